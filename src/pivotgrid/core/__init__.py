"""
Core module - Viewport adapter between a pivot view engine and a grid widget.

Architecture:
    View engine (protocols.ViewEngine, e.g. dataframe_view.DataFrameView)
           ↓
    model.create_model → PivotModel (config, merged schemas, column paths)
           ↓
    viewport.ViewportFetcher → WindowResult (formatted window + tree paths)
           ↓
    Grid widget ← cell_style (flags) / controller (press → sort or tree change)
"""

from .formatting import FormatterCache, NumberFormatter, DateTimeFormatter, format_value
from .view_config import ViewConfig
from .metadata import (
    LeafHeader,
    GroupHeader,
    RowHeaderCell,
    BodyCell,
    PressEvent,
    SortRequested,
    SetDepth,
    CollapseRow,
    ExpandRow,
)
from .model import PivotModel, create_model, rebuild_with_sort
from .type_resolver import resolve_type
from .sort_state import compute_sort, append_sort, override_sort
from .viewport import ViewportFetcher, WindowResult, TreeLabel, tree_header
from .tree_navigation import TreeNodeState, tree_node_state, tree_command, apply_tree_command
from .cell_style import CellStyle, style_cell
from .controller import PivotGridController
from .export import export_csv
from .dataframe_view import DataFrameTable, DataFrameView, ComputedColumn

__all__ = [
    # Formatting
    'FormatterCache',
    'NumberFormatter',
    'DateTimeFormatter',
    'format_value',
    # Model
    'ViewConfig',
    'PivotModel',
    'create_model',
    'rebuild_with_sort',
    'resolve_type',
    # Metadata and commands
    'LeafHeader',
    'GroupHeader',
    'RowHeaderCell',
    'BodyCell',
    'PressEvent',
    'SortRequested',
    'SetDepth',
    'CollapseRow',
    'ExpandRow',
    # Sorting
    'compute_sort',
    'append_sort',
    'override_sort',
    # Viewport
    'ViewportFetcher',
    'WindowResult',
    'TreeLabel',
    'tree_header',
    # Tree
    'TreeNodeState',
    'tree_node_state',
    'tree_command',
    'apply_tree_command',
    # Style
    'CellStyle',
    'style_cell',
    # Wiring
    'PivotGridController',
    'export_csv',
    # Reference engine
    'DataFrameTable',
    'DataFrameView',
    'ComputedColumn',
]
