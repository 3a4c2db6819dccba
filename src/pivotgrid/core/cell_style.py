"""
Cell style decisions.

Derives the presentational flags of every drawn cell from its metadata and
the model. Pure and idempotent: the widget calls it for each visible cell on
every draw and applies the flags (CSS classes, Qt roles, ...) itself.
"""

import math
import re
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Set

from .. import constants as c
from ..constants import NUMERIC_TYPES, SORT_ASC, SORT_DESC, SORT_COL_ASC, SORT_COL_DESC
from .formatting import is_null
from .metadata import BodyCell, CellMetadata, GroupHeader, LeafHeader, RowHeaderCell
from .model import PivotModel
from .tree_navigation import TreeNodeState, tree_node_state
from .type_resolver import resolve_type

_LEADING_FLOAT = re.compile(
    r"^\s*([+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?))"
)


@dataclass(frozen=True)
class CellStyle:
    """Boolean style flags of one cell."""
    header_border: bool = False
    header_group: bool = False
    header_leaf: bool = False
    header_corner: bool = False
    sort_asc: bool = False
    sort_desc: bool = False
    sort_col_asc: bool = False
    sort_col_desc: bool = False
    align_right: bool = False
    align_left: bool = False
    positive: bool = False
    negative: bool = False
    tree_label: bool = False
    tree_label_expand: bool = False
    tree_label_collapse: bool = False
    tree_leaf: bool = False

    def classes(self) -> Dict[str, bool]:
        """Flag state keyed by class name, for classList.toggle-style application."""
        return {_CLASS_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}

    def active_classes(self) -> Set[str]:
        return {name for name, on in self.classes().items() if on}


_CLASS_NAMES = {
    "header_border": c.CLASS_HEADER_BORDER,
    "header_group": c.CLASS_HEADER_GROUP,
    "header_leaf": c.CLASS_HEADER_LEAF,
    "header_corner": c.CLASS_HEADER_CORNER,
    "sort_asc": c.CLASS_SORT_ASC,
    "sort_desc": c.CLASS_SORT_DESC,
    "sort_col_asc": c.CLASS_SORT_COL_ASC,
    "sort_col_desc": c.CLASS_SORT_COL_DESC,
    "align_right": c.CLASS_ALIGN_RIGHT,
    "align_left": c.CLASS_ALIGN_LEFT,
    "positive": c.CLASS_POSITIVE,
    "negative": c.CLASS_NEGATIVE,
    "tree_label": c.CLASS_TREE_LABEL,
    "tree_label_expand": c.CLASS_TREE_EXPAND,
    "tree_label_collapse": c.CLASS_TREE_COLLAPSE,
    "tree_leaf": c.CLASS_TREE_LEAF,
}


def parse_leading_float(value: Any) -> Optional[float]:
    """
    Parse the numeric prefix of a display string ("1,234.50" -> 1.0).

    Returns None when the text does not start with a number.
    """
    if value is None:
        return None
    match = _LEADING_FLOAT.match(str(value))
    if not match:
        return None
    return float(match.group(1).replace("Infinity", "inf"))


def _sign_value(display_value: Any, raw_value: Any = None) -> Optional[float]:
    # The raw number wins over the display string when the adapter has it
    if isinstance(raw_value, (int, float)) and not isinstance(raw_value, bool) and not is_null(raw_value):
        return float(raw_value)
    return parse_leading_float(display_value)


def _value_flags(model: PivotModel, metadata: CellMetadata, raw_value: Any = None) -> Dict[str, bool]:
    is_numeric = resolve_type(metadata, model) in NUMERIC_TYPES
    number = _sign_value(metadata.value, raw_value) if is_numeric else None
    has_number = number is not None and not math.isnan(number)
    return {
        "align_right": is_numeric,
        "align_left": not is_numeric,
        "positive": has_number and number > 0,
        "negative": has_number and number < 0,
    }


def _header_depth(model: PivotModel) -> int:
    return len(model.row_pivots) - 1


def style_leaf_header(metadata: LeafHeader, model: PivotModel) -> CellStyle:
    """Flags of a cell in the innermost column header row."""
    header_depth = _header_depth(model)
    column_count = len(model.columns)
    sort = model.config.get_sort_term(metadata.column_name) if metadata.column_name is not None else None
    sort_dir = sort[1] if sort else None

    needs_border = metadata.row_header_x is not None and metadata.row_header_x == header_depth
    if metadata.x is not None and column_count > 0:
        needs_border = needs_border or (metadata.x + 1) % column_count == 0

    return CellStyle(
        header_border=needs_border,
        header_group=False,
        header_leaf=True,
        header_corner=metadata.x is None,
        sort_asc=sort_dir == SORT_ASC,
        sort_desc=sort_dir == SORT_DESC,
        sort_col_asc=sort_dir == SORT_COL_ASC,
        sort_col_desc=sort_dir == SORT_COL_DESC,
        **_value_flags(model, metadata),
    )


def style_group_header(metadata: GroupHeader, model: PivotModel) -> CellStyle:
    """Flags of a column pivot header above the leaf row."""
    header_depth = _header_depth(model)
    needs_border = (
        (metadata.row_header_x is not None and metadata.row_header_x == header_depth)
        or (metadata.x is not None and metadata.x >= 0)
    )
    return CellStyle(header_group=True, header_leaf=False, header_border=needs_border)


def style_row_header(metadata: RowHeaderCell, model: PivotModel) -> CellStyle:
    """Flags of a tree label cell."""
    state = tree_node_state(metadata, model.row_pivots)
    is_node = state in (TreeNodeState.EXPAND, TreeNodeState.COLLAPSE)
    return CellStyle(
        tree_label=is_node,
        tree_label_expand=state is TreeNodeState.EXPAND,
        tree_label_collapse=state is TreeNodeState.COLLAPSE,
        tree_leaf=state is TreeNodeState.LEAF,
        **_value_flags(model, metadata),
    )


def style_body_cell(metadata: BodyCell, model: PivotModel) -> CellStyle:
    """Flags of a data cell."""
    return CellStyle(**_value_flags(model, metadata, metadata.raw_value))


def style_cell(metadata: Optional[CellMetadata], model: PivotModel) -> CellStyle:
    """Flags of any cell; unknown metadata gets no flags."""
    if isinstance(metadata, LeafHeader):
        return style_leaf_header(metadata, model)
    if isinstance(metadata, GroupHeader):
        return style_group_header(metadata, model)
    if isinstance(metadata, RowHeaderCell):
        return style_row_header(metadata, model)
    if isinstance(metadata, BodyCell):
        return style_body_cell(metadata, model)
    return CellStyle()
