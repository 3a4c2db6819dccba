"""
Row header tree navigation.

A row header label is a tree node when its column lies above the deepest
row pivot. The node is shown expanded ("collapse" affordance) when the row
drawn below continues its path one level deeper, and collapsed ("expand"
affordance) otherwise. Labels at the deepest level are plain leaves.
"""

import logging
from enum import Enum
from typing import Optional, Sequence

from .metadata import CollapseRow, ExpandRow, RowHeaderCell, SetDepth, TreeCommand
from .model import PivotModel

logger = logging.getLogger(__name__)


class TreeNodeState(Enum):
    """Icon state of a row header label."""
    NONE = "none"
    EXPAND = "expand"
    COLLAPSE = "collapse"
    LEAF = "leaf"


def _is_not_empty(value) -> bool:
    return value is not None and len(str(value).strip()) > 0


def tree_node_state(cell: RowHeaderCell, row_pivots: Sequence[str]) -> TreeNodeState:
    """Derive the tree icon state of a row header cell."""
    if not _is_not_empty(cell.value):
        return TreeNodeState.NONE
    if cell.row_header_x >= len(row_pivots):
        return TreeNodeState.LEAF

    deeper = cell.row_header_x + 1
    next_header = cell.next_row_header
    if next_header is not None and deeper < len(next_header) and next_header[deeper] is not None:
        return TreeNodeState.COLLAPSE
    return TreeNodeState.EXPAND


def tree_command(cell: RowHeaderCell, state: TreeNodeState, shift_key: bool = False) -> Optional[TreeCommand]:
    """
    Command for a press on a tree label, or None for leaves and empty labels.

    Shift jumps every node to this label's depth (one level up when the
    label is currently expanded) instead of toggling a single row.
    """
    if state not in (TreeNodeState.EXPAND, TreeNodeState.COLLAPSE):
        return None
    is_collapse = state is TreeNodeState.COLLAPSE
    if shift_key and is_collapse:
        return SetDepth(cell.defined_depth - 2)
    if shift_key:
        return SetDepth(cell.defined_depth - 1)
    if is_collapse:
        return CollapseRow(cell.y)
    return ExpandRow(cell.y)


async def apply_tree_command(model: PivotModel, command: TreeCommand) -> None:
    """
    Run a tree command against the model's view and refresh its counts.

    Counts are refreshed before returning so the next draw never requests
    a window sized for the previous tree.
    """
    if isinstance(command, SetDepth):
        logger.info(f"Setting tree depth to {command.depth}")
        await model.view.set_depth(command.depth)
    elif isinstance(command, CollapseRow):
        logger.info(f"Collapsing row {command.y}")
        await model.view.collapse(command.y)
    elif isinstance(command, ExpandRow):
        logger.info(f"Expanding row {command.y}")
        await model.view.expand(command.y)
    else:
        raise ValueError(f"Unsupported tree command: {command!r}")
    await model.refresh_counts()
