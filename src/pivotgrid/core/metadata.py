"""
Cell metadata and interaction messages.

The widget adapter resolves every rendered cell into one of four metadata
variants before handing it to the core:

    LeafHeader      innermost column header row (sortable)
    GroupHeader     column header rows above the leaf row
    RowHeaderCell   tree label cells on the left of the body
    BodyCell        data cells

Gestures come in as PressEvent messages; handlers answer with commands the
controller executes against the view engine.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union


@dataclass(frozen=True)
class LeafHeader:
    """Innermost column header. x is None for the corner above the row headers."""
    x: Optional[int]
    column_header: Sequence[str] = ()
    row_header_x: Optional[int] = None
    value: Any = None

    @property
    def column_name(self) -> Optional[str]:
        return self.column_header[-1] if self.column_header else None


@dataclass(frozen=True)
class GroupHeader:
    """Column header above the leaf row (column pivot values)."""
    x: Optional[int]
    column_header: Sequence[str] = ()
    row_header_x: Optional[int] = None
    value: Any = None


@dataclass(frozen=True)
class RowHeaderCell:
    """
    Tree label cell.

    row_header holds one entry per pivot depth (None beyond the row's depth);
    next_row_header is the row_header of the row drawn just below, if any.
    """
    y: int
    row_header_x: int
    row_header: Sequence[Any] = ()
    value: Any = None
    y0: int = 0
    next_row_header: Optional[Sequence[Any]] = None

    @property
    def defined_depth(self) -> int:
        """Number of defined entries in row_header."""
        return sum(1 for segment in self.row_header if segment is not None)


@dataclass(frozen=True)
class BodyCell:
    """Data cell; raw_value is the unformatted value when the adapter has it."""
    x: int
    y: int
    value: Any = None
    column_header: Sequence[str] = ()
    raw_value: Any = None


CellMetadata = Union[LeafHeader, GroupHeader, RowHeaderCell, BodyCell]


@dataclass(frozen=True)
class PressEvent:
    """A pointer press on a cell; offset_x is measured from the cell's left edge."""
    metadata: Optional[CellMetadata]
    offset_x: float = 0
    shift_key: bool = False


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SortRequested:
    """The sort list a sort gesture asks the owner of the view config to apply."""
    sort: List[tuple] = field(default_factory=list)


@dataclass(frozen=True)
class SetDepth:
    depth: int


@dataclass(frozen=True)
class CollapseRow:
    y: int


@dataclass(frozen=True)
class ExpandRow:
    y: int


TreeCommand = Union[SetDepth, CollapseRow, ExpandRow]
