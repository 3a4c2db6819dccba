"""
Engine Protocols - The query surface the grid core consumes.

The core never owns data: it talks to a source table and a view derived from
it through these async interfaces. dataframe_view provides a pandas-backed
implementation.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from .view_config import ViewConfig


@runtime_checkable
class ViewEngine(Protocol):
    """
    Protocol for a (possibly pivoted) view over a table.

    Usage:
        async def draw(view: ViewEngine) -> None:
            config = await view.get_config()
            columns = await view.to_columns(start_row=0, end_row=10,
                                            start_col=0, end_col=5, id=True)
    """

    async def get_config(self) -> ViewConfig:
        """Return the configuration the view was built with."""
        ...

    async def schema(self) -> Dict[str, str]:
        """Return column name -> scalar type of the (aggregated) view."""
        ...

    async def computed_schema(self) -> Dict[str, str]:
        """Return column name -> scalar type of the view's computed columns."""
        ...

    async def num_rows(self) -> int:
        """Return the number of currently visible rows."""
        ...

    async def num_columns(self) -> int:
        """Return the number of leaf columns."""
        ...

    async def column_paths(self) -> List[str]:
        """Return every column path, including __ROW_PATH__ when pivoted."""
        ...

    async def to_columns(
        self,
        start_row: int = 0,
        start_col: int = 0,
        end_row: Optional[int] = None,
        end_col: Optional[int] = None,
        id: bool = False,
    ) -> Dict[str, List[Any]]:
        """
        Return a window of values keyed by column path.

        Rows are [start_row, end_row), leaf columns [start_col, end_col).
        Pivoted views add __ROW_PATH__; id=True adds __ID__.
        """
        ...

    async def set_depth(self, depth: int) -> None:
        """Expand every row-pivot node at depth <= depth, collapse the rest."""
        ...

    async def collapse(self, row_index: int) -> int:
        """Collapse the visible row at row_index."""
        ...

    async def expand(self, row_index: int) -> int:
        """Expand the visible row at row_index."""
        ...


@runtime_checkable
class SourceTable(Protocol):
    """Protocol for the table a view is built from."""

    async def schema(self) -> Dict[str, str]:
        """Return column name -> scalar type of the source table."""
        ...

    async def computed_schema(self, computed_columns: Sequence[Any]) -> Dict[str, str]:
        """Return column name -> scalar type of the given computed columns."""
        ...

    async def view(self, config: Optional[ViewConfig] = None) -> ViewEngine:
        """Build a view over the table."""
        ...
