"""
View configuration snapshot.

A ViewConfig describes how a view pivots, displays and sorts its table. It is
immutable: sort/expand changes produce a new config via replace().
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..constants import SORT_ASC, SORT_DESC, SORT_COL_ASC, SORT_COL_DESC

SortTerm = Tuple[str, str]

SORT_DIRECTIONS = (SORT_ASC, SORT_DESC, SORT_COL_ASC, SORT_COL_DESC)
COLUMN_SORT_DIRECTIONS = (SORT_COL_ASC, SORT_COL_DESC)


@dataclass(frozen=True)
class ViewConfig:
    """
    Pivot/display/sort configuration of a view.

    Attributes:
        row_pivots: Columns whose values group rows, outermost first
        column_pivots: Columns whose values group columns, outermost first
        columns: Displayed leaf columns (None means every table column)
        sort: Ordered (column, direction) terms
        computed_columns: Extra columns derived from the table
    """
    row_pivots: Tuple[str, ...] = ()
    column_pivots: Tuple[str, ...] = ()
    columns: Optional[Tuple[str, ...]] = None
    sort: Tuple[SortTerm, ...] = ()
    computed_columns: Tuple[Any, ...] = field(default=())

    def __post_init__(self):
        # Accept lists from callers, store tuples
        object.__setattr__(self, "row_pivots", tuple(self.row_pivots))
        object.__setattr__(self, "column_pivots", tuple(self.column_pivots))
        if self.columns is not None:
            object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "sort", tuple((str(c), str(d)) for c, d in self.sort))
        object.__setattr__(self, "computed_columns", tuple(self.computed_columns))

    def replace(self, **changes) -> "ViewConfig":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    @property
    def is_row_pivoted(self) -> bool:
        return len(self.row_pivots) > 0

    @property
    def is_column_pivoted(self) -> bool:
        return len(self.column_pivots) > 0

    def get_sort_term(self, column_name: str) -> Optional[SortTerm]:
        """Return the sort term of a column, if it is sorted."""
        for term in self.sort:
            if term[0] == column_name:
                return term
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row_pivots": list(self.row_pivots),
            "column_pivots": list(self.column_pivots),
            "columns": list(self.columns) if self.columns is not None else None,
            "sort": [list(term) for term in self.sort],
            "computed_columns": [getattr(c, "name", c) for c in self.computed_columns],
        }
