"""
Sort cycling for header clicks.

Each click moves a column one step along its direction cycle:

    without column pivots:  desc -> asc -> (removed)
    with column pivots:     desc -> asc -> col desc -> col asc -> (removed)

A plain click replaces the whole sort list, a shift click edits the column's
term in place (or appends it). Nothing here talks to the view engine.
"""

from typing import Dict, List, Optional, Sequence

from ..constants import SORT_ASC, SORT_DESC, SORT_COL_ASC, SORT_COL_DESC
from .view_config import SortTerm

ROW_SORT_ORDER: Dict[str, Optional[str]] = {
    SORT_DESC: SORT_ASC,
    SORT_ASC: None,
}

ROW_COL_SORT_ORDER: Dict[str, Optional[str]] = {
    SORT_DESC: SORT_ASC,
    SORT_ASC: SORT_COL_DESC,
    SORT_COL_DESC: SORT_COL_ASC,
    SORT_COL_ASC: None,
}


def next_sort_direction(sort_dir: Optional[str], column_pivots: Sequence[str]) -> Optional[str]:
    """
    Next direction in the cycle, or None once the term should be removed.

    A column with no current direction starts at desc.
    """
    if not sort_dir:
        return SORT_DESC
    order = ROW_COL_SORT_ORDER if len(column_pivots) > 0 else ROW_SORT_ORDER
    return order.get(sort_dir)


def create_sort(column_name: str, sort_dir: Optional[str], column_pivots: Sequence[str]) -> Optional[SortTerm]:
    """Next sort term for a column, or None when the cycle removes it."""
    inc_sort_dir = next_sort_direction(sort_dir, column_pivots)
    if inc_sort_dir:
        return (column_name, inc_sort_dir)
    return None


def override_sort(sort: Sequence[SortTerm], column_name: str, column_pivots: Sequence[str]) -> List[SortTerm]:
    """Sort list after a plain click: only the clicked column remains."""
    for _column_name, _sort_dir in sort:
        if _column_name == column_name:
            term = create_sort(column_name, _sort_dir, column_pivots)
            return [term] if term else []
    return [(column_name, SORT_DESC)]


def append_sort(sort: Sequence[SortTerm], column_name: str, column_pivots: Sequence[str]) -> List[SortTerm]:
    """Sort list after a shift click: other terms keep their positions."""
    result: List[SortTerm] = []
    found = False
    for sort_term in sort:
        _column_name, _sort_dir = sort_term
        if _column_name == column_name:
            found = True
            term = create_sort(column_name, _sort_dir, column_pivots)
            if term:
                result.append(term)
        else:
            result.append((_column_name, _sort_dir))
    if not found:
        result.append((column_name, SORT_DESC))
    return result


def compute_sort(
    sort: Sequence[SortTerm],
    column_name: str,
    column_pivots: Sequence[str],
    append: bool = False,
) -> List[SortTerm]:
    """
    Sort list resulting from clicking column_name.

    Args:
        sort: Current sort list
        column_name: Clicked column
        column_pivots: Current column pivots (enables the col asc/desc steps)
        append: True for the append (shift) gesture

    Returns:
        The new sort list
    """
    sort_method = append_sort if append else override_sort
    return sort_method(sort, column_name, column_pivots)
