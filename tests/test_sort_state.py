"""
Tests for header click sort cycling.
"""
import pytest

from pivotgrid.core.sort_state import (
    append_sort, compute_sort, create_sort, next_sort_direction, override_sort,
)

NO_PIVOTS = ()
COLUMN_PIVOTS = ("product",)


class TestDirectionCycle:
    """Test the per-column direction cycle."""

    def test_first_click_is_desc(self):
        assert next_sort_direction(None, NO_PIVOTS) == "desc"
        assert next_sort_direction(None, COLUMN_PIVOTS) == "desc"

    def test_cycle_without_column_pivots(self):
        assert next_sort_direction("desc", NO_PIVOTS) == "asc"
        assert next_sort_direction("asc", NO_PIVOTS) is None

    def test_cycle_with_column_pivots(self):
        assert next_sort_direction("desc", COLUMN_PIVOTS) == "asc"
        assert next_sort_direction("asc", COLUMN_PIVOTS) == "col desc"
        assert next_sort_direction("col desc", COLUMN_PIVOTS) == "col asc"
        assert next_sort_direction("col asc", COLUMN_PIVOTS) is None

    def test_create_sort_removed(self):
        assert create_sort("Sales", "asc", NO_PIVOTS) is None
        assert create_sort("Sales", "desc", NO_PIVOTS) == ("Sales", "asc")


class TestOverrideSort:
    """Test the replace gesture."""

    def test_sales_example(self):
        sort = compute_sort([], "Sales", NO_PIVOTS)
        assert sort == [("Sales", "desc")]
        sort = compute_sort(sort, "Sales", NO_PIVOTS)
        assert sort == [("Sales", "asc")]
        sort = compute_sort(sort, "Sales", NO_PIVOTS)
        assert sort == []

    def test_repeated_clicks_restart_at_desc(self):
        sort = []
        visited = []
        for _ in range(6):
            sort = compute_sort(sort, "Sales", NO_PIVOTS)
            visited.append(sort[0][1] if sort else None)
        assert visited == ["desc", "asc", None, "desc", "asc", None]
        assert "col asc" not in visited and "col desc" not in visited

    def test_repeated_clicks_with_column_pivots(self):
        sort = []
        visited = []
        for _ in range(5):
            sort = compute_sort(sort, "Sales", COLUMN_PIVOTS)
            visited.append(sort[0][1] if sort else None)
        assert visited == ["desc", "asc", "col desc", "col asc", None]

    def test_col_asc_is_removed(self):
        assert override_sort([("Sales", "col asc")], "Sales", COLUMN_PIVOTS) == []

    def test_replaces_other_terms(self):
        sort = [("Profit", "asc"), ("Sales", "desc")]
        assert override_sort(sort, "Sales", NO_PIVOTS) == [("Sales", "asc")]
        assert override_sort(sort, "Region", NO_PIVOTS) == [("Region", "desc")]

    def test_does_not_mutate_input(self):
        sort = [("Sales", "desc")]
        override_sort(sort, "Sales", NO_PIVOTS)
        assert sort == [("Sales", "desc")]


class TestAppendSort:
    """Test the append (shift) gesture."""

    def test_appends_new_column_last(self):
        sort = [("Profit", "asc"), ("Region", "desc")]
        assert append_sort(sort, "Sales", NO_PIVOTS) == [
            ("Profit", "asc"), ("Region", "desc"), ("Sales", "desc"),
        ]

    def test_advances_in_place(self):
        sort = [("Profit", "asc"), ("Sales", "desc"), ("Region", "desc")]
        assert append_sort(sort, "Sales", NO_PIVOTS) == [
            ("Profit", "asc"), ("Sales", "asc"), ("Region", "desc"),
        ]

    def test_drops_removed_term_in_place(self):
        sort = [("Profit", "asc"), ("Sales", "asc"), ("Region", "desc")]
        assert append_sort(sort, "Sales", NO_PIVOTS) == [("Profit", "asc"), ("Region", "desc")]

    @pytest.mark.parametrize("column", ["Profit", "Sales", "Region", "Other"])
    def test_never_reorders_other_terms(self, column):
        sort = [("Profit", "desc"), ("Sales", "col desc"), ("Region", "asc")]
        result = append_sort(sort, column, COLUMN_PIVOTS)
        others_before = [term for term in sort if term[0] != column]
        others_after = [term for term in result if term[0] != column]
        assert others_after == others_before
        assert len(result) - len(sort) in (-1, 0, 1)

    def test_columns_stay_unique(self):
        sort = []
        for column in ["A", "B", "A", "C", "B"]:
            sort = compute_sort(sort, column, COLUMN_PIVOTS, append=True)
            names = [term[0] for term in sort]
            assert len(names) == len(set(names))
