"""
Tests for value formatting and the formatter cache.
"""
from datetime import date, datetime

import pytest
import pandas as pd

from pivotgrid.config.grid_preferences import GridPreferences
from pivotgrid.core.formatting import (
    DateTimeFormatter, FormatterCache, NumberFormatter, format_value, is_null,
)


class TestNumberFormatter:
    """Test decimal formatting."""

    def test_integer_defaults(self):
        fmt = NumberFormatter("en-us", {})
        assert fmt.format(1234567) == "1,234,567"
        assert fmt.format(-20) == "-20"
        assert fmt.format(0) == "0"

    def test_default_max_three_fraction_digits(self):
        fmt = NumberFormatter("en-us", {})
        assert fmt.format(1234.5678) == "1,234.568"
        assert fmt.format(2.5) == "2.5"

    def test_fixed_fraction_digits(self):
        fmt = NumberFormatter("en-us", {"minimumFractionDigits": 2, "maximumFractionDigits": 2})
        assert fmt.format(79.0) == "79.00"
        assert fmt.format(-2.25) == "-2.25"
        assert fmt.format(1234.5) == "1,234.50"
        assert fmt.format(0.125) == "0.13"

    def test_locale_separators(self):
        fmt = NumberFormatter("de-DE", {"minimumFractionDigits": 2, "maximumFractionDigits": 2})
        assert fmt.format(1234.5) == "1.234,50"

    def test_unknown_locale_falls_back_to_en_us(self):
        fmt = NumberFormatter("xx-yy", {})
        assert fmt.format(1000) == "1,000"

    def test_percent(self):
        fmt = NumberFormatter("en-us", {"style": "percent"})
        assert fmt.format(0.256) == "26%"

    def test_no_grouping(self):
        fmt = NumberFormatter("en-us", {"useGrouping": False})
        assert fmt.format(1234567) == "1234567"

    def test_special_values(self):
        fmt = NumberFormatter("en-us", {})
        assert fmt.format(float("nan")) == "NaN"
        assert fmt.format(float("inf")) == "∞"
        assert fmt.format(float("-inf")) == "-∞"

    def test_non_numeric_passes_through(self):
        fmt = NumberFormatter("en-us", {})
        assert fmt.format("Europe") == "Europe"


class TestDateTimeFormatter:
    """Test date and date-time formatting."""

    DATE = {"year": "numeric", "month": "numeric", "day": "numeric"}
    DATETIME = {**DATE, "hour": "numeric", "minute": "numeric", "second": "numeric"}

    def test_date_en_us(self):
        fmt = DateTimeFormatter("en-us", self.DATE)
        assert fmt.format(date(2024, 1, 15)) == "1/15/2024"
        assert fmt.format(datetime(2024, 1, 15, 15, 4, 5)) == "1/15/2024"

    def test_datetime_en_us(self):
        fmt = DateTimeFormatter("en-us", self.DATETIME)
        assert fmt.format(datetime(2024, 1, 15, 15, 4, 5)) == "1/15/2024, 3:04:05 PM"
        assert fmt.format(datetime(2024, 1, 15, 0, 0, 0)) == "1/15/2024, 12:00:00 AM"

    def test_datetime_fr_fr(self):
        fmt = DateTimeFormatter("fr-fr", self.DATETIME)
        assert fmt.format(datetime(2024, 1, 5, 15, 4, 5)) == "05/01/2024, 15:04:05"

    def test_epoch_milliseconds(self):
        fmt = DateTimeFormatter("en-us", self.DATE)
        assert fmt.format(0) == "1/1/1970"

    def test_iso_string(self):
        fmt = DateTimeFormatter("en-us", self.DATE)
        assert fmt.format("2024-03-02") == "3/2/2024"

    def test_unparseable_passes_through(self):
        fmt = DateTimeFormatter("en-us", self.DATE)
        assert fmt.format("not a date") == "not a date"


class TestFormatterCache:
    """Test lazy per-type formatter construction."""

    def test_builds_once_per_type(self):
        cache = FormatterCache()
        first = cache.get("float")
        second = cache.get("float")
        assert first is second
        assert len(cache) == 1

    def test_registered_types_get_formatters(self):
        cache = FormatterCache()
        assert isinstance(cache.get("integer"), NumberFormatter)
        assert isinstance(cache.get("float"), NumberFormatter)
        assert isinstance(cache.get("date"), DateTimeFormatter)
        assert isinstance(cache.get("datetime"), DateTimeFormatter)

    def test_unformatted_types_cache_sentinel(self):
        cache = FormatterCache()
        assert cache.get("string") is False
        assert cache.get("boolean") is False
        assert cache.get("no-such-type") is False
        assert "string" in cache

    def test_locale_from_preferences(self, tmp_path):
        prefs = GridPreferences(config_dir=tmp_path)
        prefs.set("locale", "de-de", save=False)
        cache = FormatterCache(prefs)
        assert cache.get("float").format(1234.5) == "1.234,50"

    def test_type_format_override(self, tmp_path):
        prefs = GridPreferences(config_dir=tmp_path)
        prefs.set_type_format("float", {"minimumFractionDigits": 4, "maximumFractionDigits": 4})
        cache = FormatterCache(prefs)
        assert cache.get("float").format(1.5) == "1.5000"


class TestFormatValue:
    """Test type lookup and null handling in format_value."""

    VIEW_SCHEMA = {"sales": "integer", "profit": "float", "year": "integer"}
    TABLE_SCHEMA = {"region": "string", "year": "string"}

    @pytest.fixture
    def cache(self):
        return FormatterCache()

    @pytest.mark.parametrize("type_name", ["integer", "float", "string", "date", "datetime", "boolean"])
    def test_null_always_dash(self, cache, type_name):
        schema = {"col": type_name}
        assert format_value(cache, ["col"], None, schema, schema) == "-"
        assert format_value(cache, ["col"], None, schema, schema, use_table_schema=True) == "-"

    def test_nan_is_null(self, cache):
        assert format_value(cache, ["profit"], float("nan"), self.TABLE_SCHEMA, self.VIEW_SCHEMA) == "-"
        assert is_null(float("nan"))
        assert not is_null(0)

    @pytest.mark.parametrize("value", [pd.NA, pd.NaT])
    def test_pandas_nulls_are_null(self, cache, value):
        assert is_null(value)
        assert format_value(cache, ["sales"], value, self.TABLE_SCHEMA, self.VIEW_SCHEMA) == "-"

    @pytest.mark.parametrize("value", ["", "NA", [None], False])
    def test_non_null_values(self, value):
        assert not is_null(value)

    def test_null_does_not_touch_cache(self, cache):
        format_value(cache, ["profit"], None, self.TABLE_SCHEMA, self.VIEW_SCHEMA)
        assert len(cache) == 0

    def test_type_from_last_path_segment(self, cache):
        assert format_value(cache, ["A", "sales"], 1000, self.TABLE_SCHEMA, self.VIEW_SCHEMA) == "1,000"
        assert format_value(cache, ["A", "profit"], 3.5, self.TABLE_SCHEMA, self.VIEW_SCHEMA) == "3.50"

    def test_unknown_column_passes_through(self, cache):
        value = object()
        assert format_value(cache, ["mystery"], value, self.TABLE_SCHEMA, self.VIEW_SCHEMA) is value

    def test_table_schema_preferred_when_requested(self, cache):
        assert format_value(cache, ["year"], 2024, self.TABLE_SCHEMA, self.VIEW_SCHEMA) == "2,024"
        assert format_value(cache, ["year"], 2024, self.TABLE_SCHEMA, self.VIEW_SCHEMA, use_table_schema=True) == 2024

    def test_table_schema_miss_falls_back_to_view_schema(self, cache):
        assert format_value(cache, ["sales"], 1000, self.TABLE_SCHEMA, self.VIEW_SCHEMA, use_table_schema=True) == "1,000"

    def test_empty_parts(self, cache):
        assert format_value(cache, [], "x", self.TABLE_SCHEMA, self.VIEW_SCHEMA) == "x"
