"""
Value formatting - locale-aware display strings for grid cells.

Formatters are built lazily, one per scalar type, from the per-type format
options in config.type_config and kept in a FormatterCache for the lifetime
of the cache. A type without format options (or without a registered
formatter class) is displayed as-is.
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import pandas as pd

from ..config.grid_preferences import GridPreferences
from ..config.type_config import get_type_config
from ..constants import DEFAULT_LOCALE, DEFAULT_TYPE, NULL_PLACEHOLDER

logger = logging.getLogger(__name__)


# (group separator, decimal separator)
_NUMBER_SYMBOLS = {
    "en-us": (",", "."),
    "en-gb": (",", "."),
    "fr-fr": (" ", ","),
    "de-de": (".", ","),
    "es-es": (".", ","),
    "it-it": (".", ","),
}

# (date pattern, 12-hour clock)
_DATE_PATTERNS = {
    "en-us": ("{month}/{day}/{year}", True),
    "en-gb": ("{day:02d}/{month:02d}/{year}", False),
    "fr-fr": ("{day:02d}/{month:02d}/{year}", False),
    "de-de": ("{day}.{month}.{year}", False),
    "es-es": ("{day}/{month}/{year}", False),
    "it-it": ("{day}/{month}/{year}", False),
}


def _normalize_locale(locale: str) -> str:
    return (locale or DEFAULT_LOCALE).replace("_", "-").lower()


def is_null(value: Any) -> bool:
    """Return True for None, NaN, NaT and pd.NA."""
    return value is None or (pd.api.types.is_scalar(value) and bool(pd.isna(value)))


class NumberFormatter:
    """
    Decimal number formatter.

    Supported options: style ("decimal" or "percent"), minimumFractionDigits,
    maximumFractionDigits, useGrouping. Rounds half away from zero.
    """

    def __init__(self, locale: str, options: Mapping[str, Any]):
        self.locale = _normalize_locale(locale)
        self.group_separator, self.decimal_separator = _NUMBER_SYMBOLS.get(
            self.locale, _NUMBER_SYMBOLS[DEFAULT_LOCALE]
        )
        self.style = options.get("style", "decimal")
        default_max = 0 if self.style == "percent" else 3
        self.min_digits = int(options.get("minimumFractionDigits", 0))
        self.max_digits = max(int(options.get("maximumFractionDigits", default_max)), self.min_digits)
        self.use_grouping = bool(options.get("useGrouping", True))

    def format(self, value: Any) -> Any:
        try:
            number = Decimal(str(value)) if not isinstance(value, bool) else Decimal(int(value))
        except (InvalidOperation, ValueError, TypeError):
            return value

        if number.is_nan():
            return "NaN"
        negative = number.is_signed() and number != 0
        if number.is_infinite():
            return ("-" if negative else "") + "∞"

        if self.style == "percent":
            number *= 100

        quantum = Decimal(1).scaleb(-self.max_digits)
        rounded = abs(number).quantize(quantum, rounding=ROUND_HALF_UP)
        text = format(rounded, "f")
        integer_part, _, fraction = text.partition(".")

        fraction = fraction.rstrip("0")
        if len(fraction) < self.min_digits:
            fraction = fraction.ljust(self.min_digits, "0")

        if self.use_grouping:
            integer_part = self._group(integer_part)

        result = integer_part
        if fraction:
            result += self.decimal_separator + fraction
        if self.style == "percent":
            result += "%"
        return ("-" if negative else "") + result

    def _group(self, digits: str) -> str:
        groups = []
        while len(digits) > 3:
            groups.insert(0, digits[-3:])
            digits = digits[:-3]
        groups.insert(0, digits)
        return self.group_separator.join(groups)


class DateTimeFormatter:
    """
    Date / date-time formatter.

    Renders the date part when any of year/month/day is requested and the
    time part when any of hour/minute/second is. Accepts datetime, date,
    pandas Timestamp, ISO strings and epoch milliseconds.
    """

    def __init__(self, locale: str, options: Mapping[str, Any]):
        self.locale = _normalize_locale(locale)
        self.date_pattern, self.hour12 = _DATE_PATTERNS.get(
            self.locale, _DATE_PATTERNS[DEFAULT_LOCALE]
        )
        self.show_date = any(k in options for k in ("year", "month", "day"))
        self.show_time = any(k in options for k in ("hour", "minute", "second"))

    def format(self, value: Any) -> Any:
        moment = self._coerce(value)
        if moment is None:
            return value

        parts = []
        if self.show_date:
            parts.append(self.date_pattern.format(year=moment.year, month=moment.month, day=moment.day))
        if self.show_time:
            if not isinstance(moment, datetime):
                moment = datetime(moment.year, moment.month, moment.day)
            parts.append(self._format_time(moment))
        return ", ".join(parts)

    def _format_time(self, moment: datetime) -> str:
        if self.hour12:
            hour = moment.hour % 12 or 12
            suffix = "AM" if moment.hour < 12 else "PM"
            return f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}"
        return f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"

    @staticmethod
    def _coerce(value: Any) -> Optional[Union[date, datetime]]:
        if isinstance(value, (datetime, date)):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return None
        return None


FORMATTER_CONSTRUCTORS = {
    "datetime": DateTimeFormatter,
    "date": DateTimeFormatter,
    "integer": NumberFormatter,
    "float": NumberFormatter,
}


class FormatterCache:
    """
    Lazily built formatters, one per scalar type.

    Entries are never invalidated: a type maps to either a formatter or
    False (display the value unchanged). Building an entry twice yields an
    equivalent formatter, so concurrent first use needs no locking.
    """

    def __init__(self, preferences: Optional[GridPreferences] = None, locale: Optional[str] = None):
        self._preferences = preferences
        if locale is None:
            locale = preferences.get_locale() if preferences is not None else DEFAULT_LOCALE
        self.locale = locale
        self.null_placeholder = (
            preferences.get_null_placeholder() if preferences is not None else NULL_PLACEHOLDER
        )
        self._formatters: Dict[str, Any] = {}

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._formatters

    def __len__(self) -> int:
        return len(self._formatters)

    def get(self, type_name: str):
        """Return the formatter for a type (False for pass-through), building it on first use."""
        formatter = self._formatters.get(type_name)
        if formatter is None:
            formatter = self._build(type_name)
            self._formatters[type_name] = formatter
        return formatter

    def _build(self, type_name: str):
        type_config = get_type_config(type_name, self._preferences)
        constructor = FORMATTER_CONSTRUCTORS.get(type_name)
        options = type_config.get("format")
        if constructor is not None and options is not None:
            logger.debug(f"Building {constructor.__name__} for type '{type_name}' ({self.locale})")
            return constructor(self.locale, options)
        return False


def format_value(
    cache: FormatterCache,
    parts: Sequence[Optional[str]],
    value: Any,
    table_schema: Mapping[str, str],
    view_schema: Mapping[str, str],
    use_table_schema: bool = False,
) -> Any:
    """
    Format a cell value for display.

    Args:
        cache: Formatter cache to build/read formatters from
        parts: Column path segments; the last one names the source column
        value: Raw value
        table_schema: Merged source table schema
        view_schema: Merged view schema
        use_table_schema: Prefer the table schema (row header labels)

    Returns:
        Display value ("-" for nulls)
    """
    if is_null(value):
        return cache.null_placeholder

    title = parts[-1] if parts else None
    type_name = (
        (use_table_schema and table_schema.get(title))
        or view_schema.get(title)
        or DEFAULT_TYPE
    )

    formatter = cache.get(type_name)
    return formatter.format(value) if formatter else value
