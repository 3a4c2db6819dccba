"""
Viewport data fetching.

The grid widget asks for the rectangle of cells it is about to paint; the
fetcher answers with one windowed query against the view, formats every
value and rebuilds the row header tree paths for the returned rows.

Every fetch is stamped with a generation number. A widget that may have
several fetches in flight applies a result only while is_current() holds.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence

from ..constants import COLUMN_PATH_SEPARATOR, ID_COLUMN, ROW_PATH_COLUMN, TOTAL_LABEL
from .formatting import format_value
from .model import PivotModel

logger = logging.getLogger(__name__)


class TreeLabel:
    """
    Row header label formatted on first use.

    Locale formatting only runs for labels the widget actually reads.
    """
    __slots__ = ('_render', '_text')

    def __init__(self, render: Callable[[], Any]):
        self._render = render
        self._text: Optional[str] = None

    def __str__(self) -> str:
        if self._text is None:
            self._text = str(self._render())
        return self._text

    def __repr__(self) -> str:
        return f"TreeLabel({str(self)!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, TreeLabel):
            return str(self) == str(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))


@dataclass
class WindowResult:
    """
    Data for one painted window.

    Attributes:
        num_rows: Total visible rows of the view
        num_columns: Total leaf columns of the view
        row_headers: One tree path per returned row (empty when not row-pivoted)
        column_headers: Split column paths of the requested columns
        data: Formatted values, one list per requested column
        raw_data: Unformatted values, same shape as data
        generation: Fetch sequence number
    """
    num_rows: int
    num_columns: int
    row_headers: List[List[Any]] = field(default_factory=list)
    column_headers: List[List[str]] = field(default_factory=list)
    data: List[List[Any]] = field(default_factory=list)
    raw_data: List[List[Any]] = field(default_factory=list)
    generation: int = 0


def _pad(values: Sequence[Any], length: int) -> List[Any]:
    values = list(values[:length])
    if len(values) < length:
        values.extend([None] * (length - len(values)))
    return values


def tree_header(model: PivotModel, paths: Optional[Iterable[Sequence[Any]]] = None) -> Iterator[List[Any]]:
    """
    Yield the displayed row header path of each returned row.

    ["Europe", "France"] becomes ["", "", TreeLabel("France")] padded with
    None to len(row_pivots) + 1; the root row becomes [TreeLabel("TOTAL"), None, ...].
    """
    row_pivots = model.row_pivots
    length = len(row_pivots) + 1
    for path in paths or []:
        path = [TOTAL_LABEL, *path]
        last = path[-1]
        header: List[Any] = [""] * (len(path) - 1)
        pivot_index = len(header) - 1
        pivot = row_pivots[pivot_index] if 0 <= pivot_index < len(row_pivots) else None
        header.append(TreeLabel(
            lambda pivot=pivot, last=last: format_value(
                model.formatter_cache, [pivot], last,
                model.table_schema, model.schema, use_table_schema=True,
            )
        ))
        yield _pad(header, length)


class ViewportFetcher:
    """Fetches formatted windows of a PivotModel's view."""

    def __init__(self, model: PivotModel):
        self.model = model
        self._generation = 0

    @property
    def generation(self) -> int:
        """Generation of the most recently issued fetch."""
        return self._generation

    def is_current(self, result: WindowResult) -> bool:
        """True if no fetch was issued after the one that produced result."""
        return result.generation == self._generation

    async def fetch_window(self, x0: int, y0: int, x1: int, y1: int) -> WindowResult:
        """
        Fetch columns [x0, x1) and rows [y0, y1).

        Zero-area windows skip the query and return null-filled columns.
        """
        self._generation += 1
        generation = self._generation
        model = self.model

        columns = {}
        if x1 - x0 > 0 and y1 - y0 > 0:
            columns = await model.view.to_columns(
                start_row=y0,
                start_col=x0,
                end_row=y1,
                end_col=x1,
                id=True,
            )
            model.ids = list(columns.get(ID_COLUMN) or [])
        else:
            logger.debug(f"Empty window ({x0}, {y0}, {x1}, {y1}), skipping query")

        height = max(y1 - y0, 0)
        data = []
        raw_data = []
        column_headers = []
        for path in model.column_paths[max(x0, 0):max(x1, 0)]:
            path_parts = path.split(COLUMN_PATH_SEPARATOR)
            column = columns.get(path)
            if column is None:
                column = [None] * height
            column = _pad(column, height)
            raw_data.append(column)
            data.append([
                format_value(model.formatter_cache, path_parts, value, model.table_schema, model.schema)
                for value in column
            ])
            column_headers.append(path_parts)

        logger.debug(f"Fetched window ({x0}, {y0}, {x1}, {y1}) generation {generation}")
        return WindowResult(
            num_rows=model.num_rows,
            num_columns=len(model.column_paths),
            row_headers=list(tree_header(model, columns.get(ROW_PATH_COLUMN))),
            column_headers=column_headers,
            data=data,
            raw_data=raw_data,
            generation=generation,
        )
