"""
CSV export of a whole view, formatted the way the grid displays it.
"""

import csv
import io
import logging
from pathlib import Path
from typing import Optional, Union

from ..constants import COLUMN_PATH_SEPARATOR, EXPORT_PATH_SEPARATOR, ROW_PATH_COLUMN
from .model import PivotModel
from .viewport import ViewportFetcher, tree_header

logger = logging.getLogger(__name__)


def _tree_path_label(row_header) -> str:
    segments = [str(segment) for segment in row_header if segment is not None]
    return EXPORT_PATH_SEPARATOR.join(s for s in segments if s.strip())


async def export_csv(model: PivotModel, path: Optional[Union[str, Path]] = None) -> str:
    """
    Export every row and leaf column of the model's view as CSV.

    Args:
        model: Model to export
        path: File to write (optional)

    Returns:
        The CSV text
    """
    fetcher = ViewportFetcher(model)
    result = await fetcher.fetch_window(0, 0, len(model.column_paths), model.num_rows)

    has_row_headers = len(model.row_pivots) > 0
    row_headers = result.row_headers
    if has_row_headers and not model.column_paths:
        # Zero-width windows skip the query, so row paths are read on their own
        columns = await model.view.to_columns(start_row=0, end_row=model.num_rows, start_col=0, end_col=0)
        row_headers = list(tree_header(model, columns.get(ROW_PATH_COLUMN)))

    buffer = io.StringIO()
    writer = csv.writer(buffer)

    headers = [COLUMN_PATH_SEPARATOR.join(parts) for parts in result.column_headers]
    if has_row_headers:
        headers.insert(0, EXPORT_PATH_SEPARATOR.join(model.row_pivots))
    writer.writerow(headers)

    for y in range(model.num_rows):
        row = [column[y] for column in result.data]
        if has_row_headers:
            row.insert(0, _tree_path_label(row_headers[y]) if y < len(row_headers) else "")
        writer.writerow(row)

    text = buffer.getvalue()
    if path is not None:
        with open(path, 'w', newline='', encoding='utf-8') as f:
            f.write(text)
        logger.info(f"Exported {model.num_rows} rows to {path}")
    return text
