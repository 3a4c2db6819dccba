"""
Type resolution for grid cells.

Data cells take the type of the last segment of their column path in the view
schema; row header cells take the type of their pivot column in the table
schema. Unknown columns resolve to None (displayed as strings).
"""

from typing import Optional

from ..constants import COLUMN_PATH_SEPARATOR
from .metadata import CellMetadata
from .model import PivotModel


def resolve_column_type(model: PivotModel, x: int) -> Optional[str]:
    """Type of the leaf column at data index x."""
    if x >= len(model.column_paths):
        return None
    parts = model.column_paths[x].split(COLUMN_PATH_SEPARATOR)
    return model.schema.get(parts[-1])


def resolve_row_header_type(model: PivotModel, row_header_x: Optional[int]) -> Optional[str]:
    """Type of the row pivot feeding row header column row_header_x (0 is TOTAL)."""
    if row_header_x is None:
        return None
    index = row_header_x - 1
    if index < 0 or index >= len(model.row_pivots):
        return None
    return model.table_schema.get(model.row_pivots[index])


def resolve_type(metadata: CellMetadata, model: PivotModel) -> Optional[str]:
    """Declared scalar type of a cell, or None when unknown."""
    x = getattr(metadata, "x", None)
    if x is not None and x >= 0:
        return resolve_column_type(model, x)
    return resolve_row_header_type(model, getattr(metadata, "row_header_x", None))
