"""
Pivot grid model - everything the grid core reads while drawing.

create_model() snapshots the view's config, merged schemas and column paths
once; refresh_counts() re-reads the row/column counts after a tree change.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config.grid_preferences import GridPreferences, get_grid_preferences
from ..constants import ROW_PATH_COLUMN, ID_COLUMN
from .formatting import FormatterCache
from .protocols import SourceTable, ViewEngine
from .view_config import ViewConfig

logger = logging.getLogger(__name__)


@dataclass
class PivotModel:
    """
    Snapshot of a view used by the fetcher, style engine and handlers.

    Attributes:
        view: View engine queried for windows and tree changes
        table: Source table the view was built from
        config: View configuration at build time
        table_schema: Table schema merged with the computed-column schema
        schema: View schema merged with the view's computed-column schema
        column_paths: Leaf column paths (without __ROW_PATH__/__ID__)
        num_rows: Visible row count, refreshed after tree changes
        num_columns: Leaf column count reported by the view
        formatter_cache: Formatters shared by every draw of this model
        ids: __ID__ values of the last fetched window
    """
    view: ViewEngine
    table: SourceTable
    config: ViewConfig
    table_schema: Dict[str, str]
    schema: Dict[str, str]
    column_paths: List[str]
    num_rows: int = 0
    num_columns: int = 0
    formatter_cache: FormatterCache = field(default_factory=FormatterCache)
    ids: List[Any] = field(default_factory=list)

    @property
    def row_pivots(self):
        return self.config.row_pivots

    @property
    def column_pivots(self):
        return self.config.column_pivots

    @property
    def columns(self):
        return self.config.columns or ()

    @property
    def sort(self):
        return self.config.sort

    async def refresh_counts(self) -> None:
        """Re-read row and column counts from the view."""
        self.num_rows, self.num_columns = await asyncio.gather(
            self.view.num_rows(), self.view.num_columns()
        )
        logger.debug(f"Refreshed counts: {self.num_rows} rows, {self.num_columns} columns")


async def create_model(
    table: SourceTable,
    view: ViewEngine,
    preferences: Optional[GridPreferences] = None,
    formatter_cache: Optional[FormatterCache] = None,
) -> PivotModel:
    """
    Build a PivotModel from a table and a view over it.

    Args:
        table: Source table
        view: View over the table
        preferences: Grid preferences used for a new formatter cache
            (default: the shared get_grid_preferences() instance)
        formatter_cache: Existing cache to share (takes precedence)

    Returns:
        The populated model
    """
    config = await view.get_config()
    (
        table_schema,
        table_computed_schema,
        num_rows,
        num_columns,
        schema,
        computed_schema,
        column_paths,
    ) = await asyncio.gather(
        table.schema(),
        table.computed_schema(config.computed_columns),
        view.num_rows(),
        view.num_columns(),
        view.schema(),
        view.computed_schema(),
        view.column_paths(),
    )

    if formatter_cache is None:
        if preferences is None:
            preferences = get_grid_preferences()
        formatter_cache = FormatterCache(preferences)

    model = PivotModel(
        view=view,
        table=table,
        config=config,
        table_schema={**table_schema, **table_computed_schema},
        schema={**schema, **computed_schema},
        column_paths=[p for p in column_paths if p not in (ROW_PATH_COLUMN, ID_COLUMN)],
        num_rows=num_rows,
        num_columns=num_columns,
        formatter_cache=formatter_cache,
    )
    logger.info(
        f"Pivot model built: {num_rows} rows, {len(model.column_paths)} columns, "
        f"row_pivots={list(config.row_pivots)}, column_pivots={list(config.column_pivots)}"
    )
    return model


async def rebuild_with_sort(model: PivotModel, sort) -> PivotModel:
    """
    Build a new view and model with the given sort list.

    The view config is replaced wholesale; the formatter cache is shared.
    """
    config = model.config.replace(sort=tuple(tuple(term) for term in sort))
    view = await model.table.view(config)
    return await create_model(model.table, view, formatter_cache=model.formatter_cache)
