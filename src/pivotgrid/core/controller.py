"""
Pivot grid controller - the callbacks a grid widget is wired to.

    data_listener(x0, y0, x1, y1)  -> WindowResult for the painted region
    style_listener(metadata)       -> CellStyle flags for one drawn cell
    press_listener(PressEvent)     -> True when the press sorted or toggled

Sort gestures never touch the view: the new sort list is delivered to the
sort subscribers, whose owner rebuilds the view with it. Tree gestures are
applied to the view, counts are refreshed, then the redraw callback runs.
"""

import inspect
import logging
from typing import Callable, Iterable, List, Optional

from ..constants import TREE_ICON_HIT_WIDTH
from .cell_style import CellStyle, style_cell
from .metadata import CellMetadata, LeafHeader, PressEvent, RowHeaderCell, SortRequested
from .model import PivotModel
from .sort_state import compute_sort
from .tree_navigation import apply_tree_command, tree_command, tree_node_state
from .viewport import ViewportFetcher, WindowResult

logger = logging.getLogger(__name__)


class PivotGridController:
    """
    Connects a PivotModel to a grid widget.

    Usage:
        model = await create_model(table, view)
        controller = PivotGridController(model, on_redraw=grid.draw)
        controller.subscribe_sort(lambda event: save_sort(event.sort))
        result = await controller.data_listener(0, 0, 10, 50)
    """

    def __init__(self, model: PivotModel, on_redraw: Optional[Callable] = None):
        """
        Args:
            model: Model to draw
            on_redraw: Called (and awaited if it returns an awaitable) after a tree change
        """
        self._on_redraw = on_redraw
        self._sort_subscribers: List[Callable[[SortRequested], None]] = []
        self.set_model(model)

    @property
    def model(self) -> PivotModel:
        return self._model

    @property
    def fetcher(self) -> ViewportFetcher:
        return self._fetcher

    def set_model(self, model: PivotModel) -> None:
        """Switch to a rebuilt model (e.g. after a sort change)."""
        self._model = model
        self._fetcher = ViewportFetcher(model)

    def subscribe_sort(self, callback: Callable[[SortRequested], None]) -> None:
        """Register a receiver for SortRequested events."""
        if callback not in self._sort_subscribers:
            self._sort_subscribers.append(callback)

    def unsubscribe_sort(self, callback: Callable[[SortRequested], None]) -> None:
        if callback in self._sort_subscribers:
            self._sort_subscribers.remove(callback)

    # -------------------------------------------------------------------------
    # Widget callbacks
    # -------------------------------------------------------------------------

    async def data_listener(self, x0: int, y0: int, x1: int, y1: int) -> WindowResult:
        """Fetch the window the widget is about to paint."""
        try:
            return await self._fetcher.fetch_window(x0, y0, x1, y1)
        except Exception as e:
            logger.error(f"Window fetch ({x0}, {y0}, {x1}, {y1}) failed: {e}")
            raise

    def is_current(self, result: WindowResult) -> bool:
        """True if result belongs to the latest fetch."""
        return self._fetcher.is_current(result)

    def style_listener(self, metadata: Optional[CellMetadata]) -> CellStyle:
        """Style flags of one drawn cell."""
        return style_cell(metadata, self._model)

    def style_cells(self, cells: Iterable[Optional[CellMetadata]]) -> List[CellStyle]:
        """Style flags of every drawn cell, in order."""
        return [style_cell(metadata, self._model) for metadata in cells]

    async def press_listener(self, event: PressEvent) -> bool:
        """
        Handle a press on a cell.

        Returns:
            True if the press was handled (the widget should skip its default behavior)
        """
        metadata = event.metadata
        if metadata is None:
            return False

        style = style_cell(metadata, self._model)
        if style.tree_label and isinstance(metadata, RowHeaderCell) and event.offset_x < TREE_ICON_HIT_WIDTH:
            await self.expand_collapse(metadata, event.shift_key)
            return True
        if style.header_leaf and not style.header_corner and isinstance(metadata, LeafHeader):
            self.sort(metadata, event.shift_key)
            return True
        return False

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def sort(self, metadata: LeafHeader, append: bool = False) -> Optional[SortRequested]:
        """Compute the sort list for a header click and notify subscribers."""
        column_name = metadata.column_name
        if column_name is None:
            return None

        sort = compute_sort(self._model.sort, column_name, self._model.column_pivots, append=append)
        event = SortRequested(sort=sort)
        logger.info(f"Sort requested on '{column_name}' ({'append' if append else 'replace'}): {sort}")
        for callback in list(self._sort_subscribers):
            callback(event)
        return event

    async def expand_collapse(self, metadata: RowHeaderCell, shift_key: bool = False) -> bool:
        """
        Apply the tree transition for a press on a row header label.

        Returns:
            True if a transition was applied
        """
        state = tree_node_state(metadata, self._model.row_pivots)
        command = tree_command(metadata, state, shift_key)
        if command is None:
            return False

        try:
            await apply_tree_command(self._model, command)
        except Exception as e:
            logger.error(f"Tree command {command!r} failed: {e}")
            raise

        await self._redraw()
        return True

    async def _redraw(self) -> None:
        if self._on_redraw is None:
            return
        result = self._on_redraw()
        if inspect.isawaitable(result):
            await result
