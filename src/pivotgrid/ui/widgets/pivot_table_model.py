"""
Pivot Table Model for Qt views.

Adapts a PivotModel to QAbstractTableModel: the view asks for the visible
window through load_window(), cells and headers are served from the last
current WindowResult, and header presses are routed through the grid
controller (sort requests come back out as the sort_requested signal).
"""
import logging
from typing import Any, List, Optional, Tuple

from PySide6.QtCore import Qt, QAbstractTableModel, QModelIndex, Signal
from PySide6.QtGui import QColor

from ...constants import COLUMN_PATH_SEPARATOR
from ...core.controller import PivotGridController
from ...core.metadata import BodyCell, LeafHeader, PressEvent, RowHeaderCell, SortRequested
from ...core.model import PivotModel, rebuild_with_sort
from ...core.viewport import WindowResult

logger = logging.getLogger(__name__)

POSITIVE_COLOR = QColor("#1078d1")
NEGATIVE_COLOR = QColor("#de3838")
TREE_INDENT = "    "


class PivotTableModel(QAbstractTableModel):
    """
    QAbstractTableModel over a windowed pivot view.

    Signals:
        sort_requested(list): New sort list computed from a header press
        window_loaded(): A fetched window was applied
    """

    sort_requested = Signal(list)
    window_loaded = Signal()

    def __init__(self, model: PivotModel, parent=None):
        super().__init__(parent)
        self._controller = PivotGridController(model, on_redraw=self.reload)
        self._controller.subscribe_sort(self._on_sort_requested)
        self._result: Optional[WindowResult] = None
        self._rect: Tuple[int, int, int, int] = (0, 0, 0, 0)

    @property
    def controller(self) -> PivotGridController:
        return self._controller

    @property
    def pivot_model(self) -> PivotModel:
        return self._controller.model

    # -------------------------------------------------------------------------
    # Window management
    # -------------------------------------------------------------------------

    async def load_window(self, x0: int, y0: int, x1: int, y1: int) -> bool:
        """
        Fetch a window and apply it if no newer fetch was issued meanwhile.

        Returns:
            True if the result was applied
        """
        result = await self._controller.data_listener(x0, y0, x1, y1)
        if not self._controller.is_current(result):
            logger.debug(f"Discarding stale window generation {result.generation}")
            return False

        self.beginResetModel()
        self._result = result
        self._rect = (x0, y0, x1, y1)
        self.endResetModel()
        self.window_loaded.emit()
        return True

    async def reload(self) -> bool:
        """Re-fetch the current window, clamped to the current counts."""
        x0, y0, x1, y1 = self._rect
        model = self.pivot_model
        return await self.load_window(
            x0, y0, min(x1, len(model.column_paths)), min(y1, model.num_rows)
        )

    async def apply_sort(self, sort: List[Any]) -> None:
        """Rebuild the view with a new sort list and reload the window."""
        model = await rebuild_with_sort(self.pivot_model, sort)
        self.beginResetModel()
        self._controller.set_model(model)
        self._result = None
        self.endResetModel()
        await self.reload()

    def _on_sort_requested(self, event: SortRequested):
        self.sort_requested.emit([list(term) for term in event.sort])

    def _in_window(self, row: int, col: int) -> bool:
        x0, y0, x1, y1 = self._rect
        return self._result is not None and x0 <= col < x1 and y0 <= row < y1

    def _row_header(self, row: int) -> Optional[List[Any]]:
        if self._result is None:
            return None
        offset = row - self._rect[1]
        if 0 <= offset < len(self._result.row_headers):
            return self._result.row_headers[offset]
        return None

    def _body_cell(self, row: int, col: int) -> Optional[BodyCell]:
        if not self._in_window(row, col):
            return None
        x0, y0, _, _ = self._rect
        return BodyCell(
            x=col,
            y=row,
            value=self._result.data[col - x0][row - y0],
            column_header=self._result.column_headers[col - x0],
            raw_value=self._result.raw_data[col - x0][row - y0],
        )

    def _row_header_cell(self, row: int) -> Optional[RowHeaderCell]:
        header = self._row_header(row)
        if header is None:
            return None
        defined = [i for i, segment in enumerate(header) if segment is not None]
        row_header_x = defined[-1] if defined else 0
        return RowHeaderCell(
            y=row,
            y0=self._rect[1],
            row_header_x=row_header_x,
            row_header=header,
            value=header[row_header_x],
            next_row_header=self._row_header(row + 1),
        )

    # -------------------------------------------------------------------------
    # QAbstractTableModel interface
    # -------------------------------------------------------------------------

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        """Return number of visible rows of the view."""
        if parent.isValid():
            return 0
        return self.pivot_model.num_rows

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        """Return number of leaf columns of the view."""
        if parent.isValid():
            return 0
        return len(self.pivot_model.column_paths)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        """Serve cells of the loaded window; cells outside it are empty."""
        if not index.isValid():
            return None

        cell = self._body_cell(index.row(), index.column())
        if cell is None:
            return None

        if role == Qt.ItemDataRole.DisplayRole:
            return str(cell.value)

        style = self._controller.style_listener(cell)
        if role == Qt.ItemDataRole.TextAlignmentRole:
            if style.align_right:
                return Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
            return Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter

        if role == Qt.ItemDataRole.ForegroundRole:
            if style.positive:
                return POSITIVE_COLOR
            if style.negative:
                return NEGATIVE_COLOR

        return None

    def headerData(self, section: int, orientation: Qt.Orientation,
                   role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        """Column paths horizontally, indented tree labels vertically."""
        if role != Qt.ItemDataRole.DisplayRole:
            return None

        if orientation == Qt.Orientation.Horizontal:
            paths = self.pivot_model.column_paths
            if 0 <= section < len(paths):
                return paths[section].replace(COLUMN_PATH_SEPARATOR, " | ")
            return None

        cell = self._row_header_cell(section)
        if cell is None:
            return str(section + 1)
        return TREE_INDENT * cell.row_header_x + str(cell.value)

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:
        """Return item flags (read-only)."""
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        return Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable

    # -------------------------------------------------------------------------
    # Interaction
    # -------------------------------------------------------------------------

    async def header_clicked(self, section: int, shift: bool = False) -> bool:
        """Route a column header press to the controller (sorts the column)."""
        paths = self.pivot_model.column_paths
        if not 0 <= section < len(paths):
            return False
        parts = paths[section].split(COLUMN_PATH_SEPARATOR)
        metadata = LeafHeader(x=section, column_header=parts, value=parts[-1])
        return await self._controller.press_listener(PressEvent(metadata, shift_key=shift))

    async def row_header_clicked(self, row: int, shift: bool = False) -> bool:
        """Route a row header press on the tree icon to the controller."""
        metadata = self._row_header_cell(row)
        return await self._controller.press_listener(PressEvent(metadata, offset_x=0, shift_key=shift))
