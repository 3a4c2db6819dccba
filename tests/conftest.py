"""
Pytest configuration and fixtures for pivotgrid tests.
"""
import os

import pytest
import pandas as pd
from unittest.mock import AsyncMock, Mock

from pivotgrid.config.grid_preferences import GridPreferences
from pivotgrid.core.dataframe_view import DataFrameTable
from pivotgrid.core.model import PivotModel
from pivotgrid.core.view_config import ViewConfig

# Qt Application fixture for tests that need a Qt event loop
_qt_app = None


@pytest.fixture(scope="session")
def qapp():
    """Create a QApplication for tests that need Qt."""
    global _qt_app
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication
    if _qt_app is None:
        _qt_app = QApplication.instance() or QApplication([])
    yield _qt_app


@pytest.fixture(autouse=True)
def isolated_grid_preferences(tmp_path, monkeypatch):
    """Run each test against an empty _AppConfig in its own directory."""
    monkeypatch.chdir(tmp_path)
    GridPreferences.reset_instance()
    yield
    GridPreferences.reset_instance()


@pytest.fixture
def sales_df():
    """
    Five sales records over two regions.

    Pivoted by region/country (fully expanded) the rows are:
        TOTAL              sales 630   profit 79.00
          Americas         sales 280   profit 40.75
            Canada         sales -20   profit -5.00
            USA            sales 300   profit 45.75
          Europe           sales 350   profit 38.25
            France         sales 150   profit 8.25
            Germany        sales 200   profit 30.00
    """
    return pd.DataFrame({
        'region': ['Europe', 'Europe', 'Europe', 'Americas', 'Americas'],
        'country': ['France', 'France', 'Germany', 'USA', 'Canada'],
        'product': ['A', 'B', 'A', 'A', 'B'],
        'sales': [100, 50, 200, 300, -20],
        'profit': [10.5, -2.25, 30.0, 45.75, -5.0],
    })


@pytest.fixture
def sales_table(sales_df):
    """DataFrameTable over sales_df."""
    return DataFrameTable(sales_df)


@pytest.fixture
def mock_view():
    """View engine double with async methods."""
    view = Mock()
    view.to_columns = AsyncMock(return_value={})
    view.num_rows = AsyncMock(return_value=0)
    view.num_columns = AsyncMock(return_value=0)
    view.set_depth = AsyncMock()
    view.collapse = AsyncMock()
    view.expand = AsyncMock()
    return view


@pytest.fixture
def make_model(mock_view):
    """Factory building a PivotModel over mock_view without querying it."""
    def _make(config=None, schema=None, table_schema=None, column_paths=None, num_rows=0):
        config = config or ViewConfig()
        paths = list(column_paths if column_paths is not None else (config.columns or ()))
        return PivotModel(
            view=mock_view,
            table=Mock(),
            config=config,
            table_schema=dict(table_schema or {}),
            schema=dict(schema or {}),
            column_paths=paths,
            num_rows=num_rows,
            num_columns=len(paths),
        )
    return _make
