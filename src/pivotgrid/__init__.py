"""
pivotgrid - Viewport adapter for virtualized pivot grids
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("pivotgrid")
except PackageNotFoundError:
    __version__ = "0.1.0"

from .core import (
    ViewConfig,
    PivotModel,
    create_model,
    PivotGridController,
    ViewportFetcher,
    WindowResult,
    DataFrameTable,
    export_csv,
)

__all__ = [
    "__version__",
    "ViewConfig",
    "PivotModel",
    "create_model",
    "PivotGridController",
    "ViewportFetcher",
    "WindowResult",
    "DataFrameTable",
    "export_csv",
]
