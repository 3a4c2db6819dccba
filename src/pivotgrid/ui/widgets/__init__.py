"""
Qt widgets and models for pivot grids.
"""

from .pivot_table_model import PivotTableModel

__all__ = ['PivotTableModel']
