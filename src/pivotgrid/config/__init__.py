"""
Configuration - grid preferences and per-type display options.
"""

from .grid_preferences import GridPreferences, get_grid_preferences
from .type_config import TYPE_CONFIG, get_type_config

__all__ = [
    'GridPreferences',
    'get_grid_preferences',
    'TYPE_CONFIG',
    'get_type_config',
]
