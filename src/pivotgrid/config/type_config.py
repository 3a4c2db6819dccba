"""
Per-type display configuration.

Maps each scalar type a view can declare to the format options used to build
its formatter. A type whose config has no "format" entry is displayed as-is.
"""
import copy
import logging
from typing import Any, Dict, Optional

from .grid_preferences import GridPreferences

logger = logging.getLogger(__name__)


TYPE_CONFIG: Dict[str, Dict[str, Any]] = {
    "integer": {
        "format": {},
    },
    "float": {
        "format": {
            "style": "decimal",
            "minimumFractionDigits": 2,
            "maximumFractionDigits": 2,
        },
    },
    "string": {},
    "boolean": {},
    "date": {
        "format": {
            "year": "numeric",
            "month": "numeric",
            "day": "numeric",
        },
    },
    "datetime": {
        "format": {
            "year": "numeric",
            "month": "numeric",
            "day": "numeric",
            "hour": "numeric",
            "minute": "numeric",
            "second": "numeric",
        },
    },
}


def get_type_config(type_name: str, preferences: Optional[GridPreferences] = None) -> Dict[str, Any]:
    """
    Return the display config of a scalar type.

    Args:
        type_name: Scalar type ("integer", "float", "date", ...)
        preferences: Grid preferences holding per-type format overrides

    Returns:
        A copy of the config; empty dict for unknown types
    """
    config = copy.deepcopy(TYPE_CONFIG.get(type_name, {}))
    if preferences is not None:
        override = preferences.get_type_format(type_name)
        if override is not None:
            if type_name not in TYPE_CONFIG:
                logger.warning(f"Format override for unknown type '{type_name}'")
            config["format"] = {**config.get("format", {}), **override}
    return config
