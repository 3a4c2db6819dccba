"""
Grid Preferences - display settings shared by every pivot grid

Stored as JSON in _AppConfig/grid_preferences.json. Formatter caches built by
create_model() read their locale, null placeholder and per-type format
overrides from the shared instance returned by get_grid_preferences().
"""
import copy
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any

from ..constants import DEFAULT_LOCALE, NULL_PLACEHOLDER

logger = logging.getLogger(__name__)


class GridPreferences:
    """
    Persistent grid display settings

    Keys:
    - locale: Locale of number/date formatters ("en-us", "de-de", ...)
    - null_placeholder: Text displayed for null cells
    - type_formats: Per-type format options overriding the built-in ones,
      e.g. {"float": {"minimumFractionDigits": 4, "maximumFractionDigits": 4}}
    """

    DEFAULT_PREFERENCES = {
        'locale': DEFAULT_LOCALE,
        'null_placeholder': NULL_PLACEHOLDER,
        'type_formats': {},
    }

    _instance: Optional['GridPreferences'] = None

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Args:
            config_dir: Directory of grid_preferences.json (default: _AppConfig)
        """
        self._config_dir = Path(config_dir) if config_dir is not None else Path('_AppConfig')
        self._config_file = self._config_dir / 'grid_preferences.json'
        self._preferences = copy.deepcopy(self.DEFAULT_PREFERENCES)
        self.load()

    @classmethod
    def get_instance(cls) -> 'GridPreferences':
        """Shared instance, loaded on first use"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Forget the shared instance; the next get_instance() reads the file again"""
        cls._instance = None

    def get(self, key: str, default: Any = None) -> Any:
        return self._preferences.get(key, default)

    def set(self, key: str, value: Any, save: bool = True):
        """Change a setting, writing the file unless save is False"""
        self._preferences[key] = value
        logger.info(f"Grid preference '{key}' set to {value!r}")
        if save:
            self.save()

    def get_locale(self) -> str:
        return self.get('locale', DEFAULT_LOCALE)

    def get_null_placeholder(self) -> str:
        return self.get('null_placeholder', NULL_PLACEHOLDER)

    def get_type_format(self, type_name: str) -> Optional[Dict[str, Any]]:
        """Format override of a scalar type, or None to use the built-in options"""
        return self.get('type_formats', {}).get(type_name)

    def set_type_format(self, type_name: str, options: Dict[str, Any]):
        formats = dict(self.get('type_formats', {}))
        formats[type_name] = options
        self.set('type_formats', formats)

    def load(self):
        """Read the settings file over the defaults (defaults only if missing or unreadable)"""
        if not self._config_file.exists():
            logger.info(f"No {self._config_file.name}, using default grid preferences")
            return
        try:
            with open(self._config_file, 'r', encoding='utf-8') as f:
                stored = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Error loading grid preferences: {e}")
            return
        self._preferences = {**copy.deepcopy(self.DEFAULT_PREFERENCES), **stored}
        logger.info(f"Grid preferences loaded from {self._config_file}")

    def save(self):
        self._config_dir.mkdir(parents=True, exist_ok=True)
        with open(self._config_file, 'w', encoding='utf-8') as f:
            json.dump(self._preferences, f, indent=2)
        logger.debug(f"Grid preferences written to {self._config_file}")


def get_grid_preferences() -> GridPreferences:
    """Shared GridPreferences instance"""
    return GridPreferences.get_instance()
