# src/rsx_a11y/core/managers/config_manager.py
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from rsx_a11y.core.utils.path_utils import PathUtils
from rsx_auditor.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """
    A singleton class to manage the application's configuration.
    It loads the bundled settings.json, lets a user settings file override it,
    and allows for in-memory modifications.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Loads the configuration from the file."""
        self._config: Dict[str, Any] = {}
        self.reset()
        logger.debug("ConfigManager initialized.")

    def get_all(self) -> Dict[str, Any]:
        """Returns the entire current configuration dictionary."""
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Safely retrieves a nested value from the configuration.
        e.g., 'lint.workers'.
        """
        keys = key_path.split('.')
        value = self._config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
        return value if value is not None else default

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a nested value in the in-memory configuration.
        e.g., 'debug.level', 'INFO'
        """
        keys = key_path.split('.')
        d = self._config
        for key in keys[:-1]:
            d = d.setdefault(key, {})
            if not isinstance(d, dict):
                logger.error("Cannot set value: '%s' is not a dictionary.", key)
                return False

        # Cast the new value to the type of the old one
        original_value = d.get(keys[-1])
        if isinstance(original_value, list) and isinstance(value, str):
            value = [item.strip() for item in value.split(",") if item.strip()]
        if original_value is not None and not isinstance(original_value, (list, dict)):
            try:
                if isinstance(original_value, bool) and isinstance(value, str):
                    value = value.strip().lower() in ("1", "true", "yes", "on")
                else:
                    value = type(original_value)(value)
            except (ValueError, TypeError):
                logger.error(
                    "Could not cast new value for '%s' to type %s.",
                    key_path, type(original_value).__name__
                )
                return False

        d[keys[-1]] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def load_overrides(self, path: Union[str, Path]) -> None:
        """
        Deep-merges a user JSON settings file over the current configuration.
        Raises ConfigurationError when the file cannot be read or is not a JSON object.
        """
        settings_path = Path(path)
        try:
            with open(settings_path, "r", encoding="utf-8") as f:
                overrides = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not load settings file {settings_path}: {e}") from e
        if not isinstance(overrides, dict):
            raise ConfigurationError(f"Settings file {settings_path} must contain a JSON object.")

        self._config = _deep_merge(self._config, overrides)
        logger.info("Configuration overrides loaded from %s", settings_path)

    def reset(self):
        """Resets the in-memory configuration from the settings.json file."""
        config_path = PathUtils.get_default_settings_path()
        if not config_path.exists():
            logger.warning("settings.json not found at %s. Using empty config.", config_path)
            self._config = {}
            return
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
            logger.info("Configuration has been (re)loaded from settings.json.")
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load settings.json: %s", e, exc_info=True)
            self._config = {}


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
