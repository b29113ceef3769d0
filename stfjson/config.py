"""
Configuration management for stfjson.

This module handles loading and accessing configuration values from
config.yaml (or the file named by STFJSON_CONFIG). Every setting has a
built-in default, so the converter runs without any configuration file.
"""

import yaml
import os
from pathlib import Path
from typing import Any, Dict, Optional
import logging


DEFAULT_CONFIG_PATH = "config.yaml"
CONFIG_ENV_VAR = "STFJSON_CONFIG"


class ConfigManager:
    """
    Manages configuration loading and access for stfjson.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. Defaults to
                $STFJSON_CONFIG, then config.yaml in the working directory.
        """
        self.config_path = Path(config_path or os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            logging.debug(f"Configuration file not found: {self.config_path}, using defaults")
            self._config = self._get_default_config()
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}

            if not isinstance(loaded, dict):
                raise ValueError(f"expected a mapping at the top level, got {type(loaded).__name__}")

            self._config = loaded
            logging.debug(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError, ValueError) as e:
            logging.error(f"Failed to load configuration: {e}")
            # Fall back to default configuration
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "stf": {
                "default_date_format": 1,
                "input_encoding": "latin-1"
            },
            "output": {
                "indent": 2,
                "ensure_ascii": False
            },
            "logging": {
                "level": "INFO",
                "format": "%(levelname)s: %(message)s",
                "log_file": None
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "output.indent")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("stf.default_date_format")  # Returns 1
            config.get("logging.level")  # Returns "INFO"
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def default_date_format(self) -> int:
        """Get the date table index in effect before any {d} tag."""
        return self.get("stf.default_date_format", 1)

    @property
    def input_encoding(self) -> str:
        """Get the text encoding used to decode STF input."""
        return self.get("stf.input_encoding", "latin-1")

    @property
    def json_indent(self) -> int:
        """Get the JSON indentation width."""
        return self.get("output.indent", 2)

    @property
    def ensure_ascii(self) -> bool:
        """Get whether non-ASCII output is escaped."""
        return self.get("output.ensure_ascii", False)

    @property
    def log_level(self) -> str:
        """Get the logging level name."""
        return self.get("logging.level", "INFO")

    @property
    def log_format(self) -> str:
        """Get the logging format string."""
        return self.get("logging.format", "%(levelname)s: %(message)s")

    @property
    def log_filename(self) -> Optional[str]:
        """Get the optional log file name."""
        return self.get("logging.log_file")


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
