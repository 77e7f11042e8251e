"""
Configuration management for schemasync.

This module handles loading and accessing configuration values from config.yaml.
Every value has a built-in default, so the engine runs without a config file.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import yaml


DEFAULT_SCHEMA_TEXT = """type Query {
  _empty: String
}
"""


class ConfigManager:
    """
    Manages configuration loading and access for schemasync.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file, layered over the defaults."""
        self._config = self._get_default_config()
        if not self.config_path.exists():
            logging.info(f"Configuration file not found: {self.config_path}, using defaults")
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.error(f"Failed to load configuration: {e}")
            return

        if not isinstance(loaded, dict):
            logging.error(f"Configuration in {self.config_path} is not a mapping, using defaults")
            return

        _merge(self._config, loaded)
        logging.info(f"Configuration loaded from {self.config_path}")

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "schema": {
                "default_text": DEFAULT_SCHEMA_TEXT
            },
            "naming": {
                "input_suffix": "Input",
                "result_suffix": "CommandResult",
                "fallback_name": "Untitled"
            },
            "sync": {
                "declare_identity_directive": True
            },
            "paths": {
                "log_file": "schemasync.log"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "naming.input_suffix")
            default: Default value if key is not found

        Returns:
            The configuration value
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
        """Get an entire configuration section."""
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    @property
    def default_schema_text(self) -> str:
        return self.get("schema.default_text", DEFAULT_SCHEMA_TEXT)

    @property
    def input_suffix(self) -> str:
        return self.get("naming.input_suffix", "Input")

    @property
    def result_suffix(self) -> str:
        return self.get("naming.result_suffix", "CommandResult")

    @property
    def fallback_type_name(self) -> str:
        return self.get("naming.fallback_name", "Untitled")

    @property
    def declare_identity_directive(self) -> bool:
        return bool(self.get("sync.declare_identity_directive", True))

    @property
    def log_filename(self) -> str:
        return self.get("paths.log_file", "schemasync.log")


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)


# Global configuration instance, used by the command-line entry point
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
