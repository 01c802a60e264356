"""
Configuration management for contentloader.

This module handles loading configuration values from config.yaml and
resolving them, together with environment variables and CLI flags, into the
validated RunOptions for one command. Precedence, lowest first: built-in
defaults, config.yaml, environment variables, explicit overrides.
"""

import yaml
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import logging

import pydantic

from .errors import ConfigurationError
from .models import RunOptions
from .normalize.text import parse_boolean

# Option name -> environment variables that may set it, checked in order
ENV_OPTIONS = {
    "base_url": ["STRAPI_URL"],
    "token": ["STRAPI_TOKEN"],
    "dry_run": ["DRY_RUN"],
    "force_publish": ["FORCE_PUBLISH"],
    "force_unpublish": ["FORCE_UNPUBLISH"],
    "default_cover_image_id": ["DEFAULT_COVER_IMAGE_ID"],
    "only_when_empty": ["ONLY_WHEN_EMPTY_BLOCKS"],
    "clear_legacy_content": ["CLEAR_LEGACY_CONTENT"],
    "page_size": ["PAGE_SIZE"],
    "key_filter": ["KEY_FILTER", "SLUG", "ROUTE_PATH"],
    "timeout": ["HTTP_TIMEOUT"],
}

BOOLEAN_OPTIONS = {"dry_run", "force_publish", "force_unpublish", "only_when_empty", "clear_legacy_content"}

DEFAULT_UPSERT_MODES = {
    "import": "update",
    "sync": "skip",
    "migrate": "skip",
}


class ConfigManager:
    """
    Manages configuration loading and access for contentloader.
    """

    def __init__(self, config_path: str = "config.yaml", environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
            environ: Environment mapping to read overrides from (defaults to os.environ)
        """
        self.config_path = Path(config_path)
        self.environ = os.environ if environ is None else environ
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file, falling back to defaults."""
        self._config = self._get_default_config()

        if not self.config_path.exists():
            logging.debug(f"Configuration file not found, using defaults: {self.config_path}")
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load configuration from {self.config_path}: {e}")

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Configuration file {self.config_path} must contain a mapping")

        self._merge(self._config, loaded)
        logging.debug(f"Configuration loaded from {self.config_path}")

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                ConfigManager._merge(base[key], value)
            else:
                base[key] = value

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            "store": {
                "url": "http://localhost:1337",
                "token": "",
                "timeout": 30.0,
                "page_size": 100
            },
            "run": {
                "dry_run": False,
                "force_publish": False,
                "force_unpublish": False,
                "only_when_empty": True,
                "clear_legacy_content": False,
                "default_cover_image_id": None
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(levelname)s - %(message)s"
            },
            "paths": {
                "log_file": None
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "store.url")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("store.url")       # Returns "http://localhost:1337"
            config.get("logging.level")   # Returns "INFO"
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

    # Convenience properties for commonly used values

    @property
    def store_url(self) -> str:
        """Get content store base URL."""
        return self.get("store.url", "http://localhost:1337")

    @property
    def log_filename(self) -> Optional[str]:
        """Get log file name, if file logging is enabled."""
        return self.get("paths.log_file")

    def _env(self, *names: str) -> Optional[str]:
        for name in names:
            value = self.environ.get(name)
            if value is not None and value != "":
                return value
        return None

    def run_options(self, operation: str, upsert_env: str = "UPSERT_MODE",
                    overrides: Optional[Dict[str, Any]] = None) -> RunOptions:
        """
        Resolve and validate the options for one command.

        Args:
            operation: 'import', 'sync' or 'migrate'
            upsert_env: Command-specific environment variable for the upsert mode
            overrides: Values from the command line; None entries are ignored

        Returns:
            The validated options

        Raises:
            ConfigurationError: If a required option is missing or invalid
        """
        values: Dict[str, Any] = {
            "operation": operation,
            "base_url": self.store_url,
            "token": self.get("store.token") or "",
            "timeout": self.get("store.timeout", 30.0),
            "page_size": self.get("store.page_size", 100),
            "upsert_mode": self.get(f"modes.{operation}", DEFAULT_UPSERT_MODES.get(operation, "update")),
        }
        values.update({
            key: value for key, value in self.get_section("run").items() if value is not None
        })

        for option, env_names in ENV_OPTIONS.items():
            raw = self._env(*env_names)
            if raw is None:
                continue
            if option in BOOLEAN_OPTIONS:
                values[option] = parse_boolean(raw, bool(values.get(option, False)))
            elif option == "page_size":
                try:
                    values[option] = int(raw)
                except ValueError:
                    raise ConfigurationError("PAGE_SIZE must be a number between 1 and 100.")
            else:
                values[option] = raw

        mode = self._env(upsert_env, "UPSERT_MODE")
        if mode is not None:
            values["upsert_mode"] = mode

        for key, value in (overrides or {}).items():
            if value is not None:
                values[key] = value

        try:
            return RunOptions(**values)
        except pydantic.ValidationError as e:
            problems = "; ".join(str(error["msg"]).removeprefix("Value error, ") for error in e.errors())
            raise ConfigurationError(problems)


# Global configuration instance, loaded on the first get_config() call
config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance

    Raises:
        ConfigurationError: If config.yaml cannot be loaded
    """
    global config
    if config is None:
        config = ConfigManager()
    return config
