"""
Configuration management for static-mcp.

This module handles loading and accessing configuration values from config.yaml.
It provides a centralized way to manage source credentials, store paths and
logging without changing code. The per-store files (config.json) are handled
by the content store, not here.
"""

import yaml
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional


class ConfigManager:
    """
    Manages configuration loading and access for static-mcp.
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
        """Load configuration from YAML file, falling back to defaults."""
        if not self.config_path.exists():
            logging.debug(f"Configuration file not found: {self.config_path}, using defaults")
            self._config = self._get_default_config()
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError("top-level YAML value must be a mapping")
            self._config = self._merge(self._get_default_config(), loaded)
            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError, ValueError) as e:
            logging.error(f"Failed to load configuration: {e}")
            self._config = self._get_default_config()

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = ConfigManager._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "contentful": {
                "space_id": None,
                "access_token": None,
                "environment": "master",
                "host": "cdn.contentful.com",
                "include_depth": 2,
                "page_size": 1000,
                "timeout": 30.0
            },
            "store": {
                "output_dir": "output"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "log_file": None
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "contentful.host")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("contentful.environment")  # Returns "master"
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

    # Convenience properties for commonly used values

    @property
    def contentful_space_id(self) -> Optional[str]:
        """Get the Contentful space id, if configured in the file."""
        return self.get("contentful.space_id")

    @property
    def contentful_access_token(self) -> Optional[str]:
        """Get the Contentful delivery token, if configured in the file."""
        return self.get("contentful.access_token")

    @property
    def contentful_environment(self) -> str:
        return self.get("contentful.environment", "master")

    @property
    def contentful_host(self) -> str:
        return self.get("contentful.host", "cdn.contentful.com")

    @property
    def include_depth(self) -> int:
        """Get the link resolution depth requested from the source."""
        return self.get("contentful.include_depth", 2)

    @property
    def page_size(self) -> int:
        return self.get("contentful.page_size", 1000)

    @property
    def request_timeout(self) -> float:
        return self.get("contentful.timeout", 30.0)

    @property
    def output_directory(self) -> str:
        """Get the default store output directory."""
        return self.get("store.output_dir", "output")


# Global configuration instance
config = ConfigManager()


def setup_logging(config_manager: Optional[ConfigManager] = None) -> None:
    """
    Configure logging from the ``logging`` section.

    Logs go to stderr so stdout stays free for an RPC transport; a file
    handler is added when ``logging.log_file`` is set.
    """
    cfg = config_manager or config
    level = getattr(logging, str(cfg.get("logging.level", "INFO")).upper(), logging.INFO)
    format_str = cfg.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = cfg.get("logging.log_file")

    handlers: list = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=handlers
    )
