"""
Configuration management for blockrender.

This module handles loading and accessing configuration values from config.yaml.
It provides a centralized way to manage content source and output settings
without changing code. The rendering engine itself takes no configuration
beyond the registry passed to it.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional
import logging


class ConfigManager:
    """
    Manages configuration loading and access for blockrender.
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
        defaults = self._get_default_config()
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}

            if not isinstance(loaded, dict):
                raise ValueError(f"Configuration root must be a mapping, got {type(loaded).__name__}")

            self._config = self._merge(defaults, loaded)
            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, ValueError, yaml.YAMLError) as e:
            logging.debug(f"Using default configuration: {e}")
            self._config = defaults

    @classmethod
    def _merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = cls._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "notion": {
                "api_base": "https://api.notion.com/v1",
                "api_version": "2022-06-28",
                "token_env": "NOTION_TOKEN",
                "timeout": 30.0,
                "page_size": 100,
                "max_retries": 3,
                "retry_backoff": 1.0
            },
            "render": {
                "output_dir": "output",
                "file_extension": ".md",
                "include_properties": True
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
            key_path: Dot-separated path to the configuration value (e.g., "notion.page_size")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("notion.api_version")  # Returns "2022-06-28"
            config.get("render.output_dir")    # Returns "output"
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
    def notion_api_base(self) -> str:
        """Get the Notion API root URL."""
        return self.get("notion.api_base", "https://api.notion.com/v1")

    @property
    def notion_api_version(self) -> str:
        """Get the Notion-Version header value."""
        return self.get("notion.api_version", "2022-06-28")

    @property
    def notion_token_env(self) -> str:
        """Get the name of the environment variable holding the token."""
        return self.get("notion.token_env", "NOTION_TOKEN")

    @property
    def notion_timeout(self) -> float:
        """Get the HTTP timeout in seconds."""
        return float(self.get("notion.timeout", 30.0))

    @property
    def notion_page_size(self) -> int:
        """Get the page size for paginated requests."""
        return int(self.get("notion.page_size", 100))

    @property
    def notion_max_retries(self) -> int:
        """Get the retry budget per request."""
        return int(self.get("notion.max_retries", 3))

    @property
    def notion_retry_backoff(self) -> float:
        """Get the base retry delay in seconds."""
        return float(self.get("notion.retry_backoff", 1.0))

    @property
    def output_directory(self) -> str:
        """Get the directory rendered documents are written to."""
        return self.get("render.output_dir", "output")

    @property
    def file_extension(self) -> str:
        """Get the extension of rendered documents."""
        return self.get("render.file_extension", ".md")

    @property
    def include_properties(self) -> bool:
        """Whether rendered documents start with a property front matter."""
        return bool(self.get("render.include_properties", True))

    @property
    def log_filename(self) -> Optional[str]:
        """Get log file name (None disables file logging)."""
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
