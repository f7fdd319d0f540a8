"""Configuration management from environment variables and .env files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from .config_loader import Config, load_config_mapping

logger = logging.getLogger(__name__)

# Environment variable -> config key
ENV_KEYS: dict[str, str] = {
    "MEETUPCAL_RECURRENCE_LABEL": "recurrence_label",
    "MEETUPCAL_IDENTITY_SCHEME": "identity_scheme",
    "MEETUPCAL_COLOR_MODE": "color_mode",
    "MEETUPCAL_STRICT_DEFINITIONS": "strict_definitions",
    "MEETUPCAL_DEFAULT_TIMEZONE": "default_timezone",
    "MEETUPCAL_LOG_LEVEL": "log_level",
}


class ConfigManager:
    """Manages configuration from a YAML file, environment variables and .env files."""

    def __init__(self, env_file_path: Path | None = None, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
            config_path: Optional path to YAML config (defaults to ./meetupcal.yaml)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"
        self.config_path = config_path

    def load_env_file(self) -> list[str]:
        """Load .env file and set environment variables.

        Only sets variables that are not already in the environment to avoid
        surprising overrides of user's environment.

        Returns:
            List of environment variable keys that were loaded from .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        set_keys = []
        for key, val in dotenv_values(self.env_file_path).items():
            if key and val is not None and key not in os.environ:
                os.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))
        return set_keys

    def build_config_from_env(self) -> dict[str, Any]:
        """Build configuration overrides from ``MEETUPCAL_*`` environment variables."""
        cfg: dict[str, Any] = {}
        for env_key, cfg_key in ENV_KEYS.items():
            value = os.environ.get(env_key)
            if value:
                cfg[cfg_key] = value
        return cfg

    def load_full_config(self) -> Config:
        """Load file config, .env defaults and environment; environment wins.

        This is the main entry point for loading configuration.
        """
        self.load_env_file()
        merged = dict(load_config_mapping(self.config_path))
        merged.update(self.build_config_from_env())
        return Config.from_dict(merged)


def get_default_timezone(fallback: str = "UTC") -> str:
    """Get default timezone from environment with validation.

    Args:
        fallback: Fallback timezone if not configured or invalid

    Returns:
        Valid IANA timezone string
    """
    import zoneinfo

    timezone = os.environ.get("MEETUPCAL_DEFAULT_TIMEZONE", fallback)
    try:
        zoneinfo.ZoneInfo(timezone)
        return timezone
    except Exception:
        logger.warning("Invalid timezone %r, falling back to %r", timezone, fallback, exc_info=True)
        return fallback
