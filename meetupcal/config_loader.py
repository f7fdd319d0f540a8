"""meetupcal.config_loader

Lightweight config loader for meetupcal.

- Reads YAML with PyYAML.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .calendar_feed import IDENTITY_SCHEME_DATE, IDENTITY_SCHEMES
from .event_classifier import PALETTES
from .exceptions import ConfigError
from .logging_config import TRUTHY_VALUES
from .occurrence_generator import DEFAULT_RECURRENCE_LABEL

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Typed configuration for meetupcal.

    Fields:
        recurrence_label: suffix appended to titles of generated occurrences
        identity_scheme: "date" (stable across windows) or "sequence"
        color_mode: "light" or "dark" classification palette
        strict_definitions: propagate invalid definitions instead of skipping them
        default_timezone: IANA timezone used to fold aware "now" values
        log_level: logging level name
    """

    recurrence_label: str = DEFAULT_RECURRENCE_LABEL
    identity_scheme: str = IDENTITY_SCHEME_DATE
    color_mode: str = "light"
    strict_definitions: bool = False
    default_timezone: str = "UTC"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Unknown identity schemes and colour modes fall back to their defaults
        with a warning; booleans accept the usual truthy strings.
        """
        if data is None:
            data = {}

        label = data.get("recurrence_label", DEFAULT_RECURRENCE_LABEL)
        label = str(label) if label is not None else ""

        scheme = str(data.get("identity_scheme", IDENTITY_SCHEME_DATE)).lower()
        if scheme not in IDENTITY_SCHEMES:
            logger.warning(
                "Config identity_scheme=%r is not one of %s; using %r",
                scheme,
                ", ".join(IDENTITY_SCHEMES),
                IDENTITY_SCHEME_DATE,
            )
            scheme = IDENTITY_SCHEME_DATE

        color_mode = str(data.get("color_mode", "light")).lower()
        if color_mode not in PALETTES:
            logger.warning("Config color_mode=%r is not supported; using 'light'", color_mode)
            color_mode = "light"

        strict_raw = data.get("strict_definitions", False)
        if isinstance(strict_raw, str):
            strict = strict_raw.strip().lower() in TRUTHY_VALUES
        else:
            strict = bool(strict_raw)

        tz = data.get("default_timezone", "UTC")
        tz = str(tz) if tz else "UTC"

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            recurrence_label=label,
            identity_scheme=scheme,
            color_mode=color_mode,
            strict_definitions=strict,
            default_timezone=tz,
            log_level=log_level,
        )


def load_config_mapping(path: str | Path | None = None) -> dict[str, Any]:
    """Load the raw configuration mapping from a YAML file.

    Returns an empty mapping when the file is missing or empty.

    Raises:
        ConfigError: If the file parses to something other than a mapping
    """
    p = Path(path) if path else Path.cwd() / "meetupcal.yaml"
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return {}

    loaded = yaml.safe_load(p.read_text(encoding="utf-8"))
    # safe_load returns None for empty files
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, loaded)
        raise ConfigError("Config file must contain a mapping at top level")
    return loaded


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file and return a Config instance.

    Args:
        path: Optional path to the config file. Defaults to ./meetupcal.yaml.

    Returns:
        Config dataclass instance with values from file (or defaults).
    """
    cfg = Config.from_dict(load_config_mapping(path))
    logger.debug("Configuration values: %s", cfg)
    return cfg
