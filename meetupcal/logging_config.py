"""
Central logging configuration for meetupcal.

Keeps engine diagnostics at INFO by default and lets a host application or a
developer switch the meetupcal loggers to DEBUG (occurrence counts per
definition, skipped records, window changes) without touching code.
"""

import logging
import os
from typing import Optional

# Values of MEETUPCAL_DEBUG that enable debug logging
TRUTHY_VALUES = ("1", "true", "yes", "on")

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Loggers belonging to this package, tuned together
PACKAGE_LOGGERS = (
    "meetupcal",
    "meetupcal.calendar_feed",
    "meetupcal.datetime_utils",
    "meetupcal.event_classifier",
    "meetupcal.occurrence_generator",
    "meetupcal.occurrence_aggregator",
    "meetupcal.event_partitioner",
    "meetupcal.window_tracker",
    "meetupcal.calendar_controller",
    "meetupcal.config_loader",
    "meetupcal.config_manager",
)


def debug_from_env() -> bool:
    """Return True when MEETUPCAL_DEBUG holds a truthy value."""
    return os.getenv("MEETUPCAL_DEBUG", "").strip().lower() in TRUTHY_VALUES


def configure_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    level_name: Optional[str] = None,
) -> None:
    """
    Configure logging levels for meetupcal.

    Args:
        debug_mode: Whether to enable debug logging for meetupcal modules
        force_debug: Override debug mode setting (None to use env var detection)
        level_name: Root log level name; takes precedence over MEETUPCAL_LOG_LEVEL

    Environment Variables:
        MEETUPCAL_DEBUG: Set to '1', 'true', 'yes', 'on' to force debug logging
        MEETUPCAL_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    env_debug = debug_from_env()
    requested_level = (level_name or os.getenv("MEETUPCAL_LOG_LEVEL", "")).strip().upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if requested_level in LEVEL_NAMES:
        root_level = getattr(logging, requested_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    package_level = logging.DEBUG if final_debug else logging.INFO
    for name in PACKAGE_LOGGERS:
        logging.getLogger(name).setLevel(package_level)

    # dateutil and yaml are quiet already; keep them from flooding DEBUG runs
    for name in ("dateutil", "yaml"):
        logging.getLogger(name).setLevel(logging.WARNING)

    if final_debug:
        root_logger.info("Debug logging enabled for meetupcal modules.")
    else:
        root_logger.info("Production logging configuration applied.")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for name in PACKAGE_LOGGERS:
        status[name] = logging.getLevelName(logging.getLogger(name).level)
    return status
