"""meetupcal - recurring-event materialization engine for meetup calendars.

Expands weekly-recurring event definitions into concrete occurrences for the
visible calendar window, merges them with one-time events, classifies each
one for the viewing user and partitions event lists into current and past.
"""

__version__ = "0.1.0"

from typing import Optional

from .calendar_controller import CalendarController
from .calendar_feed import resolve_definition_id, to_calendar_events
from .config_loader import Config, load_config
from .event_classifier import classify, participant_status, summarize_participants
from .event_partitioner import is_event_passed, partition
from .exceptions import (
    ConfigError,
    InvalidDefinitionError,
    InvalidWindowError,
    MeetupCalError,
    WindowUnsetError,
)
from .logging_config import configure_logging, get_logging_status
from .models import (
    Classification,
    EventDefinition,
    Occurrence,
    Participant,
    ParticipantStatus,
    ParticipantSummary,
    PartitionResult,
    VisibleWindow,
)
from .occurrence_aggregator import OccurrenceAggregator, aggregate
from .occurrence_generator import generate
from .window_tracker import ViewWindowTracker

__all__ = [
    "CalendarController",
    "Classification",
    "Config",
    "ConfigError",
    "EventDefinition",
    "InvalidDefinitionError",
    "InvalidWindowError",
    "MeetupCalError",
    "Occurrence",
    "OccurrenceAggregator",
    "Participant",
    "ParticipantStatus",
    "ParticipantSummary",
    "PartitionResult",
    "ViewWindowTracker",
    "VisibleWindow",
    "WindowUnsetError",
    "aggregate",
    "classify",
    "configure_logging",
    "generate",
    "get_logging_status",
    "init_logging",
    "is_event_passed",
    "load_config",
    "participant_status",
    "partition",
    "resolve_definition_id",
    "summarize_participants",
    "to_calendar_events",
]


def init_logging(level_name: Optional[str] = None) -> None:
    """Initialize root logging to stream to console.

    Installs a colorlog console handler when the root logger has none, so
    host applications that already configured logging keep their setup.
    Levels are then applied by ``configure_logging``, which honors
    MEETUPCAL_DEBUG and MEETUPCAL_LOG_LEVEL (``level_name`` wins over the
    latter).
    """
    import logging
    import sys

    from colorlog import ColoredFormatter

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message, only the level colorized
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    configure_logging(level_name=level_name)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(root.level)
    )
