"""Exception hierarchy for meetupcal.

Every error raised by the materialization engine derives from
``MeetupCalError`` so callers can catch engine failures in one place while
still distinguishing the specific condition. All of them are deterministic
functions of their input; nothing here is transient or worth retrying.
"""

from typing import Optional


class MeetupCalError(Exception):
    """Base exception for all meetupcal errors."""


class InvalidDefinitionError(MeetupCalError, ValueError):
    """An event definition cannot be materialized.

    Raised when:
    - A recurring definition has a null weekday
    - A recurring definition has a weekday outside 0-6 (Sunday=0)
    - Date or time fields cannot be parsed
    - The generator is handed a one-time definition

    The offending definition id is kept on ``definition_id`` so the
    aggregator can log which record was skipped.
    """

    def __init__(self, message: str, definition_id: Optional[str] = None):
        super().__init__(message)
        self.definition_id = definition_id


class InvalidWindowError(MeetupCalError, ValueError):
    """A visible window ends before it starts."""


class WindowUnsetError(MeetupCalError):
    """Aggregation was requested before any visible window was established.

    Aggregation paths translate this into an empty occurrence list; it only
    escapes from ``ViewWindowTracker.require_window()``.
    """


class ConfigError(MeetupCalError):
    """Configuration file exists but does not hold a mapping."""
