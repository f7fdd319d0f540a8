"""Date and time helpers for occurrence materialization.

All calendar arithmetic in meetupcal is timezone-naive: event definitions
store a local calendar date and a local wall-clock time, and occurrences are
built by combining the two. The only timezone-aware value the engine ever
sees is "now", which is folded into naive local time by ``to_naive_local``.

Weekdays follow the store convention (Sunday=0 ... Saturday=6), which differs
from both ``date.weekday()`` (Monday=0) and dateutil's ``MO..SU`` constants.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Optional
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

# Display names indexed by store weekday (Sunday=0)
WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def is_valid_weekday(value: Any) -> bool:
    """Return True when value is an int in the store weekday domain 0-6."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 6


def weekday_for(day: date) -> int:
    """Return the store weekday (Sunday=0) for a calendar date.

    This is how the event form derives ``weekday`` from the chosen start date
    when a definition is saved as recurring.

    Examples:
        >>> weekday_for(date(2024, 1, 1))  # a Monday
        1
        >>> weekday_for(date(2024, 1, 7))  # a Sunday
        0
    """
    return (day.weekday() + 1) % 7


def to_rrule_weekday(weekday: int) -> int:
    """Map a store weekday (Sunday=0) onto dateutil's index (Monday=0)."""
    return (weekday - 1) % 7


def weekday_name(weekday: int) -> str:
    """Human-readable weekday name for a store weekday."""
    return WEEKDAY_NAMES[weekday]


def first_of_month(day: date) -> date:
    """Return the first calendar day of the month containing ``day``."""
    return day.replace(day=1)


def last_of_month(day: date) -> date:
    """Return the last calendar day of the month containing ``day``."""
    # relativedelta clamps day=31 to the month's real length
    return day + relativedelta(day=31)


def parse_date(value: Any) -> date:
    """Parse a store date value into a ``date``.

    Accepts ``date`` objects, ``datetime`` objects (truncated to their date)
    and ISO-8601 strings such as ``"2024-01-01"`` or ``"2024-01-01T10:00:00"``.

    Raises:
        ValueError: If the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        return date_parser.isoparse(value.strip()).date()
    raise ValueError(f"Invalid date value: {value!r}")


def parse_time(value: Any) -> time:
    """Parse a store time-of-day value into a naive ``time``.

    Accepts ``time`` objects and strings in ``HH:MM`` or ``HH:MM:SS`` form
    (the store returns the latter). Any tzinfo is dropped.

    Raises:
        ValueError: If the value cannot be interpreted as a time of day
    """
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value.replace(tzinfo=None)
    if isinstance(value, str) and value.strip():
        return time.fromisoformat(value.strip()).replace(tzinfo=None)
    raise ValueError(f"Invalid time value: {value!r}")


def combine(day: date, time_of_day: time) -> datetime:
    """Combine a calendar date and a wall-clock time into a naive instant."""
    return datetime.combine(day, time_of_day.replace(tzinfo=None))


def format_time(time_of_day: time) -> str:
    """Format a time of day as ``HH:MM`` for list and tooltip display."""
    return time_of_day.strftime("%H:%M")


def to_naive_local(now: datetime, timezone_name: Optional[str] = None) -> datetime:
    """Fold an instant into naive local wall-clock time.

    Naive values are assumed to already be local and are returned unchanged.
    Aware values are converted to ``timezone_name`` (UTC when not given or
    invalid) and stripped of their tzinfo so they compare against the naive
    instants built from event definitions.

    Args:
        now: Current instant, naive or timezone-aware
        timezone_name: IANA timezone name of the viewer

    Returns:
        Naive datetime in the viewer's local time
    """
    if now.tzinfo is None:
        return now

    tz_name = timezone_name or "UTC"
    try:
        tz = ZoneInfo(tz_name)
    except Exception:
        logger.warning("Invalid timezone %r for local time conversion; using UTC", tz_name)
        tz = ZoneInfo("UTC")
    return now.astimezone(tz).replace(tzinfo=None)
