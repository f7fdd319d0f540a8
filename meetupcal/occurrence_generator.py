"""Weekly recurrence expansion for meetupcal.

Expands one recurring event definition into dated occurrences bounded by the
visible window. The window is widened to whole months first, so calendar
grids that show the trailing days of the previous month and the leading days
of the next one never clip an occurrence at a month edge.
"""

import logging
from datetime import datetime, time

from dateutil.rrule import WEEKLY, rrule

from .calendar_feed import IDENTITY_SCHEME_DATE, build_occurrence_id
from .datetime_utils import is_valid_weekday, to_rrule_weekday
from .exceptions import InvalidDefinitionError
from .models import Classification, EventDefinition, Occurrence, VisibleWindow

logger = logging.getLogger(__name__)

DEFAULT_RECURRENCE_LABEL = "(recurring)"


def validate_recurring(definition: EventDefinition) -> int:
    """Check that a definition can be expanded and return its weekday.

    Raises:
        InvalidDefinitionError: If the definition is not recurring or its
            weekday is null or outside 0-6
    """
    if not definition.is_recurring:
        raise InvalidDefinitionError(
            f"Event {definition.id} is not recurring", definition_id=definition.id
        )
    weekday = definition.weekday
    if weekday is None:
        raise InvalidDefinitionError(
            f"Recurring event {definition.id} has no weekday", definition_id=definition.id
        )
    if not is_valid_weekday(weekday):
        raise InvalidDefinitionError(
            f"Recurring event {definition.id} has weekday {weekday!r} outside 0-6",
            definition_id=definition.id,
        )
    return weekday


def generate(
    definition: EventDefinition,
    window: VisibleWindow,
    *,
    recurrence_label: str = DEFAULT_RECURRENCE_LABEL,
    identity_scheme: str = IDENTITY_SCHEME_DATE,
    classification: Classification = Classification.OTHER,
    color: str = "",
) -> list[Occurrence]:
    """Expand a recurring definition into occurrences within a window.

    Every day of the month-expanded window that falls on the definition's
    weekday and is not earlier than its start date yields one occurrence.
    The rule is bounded on both ends by the expanded window, so the walk
    terminates regardless of how far in the past the series started.

    Args:
        definition: Recurring event definition
        window: Visible calendar window
        recurrence_label: Suffix appended to generated titles
        identity_scheme: ``"date"`` or ``"sequence"`` occurrence ids
        classification: Viewer-relative role attached to every occurrence
        color: Render colour attached to every occurrence

    Returns:
        Occurrences in ascending date order

    Raises:
        InvalidDefinitionError: If the definition cannot be expanded
    """
    weekday = validate_recurring(definition)
    boundary_start, boundary_end = window.expanded()

    first_day = max(boundary_start, definition.start_date)
    if first_day > boundary_end:
        logger.debug(
            "Event %s starts %s after expanded window %s..%s; no occurrences",
            definition.id,
            definition.start_date,
            boundary_start,
            boundary_end,
        )
        return []

    rule = rrule(
        WEEKLY,
        byweekday=to_rrule_weekday(weekday),
        dtstart=datetime.combine(first_day, time.min),
        until=datetime.combine(boundary_end, time.min),
    )

    title = f"{definition.title} {recurrence_label}" if recurrence_label else definition.title
    occurrences = []
    for sequence, occurrence_start in enumerate(rule, start=1):
        day = occurrence_start.date()
        occurrences.append(
            Occurrence(
                id=build_occurrence_id(definition.id, day, sequence, identity_scheme),
                definition_id=definition.id,
                title=title,
                start=definition.start_instant(day),
                end=definition.end_instant(day),
                occurrence_date=day,
                classification=classification,
                color=color,
                is_recurring=True,
            )
        )

    logger.debug(
        "Expanded event %s into %d occurrences for %s..%s",
        definition.id,
        len(occurrences),
        boundary_start,
        boundary_end,
    )
    return occurrences
