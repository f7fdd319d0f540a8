"""Current/past partitioning for event lists.

A single "ended" policy is shared by the list and calendar views:

1. An event with an explicit end date and end time has ended once that end
   instant is strictly before now.
2. A recurring event without an end date never ends. An open-ended weekly
   series stays current however long ago it started.
3. Anything else has ended once its start instant is strictly before now.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from .config_manager import get_default_timezone
from .datetime_utils import combine, to_naive_local
from .exceptions import InvalidDefinitionError
from .models import EventDefinition, PartitionResult

logger = logging.getLogger(__name__)


def is_event_passed(event: EventDefinition, now: datetime.datetime) -> bool:
    """Return True when the event has ended relative to a naive local ``now``."""
    if event.end_date is not None and event.end_time is not None:
        return combine(event.end_date, event.end_time) < now

    if event.is_recurring and event.end_date is None:
        return False

    return event.start_instant() < now


def _sort_key(event: EventDefinition) -> datetime.datetime:
    return event.start_instant()


def partition(
    events: Iterable[Union[EventDefinition, Mapping[str, Any]]],
    now: datetime.datetime,
    *,
    timezone: Optional[str] = None,
) -> PartitionResult:
    """Split events into current and past lists, each sorted by start.

    Args:
        events: Event definitions or raw store rows
        now: Current instant; aware values are folded into ``timezone``
        timezone: IANA timezone of the viewer (defaults to the configured one)

    Returns:
        PartitionResult with ``current`` and ``past`` sorted ascending
    """
    if now.tzinfo is not None:
        now = to_naive_local(now, timezone or get_default_timezone())

    current: list[EventDefinition] = []
    past: list[EventDefinition] = []

    for record in events:
        try:
            event = EventDefinition.from_record(record)
        except InvalidDefinitionError as exc:
            logger.warning("Skipping unparsable event %s in list partition: %s", exc.definition_id, exc)
            continue

        if is_event_passed(event, now):
            past.append(event)
        else:
            current.append(event)

    current.sort(key=_sort_key)
    past.sort(key=_sort_key)

    logger.debug("Partitioned events: %d current, %d past", len(current), len(past))
    return PartitionResult(current=current, past=past)
