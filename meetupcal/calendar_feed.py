"""Occurrence identity and calendar widget serialization.

Two identity schemes are supported:

- ``date`` (default): ``"{definition_id}@{YYYY-MM-DD}"``. Stable across
  window changes, so the same occurrence keeps its id when the user pages
  between months.
- ``sequence``: ``"{definition_id}_{n}"`` with ``n`` 1-based within a single
  generation call. Reproducible for identical inputs only.

Either way the definition id must be recoverable from a clicked occurrence
id so the calendar surface can navigate to the event's detail page.
"""

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any, Optional

from .models import Occurrence

logger = logging.getLogger(__name__)

IDENTITY_SCHEME_DATE = "date"
IDENTITY_SCHEME_SEQUENCE = "sequence"
IDENTITY_SCHEMES = (IDENTITY_SCHEME_DATE, IDENTITY_SCHEME_SEQUENCE)

DATE_DELIMITER = "@"
SEQUENCE_DELIMITER = "_"


def build_occurrence_id(
    definition_id: str,
    occurrence_date: date,
    sequence: int,
    scheme: str = IDENTITY_SCHEME_DATE,
) -> str:
    """Build the identity of one generated occurrence.

    Args:
        definition_id: Source event definition ID
        occurrence_date: Calendar date of the occurrence
        sequence: 1-based position within the current generation call
        scheme: ``"date"`` or ``"sequence"``

    Returns:
        Occurrence identity string

    Raises:
        ValueError: If scheme is unknown
    """
    if scheme == IDENTITY_SCHEME_DATE:
        return f"{definition_id}{DATE_DELIMITER}{occurrence_date.isoformat()}"
    if scheme == IDENTITY_SCHEME_SEQUENCE:
        return f"{definition_id}{SEQUENCE_DELIMITER}{sequence}"
    raise ValueError(f"Unknown identity scheme: {scheme!r}")


def resolve_definition_id(occurrence_id: str, known_ids: Optional[Iterable[str]] = None) -> str:
    """Recover the source definition id from an occurrence id.

    One-time occurrences carry the definition id unchanged. For generated
    ids the ``@date`` or trailing ``_n`` suffix is stripped. When
    ``known_ids`` is given, an exact match wins and otherwise the longest
    known id that prefixes the occurrence id (followed by a delimiter) is
    returned, which resolves definition ids that contain ``_`` themselves.

    Args:
        occurrence_id: Identity reported by a calendar click
        known_ids: Optional collection of current definition ids

    Returns:
        Definition id
    """
    if known_ids is not None:
        ids = set(known_ids)
        if occurrence_id in ids:
            return occurrence_id
        candidates = [
            known
            for known in ids
            if occurrence_id.startswith(known + DATE_DELIMITER)
            or occurrence_id.startswith(known + SEQUENCE_DELIMITER)
        ]
        if candidates:
            return max(candidates, key=len)
        logger.debug("Occurrence id %r matches no known definition id", occurrence_id)

    if DATE_DELIMITER in occurrence_id:
        return occurrence_id.rsplit(DATE_DELIMITER, 1)[0]

    head, sep, tail = occurrence_id.rpartition(SEQUENCE_DELIMITER)
    if sep and head and tail.isdigit():
        return head
    return occurrence_id


def to_calendar_events(occurrences: Iterable[Occurrence]) -> list[dict[str, Any]]:
    """Serialize occurrences to the calendar widget's event-object list."""
    return [occurrence.to_calendar_dict() for occurrence in occurrences]
