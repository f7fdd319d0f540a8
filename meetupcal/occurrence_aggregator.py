"""Occurrence aggregation for the calendar view.

Combines one-time events and the generated occurrences of every recurring
event into one flat list for a visible window, attaching each occurrence's
classification, colour and identity.

Failure policy: a definition that cannot be materialized (bad weekday,
unparsable fields) is skipped and logged so one bad record never blanks the
whole calendar. Set ``strict_definitions`` in the config to propagate the
error instead.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from .calendar_feed import IDENTITY_SCHEMES
from .config_loader import Config
from .event_classifier import classify, palette_for
from .exceptions import ConfigError, InvalidDefinitionError
from .models import Classification, EventDefinition, Occurrence, VisibleWindow
from .occurrence_generator import generate

logger = logging.getLogger(__name__)

DefinitionLike = Union[EventDefinition, Mapping[str, Any]]


class OccurrenceAggregator:
    """Builds the flat occurrence list for a window and a viewer."""

    def __init__(self, config: Optional[Union[Config, dict[str, Any]]] = None):
        """Initialize aggregator.

        Args:
            config: Config instance or plain mapping (defaults when omitted)

        Raises:
            ConfigError: If the identity scheme is not supported
        """
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        if config.identity_scheme not in IDENTITY_SCHEMES:
            raise ConfigError(
                f"Unsupported identity_scheme {config.identity_scheme!r}; "
                f"expected one of {', '.join(IDENTITY_SCHEMES)}"
            )
        self.config = config
        self.palette = palette_for(config.color_mode)

    def aggregate(
        self,
        definitions: Iterable[DefinitionLike],
        window: Optional[VisibleWindow],
        viewer_id: Optional[str],
    ) -> list[Occurrence]:
        """Materialize every definition into occurrences for the window.

        One-time events produce exactly one occurrence each and are not
        filtered by the window. Recurring events produce one occurrence per
        matching day of the month-expanded window. No global order is
        imposed.

        Args:
            definitions: Event definitions or raw store rows
            window: Visible window; None means no window established yet
            viewer_id: Viewing user's identity

        Returns:
            Flat list of occurrences (empty when the window is unset)

        Raises:
            InvalidDefinitionError: Only when ``strict_definitions`` is set
        """
        if window is None:
            logger.debug("Aggregation requested before a window was set; returning no occurrences")
            return []

        occurrences: list[Occurrence] = []
        skipped = 0

        for record in definitions:
            try:
                occurrences.extend(self._materialize(record, window, viewer_id))
            except InvalidDefinitionError as exc:
                if self.config.strict_definitions:
                    raise
                skipped += 1
                logger.warning(
                    "Skipping event definition %s: %s",
                    exc.definition_id or _record_id(record),
                    exc,
                )

        logger.debug(
            "Aggregated %d occurrences for window %s..%s (%d definitions skipped)",
            len(occurrences),
            window.start,
            window.end,
            skipped,
        )
        return occurrences

    def _materialize(
        self,
        record: DefinitionLike,
        window: VisibleWindow,
        viewer_id: Optional[str],
    ) -> list[Occurrence]:
        definition = EventDefinition.from_record(record)
        classification = classify(definition, viewer_id)
        color = self.palette.color_for(classification)

        if definition.is_recurring:
            return generate(
                definition,
                window,
                recurrence_label=self.config.recurrence_label,
                identity_scheme=self.config.identity_scheme,
                classification=classification,
                color=color,
            )
        return [self._one_time_occurrence(definition, classification, color)]

    def _one_time_occurrence(
        self,
        definition: EventDefinition,
        classification: Classification,
        color: str,
    ) -> Occurrence:
        return Occurrence(
            id=definition.id,
            definition_id=definition.id,
            title=definition.title,
            start=definition.start_instant(),
            end=definition.end_instant(),
            occurrence_date=definition.start_date,
            classification=classification,
            color=color,
            is_recurring=False,
        )


def _record_id(record: Any) -> Any:
    if isinstance(record, EventDefinition):
        return record.id
    if isinstance(record, Mapping):
        return record.get("id")
    return None


def aggregate(
    definitions: Iterable[DefinitionLike],
    window: Optional[VisibleWindow],
    viewer_id: Optional[str],
    *,
    config: Optional[Union[Config, dict[str, Any]]] = None,
) -> list[Occurrence]:
    """Functional wrapper around ``OccurrenceAggregator.aggregate``."""
    return OccurrenceAggregator(config).aggregate(definitions, window, viewer_id)
