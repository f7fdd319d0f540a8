"""Calendar controller tying definitions and the visible window together.

The controller owns the two inputs of aggregation (the fetched definitions
and the visible window) and recomputes the occurrence list whenever either
changes, notifying subscribers with the new result. Computation is
synchronous, so the most recent result always supersedes earlier ones.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Optional

from .calendar_feed import resolve_definition_id
from .exceptions import WindowUnsetError
from .models import EventDefinition, Occurrence
from .occurrence_aggregator import DefinitionLike, OccurrenceAggregator
from .window_tracker import ViewWindowTracker

logger = logging.getLogger(__name__)

Listener = Callable[[list[Occurrence]], None]


class CalendarController:
    """Recomputes calendar occurrences when definitions or the window change."""

    def __init__(
        self,
        viewer_id: Optional[str],
        config: Any = None,
        aggregator: Optional[OccurrenceAggregator] = None,
    ):
        """Initialize controller.

        Args:
            viewer_id: Viewing user's identity
            config: Config instance or mapping passed to the default aggregator
            aggregator: Optional pre-built aggregator (takes precedence over config)
        """
        self.viewer_id = viewer_id
        self.aggregator = aggregator or OccurrenceAggregator(config)
        self.tracker = ViewWindowTracker(on_change=lambda _window: self.refresh())
        self._definitions: list[DefinitionLike] = []
        self._occurrences: list[Occurrence] = []
        self._listeners: list[Listener] = []

    @property
    def occurrences(self) -> list[Occurrence]:
        """Latest aggregation result (empty while no window is set)."""
        return list(self._occurrences)

    @property
    def definitions(self) -> list[DefinitionLike]:
        return list(self._definitions)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for new results; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_definitions(self, definitions: Iterable[DefinitionLike]) -> list[Occurrence]:
        """Replace the definitions (e.g. after a fetch or store push) and recompute."""
        self._definitions = list(definitions)
        logger.debug("Controller received %d definitions", len(self._definitions))
        return self.refresh()

    def set_window(self, window: Any) -> bool:
        """Report the visible window; recomputes only when it changed by value."""
        return self.tracker.set_window(window)

    def refresh(self) -> list[Occurrence]:
        """Recompute occurrences from current inputs and notify subscribers."""
        try:
            window = self.tracker.require_window()
        except WindowUnsetError:
            logger.debug("No visible window yet; publishing empty occurrence list")
            self._occurrences = []
        else:
            self._occurrences = self.aggregator.aggregate(self._definitions, window, self.viewer_id)

        self._notify()
        return self.occurrences

    def resolve_click(self, occurrence_id: str) -> str:
        """Map a clicked occurrence id back to its event definition id."""
        return resolve_definition_id(occurrence_id, known_ids=self._known_ids())

    def _known_ids(self) -> list[str]:
        ids = []
        for record in self._definitions:
            if isinstance(record, EventDefinition):
                ids.append(record.id)
            elif isinstance(record, Mapping) and record.get("id") is not None:
                ids.append(str(record["id"]))
        return ids

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.occurrences)
            except Exception:
                logger.exception("Calendar listener %r failed", listener)
