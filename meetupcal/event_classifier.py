"""Viewer-relative event classification and participant helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .models import Classification, EventDefinition, ParticipantStatus, ParticipantSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorPalette:
    """Render colours per classification."""

    owned: str
    participating: str
    other: str

    def color_for(self, classification: Classification) -> str:
        if classification == Classification.OWNED:
            return self.owned
        if classification == Classification.PARTICIPATING:
            return self.participating
        return self.other


LIGHT_PALETTE = ColorPalette(owned="#48BB78", participating="#4299E1", other="#A0AEC0")
DARK_PALETTE = ColorPalette(owned="#68D391", participating="#63B3ED", other="#718096")

PALETTES: dict[str, ColorPalette] = {
    "light": LIGHT_PALETTE,
    "dark": DARK_PALETTE,
}


def palette_for(color_mode: str) -> ColorPalette:
    """Return the palette for a colour mode, defaulting to light."""
    palette = PALETTES.get(str(color_mode).lower())
    if palette is None:
        logger.warning("Unknown color mode %r; using light palette", color_mode)
        return LIGHT_PALETTE
    return palette


def classify(definition: EventDefinition, viewer_id: Optional[str]) -> Classification:
    """Classify an event relative to the viewing user.

    Ownership wins over participation. Participation ignores status: a
    declined participant is still ``participating`` for calendar colouring,
    whereas the detail view counts statuses separately (see
    ``summarize_participants``).

    Args:
        definition: Event definition to classify
        viewer_id: Viewing user's identity, None for an anonymous viewer

    Returns:
        Exactly one Classification; never raises
    """
    if viewer_id is None:
        return Classification.OTHER
    if definition.created_by == viewer_id:
        return Classification.OWNED
    if any(p.user_id == viewer_id for p in definition.participants):
        return Classification.PARTICIPATING
    return Classification.OTHER


def participant_status(
    definition: EventDefinition, viewer_id: Optional[str]
) -> Optional[ParticipantStatus]:
    """Return the viewer's participation status, or None when not a participant."""
    if viewer_id is None:
        return None
    for participant in definition.participants:
        if participant.user_id == viewer_id:
            return participant.status
    return None


def summarize_participants(definition: EventDefinition) -> ParticipantSummary:
    """Count participants by status; entries without a status are not counted."""
    summary = ParticipantSummary()
    for participant in definition.participants:
        if participant.status == ParticipantStatus.ACCEPTED:
            summary.accepted += 1
        elif participant.status == ParticipantStatus.PENDING:
            summary.pending += 1
        elif participant.status == ParticipantStatus.DECLINED:
            summary.declined += 1
    return summary
