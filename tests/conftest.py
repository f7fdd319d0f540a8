"""Shared fixtures for meetupcal tests."""

from collections.abc import Generator
from datetime import date
from typing import Any, Callable

import pytest

from meetupcal.models import EventDefinition, VisibleWindow

OWNER_ID = "user-owner"
PARTICIPANT_ID = "user-participant"
STRANGER_ID = "user-stranger"


@pytest.fixture
def make_definition() -> Callable[..., EventDefinition]:
    """Factory for event definitions with sensible one-time defaults.

    Keyword overrides use store column names or model field names. The
    factory asserts the fixture constraint that the owner never appears in
    the participant list, which keeps ``owned`` and ``participating``
    mutually exclusive.
    """

    def _make(**overrides: Any) -> EventDefinition:
        record: dict[str, Any] = {
            "id": "evt-1",
            "title": "Board games night",
            "date": "2024-06-01",
            "time": "10:00",
            "location": "Community hall",
            "created_by": OWNER_ID,
            "is_recurring": False,
            "weekday": None,
            "event_participants": [{"user_id": PARTICIPANT_ID, "status": "accepted"}],
        }
        record.update(overrides)
        definition = EventDefinition.from_record(record)
        assert definition.created_by not in {p.user_id for p in definition.participants}
        return definition

    return _make


@pytest.fixture
def weekly_monday(make_definition: Callable[..., EventDefinition]) -> EventDefinition:
    """Monday 18:00 series starting Monday 2024-01-01."""
    return make_definition(
        id="yoga",
        title="Yoga",
        date="2024-01-01",
        time="18:00",
        is_recurring=True,
        weekday=1,
    )


@pytest.fixture
def february_2024() -> VisibleWindow:
    """Visible window 2024-02-01..2024-02-29, expanding to February only."""
    return VisibleWindow(date(2024, 2, 1), date(2024, 2, 29))


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Clear MEETUPCAL_* variables so host settings never leak into tests."""
    for key in (
        "MEETUPCAL_RECURRENCE_LABEL",
        "MEETUPCAL_IDENTITY_SCHEME",
        "MEETUPCAL_COLOR_MODE",
        "MEETUPCAL_STRICT_DEFINITIONS",
        "MEETUPCAL_DEFAULT_TIMEZONE",
        "MEETUPCAL_LOG_LEVEL",
        "MEETUPCAL_DEBUG",
    ):
        monkeypatch.delenv(key, raising=False)
    yield
