"""Unit tests for occurrence_aggregator module."""

import logging
from datetime import date, datetime

import pytest

from meetupcal.config_loader import Config
from meetupcal.exceptions import ConfigError, InvalidDefinitionError
from meetupcal.models import Classification, VisibleWindow
from meetupcal.occurrence_aggregator import OccurrenceAggregator, aggregate

pytestmark = pytest.mark.unit


def store_rows():
    """Rows shaped like the calendar query result."""
    return [
        {
            "id": "yoga",
            "title": "Yoga",
            "date": "2024-01-01",
            "time": "18:00:00",
            "end_time": "19:30:00",
            "has_end_time": True,
            "created_by": "U1",
            "is_recurring": True,
            "weekday": 1,
            "event_participants": [{"user_id": "U2"}],
        },
        {
            "id": "picnic",
            "title": "Picnic",
            "date": "2024-06-01",
            "time": "10:00:00",
            "end_time": None,
            "has_end_time": False,
            "created_by": "U3",
            "is_recurring": False,
            "weekday": None,
            "event_participants": [],
        },
    ]


class TestAggregate:
    """Tests for OccurrenceAggregator.aggregate()."""

    def setup_method(self):
        """Set up test fixtures."""
        self.aggregator = OccurrenceAggregator()
        self.window = VisibleWindow(date(2024, 2, 1), date(2024, 2, 29))

    @pytest.mark.smoke
    def test_size_is_one_per_one_time_plus_generated(self):
        """Result holds the generated Mondays plus one occurrence per one-time event."""
        occurrences = self.aggregator.aggregate(store_rows(), self.window, "U1")

        assert len(occurrences) == 4 + 1
        assert len({o.id for o in occurrences}) == 5

    def test_one_time_events_are_not_window_filtered(self):
        """A June one-time event still appears in a February window."""
        occurrences = self.aggregator.aggregate(store_rows(), self.window, "U1")

        picnic = [o for o in occurrences if o.definition_id == "picnic"]
        assert len(picnic) == 1
        assert picnic[0].id == "picnic"
        assert picnic[0].title == "Picnic"
        assert picnic[0].start == datetime(2024, 6, 1, 10, 0)
        assert picnic[0].end is None
        assert picnic[0].is_recurring is False

    def test_classification_and_color_per_viewer(self):
        """Each occurrence carries the viewer-relative role and palette colour."""
        as_owner = self.aggregator.aggregate(store_rows(), self.window, "U1")
        as_participant = self.aggregator.aggregate(store_rows(), self.window, "U2")

        yoga_owner = [o for o in as_owner if o.definition_id == "yoga"]
        yoga_participant = [o for o in as_participant if o.definition_id == "yoga"]
        picnic_owner = [o for o in as_owner if o.definition_id == "picnic"]

        assert {o.classification for o in yoga_owner} == {Classification.OWNED}
        assert {o.color for o in yoga_owner} == {"#48BB78"}
        assert {o.classification for o in yoga_participant} == {Classification.PARTICIPATING}
        assert {o.color for o in yoga_participant} == {"#4299E1"}
        assert picnic_owner[0].classification == Classification.OTHER
        assert picnic_owner[0].color == "#A0AEC0"

    def test_recurring_occurrences_have_end_instants(self):
        """Generated occurrences combine their own date with end_time."""
        occurrences = self.aggregator.aggregate(store_rows(), self.window, "U1")

        yoga = sorted((o for o in occurrences if o.definition_id == "yoga"), key=lambda o: o.start)
        assert yoga[0].start == datetime(2024, 2, 5, 18, 0)
        assert yoga[0].end == datetime(2024, 2, 5, 19, 30)
        assert yoga[0].title == "Yoga (recurring)"

    def test_unset_window_returns_empty(self):
        """No occurrences are produced before a window exists."""
        assert self.aggregator.aggregate(store_rows(), None, "U1") == []

    def test_accepts_definition_models(self, make_definition):
        """Validated definitions and raw rows can be mixed."""
        rows = store_rows()
        mixed = [rows[0], make_definition(id="solo")]

        occurrences = self.aggregator.aggregate(mixed, self.window, "U1")

        assert {o.definition_id for o in occurrences} == {"yoga", "solo"}


class TestAggregateFailurePolicy:
    """Skip-and-log versus strict handling of bad definitions."""

    def bad_rows(self):
        rows = store_rows()
        rows.append(dict(rows[0], id="broken", weekday=9))
        rows.append(dict(rows[0], id="no-weekday", weekday=None))
        rows.append({"id": "garbled", "title": "Garbled", "date": "not-a-date", "time": "xx"})
        return rows

    def test_invalid_definitions_are_skipped_and_logged(self, caplog):
        """Bad records are dropped with a warning and the rest still render."""
        window = VisibleWindow(date(2024, 2, 1), date(2024, 2, 29))

        with caplog.at_level(logging.WARNING, logger="meetupcal.occurrence_aggregator"):
            occurrences = aggregate(self.bad_rows(), window, "U1")

        assert {o.definition_id for o in occurrences} == {"yoga", "picnic"}
        assert len(occurrences) == 5
        messages = " ".join(r.getMessage() for r in caplog.records)
        assert "broken" in messages
        assert "no-weekday" in messages
        assert "garbled" in messages

    def test_strict_mode_propagates(self):
        """With strict_definitions the first bad record aborts aggregation."""
        window = VisibleWindow(date(2024, 2, 1), date(2024, 2, 29))
        aggregator = OccurrenceAggregator(Config(strict_definitions=True))

        with pytest.raises(InvalidDefinitionError) as exc_info:
            aggregator.aggregate(self.bad_rows(), window, "U1")

        assert exc_info.value.definition_id == "broken"


class TestAggregateConfig:
    """Configuration flowing into aggregation."""

    def test_mapping_config_is_accepted(self):
        """Plain mappings are turned into Config."""
        window = VisibleWindow(date(2024, 2, 1), date(2024, 2, 29))

        occurrences = aggregate(
            store_rows(),
            window,
            "U1",
            config={"identity_scheme": "sequence", "color_mode": "dark", "recurrence_label": "(weekly)"},
        )

        yoga = [o for o in occurrences if o.definition_id == "yoga"]
        assert sorted(o.id for o in yoga) == ["yoga_1", "yoga_2", "yoga_3", "yoga_4"]
        assert {o.color for o in yoga} == {"#68D391"}
        assert {o.title for o in yoga} == {"Yoga (weekly)"}

    def test_unknown_identity_scheme_rejected_up_front(self):
        """A Config built directly with a bad scheme fails before any row is read."""
        with pytest.raises(ConfigError, match="identity_scheme"):
            OccurrenceAggregator(Config(identity_scheme="bogus"))

    def test_mapping_with_unknown_scheme_falls_back(self):
        """Mappings go through from_dict, which falls back to date identities."""
        window = VisibleWindow(date(2024, 2, 1), date(2024, 2, 29))

        occurrences = aggregate(store_rows(), window, "U1", config={"identity_scheme": "bogus"})

        assert "yoga@2024-02-05" in {o.id for o in occurrences}
