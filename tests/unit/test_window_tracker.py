"""Unit tests for window_tracker module."""

from datetime import date, datetime
from unittest.mock import Mock

import pytest

from meetupcal.exceptions import InvalidWindowError, WindowUnsetError
from meetupcal.models import VisibleWindow
from meetupcal.window_tracker import ViewWindowTracker

pytestmark = pytest.mark.unit


class TestViewWindowTracker:
    """Tests for ViewWindowTracker class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.on_change = Mock()
        self.tracker = ViewWindowTracker(on_change=self.on_change)

    def test_starts_unset(self):
        """A new tracker has no window."""
        assert self.tracker.window is None
        assert self.tracker.is_set is False
        with pytest.raises(WindowUnsetError):
            self.tracker.require_window()

    def test_first_window_triggers_change(self):
        """Setting the first window invokes the callback once."""
        changed = self.tracker.set_window(VisibleWindow(date(2024, 2, 1), date(2024, 3, 1)))

        assert changed is True
        self.on_change.assert_called_once_with(VisibleWindow(date(2024, 2, 1), date(2024, 3, 1)))

    def test_equal_window_by_value_does_not_trigger(self):
        """A new object with the same bounds is not a change."""
        self.tracker.set_window((date(2024, 2, 1), date(2024, 3, 1)))
        changed = self.tracker.set_window(
            {"start": datetime(2024, 2, 1, 0, 0), "end": datetime(2024, 3, 1, 0, 0)}
        )

        assert changed is False
        assert self.on_change.call_count == 1

    def test_last_write_wins(self):
        """Consecutive distinct windows each trigger and the latest is kept."""
        self.tracker.set_window(("2024-01-01", "2024-02-01"))
        self.tracker.set_window(("2024-02-01", "2024-03-01"))
        self.tracker.set_window(("2024-03-01", "2024-04-01"))

        assert self.on_change.call_count == 3
        assert self.tracker.require_window() == VisibleWindow(date(2024, 3, 1), date(2024, 4, 1))

    def test_invalid_window_leaves_state_untouched(self):
        """A reversed window is rejected and the previous window kept."""
        self.tracker.set_window(("2024-02-01", "2024-03-01"))

        with pytest.raises(InvalidWindowError):
            self.tracker.set_window(("2024-03-01", "2024-02-01"))

        assert self.tracker.window == VisibleWindow(date(2024, 2, 1), date(2024, 3, 1))
        assert self.on_change.call_count == 1

    def test_clear_resets_to_unset(self):
        """Clearing forgets the window so the next set triggers again."""
        self.tracker.set_window(("2024-02-01", "2024-03-01"))
        self.tracker.clear()
        self.tracker.set_window(("2024-02-01", "2024-03-01"))

        assert self.on_change.call_count == 2

    def test_tracker_without_callback(self):
        """Callbacks are optional."""
        tracker = ViewWindowTracker()

        assert tracker.set_window(("2024-02-01", "2024-03-01")) is True
