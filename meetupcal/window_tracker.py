"""Tracks the calendar's visible window."""

import logging
from collections.abc import Callable
from typing import Any, Optional

from .exceptions import WindowUnsetError
from .models import VisibleWindow

logger = logging.getLogger(__name__)


class ViewWindowTracker:
    """Holds the current visible window and reports value changes.

    The calendar surface reports its visible range on every navigation or
    view-mode change, often repeating the same range. Only a change by value
    invokes ``on_change``. There is a single assignment point and the last
    write wins.
    """

    def __init__(self, on_change: Optional[Callable[[VisibleWindow], None]] = None):
        self._window: Optional[VisibleWindow] = None
        self._on_change = on_change

    @property
    def window(self) -> Optional[VisibleWindow]:
        return self._window

    @property
    def is_set(self) -> bool:
        return self._window is not None

    def set_window(self, window: Any) -> bool:
        """Store a new window, triggering recomputation when it changed.

        Args:
            window: VisibleWindow, ``(start, end)`` pair or mapping

        Returns:
            True if the window changed and ``on_change`` was invoked

        Raises:
            InvalidWindowError: If the window cannot be built
        """
        new_window = VisibleWindow.coerce(window)
        if new_window == self._window:
            logger.debug("Window %s..%s unchanged; skipping recompute", new_window.start, new_window.end)
            return False

        self._window = new_window
        logger.debug("Visible window set to %s..%s", new_window.start, new_window.end)
        if self._on_change is not None:
            self._on_change(new_window)
        return True

    def require_window(self) -> VisibleWindow:
        """Return the current window.

        Raises:
            WindowUnsetError: If no window has been set yet
        """
        if self._window is None:
            raise WindowUnsetError("No visible window has been set")
        return self._window

    def clear(self) -> None:
        """Forget the current window."""
        self._window = None
