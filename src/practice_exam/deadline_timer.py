"""Deadline Timer: single-shot, cancellable auto-submit trigger."""

import logging
import threading
import time
from typing import Callable, Optional

from .errors import InvalidTransition

logger = logging.getLogger(__name__)


class DeadlineTimer:
    """
    Fires ``callback`` once when the deadline passes, unless cancelled first.

    One instance serves one session; arming it a second time is an error.
    The display countdown is ``remaining()``, computed from the clock on demand
    and independent of the background trigger.
    """

    def __init__(self, callback: Callable[[], None], clock: Callable[[], float] = time.time):
        self._callback = callback
        self._clock = clock
        self._lock = threading.Lock()
        self._thread: Optional[threading.Timer] = None
        self.deadline: Optional[float] = None
        self.fired = False
        self.cancelled = False

    def arm(self, deadline: float):
        """Schedule the single firing at ``deadline`` (a clock timestamp)."""
        with self._lock:
            if self.deadline is not None:
                raise InvalidTransition("Deadline timer already armed; create a new one per session")
            self.deadline = deadline
            delay = max(0.0, deadline - self._clock())
            self._thread = threading.Timer(delay, self._fire)
            self._thread.daemon = True
            self._thread.start()
        logger.debug(f"Deadline timer armed, firing in {delay:.1f}s")

    def _fire(self):
        with self._lock:
            if self.cancelled or self.fired:
                return
            self.fired = True
        logger.info("Deadline reached, submitting automatically")
        try:
            self._callback()
        except Exception as e:
            logger.error(f"Deadline callback failed: {e}")

    def cancel(self):
        """Stop the timer from firing. Safe to call repeatedly or after it fired."""
        with self._lock:
            if self.fired or self.cancelled:
                return
            self.cancelled = True
            thread = self._thread
        if thread is not None:
            thread.cancel()
            logger.debug("Deadline timer cancelled")

    def remaining(self) -> float:
        """Seconds until the deadline, never below zero."""
        if self.deadline is None:
            return 0.0
        return max(0.0, self.deadline - self._clock())


def format_time_remaining(seconds: float) -> str:
    """Render seconds as ``MM:SS`` for a countdown display."""
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"
