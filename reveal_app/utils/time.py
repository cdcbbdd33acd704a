"""
Clock helpers for debounce and cooldown windows.

All windows are measured on the monotonic clock in milliseconds; the clock is
injectable so tests can drive time explicitly.
"""

import time
from typing import Callable, Optional

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Current monotonic time in milliseconds."""
    return time.monotonic() * 1000.0


class Cooldown:
    """A window during which repeated triggers are ignored."""

    def __init__(self, duration_ms: float, clock: Optional[Clock] = None) -> None:
        self.duration_ms = duration_ms
        self._clock = clock or monotonic_ms
        self._until: Optional[float] = None

    @property
    def active(self) -> bool:
        return self._until is not None and self._clock() < self._until

    def start(self) -> None:
        self._until = self._clock() + self.duration_ms

    def try_acquire(self) -> bool:
        """Start the window and return True, or return False if it is still running."""
        if self.active:
            return False
        self.start()
        return True

    def clear(self) -> None:
        self._until = None
