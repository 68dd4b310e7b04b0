"""Time sources for token codecs."""

import threading
import time
from datetime import timedelta
from typing import Callable, Optional, Union

Clock = Callable[[], float]


def system_clock() -> float:
    """Return the current Unix time in seconds."""
    return time.time()


class FrozenClock:
    """A clock that only moves when told to.

    Used in tests and simulations to jump forwards or backwards in time
    without waiting.
    """

    def __init__(self, start: Optional[float] = None) -> None:
        self._now = float(time.time() if start is None else start)
        self._lock = threading.Lock()

    def __call__(self) -> float:
        return self._now

    def set(self, epoch_seconds: float) -> None:
        with self._lock:
            self._now = float(epoch_seconds)

    def advance(self, delta: Union[float, timedelta]) -> float:
        """Move the clock by ``delta`` (negative goes back). Returns the new time."""
        if isinstance(delta, timedelta):
            delta = delta.total_seconds()
        with self._lock:
            self._now += delta
            return self._now
