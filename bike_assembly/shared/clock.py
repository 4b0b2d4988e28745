"""Clock sources used by the lifecycle engine."""

import threading
from datetime import datetime, timedelta
from typing import Protocol

from .base import utcnow


class Clock(Protocol):
    """Anything that can tell the current naive-UTC time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock."""

    def now(self) -> datetime:
        return utcnow()


class FrozenClock:
    """Manually advanced clock for tests and simulations."""

    def __init__(self, start: datetime) -> None:
        self._now = start
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, value: datetime) -> None:
        with self._lock:
            self._now = value

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward by a ``timedelta(**kwargs)``."""
        with self._lock:
            self._now = self._now + timedelta(**kwargs)
            return self._now
