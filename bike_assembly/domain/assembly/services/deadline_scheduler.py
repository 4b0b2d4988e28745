"""
Deadline Scheduler Interface

A deadline is the instant an in-progress assembly must be forced to
COMPLETED if nobody ended it first.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime

# Called with (entry_id, fires_at) when a deadline is due.
DeadlineHandler = Callable[[int, datetime], None]


class DeadlineScheduler(ABC):
    """
    Schedules one-shot deadline actions.

    Cancellation is best-effort: the fired action re-reads the entry and does
    nothing if it is no longer in progress, so a missed cancel is harmless.
    """

    def __init__(self) -> None:
        self._handler: DeadlineHandler | None = None

    def bind(self, handler: DeadlineHandler) -> None:
        """Attach the action executed when a deadline fires."""
        self._handler = handler

    @property
    def handler(self) -> DeadlineHandler:
        if self._handler is None:
            raise RuntimeError(f"{type(self).__name__} has no deadline handler bound")
        return self._handler

    @abstractmethod
    def register_deadline(self, entry_id: int, fires_at: datetime) -> None:
        """Schedule the deadline action for ``entry_id`` at ``fires_at``.

        Registering an entry that already has a pending deadline replaces it.
        """
        pass

    @abstractmethod
    def cancel(self, entry_id: int) -> bool:
        """Remove a pending deadline. Returns True if one was pending."""
        pass
