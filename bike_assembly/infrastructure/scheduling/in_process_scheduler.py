"""
In-process deadline scheduler.

Pending deadlines live in a heap guarded by a condition variable. A daemon
thread sleeps until the earliest deadline (or the poll interval, whichever
comes first) and then runs every due action. Nothing here survives a restart;
the lifecycle service's reconciliation sweep covers that.
"""

import heapq
import itertools
import threading
from datetime import datetime, timedelta

from bike_assembly.core.observability import PENDING_DEADLINES, get_logger
from bike_assembly.domain.assembly.services.deadline_scheduler import DeadlineScheduler
from bike_assembly.shared.clock import Clock, SystemClock

logger = get_logger(__name__)


class InProcessDeadlineScheduler(DeadlineScheduler):
    """
    Deadline scheduler backed by a heap and a worker thread.

    Cancelled or replaced deadlines stay in the heap and are skipped when
    popped; ``_pending`` maps each entry to the sequence number of its live
    deadline.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        poll_interval: float = 30.0,
        retry_delay: float = 5.0,
    ) -> None:
        super().__init__()
        self._clock = clock or SystemClock()
        self._poll_interval = poll_interval
        self._retry_delay = timedelta(seconds=retry_delay)
        self._heap: list[tuple[datetime, int, int]] = []
        self._pending: dict[int, tuple[int, datetime]] = {}
        self._sequence = itertools.count()
        self._cond = threading.Condition()
        self._thread: threading.Thread | None = None
        self._stopping = False

    def register_deadline(self, entry_id: int, fires_at: datetime) -> None:
        with self._cond:
            seq = next(self._sequence)
            self._pending[entry_id] = (seq, fires_at)
            heapq.heappush(self._heap, (fires_at, seq, entry_id))
            PENDING_DEADLINES.set(len(self._pending))
            self._cond.notify()
        logger.debug(
            "deadline_registered", entry_id=entry_id, fires_at=fires_at.isoformat()
        )

    def cancel(self, entry_id: int) -> bool:
        with self._cond:
            removed = self._pending.pop(entry_id, None) is not None
            PENDING_DEADLINES.set(len(self._pending))
        if removed:
            logger.debug("deadline_cancelled", entry_id=entry_id)
        return removed

    def pending(self) -> dict[int, datetime]:
        """Snapshot of live deadlines by entry id."""
        with self._cond:
            return {entry_id: fires_at for entry_id, (_, fires_at) in self._pending.items()}

    def next_deadline(self) -> datetime | None:
        with self._cond:
            self._discard_stale()
            return self._heap[0][0] if self._heap else None

    def run_pending(self) -> list[int]:
        """
        Run every deadline that is due now.

        A failing action is logged and registered again after the retry delay.

        Returns:
            Ids of the entries whose action ran successfully
        """
        due: list[tuple[int, datetime]] = []
        with self._cond:
            now = self._clock.now()
            while self._heap and self._heap[0][0] <= now:
                fires_at, seq, entry_id = heapq.heappop(self._heap)
                live = self._pending.get(entry_id)
                if live is None or live[0] != seq:
                    continue
                del self._pending[entry_id]
                due.append((entry_id, fires_at))
            PENDING_DEADLINES.set(len(self._pending))

        fired = []
        for entry_id, fires_at in due:
            try:
                self.handler(entry_id, fires_at)
            except Exception as e:
                logger.exception(
                    "deadline_action_failed", entry_id=entry_id, error=str(e)
                )
                self.register_deadline(entry_id, self._clock.now() + self._retry_delay)
            else:
                fired.append(entry_id)
        return fired

    def start(self) -> None:
        """Start the background thread."""
        with self._cond:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stopping = False
            self._thread = threading.Thread(
                target=self._run, name="deadline-scheduler", daemon=True
            )
            self._thread.start()
        logger.info("deadline_scheduler_started", poll_interval=self._poll_interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop the background thread. Pending deadlines are kept."""
        with self._cond:
            self._stopping = True
            self._cond.notify_all()
            thread = self._thread
        if thread is not None:
            thread.join(timeout)
        self._thread = None
        logger.info("deadline_scheduler_stopped", pending=len(self._pending))

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        while True:
            with self._cond:
                if self._stopping:
                    return
                self._cond.wait(timeout=self._seconds_until_next())
                if self._stopping:
                    return
            self.run_pending()

    def _seconds_until_next(self) -> float:
        self._discard_stale()
        if not self._heap:
            return self._poll_interval
        delay = (self._heap[0][0] - self._clock.now()).total_seconds()
        return max(0.0, min(delay, self._poll_interval))

    def _discard_stale(self) -> None:
        while self._heap:
            _, seq, entry_id = self._heap[0]
            live = self._pending.get(entry_id)
            if live is not None and live[0] == seq:
                return
            heapq.heappop(self._heap)
