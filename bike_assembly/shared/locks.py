"""Per-key mutual exclusion for check-then-write sequences."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class KeyedLock:
    """
    Registry of re-entrant locks addressed by string key.

    Locks are created lazily and kept for the lifetime of the registry. Keys
    passed to ``hold`` are de-duplicated and acquired in sorted order so two
    callers locking the same pair of keys can never deadlock each other.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def _lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        """Hold every lock in ``keys`` for the duration of the block."""
        ordered = sorted(set(keys))
        acquired: list[threading.RLock] = []
        try:
            for key in ordered:
                lock = self._lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


def worker_key(worker_id: int) -> str:
    return f"worker:{worker_id}"


def unit_key(unit_id: int) -> str:
    return f"unit:{unit_id}"
