"""Test helpers shared across test modules."""

from datetime import datetime

from bike_assembly.core.config import UnitSeed, WorkerSeed
from bike_assembly.domain.assembly.entities import AssemblyEntry
from bike_assembly.domain.assembly.services import DeadlineScheduler
from bike_assembly.domain.assembly.value_objects import AssemblyQuery

START = datetime(2026, 3, 2, 9, 0, 0)

UNIT_SEEDS = [
    UnitSeed(name="Bike 1", expected_duration_minutes=50),
    UnitSeed(name="Bike 2", expected_duration_minutes=60),
    UnitSeed(name="Bike 3", expected_duration_minutes=80),
]
WORKER_SEEDS = [
    WorkerSeed(name="John Doe"),
    WorkerSeed(name="Jane Smith"),
    WorkerSeed(name="Bob Johnson"),
    WorkerSeed(name="Admin", role=1),
]


class RecordingScheduler(DeadlineScheduler):
    """Scheduler that only records what it was asked to do."""

    def __init__(self) -> None:
        super().__init__()
        self.registered: list[tuple[int, datetime]] = []
        self.cancelled: list[int] = []

    def register_deadline(self, entry_id: int, fires_at: datetime) -> None:
        self.registered.append((entry_id, fires_at))

    def cancel(self, entry_id: int) -> bool:
        self.cancelled.append(entry_id)
        return True


def query_matches(query: AssemblyQuery, entry: AssemblyEntry) -> bool:
    """In-memory reference for what the ledger query should return."""
    if entry.status not in query.statuses:
        return False
    if query.start_from is not None and entry.start_time < query.start_from:
        return False
    if query.start_to is not None and entry.start_time > query.start_to:
        return False
    if query.worker_id is not None and entry.worker_id != query.worker_id:
        return False
    if query.unit_id is not None and entry.unit_id != query.unit_id:
        return False
    return True
