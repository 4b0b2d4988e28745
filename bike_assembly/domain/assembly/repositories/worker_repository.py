"""Worker Repository Interface"""

from abc import ABC, abstractmethod

from ..entities.worker import Worker


class WorkerRepository(ABC):
    """Lookup of worker identities for display purposes."""

    @abstractmethod
    def get(self, worker_id: int) -> Worker | None:
        """Retrieve a worker by id, or None if unknown."""
        pass

    @abstractmethod
    def list(self) -> list[Worker]:
        """Retrieve all workers ordered by id."""
        pass

    @abstractmethod
    def add(self, worker: Worker) -> Worker:
        """Add a worker (seeding only)."""
        pass
