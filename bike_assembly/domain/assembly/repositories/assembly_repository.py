"""
Assembly Repository Interface

Defines the contract for the assembly ledger, the single shared mutable
resource of the engine.
"""

from abc import ABC, abstractmethod

from ..entities.assembly_entry import AssemblyEntry
from ..value_objects.assembly_query import AssemblyQuery


class AssemblyRepository(ABC):
    """
    Abstract repository interface for AssemblyEntry entities.

    Implementations must make ``insert`` and ``update`` atomic with respect to
    the active-entry lookups, so that at most one in-progress entry exists per
    worker and per unit even when callers race.
    """

    @abstractmethod
    def get(self, entry_id: int) -> AssemblyEntry | None:
        """Retrieve an entry by id, or None if unknown."""
        pass

    @abstractmethod
    def find_active_by_worker(self, worker_id: int) -> AssemblyEntry | None:
        """
        Retrieve the worker's in-progress entry.

        Args:
            worker_id: Worker identifier

        Returns:
            The single in-progress entry, or None

        Raises:
            StorageError: If retrieval operation fails
        """
        pass

    @abstractmethod
    def find_active_by_unit(self, unit_id: int) -> AssemblyEntry | None:
        """
        Retrieve the unit's in-progress entry.

        Args:
            unit_id: Unit identifier

        Returns:
            The single in-progress entry, or None

        Raises:
            StorageError: If retrieval operation fails
        """
        pass

    @abstractmethod
    def find_latest_by_unit(self, unit_id: int) -> AssemblyEntry | None:
        """Retrieve the most recently started entry for a unit, in any status."""
        pass

    @abstractmethod
    def list_active(self) -> list[AssemblyEntry]:
        """Retrieve every in-progress entry ordered by expected end time."""
        pass

    @abstractmethod
    def insert(self, entry: AssemblyEntry) -> AssemblyEntry:
        """
        Insert a new in-progress entry.

        Args:
            entry: Entry without an id

        Returns:
            Entry with its assigned id

        Raises:
            WorkerBusyError: If the worker already has an in-progress entry
            UnitBusyError: If the unit already has an in-progress entry
            StorageError: If save operation fails
        """
        pass

    @abstractmethod
    def update(self, entry: AssemblyEntry) -> AssemblyEntry:
        """
        Persist the IN_PROGRESS -> COMPLETED transition of ``entry``.

        Args:
            entry: Entry already completed in memory

        Returns:
            The persisted entry

        Raises:
            InvalidTransitionError: If the stored entry is already completed
            AssemblyNotFoundError: If the entry does not exist
            StorageError: If save operation fails
        """
        pass

    @abstractmethod
    def query(self, query: AssemblyQuery) -> list[AssemblyEntry]:
        """
        Retrieve entries matching a filter, ordered by start time then id.

        An empty result is a valid answer, never an error.
        """
        pass
