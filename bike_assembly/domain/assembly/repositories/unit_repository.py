"""
Unit Repository Interface

Defines the contract for the resource registry.
"""

from abc import ABC, abstractmethod

from ..entities.unit import Unit


class UnitRepository(ABC):
    """
    Read-mostly registry of assemblable units.

    The catalog is seeded once at start-up; the lifecycle engine only reads it.
    """

    @abstractmethod
    def get(self, unit_id: int) -> Unit:
        """
        Retrieve a unit by its ID.

        Args:
            unit_id: Unit identifier

        Returns:
            Unit entity

        Raises:
            UnitNotFoundError: If no such unit exists
            StorageError: If retrieval operation fails
        """
        pass

    @abstractmethod
    def list(self) -> list[Unit]:
        """
        Retrieve all units ordered by id.

        Raises:
            StorageError: If retrieval operation fails
        """
        pass

    @abstractmethod
    def add(self, unit: Unit) -> Unit:
        """
        Add a unit to the catalog (seeding only).

        Returns:
            Unit with its assigned id

        Raises:
            StorageError: If save operation fails
        """
        pass
