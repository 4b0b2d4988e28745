"""
Unit of Work Interface

A transaction boundary exposing the three assembly repositories.
"""

from abc import ABC, abstractmethod

from .assembly_repository import AssemblyRepository
from .unit_repository import UnitRepository
from .worker_repository import WorkerRepository


class UnitOfWork(ABC):
    """
    Context manager that commits on success and rolls back on any exception.

    Usage:
        with uow_factory() as uow:
            unit = uow.units.get(unit_id)
            uow.assemblies.insert(entry)
    """

    units: UnitRepository
    workers: WorkerRepository
    assemblies: AssemblyRepository

    @abstractmethod
    def __enter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass
