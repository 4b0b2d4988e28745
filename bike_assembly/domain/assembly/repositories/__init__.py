"""Repository interfaces for the assembly domain."""

from .assembly_repository import AssemblyRepository
from .unit_of_work import UnitOfWork
from .unit_repository import UnitRepository
from .worker_repository import WorkerRepository

__all__ = [
    "AssemblyRepository",
    "UnitOfWork",
    "UnitRepository",
    "WorkerRepository",
]
