"""SQL repository implementations."""

from .assembly_repository import SqlAssemblyRepository
from .base import BaseRepository
from .unit_repository import SqlUnitRepository
from .worker_repository import SqlWorkerRepository

__all__ = [
    "BaseRepository",
    "SqlAssemblyRepository",
    "SqlUnitRepository",
    "SqlWorkerRepository",
]
