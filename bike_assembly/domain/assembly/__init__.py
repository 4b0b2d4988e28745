"""
Bicycle Assembly Domain

Units (bicycles), workers and the ledger of assembly entries, together with
the lifecycle service that enforces one active assembly per worker and per
unit and closes out overdue assemblies.
"""

from .entities import AssemblyEntry, Unit, Worker
from .repositories import (
    AssemblyRepository,
    UnitOfWork,
    UnitRepository,
    WorkerRepository,
)
from .services import (
    AssemblyLifecycleService,
    DeadlineScheduler,
    ReconciliationReport,
    derive_unit_status,
)
from .value_objects import (
    ActiveAssemblySummary,
    AssemblyQuery,
    AssemblyStatus,
    CompletionTrigger,
    UnitDisplayStatus,
    UnitStatusView,
    WorkerRole,
)

__all__ = [
    # Entities
    "AssemblyEntry",
    "Unit",
    "Worker",
    # Value Objects
    "ActiveAssemblySummary",
    "AssemblyQuery",
    "AssemblyStatus",
    "CompletionTrigger",
    "UnitDisplayStatus",
    "UnitStatusView",
    "WorkerRole",
    # Repository Interfaces
    "AssemblyRepository",
    "UnitOfWork",
    "UnitRepository",
    "WorkerRepository",
    # Domain Services
    "AssemblyLifecycleService",
    "DeadlineScheduler",
    "ReconciliationReport",
    "derive_unit_status",
]
