"""Domain services for the assembly lifecycle."""

from .deadline_scheduler import DeadlineHandler, DeadlineScheduler
from .lifecycle_service import AssemblyLifecycleService, ReconciliationReport
from .status_projection import derive_unit_status

__all__ = [
    "AssemblyLifecycleService",
    "DeadlineHandler",
    "DeadlineScheduler",
    "ReconciliationReport",
    "derive_unit_status",
]
