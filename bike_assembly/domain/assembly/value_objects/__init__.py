"""Assembly value objects."""

from .assembly_query import AssemblyQuery
from .enums import AssemblyStatus, CompletionTrigger, UnitDisplayStatus, WorkerRole
from .unit_status import ActiveAssemblySummary, UnitStatusView

__all__ = [
    "ActiveAssemblySummary",
    "AssemblyQuery",
    "AssemblyStatus",
    "CompletionTrigger",
    "UnitDisplayStatus",
    "UnitStatusView",
    "WorkerRole",
]
