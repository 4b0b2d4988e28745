"""Celery background tasks."""

from bike_assembly.core.tasks.assembly import (
    complete_assembly_at_deadline,
    reconcile_overdue_assemblies,
)

__all__ = [
    "complete_assembly_at_deadline",
    "reconcile_overdue_assemblies",
]
