"""
Mappers between assembly domain entities and SQL rows.

Domain entities are pydantic models detached from any session, so rows never
leak out of a unit of work.
"""

from bike_assembly.domain.assembly.entities.assembly_entry import (
    AssemblyEntry as DomainAssemblyEntry,
)
from bike_assembly.domain.assembly.entities.unit import Unit as DomainUnit
from bike_assembly.domain.assembly.entities.worker import Worker as DomainWorker
from bike_assembly.domain.assembly.value_objects.enums import (
    AssemblyStatus,
    CompletionTrigger,
    WorkerRole,
)
from bike_assembly.infrastructure.database.models import AssemblyEntry as SQLAssemblyEntry
from bike_assembly.infrastructure.database.models import Unit as SQLUnit
from bike_assembly.infrastructure.database.models import Worker as SQLWorker


class UnitMapper:
    """Convert units between layers."""

    @staticmethod
    def domain_to_sql(unit: DomainUnit) -> SQLUnit:
        return SQLUnit(
            id=unit.id,
            name=unit.display_name,
            expected_duration_minutes=unit.expected_duration_minutes,
        )

    @staticmethod
    def sql_to_domain(row: SQLUnit) -> DomainUnit:
        return DomainUnit(
            id=row.id,
            display_name=row.name,
            expected_duration_minutes=row.expected_duration_minutes,
        )


class WorkerMapper:
    """Convert workers between layers."""

    @staticmethod
    def domain_to_sql(worker: DomainWorker) -> SQLWorker:
        return SQLWorker(id=worker.id, name=worker.display_name, role=worker.role.value)

    @staticmethod
    def sql_to_domain(row: SQLWorker) -> DomainWorker:
        return DomainWorker(id=row.id, display_name=row.name, role=WorkerRole(row.role))


class AssemblyEntryMapper:
    """
    Convert assembly entries between layers.

    Status and completion trigger are stored as their string values.
    """

    @staticmethod
    def domain_to_sql(entry: DomainAssemblyEntry) -> SQLAssemblyEntry:
        """
        Convert a domain entry to a new SQL row.

        Args:
            entry: Domain entry to convert

        Returns:
            SQL row, not yet attached to a session
        """
        return SQLAssemblyEntry(
            id=entry.id,
            worker_id=entry.worker_id,
            unit_id=entry.unit_id,
            start_time=entry.start_time,
            expected_end_time=entry.expected_end_time,
            end_time=entry.end_time,
            status=entry.status.value,
            completion_trigger=(
                entry.completion_trigger.value if entry.completion_trigger else None
            ),
        )

    @staticmethod
    def sql_to_domain(row: SQLAssemblyEntry) -> DomainAssemblyEntry:
        """
        Convert a SQL row to a domain entry.

        Args:
            row: SQL row to convert

        Returns:
            Domain entry
        """
        return DomainAssemblyEntry(
            id=row.id,
            worker_id=row.worker_id,
            unit_id=row.unit_id,
            start_time=row.start_time,
            expected_end_time=row.expected_end_time,
            end_time=row.end_time,
            status=AssemblyStatus(row.status),
            completion_trigger=(
                CompletionTrigger(row.completion_trigger)
                if row.completion_trigger
                else None
            ),
        )
