"""
Assembly ledger implementation.

``insert`` relies on the partial unique indexes of ``assembly_entries`` and
``update`` is a conditional write on the current status, so neither can
break the one-active-entry rules even if the caller skipped its own checks.
"""

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from bike_assembly.domain.assembly.entities.assembly_entry import AssemblyEntry
from bike_assembly.domain.assembly.repositories.assembly_repository import (
    AssemblyRepository,
)
from bike_assembly.domain.assembly.value_objects.assembly_query import AssemblyQuery
from bike_assembly.domain.assembly.value_objects.enums import AssemblyStatus
from bike_assembly.infrastructure.database.models import (
    AssemblyEntry as SQLAssemblyEntry,
)
from bike_assembly.shared.exceptions import (
    AssemblyNotFoundError,
    InvalidTransitionError,
    UnitBusyError,
    WorkerBusyError,
)

from .base import BaseRepository
from .mappers import AssemblyEntryMapper

_IN_PROGRESS = AssemblyStatus.IN_PROGRESS.value


class SqlAssemblyRepository(BaseRepository, AssemblyRepository):
    """Assembly ledger backed by the ``assembly_entries`` table."""

    def get(self, entry_id: int) -> AssemblyEntry | None:
        with self._storage_errors("get_assembly"):
            row = self.session.get(SQLAssemblyEntry, entry_id, populate_existing=True)
        return AssemblyEntryMapper.sql_to_domain(row) if row else None

    def find_active_by_worker(self, worker_id: int) -> AssemblyEntry | None:
        statement = select(SQLAssemblyEntry).where(
            SQLAssemblyEntry.worker_id == worker_id,
            SQLAssemblyEntry.status == _IN_PROGRESS,
        )
        return self._first(statement, "find_active_by_worker")

    def find_active_by_unit(self, unit_id: int) -> AssemblyEntry | None:
        statement = select(SQLAssemblyEntry).where(
            SQLAssemblyEntry.unit_id == unit_id,
            SQLAssemblyEntry.status == _IN_PROGRESS,
        )
        return self._first(statement, "find_active_by_unit")

    def find_latest_by_unit(self, unit_id: int) -> AssemblyEntry | None:
        statement = (
            select(SQLAssemblyEntry)
            .where(SQLAssemblyEntry.unit_id == unit_id)
            .order_by(
                col(SQLAssemblyEntry.start_time).desc(), col(SQLAssemblyEntry.id).desc()
            )
            .limit(1)
        )
        return self._first(statement, "find_latest_by_unit")

    def list_active(self) -> list[AssemblyEntry]:
        statement = (
            select(SQLAssemblyEntry)
            .where(SQLAssemblyEntry.status == _IN_PROGRESS)
            .order_by(SQLAssemblyEntry.expected_end_time, SQLAssemblyEntry.id)
        )
        return self._all(statement, "list_active")

    def insert(self, entry: AssemblyEntry) -> AssemblyEntry:
        """
        Insert a new in-progress entry.

        Raises:
            WorkerBusyError: If the worker already has an in-progress entry
            UnitBusyError: If the unit already has an in-progress entry
            StorageError: If the write fails for another reason
        """
        ongoing = self.find_active_by_worker(entry.worker_id)
        if ongoing is not None:
            raise WorkerBusyError(entry.worker_id, ongoing.id)
        occupied = self.find_active_by_unit(entry.unit_id)
        if occupied is not None:
            raise UnitBusyError(entry.unit_id, occupied.id)

        row = AssemblyEntryMapper.domain_to_sql(entry)
        with self._storage_errors("insert_assembly"):
            try:
                self.session.add(row)
                self.session.flush()
            except IntegrityError as e:
                # Lost a race against a writer in another process.
                if "worker" in str(e.orig):
                    raise WorkerBusyError(entry.worker_id) from e
                raise UnitBusyError(entry.unit_id) from e
            self.session.refresh(row)
        return AssemblyEntryMapper.sql_to_domain(row)

    def update(self, entry: AssemblyEntry) -> AssemblyEntry:
        """
        Persist the completion of ``entry`` if the stored row is still in progress.

        Raises:
            InvalidTransitionError: If the stored row is already completed
            AssemblyNotFoundError: If there is no such row
            StorageError: If the write fails
        """
        if entry.status != AssemblyStatus.COMPLETED or entry.end_time is None:
            raise InvalidTransitionError(entry.id, entry.status.value)

        statement = (
            update(SQLAssemblyEntry)
            .where(
                SQLAssemblyEntry.id == entry.id,
                SQLAssemblyEntry.status == _IN_PROGRESS,
            )
            .values(
                status=entry.status.value,
                end_time=entry.end_time,
                completion_trigger=(
                    entry.completion_trigger.value if entry.completion_trigger else None
                ),
            )
            .execution_options(synchronize_session=False)
        )
        with self._storage_errors("update_assembly"):
            result = self.session.execute(statement)

        if result.rowcount == 0:
            stored = self.get(entry.id)
            if stored is None:
                raise AssemblyNotFoundError(entry.id)
            raise InvalidTransitionError(entry.id, stored.status.value)

        return entry

    def query(self, query: AssemblyQuery) -> list[AssemblyEntry]:
        statement = select(SQLAssemblyEntry).where(
            col(SQLAssemblyEntry.status).in_([s.value for s in query.statuses])
        )
        if query.start_from is not None:
            statement = statement.where(SQLAssemblyEntry.start_time >= query.start_from)
        if query.start_to is not None:
            statement = statement.where(SQLAssemblyEntry.start_time <= query.start_to)
        if query.worker_id is not None:
            statement = statement.where(SQLAssemblyEntry.worker_id == query.worker_id)
        if query.unit_id is not None:
            statement = statement.where(SQLAssemblyEntry.unit_id == query.unit_id)
        statement = statement.order_by(SQLAssemblyEntry.start_time, SQLAssemblyEntry.id)
        return self._all(statement, "query_assemblies")

    def _first(self, statement, operation: str) -> AssemblyEntry | None:
        with self._storage_errors(operation):
            row = self.session.exec(statement).first()
        return AssemblyEntryMapper.sql_to_domain(row) if row else None

    def _all(self, statement, operation: str) -> list[AssemblyEntry]:
        with self._storage_errors(operation):
            rows = self.session.exec(statement).all()
        return [AssemblyEntryMapper.sql_to_domain(row) for row in rows]
