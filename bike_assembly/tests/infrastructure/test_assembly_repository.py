"""
Ledger repository tests.

Exercise the storage-level guarantees directly: the partial unique indexes
and the conditional completion write.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy import DateTime
from sqlalchemy.exc import OperationalError

from bike_assembly.domain.assembly.entities import AssemblyEntry, Unit
from bike_assembly.domain.assembly.value_objects import AssemblyQuery
from bike_assembly.domain.assembly.value_objects.enums import (
    AssemblyStatus,
    CompletionTrigger,
)
from bike_assembly.infrastructure.database import models
from bike_assembly.infrastructure.database.repositories import SqlAssemblyRepository
from bike_assembly.shared.exceptions import (
    AssemblyNotFoundError,
    InvalidTransitionError,
    StorageError,
    UnitBusyError,
    UnitNotFoundError,
    WorkerBusyError,
)
from bike_assembly.tests.utils import START


@pytest.fixture
def bike(units) -> Unit:
    return units[0]


def insert(uow_factory, worker_id: int, unit: Unit, start=START) -> AssemblyEntry:
    with uow_factory() as uow:
        return uow.assemblies.insert(AssemblyEntry.start(worker_id, unit, start))


class TestCatalogs:
    def test_seeded_units_in_id_order(self, units):
        assert [(u.display_name, u.expected_duration_minutes) for u in units] == [
            ("Bike 1", 50),
            ("Bike 2", 60),
            ("Bike 3", 80),
        ]

    def test_unknown_unit(self, uow_factory):
        with uow_factory() as uow:
            with pytest.raises(UnitNotFoundError):
                uow.units.get(404)

    def test_unknown_worker_is_none(self, uow_factory):
        with uow_factory() as uow:
            assert uow.workers.get(404) is None
            assert uow.workers.get(1).display_name == "John Doe"


class TestInsert:
    def test_insert_assigns_id(self, uow_factory, bike):
        entry = insert(uow_factory, 1, bike)

        assert entry.id is not None
        with uow_factory() as uow:
            assert uow.assemblies.get(entry.id) == entry
            assert uow.assemblies.find_active_by_worker(1).id == entry.id
            assert uow.assemblies.find_active_by_unit(bike.id).id == entry.id

    def test_prechecks_report_conflicts(self, uow_factory, units):
        insert(uow_factory, 1, units[0])

        with pytest.raises(WorkerBusyError):
            insert(uow_factory, 1, units[1])
        with pytest.raises(UnitBusyError):
            insert(uow_factory, 2, units[0])

    @pytest.mark.parametrize(
        ("worker_id", "unit_index", "error"),
        [(1, 1, WorkerBusyError), (2, 0, UnitBusyError)],
    )
    def test_unique_indexes_reject_second_active_entry(
        self, uow_factory, units, worker_id, unit_index, error
    ):
        """A writer that skipped the checks still cannot create a duplicate."""
        insert(uow_factory, 1, units[0])

        with (
            patch.object(SqlAssemblyRepository, "find_active_by_worker", return_value=None),
            patch.object(SqlAssemblyRepository, "find_active_by_unit", return_value=None),
        ):
            with pytest.raises(error):
                insert(uow_factory, worker_id, units[unit_index])

        with uow_factory() as uow:
            assert len(uow.assemblies.list_active()) == 1

    def test_completed_entries_do_not_block(self, uow_factory, bike):
        first = insert(uow_factory, 1, bike)
        first.complete(START + timedelta(minutes=5))
        with uow_factory() as uow:
            uow.assemblies.update(first)

        second = insert(uow_factory, 1, bike, START + timedelta(minutes=10))

        with uow_factory() as uow:
            assert uow.assemblies.find_latest_by_unit(bike.id).id == second.id
            assert [e.id for e in uow.assemblies.list_active()] == [second.id]


class TestUpdate:
    def test_completion_is_persisted(self, uow_factory, bike):
        entry = insert(uow_factory, 1, bike)
        entry.complete(START + timedelta(minutes=50), CompletionTrigger.DEADLINE)

        with uow_factory() as uow:
            uow.assemblies.update(entry)

        with uow_factory() as uow:
            stored = uow.assemblies.get(entry.id)
        assert stored.status == AssemblyStatus.COMPLETED
        assert stored.end_time == START + timedelta(minutes=50)
        assert stored.completion_trigger == CompletionTrigger.DEADLINE

    def test_second_completion_is_refused(self, uow_factory, bike):
        entry = insert(uow_factory, 1, bike)
        stale = entry.model_copy(deep=True)
        entry.complete(START + timedelta(minutes=1))
        with uow_factory() as uow:
            uow.assemblies.update(entry)

        stale.complete(START + timedelta(minutes=50), CompletionTrigger.DEADLINE)
        with pytest.raises(InvalidTransitionError):
            with uow_factory() as uow:
                uow.assemblies.update(stale)

        with uow_factory() as uow:
            assert uow.assemblies.get(entry.id).end_time == START + timedelta(minutes=1)

    def test_in_progress_entry_cannot_be_written(self, uow_factory, bike):
        entry = insert(uow_factory, 1, bike)
        with uow_factory() as uow:
            with pytest.raises(InvalidTransitionError):
                uow.assemblies.update(entry)

    def test_unknown_entry(self, uow_factory, bike):
        ghost = AssemblyEntry.start(1, bike, START)
        ghost.id = 999
        ghost.complete(START)
        with uow_factory() as uow:
            with pytest.raises(AssemblyNotFoundError):
                uow.assemblies.update(ghost)


class TestQuery:
    def test_query_by_unit_and_range(self, uow_factory, units):
        early = insert(uow_factory, 1, units[0], START)
        insert(uow_factory, 2, units[1], START + timedelta(hours=1))

        with uow_factory() as uow:
            by_unit = uow.assemblies.query(AssemblyQuery(unit_id=units[0].id))
            late = uow.assemblies.query(
                AssemblyQuery(start_from=START + timedelta(minutes=1))
            )

        assert [e.id for e in by_unit] == [early.id]
        assert [e.unit_id for e in late] == [units[1].id]


class TestStorageErrors:
    def test_driver_errors_become_storage_errors(self, uow_factory):
        failure = OperationalError("SELECT", {}, Exception("database is locked"))
        with uow_factory() as uow:
            with patch.object(uow.session, "exec", side_effect=failure):
                with pytest.raises(StorageError) as exc_info:
                    uow.assemblies.find_active_by_worker(1)

        assert exc_info.value.operation == "find_active_by_worker"


class TestTimestamps:
    def test_naive_timestamps_round_trip(self, uow_factory, bike):
        entry = insert(uow_factory, 1, bike)
        entry.complete(START + timedelta(minutes=50), CompletionTrigger.DEADLINE)
        with uow_factory() as uow:
            uow.assemblies.update(entry)

        with uow_factory() as uow:
            stored = uow.assemblies.get(entry.id)

        assert stored.start_time == START
        assert stored.expected_end_time == START + timedelta(minutes=50)
        assert stored.end_time == START + timedelta(minutes=50)
        for value in (stored.start_time, stored.expected_end_time, stored.end_time):
            assert value.tzinfo is None

    def test_timestamp_columns_are_plain_datetime(self):
        columns = models.AssemblyEntry.__table__.columns
        for name in ("created_at", "start_time", "expected_end_time", "end_time"):
            assert type(columns[name].type) is DateTime
            assert columns[name].type.timezone is False
        assert columns["end_time"].nullable
        assert not columns["start_time"].nullable
