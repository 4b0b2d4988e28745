"""
Tests for the assembly domain entities.

Covers deadline derivation, the single IN_PROGRESS -> COMPLETED transition
and the consistency between status and end time.
"""

from datetime import timedelta

import pytest

from bike_assembly.domain.assembly.entities import AssemblyEntry, Unit, Worker
from bike_assembly.domain.assembly.value_objects.enums import (
    AssemblyStatus,
    CompletionTrigger,
    WorkerRole,
)
from bike_assembly.shared.exceptions import (
    ErrorType,
    InvalidTransitionError,
    ValidationError,
)
from bike_assembly.tests.utils import START


@pytest.fixture
def unit() -> Unit:
    return Unit.create("Bike 2", 60, unit_id=2)


class TestUnit:
    def test_expected_end_adds_duration(self, unit):
        assert unit.expected_duration == timedelta(minutes=60)
        assert unit.expected_end_for(START) == START + timedelta(minutes=60)

    @pytest.mark.parametrize("minutes", [0, -5])
    def test_rejects_non_positive_duration(self, minutes):
        with pytest.raises(ValueError):
            Unit.create("Bike X", minutes)

    def test_rejects_empty_name(self):
        with pytest.raises(ValueError):
            Unit.create("", 30)

    def test_units_are_immutable(self, unit):
        with pytest.raises(ValueError):
            unit.expected_duration_minutes = 10


class TestWorker:
    def test_defaults_to_assembler(self):
        worker = Worker(display_name="Jane Smith")
        assert worker.role == WorkerRole.ASSEMBLER
        assert worker.is_valid()


class TestAssemblyEntryStart:
    def test_start_derives_deadline(self, unit):
        entry = AssemblyEntry.start(worker_id=7, unit=unit, start_time=START)

        assert entry.id is None
        assert entry.worker_id == 7
        assert entry.unit_id == 2
        assert entry.status == AssemblyStatus.IN_PROGRESS
        assert entry.expected_end_time == START + timedelta(minutes=60)
        assert entry.end_time is None
        assert entry.completion_trigger is None
        assert entry.is_valid()

    def test_overdue_from_the_deadline_instant(self, unit):
        entry = AssemblyEntry.start(7, unit, START)

        assert not entry.is_overdue(START + timedelta(minutes=59, seconds=59))
        assert entry.is_overdue(START + timedelta(minutes=60))
        assert entry.is_overdue(START + timedelta(hours=5))


class TestAssemblyEntryComplete:
    def test_manual_completion(self, unit):
        entry = AssemblyEntry.start(7, unit, START)
        finished = START + timedelta(minutes=20)

        entry.complete(finished)

        assert entry.status == AssemblyStatus.COMPLETED
        assert entry.end_time == finished
        assert entry.completion_trigger == CompletionTrigger.MANUAL
        assert not entry.is_active
        assert not entry.is_overdue(START + timedelta(days=1))
        assert entry.is_valid()

    def test_deadline_completion_records_trigger(self, unit):
        entry = AssemblyEntry.start(7, unit, START)

        entry.complete(entry.expected_end_time, CompletionTrigger.DEADLINE)

        assert entry.completion_trigger == CompletionTrigger.DEADLINE
        assert entry.end_time == entry.expected_end_time

    def test_second_completion_is_rejected(self, unit):
        entry = AssemblyEntry.start(7, unit, START)
        entry.id = 11
        entry.complete(START + timedelta(minutes=5))

        with pytest.raises(InvalidTransitionError) as exc_info:
            entry.complete(START + timedelta(minutes=6))

        assert exc_info.value.error_type == ErrorType.INVALID_TRANSITION
        assert entry.end_time == START + timedelta(minutes=5)

    def test_end_before_start_is_rejected(self, unit):
        entry = AssemblyEntry.start(7, unit, START)

        with pytest.raises(ValidationError):
            entry.complete(START - timedelta(seconds=1))

        assert entry.status == AssemblyStatus.IN_PROGRESS
        assert entry.end_time is None

    def test_completing_at_start_time_is_allowed(self, unit):
        entry = AssemblyEntry.start(7, unit, START)
        entry.complete(START)
        assert entry.end_time == START


class TestAssemblyEntryConsistency:
    @pytest.mark.parametrize(
        ("status", "end_time", "valid"),
        [
            (AssemblyStatus.IN_PROGRESS, None, True),
            (AssemblyStatus.IN_PROGRESS, START, False),
            (AssemblyStatus.COMPLETED, None, False),
            (AssemblyStatus.COMPLETED, START, True),
        ],
    )
    def test_end_time_set_iff_completed(self, status, end_time, valid):
        entry = AssemblyEntry(
            worker_id=1,
            unit_id=1,
            start_time=START,
            expected_end_time=START + timedelta(minutes=50),
            end_time=end_time,
            status=status,
        )
        assert entry.is_valid() is valid

    def test_deadline_before_start_is_invalid(self):
        entry = AssemblyEntry(
            worker_id=1,
            unit_id=1,
            start_time=START,
            expected_end_time=START - timedelta(minutes=1),
        )
        assert not entry.is_valid()
        with pytest.raises(ValueError):
            entry.validate_rules()

    def test_equality_is_by_id(self, unit):
        first = AssemblyEntry.start(1, unit, START)
        second = AssemblyEntry.start(1, unit, START)
        assert first != second

        first.id = second.id = 3
        assert first == second
        assert hash(first) == hash(second)


class TestAssemblyStatus:
    def test_only_in_progress_to_completed(self):
        assert AssemblyStatus.IN_PROGRESS.can_transition_to(AssemblyStatus.COMPLETED)
        assert not AssemblyStatus.COMPLETED.can_transition_to(
            AssemblyStatus.IN_PROGRESS
        )
        assert not AssemblyStatus.COMPLETED.can_transition_to(AssemblyStatus.COMPLETED)
        assert AssemblyStatus.COMPLETED.is_terminal
        assert AssemblyStatus.IN_PROGRESS.is_active
