"""Tests for the unit display status projection."""

from datetime import timedelta

import pytest

from bike_assembly.domain.assembly.entities import AssemblyEntry, Unit
from bike_assembly.domain.assembly.services import derive_unit_status
from bike_assembly.domain.assembly.value_objects.enums import UnitDisplayStatus
from bike_assembly.tests.utils import START


@pytest.fixture
def entry() -> AssemblyEntry:
    entry = AssemblyEntry.start(1, Unit.create("Bike 1", 50, unit_id=1), START)
    entry.id = 1
    return entry


def test_never_assembled_unit_is_available():
    assert derive_unit_status(None, None, START) == UnitDisplayStatus.AVAILABLE


def test_active_entry_means_in_progress(entry):
    status = derive_unit_status(entry, entry, START + timedelta(hours=3))
    assert status == UnitDisplayStatus.IN_PROGRESS


def test_completed_unit_is_available_again_by_default(entry):
    entry.complete(START + timedelta(minutes=10))
    status = derive_unit_status(None, entry, START + timedelta(minutes=10))
    assert status == UnitDisplayStatus.AVAILABLE


def test_completed_display_window(entry):
    entry.complete(START + timedelta(minutes=10))
    window = timedelta(minutes=5)

    inside = derive_unit_status(None, entry, START + timedelta(minutes=14), window)
    outside = derive_unit_status(None, entry, START + timedelta(minutes=15), window)

    assert inside == UnitDisplayStatus.COMPLETED
    assert outside == UnitDisplayStatus.AVAILABLE
