"""Projection of ledger state onto the status shown for a unit."""

from datetime import datetime, timedelta

from ..entities.assembly_entry import AssemblyEntry
from ..value_objects.enums import AssemblyStatus, UnitDisplayStatus


def derive_unit_status(
    active_entry: AssemblyEntry | None,
    latest_entry: AssemblyEntry | None,
    now: datetime,
    completed_display: timedelta = timedelta(0),
) -> UnitDisplayStatus:
    """
    Compute the display status of a unit.

    Args:
        active_entry: The unit's in-progress entry, if any
        latest_entry: The unit's most recently started entry, if any
        now: Current time
        completed_display: How long a finished unit keeps showing COMPLETED

    Returns:
        IN_PROGRESS while an entry is active, COMPLETED while the latest entry
        ended less than ``completed_display`` ago, AVAILABLE otherwise.
    """
    if active_entry is not None:
        return UnitDisplayStatus.IN_PROGRESS

    if (
        latest_entry is not None
        and latest_entry.status == AssemblyStatus.COMPLETED
        and latest_entry.end_time is not None
        and now - latest_entry.end_time < completed_display
    ):
        return UnitDisplayStatus.COMPLETED

    return UnitDisplayStatus.AVAILABLE
