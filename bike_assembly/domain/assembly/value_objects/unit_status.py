"""Read-side views of units and their current assembly."""

from datetime import datetime

from ....shared.base import ValueObject
from ..entities.unit import Unit
from .enums import UnitDisplayStatus


class ActiveAssemblySummary(ValueObject):
    """Who is assembling a unit and until when."""

    entry_id: int
    start_time: datetime
    expected_end_time: datetime
    worker_id: int
    worker_name: str | None = None


class UnitStatusView(ValueObject):
    """A unit together with its derived display status."""

    unit: Unit
    status: UnitDisplayStatus
    active_assembly: ActiveAssemblySummary | None = None
