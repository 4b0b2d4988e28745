"""AssemblyEntry entity: one attempt by one worker to assemble one unit."""

from datetime import datetime

from pydantic import Field

from ....shared.base import Entity
from ....shared.exceptions import InvalidTransitionError, ValidationError
from ..value_objects.enums import AssemblyStatus, CompletionTrigger
from .unit import Unit


class AssemblyEntry(Entity):
    """
    Assembly entry in the ledger.

    An entry is created IN_PROGRESS and completed exactly once, either by the
    worker or by its deadline. ``end_time`` is set if and only if the entry
    is COMPLETED, and ``expected_end_time`` never changes after creation.
    """

    worker_id: int
    unit_id: int
    start_time: datetime
    expected_end_time: datetime
    end_time: datetime | None = None
    status: AssemblyStatus = Field(default=AssemblyStatus.IN_PROGRESS)
    completion_trigger: CompletionTrigger | None = None

    def is_valid(self) -> bool:
        """Validate business rules."""
        if self.expected_end_time < self.start_time:
            return False
        if self.status == AssemblyStatus.IN_PROGRESS:
            return self.end_time is None
        return self.end_time is not None

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def is_overdue(self, now: datetime) -> bool:
        """True once the deadline has been reached while still in progress."""
        return self.is_active and now >= self.expected_end_time

    def complete(
        self, end_time: datetime, trigger: CompletionTrigger = CompletionTrigger.MANUAL
    ) -> None:
        """
        Apply the single legal transition IN_PROGRESS -> COMPLETED.

        Args:
            end_time: Instant the assembly finished
            trigger: What caused the completion

        Raises:
            InvalidTransitionError: If the entry is already completed
            ValidationError: If end_time precedes start_time
        """
        if not self.status.can_transition_to(AssemblyStatus.COMPLETED):
            raise InvalidTransitionError(self.id, self.status.value)
        if end_time < self.start_time:
            raise ValidationError(
                "end_time", end_time.isoformat(), "cannot be before start_time"
            )

        self.end_time = end_time
        self.status = AssemblyStatus.COMPLETED
        self.completion_trigger = trigger

    @staticmethod
    def start(worker_id: int, unit: Unit, start_time: datetime) -> "AssemblyEntry":
        """
        Factory method for a new in-progress entry.

        The deadline is derived from the unit's expected duration once, here.
        """
        entry = AssemblyEntry(
            worker_id=worker_id,
            unit_id=unit.id,
            start_time=start_time,
            expected_end_time=unit.expected_end_for(start_time),
        )
        entry.validate_rules()
        return entry
