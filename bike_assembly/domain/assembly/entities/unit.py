"""Unit entity: a bicycle that can be assembled."""

from datetime import datetime, timedelta

from pydantic import ConfigDict, Field

from ....shared.base import Entity


class Unit(Entity):
    """
    A bicycle in the resource registry.

    Units are immutable once created; the expected duration is a catalog
    parameter, not runtime state.
    """

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(min_length=1, max_length=100)
    expected_duration_minutes: int = Field(gt=0)

    def is_valid(self) -> bool:
        """Validate business rules."""
        return bool(self.display_name) and self.expected_duration_minutes > 0

    @property
    def expected_duration(self) -> timedelta:
        return timedelta(minutes=self.expected_duration_minutes)

    def expected_end_for(self, start_time: datetime) -> datetime:
        """Deadline of an assembly of this unit started at ``start_time``."""
        return start_time + self.expected_duration

    @staticmethod
    def create(
        display_name: str, expected_duration_minutes: int, unit_id: int | None = None
    ) -> "Unit":
        """Factory method to create a new Unit."""
        unit = Unit(
            id=unit_id,
            display_name=display_name,
            expected_duration_minutes=expected_duration_minutes,
        )
        unit.validate_rules()
        return unit
