"""
Assembly Query Value Object

Filter used to read assembly history from the ledger.
"""

from datetime import datetime

from pydantic import Field, model_validator
from typing_extensions import Self

from ....shared.base import ValueObject
from .enums import AssemblyStatus


class AssemblyQuery(ValueObject):
    """
    Ledger filter over status, start time and the two resource ids.

    ``start_from`` and ``start_to`` are both inclusive bounds on
    ``start_time``; either may be omitted for an open-ended range.
    """

    statuses: frozenset[AssemblyStatus] = Field(
        default_factory=lambda: frozenset(AssemblyStatus)
    )
    start_from: datetime | None = None
    start_to: datetime | None = None
    worker_id: int | None = None
    unit_id: int | None = None

    @model_validator(mode="after")
    def _check_range(self) -> Self:
        if not self.statuses:
            raise ValueError("statuses must contain at least one status")
        if (
            self.start_from is not None
            and self.start_to is not None
            and self.start_from > self.start_to
        ):
            raise ValueError("start_from must not be after start_to")
        return self
