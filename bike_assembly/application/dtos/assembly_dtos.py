"""Assembly-related Data Transfer Objects."""

from datetime import datetime

from pydantic import BaseModel, Field

from bike_assembly.domain.assembly.entities import AssemblyEntry
from bike_assembly.domain.assembly.value_objects.enums import (
    AssemblyStatus,
    CompletionTrigger,
)


class CurrentAssemblyView(BaseModel):
    """What a worker is assembling right now."""

    in_progress: bool = Field(..., description="Whether the worker has an open assembly")
    unit_name: str | None = None
    start_time: datetime | None = None
    expected_end_time: datetime | None = None

    @classmethod
    def idle(cls) -> "CurrentAssemblyView":
        return cls(in_progress=False)


class AssemblyDetailResponse(BaseModel):
    """An assembly entry joined with the names of its unit and worker."""

    id: int
    worker_id: int
    worker_name: str | None = None
    unit_id: int
    unit_name: str | None = None
    start_time: datetime
    expected_end_time: datetime
    end_time: datetime | None = None
    status: AssemblyStatus
    completion_trigger: CompletionTrigger | None = None

    @classmethod
    def from_entry(
        cls,
        entry: AssemblyEntry,
        unit_name: str | None = None,
        worker_name: str | None = None,
    ) -> "AssemblyDetailResponse":
        return cls(
            id=entry.id,
            worker_id=entry.worker_id,
            worker_name=worker_name,
            unit_id=entry.unit_id,
            unit_name=unit_name,
            start_time=entry.start_time,
            expected_end_time=entry.expected_end_time,
            end_time=entry.end_time,
            status=entry.status,
            completion_trigger=entry.completion_trigger,
        )
