"""Worker entity."""

from pydantic import ConfigDict, Field

from ....shared.base import Entity
from ..value_objects.enums import WorkerRole


class Worker(Entity):
    """A person known to the engine. Credentials live elsewhere."""

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(min_length=1, max_length=100)
    role: WorkerRole = WorkerRole.ASSEMBLER

    def is_valid(self) -> bool:
        return bool(self.display_name)
