"""Base classes for domain entities and value objects."""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(UTC).replace(tzinfo=None)


class ValueObject(BaseModel):
    """Base class for value objects (immutable, defined by their values)."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class Entity(BaseModel, ABC):
    """Base class for entities (have identity, can change over time).

    Identifiers are assigned by storage, so a freshly built entity has
    ``id=None`` until it has been persisted.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    id: int | None = None

    def __eq__(self, other: Any) -> bool:
        """Persisted entities are equal if they have the same ID and type."""
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.id))

    @abstractmethod
    def is_valid(self) -> bool:
        """Validate business rules for this entity."""
        pass

    def validate_rules(self) -> None:
        """Validate the entity and raise exception if invalid."""
        if not self.is_valid():
            raise ValueError(
                f"Entity {self.__class__.__name__} with ID {self.id} is invalid"
            )


class DomainService(ABC):
    """Base class for domain services (business logic that doesn't belong to a single entity)."""

    pass
