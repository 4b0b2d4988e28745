"""
Domain Exceptions

Typed errors surfaced by the assembly lifecycle engine. Every error carries an
``ErrorType`` discriminator and a flat ``details`` mapping so a transport layer
can turn it into a response without inspecting the concrete class.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_TRANSITION = "invalid_transition"
    STORAGE = "storage"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when input validation rules are violated."""

    def __init__(
        self,
        field_name: str,
        value: str | int | float | bool | None,
        message: str,
    ) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Validation failed for field '{field_name}': {message}",
            ErrorType.VALIDATION,
            {"field": field_name, "value": str(value) if value is not None else None},
        )


# Not found
class NotFoundError(DomainError):
    """Base class for lookups that found nothing."""

    def __init__(
        self, message: str, details: dict[str, str | int | bool | None] | None = None
    ) -> None:
        super().__init__(message, ErrorType.NOT_FOUND, details)


class UnitNotFoundError(NotFoundError):
    """Raised when a unit is not in the registry."""

    code = "UnitNotFound"

    def __init__(self, unit_id: int) -> None:
        super().__init__(
            f"Unit not found: {unit_id}",
            {"unit_id": unit_id, "reason": self.code},
        )
        self.unit_id = unit_id


class NoActiveAssemblyError(NotFoundError):
    """Raised when a worker has no assembly in progress."""

    code = "NoActiveAssembly"

    def __init__(self, worker_id: int) -> None:
        super().__init__(
            f"No ongoing assembly found for worker {worker_id}",
            {"worker_id": worker_id, "reason": self.code},
        )
        self.worker_id = worker_id


class AssemblyNotFoundError(NotFoundError):
    """Raised when an assembly entry id is unknown to the ledger."""

    code = "AssemblyNotFound"

    def __init__(self, entry_id: int) -> None:
        super().__init__(
            f"Assembly not found: {entry_id}",
            {"entry_id": entry_id, "reason": self.code},
        )
        self.entry_id = entry_id


# Conflicts
class ConflictError(DomainError):
    """Raised when an operation would put a worker or unit in two assemblies."""

    code = "Conflict"

    def __init__(
        self, message: str, details: dict[str, str | int | bool | None] | None = None
    ) -> None:
        conflict_details = details or {}
        conflict_details.setdefault("reason", self.code)
        super().__init__(message, ErrorType.CONFLICT, conflict_details)


class WorkerBusyError(ConflictError):
    """Raised when the worker already has an assembly in progress."""

    code = "WorkerBusy"

    def __init__(self, worker_id: int, active_entry_id: int | None = None) -> None:
        super().__init__(
            f"Worker {worker_id} has an ongoing assembly; complete it before starting a new one",
            {"worker_id": worker_id, "active_entry_id": active_entry_id},
        )
        self.worker_id = worker_id
        self.active_entry_id = active_entry_id


class UnitBusyError(ConflictError):
    """Raised when the unit is already being assembled."""

    code = "UnitBusy"

    def __init__(self, unit_id: int, active_entry_id: int | None = None) -> None:
        super().__init__(
            f"Unit {unit_id} is already being assembled",
            {"unit_id": unit_id, "active_entry_id": active_entry_id},
        )
        self.unit_id = unit_id
        self.active_entry_id = active_entry_id


class InvalidTransitionError(DomainError):
    """Raised when completing an assembly entry that is already completed."""

    def __init__(self, entry_id: int | None, current_status: str) -> None:
        super().__init__(
            f"Cannot complete assembly {entry_id}: status is already {current_status}",
            ErrorType.INVALID_TRANSITION,
            {"entry_id": entry_id, "current_status": current_status},
        )
        self.entry_id = entry_id
        self.current_status = current_status


class StorageError(DomainError):
    """Raised when the storage layer fails (connectivity, aborted transaction)."""

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        message = f"Storage error during {operation}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(
            message,
            ErrorType.STORAGE,
            {"operation": operation, "cause_type": type(cause).__name__ if cause else None},
        )
        self.operation = operation
        self.cause = cause
