"""Domain enums for bicycle assembly."""

from enum import Enum


class AssemblyStatus(str, Enum):
    """Assembly entry status enumeration."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def is_active(self) -> bool:
        """Check if status represents an assembly still being worked on."""
        return self == AssemblyStatus.IN_PROGRESS

    @property
    def is_terminal(self) -> bool:
        """Check if status is terminal (cannot transition further)."""
        return self == AssemblyStatus.COMPLETED

    def can_transition_to(self, target_status: "AssemblyStatus") -> bool:
        """Only IN_PROGRESS -> COMPLETED is legal."""
        valid_transitions = {
            AssemblyStatus.IN_PROGRESS: {AssemblyStatus.COMPLETED},
            AssemblyStatus.COMPLETED: set(),  # Terminal state
        }
        return target_status in valid_transitions.get(self, set())


class CompletionTrigger(str, Enum):
    """What caused an assembly entry to complete."""

    MANUAL = "manual"
    DEADLINE = "deadline"
    RECONCILIATION = "reconciliation"


class UnitDisplayStatus(str, Enum):
    """Status shown for a unit in resource listings."""

    AVAILABLE = "available"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class WorkerRole(int, Enum):
    """Worker capability. Values match the numeric roles of the credential store."""

    ADMIN = 1
    ASSEMBLER = 2
