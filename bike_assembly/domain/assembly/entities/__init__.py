"""Assembly domain entities."""

from .assembly_entry import AssemblyEntry
from .unit import Unit
from .worker import Worker

__all__ = ["AssemblyEntry", "Unit", "Worker"]
