"""Mappers between domain entities and SQLModel rows."""

from .assembly_mapper import AssemblyEntryMapper, UnitMapper, WorkerMapper

__all__ = ["AssemblyEntryMapper", "UnitMapper", "WorkerMapper"]
