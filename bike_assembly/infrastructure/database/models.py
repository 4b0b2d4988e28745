"""
SQLModel table definitions for the assembly domain.

Timestamps are naive UTC and stored in plain ``DateTime`` columns.

The two partial unique indexes on ``assembly_entries`` are the storage-level
guarantee that a worker and a unit each have at most one in-progress entry,
including when writers live in different processes.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, text
from sqlmodel import Field, SQLModel

from bike_assembly.domain.assembly.value_objects.enums import AssemblyStatus
from bike_assembly.shared.base import utcnow

_ACTIVE = text(f"status = '{AssemblyStatus.IN_PROGRESS.value}'")


class TimestampedModel(SQLModel):
    """Base model with a creation timestamp."""

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class Unit(TimestampedModel, table=True):
    """Unit (bicycle) table definition."""

    __tablename__ = "units"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(min_length=1, max_length=100)
    expected_duration_minutes: int = Field(gt=0)


class Worker(TimestampedModel, table=True):
    """Worker table definition. Credentials are stored elsewhere."""

    __tablename__ = "workers"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(min_length=1, max_length=100)
    role: int = Field(default=2)


class AssemblyEntry(TimestampedModel, table=True):
    """Assembly entry table definition."""

    __tablename__ = "assembly_entries"
    __table_args__ = (
        Index(
            "uq_assembly_entries_active_worker",
            "worker_id",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
        Index(
            "uq_assembly_entries_active_unit",
            "unit_id",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
        Index("ix_assembly_entries_start_time", "start_time"),
    )

    id: int | None = Field(default=None, primary_key=True)
    worker_id: int = Field(index=True)
    unit_id: int = Field(foreign_key="units.id", index=True)
    start_time: datetime = Field(sa_type=DateTime)
    expected_end_time: datetime = Field(sa_type=DateTime)
    end_time: datetime | None = Field(default=None, sa_type=DateTime)
    status: str = Field(default=AssemblyStatus.IN_PROGRESS.value, max_length=20)
    completion_trigger: str | None = Field(default=None, max_length=20)
