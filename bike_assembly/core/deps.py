"""
Service wiring.

Builds the lifecycle service from settings: engine, unit of work factory and
the deadline scheduler selected by ``DEADLINE_BACKEND``.
"""

from datetime import timedelta

from sqlalchemy.engine import Engine

from bike_assembly.core.config import settings
from bike_assembly.domain.assembly.services import (
    AssemblyLifecycleService,
    DeadlineScheduler,
)
from bike_assembly.infrastructure.database.unit_of_work import make_uow_factory
from bike_assembly.shared.clock import Clock

_lifecycle_service: AssemblyLifecycleService | None = None


def build_scheduler(clock: Clock | None = None) -> DeadlineScheduler:
    if settings.DEADLINE_BACKEND == "celery":
        from bike_assembly.core.celery_app import celery_app
        from bike_assembly.infrastructure.scheduling import CeleryDeadlineScheduler

        return CeleryDeadlineScheduler(celery_app)

    from bike_assembly.infrastructure.scheduling import InProcessDeadlineScheduler

    return InProcessDeadlineScheduler(
        clock=clock,
        poll_interval=settings.DEADLINE_POLL_INTERVAL_SECONDS,
        retry_delay=settings.DEADLINE_RETRY_DELAY_SECONDS,
    )


def build_lifecycle_service(
    engine: Engine | None = None,
    scheduler: DeadlineScheduler | None = None,
    clock: Clock | None = None,
) -> AssemblyLifecycleService:
    if engine is None:
        from bike_assembly.core.db import engine as default_engine

        engine = default_engine

    return AssemblyLifecycleService(
        uow_factory=make_uow_factory(engine),
        scheduler=scheduler or build_scheduler(clock),
        clock=clock,
        completed_display=timedelta(seconds=settings.COMPLETED_DISPLAY_SECONDS),
    )


def get_lifecycle_service() -> AssemblyLifecycleService:
    """Process-wide lifecycle service, built on first use."""
    global _lifecycle_service
    if _lifecycle_service is None:
        _lifecycle_service = build_lifecycle_service()
    return _lifecycle_service


def set_lifecycle_service(service: AssemblyLifecycleService | None) -> None:
    """Replace the process-wide service (None resets it)."""
    global _lifecycle_service
    _lifecycle_service = service
