"""
Shared fixtures.

Each test gets its own SQLite file, seeded with three units and a handful of
workers, a frozen clock and an in-process scheduler that tests drive by
calling ``run_pending()`` after advancing the clock.
"""

from collections.abc import Generator

import pytest
from sqlalchemy.engine import Engine

from bike_assembly.core.db import create_db_engine, init_db
from bike_assembly.domain.assembly.entities import Unit, Worker
from bike_assembly.domain.assembly.services import AssemblyLifecycleService
from bike_assembly.infrastructure.database import make_uow_factory
from bike_assembly.infrastructure.scheduling import InProcessDeadlineScheduler
from bike_assembly.shared.clock import FrozenClock

from .utils import START, UNIT_SEEDS, WORKER_SEEDS, RecordingScheduler


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(START)


@pytest.fixture
def engine(tmp_path) -> Generator[Engine, None, None]:
    """Seeded SQLite database private to the test."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'assembly.db'}", echo=False)
    init_db(engine, units=UNIT_SEEDS, workers=WORKER_SEEDS)
    yield engine
    engine.dispose()


@pytest.fixture
def uow_factory(engine):
    return make_uow_factory(engine)


@pytest.fixture
def units(uow_factory) -> list[Unit]:
    with uow_factory() as uow:
        return uow.units.list()


@pytest.fixture
def workers(uow_factory) -> list[Worker]:
    with uow_factory() as uow:
        return uow.workers.list()


@pytest.fixture
def scheduler(clock) -> Generator[InProcessDeadlineScheduler, None, None]:
    scheduler = InProcessDeadlineScheduler(clock=clock, poll_interval=0.05, retry_delay=1)
    yield scheduler
    scheduler.stop(timeout=1)


@pytest.fixture
def service(uow_factory, scheduler, clock) -> AssemblyLifecycleService:
    return AssemblyLifecycleService(uow_factory, scheduler, clock=clock)


@pytest.fixture
def recording_scheduler() -> RecordingScheduler:
    return RecordingScheduler()
