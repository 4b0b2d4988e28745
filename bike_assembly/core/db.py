from collections.abc import Sequence
from typing import Any

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from bike_assembly.core.config import UnitSeed, WorkerSeed, settings
from bike_assembly.core.observability import get_logger
from bike_assembly.domain.assembly.entities import Unit, Worker
from bike_assembly.domain.assembly.value_objects.enums import WorkerRole
from bike_assembly.infrastructure.database import models  # noqa: F401
from bike_assembly.infrastructure.database.unit_of_work import SqlModelUnitOfWork

logger = get_logger(__name__)


def create_db_engine(
    url: str | None = None, echo: bool | None = None, **overrides: Any
) -> Engine:
    """Create the engine for the assembly ledger database."""
    url = url or settings.DATABASE_URL
    engine_kwargs: dict[str, Any] = {
        "echo": settings.DATABASE_ECHO if echo is None else echo,
        "pool_pre_ping": settings.DATABASE_POOL_PRE_PING,
    }

    if url.startswith("sqlite"):
        # Deadline threads share the engine with the caller's thread
        engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    else:
        engine_kwargs.update(pool_recycle=3600, pool_size=10, max_overflow=20)

    engine_kwargs.update(overrides)
    return create_engine(url, **engine_kwargs)


engine = create_db_engine()


# models must be imported before create_all so their tables are registered
def init_db(
    engine: Engine,
    units: Sequence[UnitSeed] | None = None,
    workers: Sequence[WorkerSeed] | None = None,
) -> None:
    """Create tables and seed the unit and worker catalogs when empty."""
    SQLModel.metadata.create_all(engine)

    units = settings.SEED_UNITS if units is None else units
    workers = settings.SEED_WORKERS if workers is None else workers

    with SqlModelUnitOfWork(engine) as uow:
        if not uow.units.list():
            for seed in units:
                uow.units.add(Unit.create(seed.name, seed.expected_duration_minutes))
            logger.info("units_seeded", count=len(units))

        if not uow.workers.list():
            for seed in workers:
                uow.workers.add(
                    Worker(display_name=seed.name, role=WorkerRole(seed.role))
                )
            logger.info("workers_seeded", count=len(workers))
