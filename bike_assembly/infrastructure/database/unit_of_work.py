"""
Unit of Work pattern implementation for transaction management.

One unit of work is one session and one transaction. It commits when the
block exits normally and rolls back when it raises.
"""

import time
from collections.abc import Callable

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from bike_assembly.core.observability import get_logger
from bike_assembly.domain.assembly.repositories.unit_of_work import UnitOfWork
from bike_assembly.shared.exceptions import StorageError

from .repositories import SqlAssemblyRepository, SqlUnitRepository, SqlWorkerRepository

logger = get_logger(__name__)


class SqlModelUnitOfWork(UnitOfWork):
    """
    Unit of Work over a SQLModel session.

    Usage:
        with SqlModelUnitOfWork(engine) as uow:
            entry = uow.assemblies.find_active_by_worker(worker_id)
    """

    def __init__(self, engine: Engine, slow_transaction_ms: float = 1000.0):
        self._engine = engine
        self._slow_transaction_ms = slow_transaction_ms
        self.session: Session | None = None
        self._started_at: float | None = None

    def __enter__(self) -> "SqlModelUnitOfWork":
        if self.session is not None:
            raise RuntimeError("UnitOfWork is already active")

        self.session = Session(self._engine, expire_on_commit=False)
        self.units = SqlUnitRepository(self.session)
        self.workers = SqlWorkerRepository(self.session)
        self.assemblies = SqlAssemblyRepository(self.session)
        self._started_at = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.session is None:
            return

        try:
            if exc_type:
                self.rollback()
                logger.debug(
                    "transaction_rolled_back",
                    error_type=exc_type.__name__,
                    error=str(exc_val),
                )
            else:
                self.commit()
        finally:
            self._log_duration()
            self.session.close()
            self.session = None

    def commit(self) -> None:
        """Commit the current transaction."""
        if not self.session:
            raise RuntimeError("No active session to commit")

        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("transaction_commit_failed", error=str(e))
            raise StorageError("commit", e) from e

    def rollback(self) -> None:
        """Rollback the current transaction."""
        if not self.session:
            raise RuntimeError("No active session to rollback")

        try:
            self.session.rollback()
        except SQLAlchemyError as e:
            logger.error("transaction_rollback_failed", error=str(e))
            raise StorageError("rollback", e) from e

    def _log_duration(self) -> None:
        if self._started_at is None:
            return
        duration_ms = (time.perf_counter() - self._started_at) * 1000
        if duration_ms > self._slow_transaction_ms:
            logger.warning("slow_transaction", duration_ms=round(duration_ms, 2))


def make_uow_factory(
    engine: Engine, slow_transaction_ms: float = 1000.0
) -> Callable[[], SqlModelUnitOfWork]:
    """Build the zero-argument factory the lifecycle service expects."""

    def factory() -> SqlModelUnitOfWork:
        return SqlModelUnitOfWork(engine, slow_transaction_ms)

    return factory
