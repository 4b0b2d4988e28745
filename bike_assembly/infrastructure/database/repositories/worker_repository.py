"""SQL implementation of the worker lookup."""

from sqlmodel import select

from bike_assembly.domain.assembly.entities.worker import Worker
from bike_assembly.domain.assembly.repositories.worker_repository import (
    WorkerRepository,
)
from bike_assembly.infrastructure.database.models import Worker as SQLWorker

from .base import BaseRepository
from .mappers import WorkerMapper


class SqlWorkerRepository(BaseRepository, WorkerRepository):
    """Worker lookup backed by the ``workers`` table."""

    def get(self, worker_id: int) -> Worker | None:
        with self._storage_errors("get_worker"):
            row = self.session.get(SQLWorker, worker_id)
        return WorkerMapper.sql_to_domain(row) if row else None

    def list(self) -> list[Worker]:
        with self._storage_errors("list_workers"):
            rows = self.session.exec(select(SQLWorker).order_by(SQLWorker.id)).all()
        return [WorkerMapper.sql_to_domain(row) for row in rows]

    def add(self, worker: Worker) -> Worker:
        with self._storage_errors("add_worker"):
            row = WorkerMapper.domain_to_sql(worker)
            self.session.add(row)
            self.session.flush()
            self.session.refresh(row)
        return WorkerMapper.sql_to_domain(row)
