"""Celery application for durable deadlines and the periodic overdue sweep."""

from typing import Any

from celery import Celery, Task
from celery.signals import task_postrun, task_prerun

from bike_assembly.core.config import settings
from bike_assembly.core.observability import bind_correlation_id, clear_correlation_id, get_logger
from bike_assembly.shared.exceptions import StorageError

logger = get_logger(__name__)

DEADLINE_QUEUE = "deadlines"
MAINTENANCE_QUEUE = "maintenance"


celery_app = Celery(
    "bike_assembly",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["bike_assembly.core.tasks.assembly"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_time_limit=settings.CELERY_TASK_TIME_LIMIT,
    # A deadline is acked only once the entry has been written
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=settings.CELERY_WORKER_PREFETCH_MULTIPLIER,
    result_expires=3600,
    task_default_queue=MAINTENANCE_QUEUE,
    task_routes={
        "bike_assembly.core.tasks.assembly.complete_assembly_at_deadline": {
            "queue": DEADLINE_QUEUE
        },
    },
    beat_schedule={
        "reconcile-overdue-assemblies": {
            "task": "bike_assembly.core.tasks.assembly.reconcile_overdue_assemblies",
            "schedule": settings.RECONCILE_INTERVAL_SECONDS,
        },
    },
)


class BaseTask(Task):
    """Task base retrying storage outages; domain errors are final."""

    autoretry_for = (StorageError,)
    retry_backoff = True
    max_retries = 5

    def on_failure(
        self, exc: Exception, task_id: str, args: tuple, kwargs: dict, einfo: Any
    ) -> None:
        logger.error(
            "task_failed",
            task_name=self.name,
            task_id=task_id,
            task_args=list(args),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        super().on_failure(exc, task_id, args, kwargs, einfo)

    def on_retry(
        self, exc: Exception, task_id: str, args: tuple, kwargs: dict, einfo: Any
    ) -> None:
        logger.warning(
            "task_retrying",
            task_name=self.name,
            task_id=task_id,
            retries=self.request.retries,
            error=str(exc),
        )
        super().on_retry(exc, task_id, args, kwargs, einfo)


celery_app.Task = BaseTask


@task_prerun.connect
def bind_task_correlation_id(task_id: str, task: Task, **kw: Any) -> None:
    """Tag every log line emitted by a task with the task id."""
    bind_correlation_id(task_id)
    logger.debug("task_started", task_name=task.name)


@task_postrun.connect
def log_task_outcome(task_id: str, task: Task, state: str | None = None, **kw: Any) -> None:
    logger.debug("task_finished", task_name=task.name, state=state)
    clear_correlation_id()


def revoke_task(task_id: str) -> bool:
    """Broadcast a revoke for ``task_id``. Returns False if the broker is unreachable."""
    try:
        celery_app.control.revoke(task_id)
    except Exception as e:
        logger.warning("task_revoke_failed", task_id=task_id, error=str(e))
        return False
    logger.debug("task_revoked", task_id=task_id)
    return True


__all__ = ["celery_app", "BaseTask", "revoke_task"]
