"""
Celery-backed deadline scheduler.

Each deadline is a task message delivered at its eta by the broker, so it
survives restarts of the process that registered it.
"""

from datetime import UTC, datetime

from celery import Celery

from bike_assembly.core.celery_app import revoke_task
from bike_assembly.core.observability import get_logger
from bike_assembly.domain.assembly.services.deadline_scheduler import DeadlineScheduler

logger = get_logger(__name__)

DEADLINE_TASK = "bike_assembly.core.tasks.assembly.complete_assembly_at_deadline"


def deadline_task_id(entry_id: int) -> str:
    """Deterministic task id, so any process can cancel the deadline."""
    return f"assembly-deadline-{entry_id}"


class CeleryDeadlineScheduler(DeadlineScheduler):
    """Deadline scheduler sending eta tasks to a Celery broker."""

    def __init__(self, app: Celery) -> None:
        super().__init__()
        self._app = app

    def register_deadline(self, entry_id: int, fires_at: datetime) -> None:
        """Send the eta task. A broker failure is logged and left to the sweep."""
        eta = fires_at if fires_at.tzinfo else fires_at.replace(tzinfo=UTC)
        try:
            self._app.send_task(
                DEADLINE_TASK,
                args=[entry_id, fires_at.isoformat()],
                eta=eta,
                task_id=deadline_task_id(entry_id),
            )
        except Exception as e:
            logger.warning(
                "deadline_registration_failed",
                entry_id=entry_id,
                fires_at=fires_at.isoformat(),
                error=str(e),
            )
            return
        logger.debug(
            "deadline_registered",
            entry_id=entry_id,
            fires_at=fires_at.isoformat(),
            backend="celery",
        )

    def cancel(self, entry_id: int) -> bool:
        return revoke_task(deadline_task_id(entry_id))
