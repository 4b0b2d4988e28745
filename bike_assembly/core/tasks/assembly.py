"""Assembly lifecycle background tasks."""

from datetime import datetime
from typing import Any

from bike_assembly.core.celery_app import BaseTask, celery_app
from bike_assembly.core.deps import get_lifecycle_service
from bike_assembly.core.observability import get_logger

logger = get_logger(__name__)


@celery_app.task(
    base=BaseTask,
    name="bike_assembly.core.tasks.assembly.complete_assembly_at_deadline",
    queue="deadlines",
)
def complete_assembly_at_deadline(entry_id: int, fires_at: str) -> dict[str, Any]:
    """
    Deadline action for one assembly entry.

    Args:
        entry_id: Assembly entry identifier
        fires_at: ISO timestamp the deadline was registered for

    Returns:
        The entry's status after the action, or None for an unknown entry
    """
    service = get_lifecycle_service()
    entry = service.expire_assembly(entry_id, datetime.fromisoformat(fires_at))

    return {
        "entry_id": entry_id,
        "status": entry.status.value if entry else None,
        "end_time": entry.end_time.isoformat() if entry and entry.end_time else None,
    }


@celery_app.task(
    base=BaseTask,
    name="bike_assembly.core.tasks.assembly.reconcile_overdue_assemblies",
    queue="maintenance",
)
def reconcile_overdue_assemblies() -> dict[str, Any]:
    """
    Periodic sweep completing overdue entries whose deadline message was lost.

    Deadlines still pending are left to the broker.
    """
    service = get_lifecycle_service()
    report = service.reconcile_overdue(reschedule=False)
    logger.info("overdue_sweep_finished", completed=len(report.completed))
    return {"completed": report.completed, "timestamp": service.clock.now().isoformat()}
