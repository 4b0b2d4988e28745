"""Deadline scheduler implementations."""

from .celery_scheduler import CeleryDeadlineScheduler, deadline_task_id
from .in_process_scheduler import InProcessDeadlineScheduler

__all__ = [
    "CeleryDeadlineScheduler",
    "InProcessDeadlineScheduler",
    "deadline_task_id",
]
