"""
Logging and metrics for the assembly lifecycle.

Log lines are structlog events; anything bound with ``bind_correlation_id``
is merged into every event emitted from the same context, such as one
Celery task run.
"""

import logging
import sys
import uuid

import structlog
from prometheus_client import Counter, Gauge, start_http_server

from .config import settings

ASSEMBLIES_STARTED = Counter(
    "bike_assembly_started_total", "Assemblies started", ["unit_id"]
)

ASSEMBLIES_COMPLETED = Counter(
    "bike_assembly_completed_total", "Assemblies completed", ["trigger"]
)

ASSEMBLIES_REJECTED = Counter(
    "bike_assembly_rejected_total", "Rejected lifecycle requests", ["reason"]
)

ACTIVE_ASSEMBLIES = Gauge("bike_assembly_active", "Assemblies currently in progress")

PENDING_DEADLINES = Gauge(
    "bike_assembly_pending_deadlines", "Deadlines registered with the in-process scheduler"
)


def setup_structured_logging() -> None:
    """Route structlog events through stdlib logging on stdout."""
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if settings.LOG_FORMAT == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(stream=sys.stdout, format="%(message)s", level=level)

    sql_level = logging.INFO if settings.LOG_SQL else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)


def setup_metrics() -> None:
    """Serve the Prometheus registry when metrics are enabled."""
    if settings.ENABLE_METRICS:
        start_http_server(settings.METRICS_PORT)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation id to the current context, generating one if absent."""
    correlation_id = correlation_id or uuid.uuid4().hex
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    structlog.contextvars.unbind_contextvars("correlation_id")
