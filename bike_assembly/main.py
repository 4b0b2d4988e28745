import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from bike_assembly.core.config import settings
from bike_assembly.core.db import engine, init_db
from bike_assembly.core.deps import get_lifecycle_service
from bike_assembly.core.observability import (
    get_logger,
    setup_metrics,
    setup_structured_logging,
)
from bike_assembly.domain.assembly.services import AssemblyLifecycleService
from bike_assembly.infrastructure.scheduling import InProcessDeadlineScheduler

logger = get_logger(__name__)


@contextmanager
def lifespan() -> Iterator[AssemblyLifecycleService]:
    """Start the engine, yield the lifecycle service and shut down on exit."""
    setup_structured_logging()
    logger.info("Starting assembly engine")

    scheduler = None
    try:
        setup_metrics()
        init_db(engine)

        service = get_lifecycle_service()
        scheduler = service.scheduler
        if settings.RECONCILE_ON_STARTUP:
            service.reconcile_overdue(
                reschedule=isinstance(scheduler, InProcessDeadlineScheduler)
            )
        if isinstance(scheduler, InProcessDeadlineScheduler):
            scheduler.start()

        logger.info(
            "Assembly engine started",
            project_name=settings.PROJECT_NAME,
            environment=settings.ENVIRONMENT,
            deadline_backend=settings.DEADLINE_BACKEND,
            metrics_port=settings.METRICS_PORT if settings.ENABLE_METRICS else None,
        )

        yield service

    except Exception as e:
        logger.error("Assembly engine startup failed", error=str(e), exc_info=True)
        raise

    finally:
        if isinstance(scheduler, InProcessDeadlineScheduler):
            scheduler.stop()
        logger.info("Shutting down assembly engine")


def main() -> None:
    """Run the engine until SIGINT or SIGTERM."""
    stop = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: stop.set())
    signal.signal(signal.SIGINT, lambda *_: stop.set())

    with lifespan():
        stop.wait()


if __name__ == "__main__":
    main()
