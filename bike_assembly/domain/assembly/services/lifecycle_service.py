"""
Assembly Lifecycle Service

Enforces the start/end rules of assembly entries, computes deadlines and
drives the single IN_PROGRESS -> COMPLETED transition, whether it is
requested by a worker, fired by a deadline or applied by the start-up sweep.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from pydantic import ValidationError as PydanticValidationError

from ....core.observability import (
    ACTIVE_ASSEMBLIES,
    ASSEMBLIES_COMPLETED,
    ASSEMBLIES_REJECTED,
    ASSEMBLIES_STARTED,
    get_logger,
)
from ....shared.base import DomainService
from ....shared.clock import Clock, SystemClock
from ....shared.exceptions import (
    AssemblyNotFoundError,
    ConflictError,
    DomainError,
    InvalidTransitionError,
    NoActiveAssemblyError,
    NotFoundError,
    UnitBusyError,
    ValidationError,
    WorkerBusyError,
)
from ....shared.locks import KeyedLock, unit_key, worker_key
from ..entities.assembly_entry import AssemblyEntry
from ..repositories.unit_of_work import UnitOfWork
from ..value_objects.assembly_query import AssemblyQuery
from ..value_objects.enums import AssemblyStatus, CompletionTrigger
from ..value_objects.unit_status import ActiveAssemblySummary, UnitStatusView
from .deadline_scheduler import DeadlineScheduler
from .status_projection import derive_unit_status

logger = get_logger(__name__)


@dataclass
class ReconciliationReport:
    """Outcome of a sweep over in-progress entries."""

    completed: list[int] = field(default_factory=list)
    rescheduled: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.completed) + len(self.rescheduled)


class AssemblyLifecycleService(DomainService):
    """
    Domain service owning the assembly lifecycle.

    Check-then-write sequences run while holding the per-key locks of the
    worker and the unit involved; the storage layer additionally rejects a
    second in-progress entry or a second completion, which covers writers in
    other processes.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        scheduler: DeadlineScheduler,
        clock: Clock | None = None,
        locks: KeyedLock | None = None,
        completed_display: timedelta = timedelta(0),
    ) -> None:
        self._uow_factory = uow_factory
        self._scheduler = scheduler
        self._clock = clock or SystemClock()
        self._locks = locks or KeyedLock()
        self._completed_display = completed_display
        scheduler.bind(self.expire_assembly)

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def scheduler(self) -> DeadlineScheduler:
        return self._scheduler

    def start_assembly(self, worker_id: int, unit_id: int) -> AssemblyEntry:
        """
        Start assembling a unit.

        Preconditions are checked in order and the first failure wins.

        Args:
            worker_id: Worker performing the assembly
            unit_id: Unit being assembled

        Returns:
            The new in-progress entry

        Raises:
            UnitNotFoundError: If the unit is not in the registry
            WorkerBusyError: If the worker already has an assembly in progress
            UnitBusyError: If the unit is already being assembled
        """
        with self._locks.hold(worker_key(worker_id), unit_key(unit_id)):
            try:
                with self._uow_factory() as uow:
                    unit = uow.units.get(unit_id)

                    ongoing = uow.assemblies.find_active_by_worker(worker_id)
                    if ongoing is not None:
                        raise WorkerBusyError(worker_id, ongoing.id)

                    occupied = uow.assemblies.find_active_by_unit(unit_id)
                    if occupied is not None:
                        raise UnitBusyError(unit_id, occupied.id)

                    entry = AssemblyEntry.start(worker_id, unit, self._clock.now())
                    entry = uow.assemblies.insert(entry)
            except (NotFoundError, ConflictError) as e:
                self._reject("start_assembly", e)
                raise

        self._scheduler.register_deadline(entry.id, entry.expected_end_time)

        ASSEMBLIES_STARTED.labels(unit_id=str(unit_id)).inc()
        ACTIVE_ASSEMBLIES.inc()
        logger.info(
            "assembly_started",
            entry_id=entry.id,
            worker_id=worker_id,
            unit_id=unit_id,
            expected_end_time=entry.expected_end_time.isoformat(),
        )
        return entry

    def end_assembly(self, worker_id: int) -> AssemblyEntry:
        """
        Complete the worker's in-progress assembly.

        If the deadline completed the entry between the lookup and the write,
        the stored entry is returned: the assembly is completed either way.

        Raises:
            NoActiveAssemblyError: If the worker has no assembly in progress
        """
        with self._uow_factory() as uow:
            entry = uow.assemblies.find_active_by_worker(worker_id)

        if entry is None:
            error = NoActiveAssemblyError(worker_id)
            self._reject("end_assembly", error)
            raise error

        completed, _ = self._complete(entry, CompletionTrigger.MANUAL)
        self._scheduler.cancel(completed.id)
        return completed

    def expire_assembly(self, entry_id: int, fires_at: datetime) -> AssemblyEntry | None:
        """
        Deadline action: force an overdue entry to COMPLETED.

        Does nothing for unknown or already completed entries. A deadline that
        fires before the entry's expected end is registered again instead of
        completing early.
        """
        entry = self._get_entry(entry_id)
        if entry is None:
            logger.warning("deadline_for_unknown_assembly", entry_id=entry_id)
            return None
        if not entry.is_active:
            logger.debug("deadline_for_completed_assembly", entry_id=entry_id)
            return entry

        completed, changed = self._complete(entry, CompletionTrigger.DEADLINE)
        if not changed and completed.is_active:
            logger.info(
                "deadline_fired_early",
                entry_id=entry_id,
                fires_at=fires_at.isoformat(),
                expected_end_time=completed.expected_end_time.isoformat(),
            )
            self._scheduler.register_deadline(entry_id, completed.expected_end_time)
        return completed

    def reconcile_overdue(self, reschedule: bool = True) -> ReconciliationReport:
        """
        Sweep all in-progress entries.

        Overdue entries are completed at their expected end. With
        ``reschedule`` the others get their deadline registered again, which
        is needed after a restart of an in-memory scheduler; a durable
        scheduler's periodic sweep passes False.
        """
        with self._uow_factory() as uow:
            active = uow.assemblies.list_active()

        report = ReconciliationReport()
        now = self._clock.now()
        for entry in active:
            if entry.is_overdue(now):
                completed, changed = self._complete(
                    entry, CompletionTrigger.RECONCILIATION
                )
                if changed or not completed.is_active:
                    report.completed.append(entry.id)
            elif reschedule:
                self._scheduler.register_deadline(entry.id, entry.expected_end_time)
                report.rescheduled.append(entry.id)

        ACTIVE_ASSEMBLIES.set(len(active) - len(report.completed))
        logger.info(
            "reconciliation_finished",
            completed=len(report.completed),
            rescheduled=len(report.rescheduled),
        )
        return report

    def get_active_assembly(self, worker_id: int) -> AssemblyEntry | None:
        """Return the worker's in-progress entry, if any."""
        with self._uow_factory() as uow:
            return uow.assemblies.find_active_by_worker(worker_id)

    def list_units_with_status(self) -> list[UnitStatusView]:
        """List every unit with its derived status and current assembly."""
        now = self._clock.now()
        views = []
        with self._uow_factory() as uow:
            for unit in uow.units.list():
                active = uow.assemblies.find_active_by_unit(unit.id)
                latest = (
                    active
                    if active is not None
                    else uow.assemblies.find_latest_by_unit(unit.id)
                )
                summary = None
                if active is not None:
                    worker = uow.workers.get(active.worker_id)
                    summary = ActiveAssemblySummary(
                        entry_id=active.id,
                        start_time=active.start_time,
                        expected_end_time=active.expected_end_time,
                        worker_id=active.worker_id,
                        worker_name=worker.display_name if worker else None,
                    )
                views.append(
                    UnitStatusView(
                        unit=unit,
                        status=derive_unit_status(
                            active, latest, now, self._completed_display
                        ),
                        active_assembly=summary,
                    )
                )
        return views

    def query_assemblies(
        self,
        statuses: Iterable[AssemblyStatus],
        start_inclusive: datetime | None = None,
        end_inclusive: datetime | None = None,
        worker_id: int | None = None,
        unit_id: int | None = None,
    ) -> list[AssemblyEntry]:
        """
        Read assembly history.

        Raises:
            ValidationError: If the status set is empty or the range is inverted
        """
        try:
            query = AssemblyQuery(
                statuses=frozenset(statuses),
                start_from=start_inclusive,
                start_to=end_inclusive,
                worker_id=worker_id,
                unit_id=unit_id,
            )
        except PydanticValidationError as e:
            raise ValidationError("query", None, e.errors()[0]["msg"]) from e

        with self._uow_factory() as uow:
            return uow.assemblies.query(query)

    def _complete(
        self, entry: AssemblyEntry, trigger: CompletionTrigger
    ) -> tuple[AssemblyEntry, bool]:
        """
        Apply the transition under the entry's locks.

        Manual completions end now; deadline and sweep completions end at the
        expected end and are refused before it.

        Returns:
            The stored entry and whether this call completed it
        """
        with self._locks.hold(worker_key(entry.worker_id), unit_key(entry.unit_id)):
            try:
                with self._uow_factory() as uow:
                    current = uow.assemblies.get(entry.id)
                    if current is None:
                        raise AssemblyNotFoundError(entry.id)
                    if not current.is_active:
                        return current, False

                    now = self._clock.now()
                    if trigger == CompletionTrigger.MANUAL:
                        end_time = now
                    elif now < current.expected_end_time:
                        return current, False
                    else:
                        end_time = current.expected_end_time

                    current.complete(end_time, trigger)
                    current = uow.assemblies.update(current)
            except InvalidTransitionError:
                logger.info(
                    "assembly_already_completed",
                    entry_id=entry.id,
                    trigger=trigger.value,
                )
                stored = self._get_entry(entry.id)
                if stored is None:
                    raise AssemblyNotFoundError(entry.id)
                return stored, False

        ASSEMBLIES_COMPLETED.labels(trigger=trigger.value).inc()
        ACTIVE_ASSEMBLIES.dec()
        logger.info(
            "assembly_completed",
            entry_id=current.id,
            worker_id=current.worker_id,
            unit_id=current.unit_id,
            trigger=trigger.value,
            end_time=current.end_time.isoformat(),
        )
        return current, True

    def _get_entry(self, entry_id: int) -> AssemblyEntry | None:
        with self._uow_factory() as uow:
            return uow.assemblies.get(entry_id)

    def _reject(self, operation: str, error: DomainError) -> None:
        reason = str(error.details.get("reason", type(error).__name__))
        ASSEMBLIES_REJECTED.labels(reason=reason).inc()
        logger.info(operation + "_rejected", reason=reason, message=error.message)
