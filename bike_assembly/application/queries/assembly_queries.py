"""
Assembly query service for history and per-worker views.

Reads go through the lifecycle service; names of units and workers are joined
in from the catalogs.
"""

from collections.abc import Callable
from datetime import date, datetime, time

from bike_assembly.domain.assembly.entities import AssemblyEntry
from bike_assembly.domain.assembly.repositories.unit_of_work import UnitOfWork
from bike_assembly.domain.assembly.services import AssemblyLifecycleService
from bike_assembly.domain.assembly.value_objects.enums import AssemblyStatus
from bike_assembly.shared.exceptions import UnitNotFoundError, ValidationError

from ..dtos import AssemblyDetailResponse, CurrentAssemblyView


class AssemblyQueryService:
    """Reporting queries over the assembly ledger."""

    def __init__(
        self,
        lifecycle: AssemblyLifecycleService,
        uow_factory: Callable[[], UnitOfWork],
    ) -> None:
        self._lifecycle = lifecycle
        self._uow_factory = uow_factory

    def completed_assemblies(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> list[AssemblyEntry]:
        """
        Completed entries, optionally restricted by start time.

        The range applies only when both bounds are given; an inverted range
        matches nothing.
        """
        if start is None or end is None:
            start = end = None
        elif start > end:
            return []
        return self._lifecycle.query_assemblies(
            {AssemblyStatus.COMPLETED}, start_inclusive=start, end_inclusive=end
        )

    def assembly_details(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> list[AssemblyDetailResponse]:
        """
        Entries of both statuses started within whole days.

        Without both dates the current day is used. The range runs from the
        start of ``start_date`` to the last instant of ``end_date``.

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date is None or end_date is None:
            start_date = end_date = self._lifecycle.clock.now().date()
        if start_date > end_date:
            raise ValidationError(
                "start_date",
                start_date.isoformat(),
                "Start date must be before end date",
            )

        entries = self._lifecycle.query_assemblies(
            set(AssemblyStatus),
            start_inclusive=datetime.combine(start_date, time.min),
            end_inclusive=datetime.combine(end_date, time.max),
        )

        with self._uow_factory() as uow:
            unit_names = {unit.id: unit.display_name for unit in uow.units.list()}
            worker_names = {
                worker.id: worker.display_name for worker in uow.workers.list()
            }

        return [
            AssemblyDetailResponse.from_entry(
                entry,
                unit_name=unit_names.get(entry.unit_id),
                worker_name=worker_names.get(entry.worker_id),
            )
            for entry in entries
        ]

    def current_assembly(self, worker_id: int) -> CurrentAssemblyView:
        """The worker's in-progress assembly, or an idle view."""
        entry = self._lifecycle.get_active_assembly(worker_id)
        if entry is None:
            return CurrentAssemblyView.idle()

        with self._uow_factory() as uow:
            try:
                unit_name = uow.units.get(entry.unit_id).display_name
            except UnitNotFoundError:
                unit_name = None

        return CurrentAssemblyView(
            in_progress=True,
            unit_name=unit_name,
            start_time=entry.start_time,
            expected_end_time=entry.expected_end_time,
        )
