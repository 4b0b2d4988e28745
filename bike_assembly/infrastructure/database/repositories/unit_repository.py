"""SQL implementation of the unit registry."""

from sqlmodel import select

from bike_assembly.domain.assembly.entities.unit import Unit
from bike_assembly.domain.assembly.repositories.unit_repository import UnitRepository
from bike_assembly.infrastructure.database.models import Unit as SQLUnit
from bike_assembly.shared.exceptions import UnitNotFoundError

from .base import BaseRepository
from .mappers import UnitMapper


class SqlUnitRepository(BaseRepository, UnitRepository):
    """Unit registry backed by the ``units`` table."""

    def get(self, unit_id: int) -> Unit:
        with self._storage_errors("get_unit"):
            row = self.session.get(SQLUnit, unit_id)
        if row is None:
            raise UnitNotFoundError(unit_id)
        return UnitMapper.sql_to_domain(row)

    def list(self) -> list[Unit]:
        with self._storage_errors("list_units"):
            rows = self.session.exec(select(SQLUnit).order_by(SQLUnit.id)).all()
        return [UnitMapper.sql_to_domain(row) for row in rows]

    def add(self, unit: Unit) -> Unit:
        with self._storage_errors("add_unit"):
            row = UnitMapper.domain_to_sql(unit)
            self.session.add(row)
            self.session.flush()
            self.session.refresh(row)
        return UnitMapper.sql_to_domain(row)
