"""SQLModel storage binding: tables, repositories and the unit of work."""

from .unit_of_work import SqlModelUnitOfWork, make_uow_factory

__all__ = ["SqlModelUnitOfWork", "make_uow_factory"]
