"""
Base repository implementation shared by the SQL repositories.

Every repository works inside a session owned by a unit of work: it flushes
but never commits, and it converts SQLAlchemy failures into ``StorageError``.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from bike_assembly.shared.exceptions import StorageError


class BaseRepository:
    """Holds the session and the storage error translation."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session owned by the caller
        """
        self.session = session

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        """Re-raise SQLAlchemy failures as StorageError."""
        try:
            yield
        except SQLAlchemyError as e:
            raise StorageError(operation, e) from e
