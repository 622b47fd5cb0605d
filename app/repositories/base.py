"""Shared persistence helpers for the marketplace repositories."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from app.errors.database import DatabaseConnectionError, DatabaseError, DuplicateEntryError

UNIQUE_VIOLATION_MARKERS = ("unique", "duplicate")


class BaseRepository[ModelT: SQLModel]:
    """
    Primary-key CRUD shared by accounts and posts.

    Repositories only flush. The request-scoped session from
    ``app.db.transaction`` owns the commit, so a service can chain several
    writes (record a purchase, credit the seller) and have them land
    together.

    Attributes:
        model: SQLModel table class handled by the repository.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, record_id: UUID) -> ModelT | None:
        """
        Load one row by primary key.

        Args:
            record_id: Row UUID

        Returns:
            ModelT | None: The row, or None when it does not exist
        """
        return await self.session.get(self.model, record_id)

    async def update(self, record: ModelT, changes: Mapping[str, Any]) -> ModelT:
        """
        Apply ``changes`` to a loaded row and stamp ``updated_at``.

        Args:
            record: Row previously loaded through this repository
            changes: Column name to new value

        Returns:
            ModelT: The row as stored after the flush
        """
        for column, value in changes.items():
            setattr(record, column, value)
        if hasattr(record, "updated_at"):
            record.updated_at = datetime.now(tz=UTC)
        return await self._save(record)

    async def delete(self, record_id: UUID) -> bool:
        """
        Delete a row by primary key.

        Returns:
            bool: False when there was nothing to delete
        """
        record = await self.get_by_id(record_id)
        if record is None:
            return False

        await self.session.delete(record)
        await self.session.flush()
        return True

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar() or 0

    async def _save[RecordT: SQLModel](self, record: RecordT) -> RecordT:
        """
        Flush ``record`` and reload server-side defaults.

        Raises:
            DuplicateEntryError: If a unique constraint rejects the row
            DatabaseError: If another integrity rule rejects the row
            DatabaseConnectionError: If the database cannot take the write
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        except IntegrityError as e:
            await self.session.rollback()
            reason = str(e.orig or e).lower()
            if any(marker in reason for marker in UNIQUE_VIOLATION_MARKERS):
                raise DuplicateEntryError from e
            raise DatabaseError(detail="Database integrity error") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseConnectionError(detail="Failed to save record") from e
        return record

    async def _exists(self, column_name: str, value: object, exclude_id: UUID | None = None) -> bool:
        """Return True when another row already holds ``value`` in ``column_name``."""
        column = getattr(self.model, column_name)
        statement = select(1).where(column == value)
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)  # type: ignore[attr-defined]

        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none() is not None
