"""User repository for database operations."""

from typing import cast
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.sql.expression import ColumnElement

from app.errors import DuplicateEntryError, DuplicateIdentityError
from app.models.user import UserDB
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for User database operations.

    Emails are stored already normalized (trimmed, lower-cased) by the
    request schemas, so lookups compare them verbatim.
    """

    model = UserDB

    async def create(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: str = "user",
        bio: str | None = None,
    ) -> UserDB:
        """
        Insert a new account.

        Raises:
            DuplicateIdentityError: If the email is already registered
        """
        db_user = UserDB(
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            bio=bio,
        )
        try:
            return await self._save(db_user)
        except DuplicateEntryError as e:
            raise DuplicateIdentityError from e

    async def get_by_email(self, email: str) -> UserDB | None:
        """
        Get user by email.

        Args:
            email: Normalized email to search for

        Returns:
            UserDB | None: User if found, None otherwise
        """
        result = await self.session.execute(
            select(UserDB).where(cast(ColumnElement[bool], UserDB.email == email)),
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str, exclude_id: UUID | None = None) -> bool:
        return await self._exists("email", email, exclude_id=exclude_id)

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 10,
    ) -> list[UserDB]:
        """
        Get all users with pagination, oldest first.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            list[UserDB]: List of users
        """
        result = await self.session.execute(
            select(UserDB).order_by(UserDB.created_at).offset(skip).limit(limit),
        )
        return list(result.scalars().all())

    async def credit_sale(self, seller_id: UUID, amount: float) -> None:
        """Add ``amount`` to the seller's earnings and count one sale."""
        await self.session.execute(
            update(UserDB)
            .where(cast(ColumnElement[bool], UserDB.id == seller_id))
            .values(
                earnings=UserDB.earnings + amount,
                total_sales=UserDB.total_sales + 1,
            ),
        )
