"""Post repository: posts plus their comments, purchases, saves and ratings."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import delete, desc, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.sql.expression import ColumnElement

from app.errors.database import DuplicateEntryError
from app.errors.resource import AlreadyPurchasedError, AlreadySavedError
from app.models.post import CommentDB, PostDB, PurchaseDB, RatingDB, SavedPostDB
from app.monitoring import get_logger
from app.repositories.base import BaseRepository

logger = get_logger(__name__)


class PostRepository(BaseRepository[PostDB]):
    """Repository for Post database operations."""

    model = PostDB

    async def create(self, post: PostDB) -> PostDB:
        return await self._save(post)

    async def list_posts(
        self,
        skip: int = 0,
        limit: int = 10,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> tuple[list[PostDB], int]:
        """
        Get one page of posts, newest first, with optional filters.

        A post matches ``tags`` when it carries any of them.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            category: Optional exact category filter
            tags: Optional tag filter

        Returns:
            tuple[list[PostDB], int]: The page and the total number of matches
        """
        conditions: list[ColumnElement[bool]] = []
        if category:
            conditions.append(cast(ColumnElement[bool], PostDB.category == category))
        if tags:
            conditions.append(
                or_(*[func.jsonb_exists(PostDB.tags, tag) for tag in tags]),
            )

        query = select(PostDB).where(*conditions)
        query = query.order_by(desc(PostDB.created_at)).offset(skip).limit(limit)
        result = await self.session.execute(query)

        total_result = await self.session.execute(
            select(func.count()).select_from(PostDB).where(*conditions),
        )
        return list(result.scalars().all()), total_result.scalar() or 0

    async def delete_post(self, post: PostDB) -> None:
        await self.session.delete(post)
        await self.session.flush()

    async def delete_many_by_owner(self, owner_id: UUID) -> list[str]:
        """
        Delete every post of ``owner_id``.

        Returns:
            list[str]: Storage identifiers of the deleted posts' images
        """
        result = await self.session.execute(
            delete(PostDB)
            .where(cast(ColumnElement[bool], PostDB.author_id == owner_id))
            .returning(PostDB.image_public_id),
        )
        public_ids = [public_id for public_id in result.scalars().all() if public_id]
        logger.info("Deleted posts of owner", owner_id=str(owner_id), images=len(public_ids))
        return public_ids

    async def increment_likes(self, post_id: UUID) -> int | None:
        """Atomically add one like; returns the new count or None if missing."""
        result = await self.session.execute(
            update(PostDB)
            .where(cast(ColumnElement[bool], PostDB.id == post_id))
            .values(likes=PostDB.likes + 1)
            .returning(PostDB.likes),
        )
        return result.scalar_one_or_none()

    async def add_comment(self, comment: CommentDB) -> CommentDB:
        return await self._save(comment)

    async def list_comments(
        self,
        post_id: UUID,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[CommentDB], int]:
        """
        Get one page of a post's comments, oldest first.

        Args:
            post_id: Post the comments belong to
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            tuple[list[CommentDB], int]: The page and the post's comment count
        """
        condition = cast(ColumnElement[bool], CommentDB.post_id == post_id)
        result = await self.session.execute(
            select(CommentDB).where(condition).order_by(CommentDB.created_at).offset(skip).limit(limit),
        )
        total_result = await self.session.execute(
            select(func.count()).select_from(CommentDB).where(condition),
        )
        return list(result.scalars().all()), total_result.scalar() or 0

    async def get_purchase(self, user_id: UUID, post_id: UUID) -> PurchaseDB | None:
        result = await self.session.execute(
            select(PurchaseDB).where(
                cast(ColumnElement[bool], PurchaseDB.user_id == user_id),
                cast(ColumnElement[bool], PurchaseDB.post_id == post_id),
            ),
        )
        return result.scalar_one_or_none()

    async def add_purchase(self, purchase: PurchaseDB) -> PurchaseDB:
        """
        Record a purchase.

        Raises:
            AlreadyPurchasedError: If a concurrent request recorded the same purchase
        """
        try:
            return await self._save(purchase)
        except DuplicateEntryError as e:
            raise AlreadyPurchasedError from e

    async def list_purchases(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[tuple[PurchaseDB, PostDB]], int]:
        """
        Get one page of an account's purchases with their posts, newest first.

        Returns:
            tuple[list[tuple[PurchaseDB, PostDB]], int]: The page and the purchase count
        """
        condition = cast(ColumnElement[bool], PurchaseDB.user_id == user_id)
        result = await self.session.execute(
            select(PurchaseDB, PostDB)
            .join(PostDB, cast(ColumnElement[bool], PostDB.id == PurchaseDB.post_id))
            .where(condition)
            .order_by(desc(PurchaseDB.purchased_at))
            .offset(skip)
            .limit(limit),
        )
        total_result = await self.session.execute(
            select(func.count()).select_from(PurchaseDB).where(condition),
        )
        rows = [(purchase, post) for purchase, post in result.all()]
        return rows, total_result.scalar() or 0

    async def get_saved(self, user_id: UUID, post_id: UUID) -> SavedPostDB | None:
        return await self.session.get(SavedPostDB, (user_id, post_id))

    async def save(self, user_id: UUID, post_id: UUID) -> None:
        """
        Bookmark a post for an account.

        Raises:
            AlreadySavedError: If a concurrent request saved the same post
        """
        try:
            await self._save(SavedPostDB(user_id=user_id, post_id=post_id))
        except DuplicateEntryError as e:
            raise AlreadySavedError from e

    async def unsave(self, saved: SavedPostDB) -> None:
        await self.session.delete(saved)
        await self.session.flush()

    async def list_saved(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[PostDB], int]:
        """Get one page of the posts an account saved, most recently saved first."""
        condition = cast(ColumnElement[bool], SavedPostDB.user_id == user_id)
        result = await self.session.execute(
            select(PostDB)
            .join(SavedPostDB, cast(ColumnElement[bool], SavedPostDB.post_id == PostDB.id))
            .where(condition)
            .order_by(desc(SavedPostDB.saved_at))
            .offset(skip)
            .limit(limit),
        )
        total_result = await self.session.execute(
            select(func.count()).select_from(SavedPostDB).where(condition),
        )
        return list(result.scalars().all()), total_result.scalar() or 0

    async def upsert_rating(self, user_id: UUID, post_id: UUID, value: int) -> None:
        """Insert the account's rating of a post, or replace its value."""
        # Core inserts skip the model default factories
        statement = insert(RatingDB).values(
            id=uuid4(),
            user_id=user_id,
            post_id=post_id,
            value=value,
            created_at=datetime.now(tz=UTC),
        )
        statement = statement.on_conflict_do_update(
            constraint="uq_post_ratings_user_post",
            set_={"value": statement.excluded.value, "updated_at": func.now()},
        )
        await self.session.execute(statement)

    async def rating_summary(self, post_id: UUID) -> tuple[float, int]:
        """
        Average and number of ratings a post received.

        Returns:
            tuple[float, int]: Average rounded to two decimals (0.0 when unrated) and count
        """
        result = await self.session.execute(
            select(func.avg(RatingDB.value), func.count()).where(
                cast(ColumnElement[bool], RatingDB.post_id == post_id),
            ),
        )
        average, count = result.one()
        return round(float(average or 0), 2), count or 0

