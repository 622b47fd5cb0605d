"""Marketplace posts: publishing, browsing, purchases, engagement and ratings."""

from uuid import UUID, uuid4

from fastapi import UploadFile

from app.errors import (
    AlreadyPurchasedError,
    FreePostError,
    NotFoundError,
    PurchaseRequiredError,
    ValidationError,
)
from app.models import CommentDB, PostDB, PurchaseDB, UserDB
from app.monitoring import get_logger
from app.rabc import assert_can_mutate, is_owner_or_admin
from app.repositories import PostRepository, UserRepository
from app.schemas.post import PostUpdate
from app.services.media import MediaService

logger = get_logger(__name__)


class PostService:
    """Service for post lifecycle and buyer interactions."""

    def __init__(
        self,
        post_repo: PostRepository,
        user_repo: UserRepository,
        media: MediaService | None = None,
    ) -> None:
        self.post_repo = post_repo
        self.user_repo = user_repo
        self._media = media

    @property
    def media(self) -> MediaService:
        if self._media is None:
            self._media = MediaService()
        return self._media

    async def get_post(self, post_id: UUID) -> PostDB:
        post = await self.post_repo.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post")
        return post

    async def create_post(
        self,
        author: UserDB,
        *,
        title: str,
        price: float = 0.0,
        category: str | None = None,
        tags: list[str] | None = None,
        file: UploadFile | None = None,
    ) -> PostDB:
        """
        Publish a post, uploading its image first when one is attached.

        If the row cannot be written the uploaded image is removed again.

        Raises:
            ValidationError: If the title is blank
        """
        title = title.strip()
        if not title:
            raise ValidationError("Title is required")

        post = PostDB(
            id=uuid4(),
            author_id=author.id,
            title=title,
            price=price,
            category=category or None,
            tags=tags or [],
        )
        if file is not None:
            stored = await self.media.upload_post_image(str(post.id), file)
            post.image_url = stored.url
            post.image_public_id = stored.public_id

        try:
            created = await self.post_repo.create(post)
        except Exception:
            await self.media.delete(post.image_public_id)
            raise

        logger.info("Post created", post_id=str(created.id), author_id=str(author.id))
        return created

    async def list_posts(
        self,
        page: int = 1,
        limit: int = 10,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> tuple[list[PostDB], int]:
        skip = (page - 1) * limit
        return await self.post_repo.list_posts(skip=skip, limit=limit, category=category, tags=tags)

    async def update_post(self, caller: UserDB, post_id: UUID, data: PostUpdate) -> PostDB:
        """
        Edit a post's title, price, category or tags.

        Raises:
            NotFoundError: If the post does not exist
            ForbiddenError: If the caller neither owns the post nor is an admin
        """
        post = await self.get_post(post_id)
        assert_can_mutate(caller, post.author_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return post
        return await self.post_repo.update(post, changes)

    async def approve_post(self, post_id: UUID) -> PostDB:
        post = await self.get_post(post_id)
        return await self.post_repo.update(post, {"approved": True})

    async def delete_post(self, caller: UserDB, post_id: UUID) -> str | None:
        """
        Delete a post.

        Returns:
            str | None: Storage id of the post's image, to remove after commit

        Raises:
            NotFoundError: If the post does not exist
            ForbiddenError: If the caller neither owns the post nor is an admin
        """
        post = await self.get_post(post_id)
        assert_can_mutate(caller, post.author_id)
        public_id = post.image_public_id
        await self.post_repo.delete_post(post)
        logger.info("Post deleted", post_id=str(post_id), by=str(caller.id))
        return public_id

    async def purchase(self, buyer: UserDB, post_id: UUID) -> tuple[PostDB, PurchaseDB]:
        """
        Buy a paid post.

        Payment itself is out of scope; the purchase is recorded at the
        current price and the seller is credited.

        Raises:
            NotFoundError: If the post does not exist
            FreePostError: If the post is free
            AlreadyPurchasedError: If the buyer already owns a purchase of it
        """
        post = await self.get_post(post_id)
        if post.price <= 0:
            raise FreePostError
        if await self.post_repo.get_purchase(buyer.id, post.id) is not None:
            raise AlreadyPurchasedError

        purchase = await self.post_repo.add_purchase(
            PurchaseDB(user_id=buyer.id, post_id=post.id, price_paid=post.price),
        )
        await self.user_repo.credit_sale(post.author_id, post.price)
        logger.info("Post purchased", post_id=str(post.id), buyer_id=str(buyer.id), price=post.price)
        return post, purchase

    async def download_url(self, caller: UserDB, post_id: UUID) -> str | None:
        """
        Return the image URL of a post the caller may download.

        Free posts are open to everyone; paid posts need a purchase unless
        the caller owns the post or is an admin.

        Raises:
            NotFoundError: If the post does not exist
            PurchaseRequiredError: If a paid post was not bought
        """
        post = await self.get_post(post_id)
        if post.price > 0 and not is_owner_or_admin(caller, post.author_id):
            if await self.post_repo.get_purchase(caller.id, post.id) is None:
                raise PurchaseRequiredError
        return post.image_url

    async def like(self, post_id: UUID) -> int:
        likes = await self.post_repo.increment_likes(post_id)
        if likes is None:
            raise NotFoundError("Post")
        return likes

    async def comment(self, caller: UserDB, post_id: UUID, text: str) -> CommentDB:
        post = await self.get_post(post_id)
        return await self.post_repo.add_comment(
            CommentDB(post_id=post.id, user_id=caller.id, text=text),
        )

    async def list_comments(self, post_id: UUID, page: int = 1, limit: int = 20) -> tuple[list[CommentDB], int]:
        """
        One page of a post's comments, oldest first.

        Raises:
            NotFoundError: If the post does not exist
        """
        post = await self.get_post(post_id)
        return await self.post_repo.list_comments(post.id, skip=(page - 1) * limit, limit=limit)

    async def saved_posts(self, caller: UserDB, page: int = 1, limit: int = 20) -> tuple[list[PostDB], int]:
        return await self.post_repo.list_saved(caller.id, skip=(page - 1) * limit, limit=limit)

    async def purchases(
        self,
        caller: UserDB,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[tuple[PurchaseDB, PostDB]], int]:
        return await self.post_repo.list_purchases(caller.id, skip=(page - 1) * limit, limit=limit)

    async def rate(self, caller: UserDB, post_id: UUID, value: int) -> tuple[float, int]:
        """
        Record the caller's star rating of a post, replacing an earlier one.

        Args:
            caller: Account giving the rating
            post_id: Rated post
            value: Stars, already checked to lie between 1 and 5

        Returns:
            tuple[float, int]: The post's new average and number of ratings

        Raises:
            NotFoundError: If the post does not exist
        """
        post = await self.get_post(post_id)
        await self.post_repo.upsert_rating(caller.id, post.id, value)
        average, count = await self.post_repo.rating_summary(post.id)
        logger.info("Post rated", post_id=str(post.id), user_id=str(caller.id), value=value)
        return average, count

    async def rating(self, post_id: UUID) -> tuple[float, int]:
        """
        Average and number of ratings of a post.

        Raises:
            NotFoundError: If the post does not exist
        """
        post = await self.get_post(post_id)
        return await self.post_repo.rating_summary(post.id)

    async def toggle_save(self, caller: UserDB, post_id: UUID) -> bool:
        """
        Save the post for the caller, or unsave it if already saved.

        Returns:
            bool: Whether the post is saved after the call
        """
        post = await self.get_post(post_id)
        saved = await self.post_repo.get_saved(caller.id, post.id)
        if saved is not None:
            await self.post_repo.unsave(saved)
            return False
        await self.post_repo.save(caller.id, post.id)
        return True
