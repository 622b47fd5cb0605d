"""Tests for PostService purchase, download, listing and rating rules."""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError as SchemaValidationError

from app.errors import DatabaseError, FreePostError, NotFoundError, PurchaseRequiredError
from app.models import PostDB, PurchaseDB, UserDB
from app.schemas import PostUpdate
from app.services import PostService
from app.services.storage import StoredMedia


@pytest.fixture
def service(post_repo: MagicMock, user_repo: MagicMock, media: MagicMock) -> PostService:
    return PostService(post_repo, user_repo, media)


@pytest.mark.asyncio
async def test_purchase_missing_post(service: PostService, regular_user: UserDB) -> None:
    with pytest.raises(NotFoundError, match="Post not found"):
        await service.purchase(regular_user, PostDB(author_id=regular_user.id, title="x").id)


@pytest.mark.asyncio
async def test_purchase_free_post_does_not_write(
    service: PostService,
    post_repo: MagicMock,
    regular_user: UserDB,
    make_user: Callable[..., UserDB],
    make_post: Callable[..., PostDB],
) -> None:
    post_repo.get_by_id.return_value = make_post(make_user("user"), price=0)
    post_repo.add_purchase = AsyncMock()
    with pytest.raises(FreePostError):
        await service.purchase(regular_user, post_repo.get_by_id.return_value.id)
    post_repo.add_purchase.assert_not_called()


@pytest.mark.asyncio
async def test_purchase_records_price_and_credits_seller(
    service: PostService,
    post_repo: MagicMock,
    user_repo: MagicMock,
    regular_user: UserDB,
    make_user: Callable[..., UserDB],
    make_post: Callable[..., PostDB],
) -> None:
    seller = make_user("user")
    post = make_post(seller, price=12.5)
    post_repo.get_by_id.return_value = post
    post_repo.add_purchase = AsyncMock(side_effect=lambda purchase: purchase)

    _, purchase = await service.purchase(regular_user, post.id)

    assert isinstance(purchase, PurchaseDB)
    assert purchase.price_paid == 12.5
    assert purchase.user_id == regular_user.id
    user_repo.credit_sale.assert_awaited_once_with(seller.id, 12.5)


@pytest.mark.asyncio
async def test_download_free_post_is_open(
    service: PostService,
    post_repo: MagicMock,
    regular_user: UserDB,
    make_user: Callable[..., UserDB],
    make_post: Callable[..., PostDB],
) -> None:
    post = make_post(make_user("user"), price=0)
    post_repo.get_by_id.return_value = post
    assert await service.download_url(regular_user, post.id) == post.image_url
    post_repo.get_purchase.assert_not_called()


@pytest.mark.asyncio
async def test_download_after_purchase(
    service: PostService,
    post_repo: MagicMock,
    regular_user: UserDB,
    make_user: Callable[..., UserDB],
    make_post: Callable[..., PostDB],
) -> None:
    post = make_post(make_user("user"), price=2)
    post_repo.get_by_id.return_value = post

    with pytest.raises(PurchaseRequiredError):
        await service.download_url(regular_user, post.id)

    post_repo.get_purchase.return_value = PurchaseDB(user_id=regular_user.id, post_id=post.id, price_paid=2)
    assert await service.download_url(regular_user, post.id) == post.image_url


@pytest.mark.asyncio
async def test_create_removes_image_when_insert_fails(
    service: PostService,
    post_repo: MagicMock,
    media: MagicMock,
    regular_user: UserDB,
) -> None:
    media.upload_post_image = AsyncMock(return_value=StoredMedia(url="/u/p.jpg", public_id="posts/p.jpg"))
    post_repo.create = AsyncMock(side_effect=DatabaseError)

    with pytest.raises(DatabaseError):
        await service.create_post(regular_user, title="Sunset", file=MagicMock())

    media.delete.assert_awaited_once_with("posts/p.jpg")


@pytest.mark.parametrize("price", [float("inf"), float("-inf"), float("nan")])
def test_update_schema_rejects_non_finite_price(price: float) -> None:
    with pytest.raises(SchemaValidationError):
        PostUpdate(price=price)


@pytest.mark.asyncio
async def test_rate_upserts_then_summarizes(
    service: PostService,
    post_repo: MagicMock,
    regular_user: UserDB,
    make_user: Callable[..., UserDB],
    make_post: Callable[..., PostDB],
) -> None:
    post = make_post(make_user("user"))
    post_repo.get_by_id.return_value = post
    post_repo.rating_summary.return_value = (4.0, 3)

    assert await service.rate(regular_user, post.id, 4) == (4.0, 3)
    post_repo.upsert_rating.assert_awaited_once_with(regular_user.id, post.id, 4)
    post_repo.rating_summary.assert_awaited_once_with(post.id)


@pytest.mark.asyncio
async def test_rate_missing_post(service: PostService, post_repo: MagicMock, regular_user: UserDB) -> None:
    with pytest.raises(NotFoundError):
        await service.rate(regular_user, PostDB(author_id=regular_user.id, title="x").id, 3)
    post_repo.upsert_rating.assert_not_awaited()


@pytest.mark.asyncio
async def test_listings_translate_page_to_offset(
    service: PostService,
    post_repo: MagicMock,
    regular_user: UserDB,
    make_post: Callable[..., PostDB],
) -> None:
    post = make_post(regular_user)
    post_repo.get_by_id.return_value = post

    await service.list_comments(post.id, page=2, limit=25)
    await service.saved_posts(regular_user, page=3, limit=10)
    await service.purchases(regular_user)

    post_repo.list_comments.assert_awaited_once_with(post.id, skip=25, limit=25)
    post_repo.list_saved.assert_awaited_once_with(regular_user.id, skip=20, limit=10)
    post_repo.list_purchases.assert_awaited_once_with(regular_user.id, skip=0, limit=20)
