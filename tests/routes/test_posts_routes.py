"""HTTP tests for marketplace post endpoints."""

from collections.abc import Callable
from io import BytesIO
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient

from app.errors import AlreadyPurchasedError, AlreadySavedError
from app.models import CommentDB, PostDB, PurchaseDB, SavedPostDB, UserDB
from app.services.storage import StoredMedia

HeadersFor = Callable[[UserDB], dict[str, str]]


@pytest.fixture
def seeded(
    users_by_id: dict[UUID, UserDB],
    regular_user: UserDB,
    manager_user: UserDB,
    admin_user: UserDB,
) -> dict[UUID, UserDB]:
    for user in (regular_user, manager_user, admin_user):
        users_by_id[user.id] = user
    return users_by_id


@pytest.fixture
def posts(post_repo: MagicMock) -> dict[UUID, PostDB]:
    """Registry backing ``post_repo.get_by_id``."""
    registry: dict[UUID, PostDB] = {}

    async def _get(post_id: UUID) -> PostDB | None:
        return registry.get(post_id)

    post_repo.get_by_id.side_effect = _get
    return registry


@pytest.fixture
def author(make_user: Callable[..., UserDB], users_by_id: dict[UUID, UserDB]) -> UserDB:
    user = make_user("user", name="Author")
    users_by_id[user.id] = user
    return user


class TestBrowse:
    @pytest.mark.asyncio
    async def test_list_is_public_and_paginated(
        self,
        client: AsyncClient,
        post_repo: MagicMock,
        author: UserDB,
        make_post: Callable[..., PostDB],
    ) -> None:
        post_repo.list_posts.return_value = ([make_post(author)], 11)

        response = await client.get("/posts?page=2&limit=5&category=nature&tags=Sunset,%20sea")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 11
        assert body["page"] == 2
        assert len(body["posts"]) == 1
        post_repo.list_posts.assert_awaited_once_with(
            skip=5,
            limit=5,
            category="nature",
            tags=["sunset", "sea"],
        )

    @pytest.mark.asyncio
    async def test_get_missing_post(self, client: AsyncClient, posts: dict) -> None:
        response = await client.get(f"/posts/{uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"success": False, "msg": "Post not found"}


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_with_image(
        self,
        client: AsyncClient,
        seeded: dict,
        regular_user: UserDB,
        post_repo: MagicMock,
        media: MagicMock,
        headers_for: HeadersFor,
        valid_jpeg_bytes: bytes,
    ) -> None:
        post_repo.create = AsyncMock(side_effect=lambda post: post)
        media.upload_post_image = AsyncMock(
            return_value=StoredMedia(url="/uploads/posts/p/1.jpg", public_id="posts/p/1.jpg"),
        )

        response = await client.post(
            "/posts",
            data={"title": "  Sunset  ", "price": "4.5", "category": "nature", "tags": "Sunset, sea,sunset"},
            files={"file": ("sunset.jpg", BytesIO(valid_jpeg_bytes), "image/jpeg")},
            headers=headers_for(regular_user),
        )

        assert response.status_code == 201
        post = response.json()["post"]
        assert post["title"] == "Sunset"
        assert post["price"] == 4.5
        assert post["tags"] == ["sunset", "sea"]
        assert post["image_url"] == "/uploads/posts/p/1.jpg"
        assert post["author_id"] == str(regular_user.id)

    @pytest.mark.asyncio
    async def test_negative_price_rejected(
        self,
        client: AsyncClient,
        seeded: dict,
        regular_user: UserDB,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.post(
            "/posts",
            data={"title": "Sunset", "price": "-1"},
            headers=headers_for(regular_user),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price", ["inf", "-inf", "nan"])
    async def test_non_finite_price_rejected(
        self,
        client: AsyncClient,
        seeded: dict,
        regular_user: UserDB,
        headers_for: HeadersFor,
        price: str,
    ) -> None:
        response = await client.post(
            "/posts",
            data={"title": "Sunset", "price": price},
            headers=headers_for(regular_user),
        )
        assert response.status_code == 400
        assert response.json()["msg"].startswith("price:")

    @pytest.mark.asyncio
    async def test_blank_title_rejected(
        self,
        client: AsyncClient,
        seeded: dict,
        regular_user: UserDB,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.post("/posts", data={"title": "   "}, headers=headers_for(regular_user))
        assert response.status_code == 400
        assert response.json()["msg"] == "Title is required"

    @pytest.mark.asyncio
    async def test_create_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.post("/posts", data={"title": "Sunset"})
        assert response.status_code == 401


class TestDelete:
    @pytest.mark.asyncio
    async def test_non_owner_cannot_delete(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        manager_user: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author)
        posts[post.id] = post

        response = await client.delete(f"/posts/{post.id}", headers=headers_for(manager_user))

        assert response.status_code == 403
        assert response.json()["msg"] == "Not authorized to modify this resource"
        post_repo.delete_post.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("who", ["owner", "admin"])
    async def test_owner_or_admin_deletes(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        admin_user: UserDB,
        post_repo: MagicMock,
        media: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
        who: str,
    ) -> None:
        post = make_post(author)
        posts[post.id] = post
        caller = author if who == "owner" else admin_user

        response = await client.delete(f"/posts/{post.id}", headers=headers_for(caller))

        assert response.status_code == 200
        post_repo.delete_post.assert_awaited_once_with(post)
        media.delete.assert_awaited_once_with("posts/x/image.jpg")

    @pytest.mark.asyncio
    async def test_delete_missing_post(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict,
        admin_user: UserDB,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.delete(f"/posts/{uuid4()}", headers=headers_for(admin_user))
        assert response.status_code == 404


class TestUpdateAndApprove:
    @pytest.mark.asyncio
    async def test_owner_updates(
        self,
        client: AsyncClient,
        posts: dict[UUID, PostDB],
        author: UserDB,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author)
        posts[post.id] = post
        response = await client.put(
            f"/posts/{post.id}",
            json={"title": "Dawn", "price": 2},
            headers=headers_for(author),
        )
        assert response.status_code == 200
        assert response.json()["post"]["title"] == "Dawn"
        assert post.price == 2

    @pytest.mark.asyncio
    async def test_update_rejects_infinite_price(
        self,
        client: AsyncClient,
        posts: dict[UUID, PostDB],
        author: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author, price=4)
        posts[post.id] = post
        response = await client.put(
            f"/posts/{post.id}",
            content=b'{"price": Infinity}',
            headers={**headers_for(author), "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert post.price == 4
        post_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_only_manager_approves(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        manager_user: UserDB,
        admin_user: UserDB,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author)
        posts[post.id] = post

        denied = await client.put(f"/posts/{post.id}/approve", headers=headers_for(admin_user))
        assert denied.status_code == 403

        approved = await client.put(f"/posts/{post.id}/approve", headers=headers_for(manager_user))
        assert approved.status_code == 200
        assert approved.json()["post"]["approved"] is True


class TestPurchaseAndDownload:
    @pytest.mark.asyncio
    async def test_purchase_paid_post(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        post_repo: MagicMock,
        user_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author, price=9.99)
        posts[post.id] = post
        post_repo.add_purchase = AsyncMock(side_effect=lambda purchase: purchase)

        response = await client.post(f"/posts/{post.id}/purchase", headers=headers_for(regular_user))

        assert response.status_code == 200
        assert response.json()["price_paid"] == 9.99
        user_repo.credit_sale.assert_awaited_once_with(author.id, 9.99)

    @pytest.mark.asyncio
    async def test_purchase_free_post(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author, price=0)
        posts[post.id] = post
        response = await client.post(f"/posts/{post.id}/purchase", headers=headers_for(regular_user))
        assert response.status_code == 400
        assert response.json()["msg"] == "This post is free to download"

    @pytest.mark.asyncio
    async def test_purchase_twice(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author, price=3)
        posts[post.id] = post
        post_repo.get_purchase.return_value = PurchaseDB(user_id=regular_user.id, post_id=post.id, price_paid=3)

        response = await client.post(f"/posts/{post.id}/purchase", headers=headers_for(regular_user))

        assert response.status_code == 400
        assert response.json()["msg"] == "You already purchased this post"

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_purchase(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        post_repo: MagicMock,
        user_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author, price=3)
        posts[post.id] = post
        post_repo.add_purchase = AsyncMock(side_effect=AlreadyPurchasedError())

        response = await client.post(f"/posts/{post.id}/purchase", headers=headers_for(regular_user))

        assert response.status_code == 400
        assert response.json() == {"success": False, "msg": "You already purchased this post"}
        user_repo.credit_sale.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_admin_cannot_purchase(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        admin_user: UserDB,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author, price=3)
        posts[post.id] = post
        response = await client.post(f"/posts/{post.id}/purchase", headers=headers_for(admin_user))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_download_paid_post_requires_purchase(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        admin_user: UserDB,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author, price=5)
        posts[post.id] = post

        buyer = await client.get(f"/posts/{post.id}/download", headers=headers_for(regular_user))
        assert buyer.status_code == 403
        assert buyer.json()["msg"] == "You must purchase this post first"

        for exempt in (author, admin_user):
            response = await client.get(f"/posts/{post.id}/download", headers=headers_for(exempt))
            assert response.status_code == 200
            assert response.json()["url"] == post.image_url


class TestEngagement:
    @pytest.mark.asyncio
    async def test_like(
        self,
        client: AsyncClient,
        seeded: dict,
        regular_user: UserDB,
        post_repo: MagicMock,
        headers_for: HeadersFor,
    ) -> None:
        post_repo.increment_likes.return_value = 4
        response = await client.post(f"/posts/{uuid4()}/like", headers=headers_for(regular_user))
        assert response.status_code == 200
        assert response.json()["likes"] == 4

    @pytest.mark.asyncio
    async def test_like_missing_post(
        self,
        client: AsyncClient,
        seeded: dict,
        regular_user: UserDB,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.post(f"/posts/{uuid4()}/like", headers=headers_for(regular_user))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_comment(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author)
        posts[post.id] = post
        post_repo.add_comment = AsyncMock(side_effect=lambda comment: comment)

        response = await client.post(
            f"/posts/{post.id}/comment",
            json={"text": "Lovely"},
            headers=headers_for(regular_user),
        )
        empty = await client.post(
            f"/posts/{post.id}/comment",
            json={"text": "   "},
            headers=headers_for(regular_user),
        )

        assert response.status_code == 201
        assert response.json()["comment"]["text"] == "Lovely"
        assert empty.status_code == 400
        assert isinstance(post_repo.add_comment.await_args.args[0], CommentDB)

    @pytest.mark.asyncio
    async def test_save_toggles(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author)
        posts[post.id] = post

        first = await client.post(f"/posts/{post.id}/save", headers=headers_for(regular_user))
        assert first.json()["saved"] is True
        post_repo.save.assert_awaited_once_with(regular_user.id, post.id)

        post_repo.get_saved.return_value = SavedPostDB(user_id=regular_user.id, post_id=post.id)
        second = await client.post(f"/posts/{post.id}/save", headers=headers_for(regular_user))
        assert second.json()["saved"] is False
        post_repo.unsave.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_save(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author)
        posts[post.id] = post
        post_repo.save.side_effect = AlreadySavedError()

        response = await client.post(f"/posts/{post.id}/save", headers=headers_for(regular_user))

        assert response.status_code == 400
        assert response.json() == {"success": False, "msg": "Post already saved"}

    @pytest.mark.asyncio
    async def test_list_comments_is_public(
        self,
        client: AsyncClient,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
    ) -> None:
        post = make_post(author)
        posts[post.id] = post
        comments = [
            CommentDB(post_id=post.id, user_id=regular_user.id, text="First"),
            CommentDB(post_id=post.id, user_id=author.id, text="Thanks"),
        ]
        post_repo.list_comments.return_value = (comments, 7)

        response = await client.get(f"/posts/{post.id}/comments?page=3&limit=2")

        assert response.status_code == 200
        body = response.json()
        assert [comment["text"] for comment in body["comments"]] == ["First", "Thanks"]
        assert body["total"] == 7
        assert body["page"] == 3
        post_repo.list_comments.assert_awaited_once_with(post.id, skip=4, limit=2)

    @pytest.mark.asyncio
    async def test_list_comments_missing_post(self, client: AsyncClient, posts: dict) -> None:
        response = await client.get(f"/posts/{uuid4()}/comments")
        assert response.status_code == 404
        assert response.json()["msg"] == "Post not found"


class TestRating:
    @pytest.mark.asyncio
    async def test_rate_returns_summary(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
    ) -> None:
        post = make_post(author)
        posts[post.id] = post
        post_repo.rating_summary.return_value = (4.5, 2)

        response = await client.post(
            f"/posts/{post.id}/rate",
            json={"value": 5},
            headers=headers_for(regular_user),
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "msg": "Rating saved",
            "average": 4.5,
            "count": 2,
            "your_rating": 5,
        }
        post_repo.upsert_rating.assert_awaited_once_with(regular_user.id, post.id, 5)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, 6, "five"])
    async def test_out_of_range_value_rejected(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict[UUID, PostDB],
        author: UserDB,
        regular_user: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
        headers_for: HeadersFor,
        value: object,
    ) -> None:
        post = make_post(author)
        posts[post.id] = post

        response = await client.post(
            f"/posts/{post.id}/rate",
            json={"value": value},
            headers=headers_for(regular_user),
        )

        assert response.status_code == 400
        post_repo.upsert_rating.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rate_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.post(f"/posts/{uuid4()}/rate", json={"value": 3})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_rate_missing_post(
        self,
        client: AsyncClient,
        seeded: dict,
        posts: dict,
        regular_user: UserDB,
        post_repo: MagicMock,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.post(
            f"/posts/{uuid4()}/rate",
            json={"value": 3},
            headers=headers_for(regular_user),
        )
        assert response.status_code == 404
        post_repo.upsert_rating.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rating_summary_is_public(
        self,
        client: AsyncClient,
        posts: dict[UUID, PostDB],
        author: UserDB,
        post_repo: MagicMock,
        make_post: Callable[..., PostDB],
    ) -> None:
        post = make_post(author)
        posts[post.id] = post
        post_repo.rating_summary.return_value = (3.67, 3)

        response = await client.get(f"/posts/{post.id}/rating")

        assert response.status_code == 200
        body = response.json()
        assert body["average"] == 3.67
        assert body["count"] == 3
        assert body["your_rating"] is None
