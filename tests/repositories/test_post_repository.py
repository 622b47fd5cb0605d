"""Tests for PostRepository writes over a mocked AsyncSession."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError

from app.errors import AlreadyPurchasedError, AlreadySavedError, DatabaseConnectionError
from app.models import CommentDB, PurchaseDB, SavedPostDB
from app.repositories import PostRepository


def unique_violation() -> IntegrityError:
    return IntegrityError(
        "INSERT",
        {},
        Exception('duplicate key value violates unique constraint "uq_purchases_user_post"'),
    )


@pytest.fixture
def session() -> MagicMock:
    mock = MagicMock()
    mock.flush = AsyncMock()
    mock.refresh = AsyncMock()
    mock.rollback = AsyncMock()
    mock.execute = AsyncMock()
    return mock


@pytest.fixture
def repo(session: MagicMock) -> PostRepository:
    return PostRepository(session)


@pytest.mark.asyncio
async def test_add_purchase_flushes_and_refreshes(repo: PostRepository, session: MagicMock) -> None:
    purchase = PurchaseDB(user_id=uuid4(), post_id=uuid4(), price_paid=3)

    assert await repo.add_purchase(purchase) is purchase

    session.add.assert_called_once_with(purchase)
    session.flush.assert_awaited_once()
    session.refresh.assert_awaited_once_with(purchase)


@pytest.mark.asyncio
async def test_duplicate_purchase_becomes_domain_error(repo: PostRepository, session: MagicMock) -> None:
    session.flush.side_effect = unique_violation()

    with pytest.raises(AlreadyPurchasedError):
        await repo.add_purchase(PurchaseDB(user_id=uuid4(), post_id=uuid4(), price_paid=3))

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_duplicate_save_becomes_domain_error(repo: PostRepository, session: MagicMock) -> None:
    session.flush.side_effect = unique_violation()

    with pytest.raises(AlreadySavedError, match="Post already saved"):
        await repo.save(uuid4(), uuid4())

    assert isinstance(session.add.call_args.args[0], SavedPostDB)
    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_comment_write_failure_is_wrapped(repo: PostRepository, session: MagicMock) -> None:
    session.flush.side_effect = OperationalError("INSERT", {}, Exception("connection reset"))

    with pytest.raises(DatabaseConnectionError):
        await repo.add_comment(CommentDB(post_id=uuid4(), user_id=uuid4(), text="Nice"))

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_rating_summary_rounds_and_defaults(repo: PostRepository, session: MagicMock) -> None:
    rated = MagicMock()
    rated.one.return_value = (3.6666, 3)
    unrated = MagicMock()
    unrated.one.return_value = (None, 0)
    session.execute.side_effect = [rated, unrated]

    assert await repo.rating_summary(uuid4()) == (3.67, 3)
    assert await repo.rating_summary(uuid4()) == (0.0, 0)


@pytest.mark.asyncio
async def test_upsert_rating_targets_unique_constraint(repo: PostRepository, session: MagicMock) -> None:
    await repo.upsert_rating(uuid4(), uuid4(), 4)

    statement = session.execute.await_args.args[0]
    sql = str(statement.compile(dialect=postgresql.dialect()))
    assert "ON CONFLICT ON CONSTRAINT uq_post_ratings_user_post DO UPDATE" in sql
