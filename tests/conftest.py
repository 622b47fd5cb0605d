# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Must happen before app settings are imported anywhere
os.environ["SECRET_KEY"] = "test-secret-key-for-pytest-only"
os.environ["PASSWORD_SECURITY_LEVEL"] = "low"
os.environ["ENVIRONMENT"] = "development"
os.environ["STORAGE_PROVIDER"] = "local"

from collections.abc import AsyncGenerator, Callable, Mapping  # noqa: E402
from io import BytesIO  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import UUID, uuid4  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402

from app.dependencies import (  # noqa: E402
    get_media_service,
    get_post_repository,
    get_user_repository,
)
from app.main import app  # noqa: E402
from app.managers.rate_limiter import limiter  # noqa: E402
from app.managers.token_manager import create_access_token  # noqa: E402
from app.models import PostDB, UserDB  # noqa: E402
from app.repositories import PostRepository, UserRepository  # noqa: E402
from app.services import MediaService  # noqa: E402

UserFactory = Callable[..., UserDB]
HeadersFor = Callable[[UserDB], dict[str, str]]


@pytest.fixture
def make_user() -> UserFactory:
    """Build in-memory accounts; nothing touches a database."""

    def _make(
        role: str = "user",
        *,
        name: str = "Test User",
        email: str | None = None,
        suspended: bool = False,
        user_id: UUID | None = None,
    ) -> UserDB:
        uid = user_id or uuid4()
        return UserDB(
            id=uid,
            name=name,
            email=email or f"{role}-{uid.hex[:8]}@example.com",
            password_hash="$argon2id$v=19$m=8192,t=1,p=1$c29tZXNhbHQ$somehash",
            role=role,
            suspended=suspended,
        )

    return _make


@pytest.fixture
def regular_user(make_user: UserFactory) -> UserDB:
    return make_user("user", name="Regular")


@pytest.fixture
def manager_user(make_user: UserFactory) -> UserDB:
    return make_user("manager", name="Manager")


@pytest.fixture
def admin_user(make_user: UserFactory) -> UserDB:
    return make_user("admin", name="Admin")


@pytest.fixture
def make_post() -> Callable[..., PostDB]:
    def _make(author: UserDB, *, price: float = 0.0, title: str = "Sunset") -> PostDB:
        return PostDB(
            id=uuid4(),
            author_id=author.id,
            title=title,
            price=price,
            tags=["sunset"],
            image_url="/uploads/posts/x/image.jpg",
            image_public_id="posts/x/image.jpg",
        )

    return _make


@pytest.fixture
def headers_for() -> HeadersFor:
    """Bearer header carrying a fresh token for an account."""

    def _headers(user: UserDB) -> dict[str, str]:
        token = create_access_token(user_id=user.id, email=user.email, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


async def _apply_changes(record: Any, changes: Mapping[str, Any]) -> Any:
    for key, value in changes.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def user_repo() -> MagicMock:
    """User repository mock whose ``update`` really applies changes."""
    mock = MagicMock(spec=UserRepository)
    mock.get_by_id = AsyncMock(return_value=None)
    mock.get_by_email = AsyncMock(return_value=None)
    mock.email_exists = AsyncMock(return_value=False)
    mock.update = AsyncMock(side_effect=_apply_changes)
    mock.delete = AsyncMock(return_value=True)
    mock.count = AsyncMock(return_value=0)
    mock.get_all = AsyncMock(return_value=[])
    mock.credit_sale = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def post_repo() -> MagicMock:
    mock = MagicMock(spec=PostRepository)
    mock.get_by_id = AsyncMock(return_value=None)
    mock.update = AsyncMock(side_effect=_apply_changes)
    mock.delete_post = AsyncMock(return_value=None)
    mock.delete_many_by_owner = AsyncMock(return_value=[])
    mock.list_posts = AsyncMock(return_value=([], 0))
    mock.increment_likes = AsyncMock(return_value=None)
    mock.get_purchase = AsyncMock(return_value=None)
    mock.get_saved = AsyncMock(return_value=None)
    mock.save = AsyncMock(return_value=None)
    mock.unsave = AsyncMock(return_value=None)
    mock.list_comments = AsyncMock(return_value=([], 0))
    mock.list_saved = AsyncMock(return_value=([], 0))
    mock.list_purchases = AsyncMock(return_value=([], 0))
    mock.upsert_rating = AsyncMock(return_value=None)
    mock.rating_summary = AsyncMock(return_value=(0.0, 0))
    return mock


@pytest.fixture
def media() -> MagicMock:
    mock = MagicMock(spec=MediaService)
    mock.delete = AsyncMock(return_value=True)
    mock.delete_many = AsyncMock(return_value=0)
    return mock


@pytest.fixture
def users_by_id(user_repo: MagicMock) -> dict[UUID, UserDB]:
    """Registry backing ``user_repo.get_by_id``; tests add accounts to it."""
    registry: dict[UUID, UserDB] = {}

    async def _get(user_id: UUID) -> UserDB | None:
        return registry.get(user_id)

    user_repo.get_by_id.side_effect = _get
    return registry


@pytest.fixture
async def client(
    user_repo: MagicMock,
    post_repo: MagicMock,
    media: MagicMock,
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client over the real app with repositories mocked out."""
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_post_repository] = lambda: post_repo
    app.dependency_overrides[get_media_service] = lambda: media
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app, raise_app_exceptions=False),
    ) as ac:
        yield ac
    limiter.enabled = True
    app.dependency_overrides = {}


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    img = Image.new("RGB", (200, 200), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    img = Image.new("RGBA", (200, 200), color="blue")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
