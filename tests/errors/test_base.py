# tests/errors/test_base.py
"""Tests for the shared error envelope and handlers."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from app.errors import (
    BaseAppError,
    ImageTooLargeError,
    NotFoundError,
    ValidationError,
    create_exception_handler,
    create_unhandled_exception_handler,
    validation_exception_handler,
)
from app.monitoring import get_logger

logger = get_logger(__name__)


class Payload(BaseModel):
    name: str
    age: int


@pytest.fixture
def error_app() -> FastAPI:
    app = FastAPI()
    app.add_exception_handler(BaseAppError, create_exception_handler(logger))
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, create_unhandled_exception_handler(logger))

    @app.get("/missing")
    async def missing() -> None:
        raise NotFoundError("Post")

    @app.get("/too-large")
    async def too_large() -> None:
        raise ImageTooLargeError(max_size_mb=10, actual_size_mb=12.5)

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("database password is hunter2")

    @app.post("/payload")
    async def payload(body: Payload) -> dict[str, str]:
        return {"name": body.name}

    return app


@pytest.fixture
async def error_client(error_app: FastAPI):
    transport = ASGITransport(app=error_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def test_base_error_defaults() -> None:
    exc = BaseAppError()

    assert exc.status_code == 500
    assert str(exc) == exc.detail


def test_validation_error_is_bad_request() -> None:
    exc = ValidationError("Title is required")

    assert exc.status_code == 400
    assert exc.errors == []


@pytest.mark.asyncio
async def test_app_error_uses_envelope(error_client: AsyncClient) -> None:
    response = await error_client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {"success": False, "msg": "Post not found"}


@pytest.mark.asyncio
async def test_error_attributes_are_exposed(error_client: AsyncClient) -> None:
    response = await error_client.get("/too-large")

    assert response.status_code == 413
    body = response.json()
    assert body["success"] is False
    assert body["max_size_mb"] == 10


@pytest.mark.asyncio
async def test_unhandled_error_hides_internals(error_client: AsyncClient) -> None:
    response = await error_client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"success": False, "msg": "Internal Server Error"}
    assert "hunter2" not in response.text


@pytest.mark.asyncio
async def test_missing_fields_message(error_client: AsyncClient) -> None:
    response = await error_client.post("/payload", json={})

    assert response.status_code == 400
    body = response.json()
    assert body["msg"] == "All fields are required"
    assert {error["field"] for error in body["errors"]} == {"name", "age"}


@pytest.mark.asyncio
async def test_invalid_field_message_names_field(error_client: AsyncClient) -> None:
    response = await error_client.post("/payload", json={"name": "x", "age": "old"})

    assert response.status_code == 400
    assert response.json()["msg"].startswith("age:")


@pytest.mark.asyncio
async def test_unhandled_error_through_application(
    client: AsyncClient,
    post_repo: MagicMock,
) -> None:
    post_repo.list_posts.side_effect = RuntimeError("connection reset")

    response = await client.get("/posts")

    assert response.status_code == 500
    assert response.json() == {"success": False, "msg": "Internal Server Error"}
