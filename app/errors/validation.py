"""
Request validation errors.

FastAPI's 422 for malformed bodies, queries and forms becomes a 400 in the
standard envelope. ``msg`` carries one readable sentence for the client,
``errors`` the full per-field list.
"""

from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from app.errors.base import BaseAppError, error_envelope
from app.monitoring import get_logger
from app.utils.helpers import host

logger = get_logger(__name__)

# First location segment names the source ("body", "query", "path")
LOCATION_SOURCES = frozenset({"body", "query", "path", "header", "cookie"})


class ValidationError(BaseAppError):
    """Raised by services for input rules the schemas cannot express."""

    kind = "validation"

    def __init__(
        self,
        detail: str = "Validation Error",
        errors: list[dict] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.errors = errors or []


def _field_name(loc: tuple[Any, ...] | list[Any]) -> str:
    parts = list(loc)
    if parts and parts[0] in LOCATION_SOURCES:
        parts = parts[1:]
    return ".".join(str(part) for part in parts)


def _format_error(error: dict[str, Any]) -> dict[str, Any]:
    # Input values are never echoed back, they may hold passwords
    formatted: dict[str, Any] = {
        "field": _field_name(error.get("loc", ())),
        "message": error.get("msg", "Invalid value"),
        "type": error.get("type", "validation_error"),
    }
    if ctx := error.get("ctx"):
        formatted["context"] = {key: str(value) if isinstance(value, Exception) else value for key, value in ctx.items()}
    return formatted


def summarize(errors: list[dict[str, Any]]) -> str:
    """One client-facing sentence for a list of formatted errors."""
    if not errors:
        return "Validation failed"
    first = errors[0]
    if first["type"] == "missing":
        return "All fields are required"
    return f"{first['field']}: {first['message']}" if first["field"] else first["message"]


async def validation_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """
    Convert a ``RequestValidationError`` into a 400 envelope.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with ``msg`` and the formatted ``errors``.
    """
    errors = [_format_error(error) for error in cast(RequestValidationError, exc).errors()]

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}",
        fields=[error["field"] for error in errors],
    )

    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=error_envelope(summarize(errors), errors=errors),
    )
