from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from structlog.stdlib import BoundLogger

from app.configs.settings import DEFAULT_ERROR_MESSAGE
from app.utils.helpers import host


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def error_envelope(detail: str, **extra: Any) -> dict[str, Any]:
    """Build the failure body shared by every error response."""
    return {"success": False, "msg": detail, **extra}


def create_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = HTTP_500_INTERNAL_SERVER_ERROR
        detail = DEFAULT_ERROR_MESSAGE

        if isinstance(exc, BaseAppError):
            status_code = exc.status_code
            detail = exc.detail

        logger.warning(
            f"{detail} for ip: {host(request)} for endpoint {request.url.path}",
            error=type(exc).__name__,
            kind=getattr(exc, "kind", None),
        )

        # Instance attributes beyond detail/status_code are exposed as payload
        extra = {}
        if isinstance(exc, BaseAppError):
            extra = {k: v for k, v in exc.__dict__.items() if k not in ("status_code", "detail")}

        return ORJSONResponse(content=error_envelope(detail, **extra), status_code=status_code)

    return handler


def create_unhandled_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """Create the catch-all handler that hides internals behind a 500."""

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception(
            f"Unhandled {type(exc).__name__} for ip: {host(request)} for endpoint {request.url.path}",
            exc_info=exc,
        )
        return ORJSONResponse(
            content=error_envelope(DEFAULT_ERROR_MESSAGE),
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return handler
