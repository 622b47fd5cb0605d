# app/managers/rate_limiter.py

"""
Per-client request throttling with slowapi.

Every route shares the default budget from ``LimiterConfig``; the login and
signup routes get a tighter one because they are the password-guessing
and account-farming surfaces.
"""

from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from app.configs import LimiterConfig, settings
from app.errors import error_envelope
from app.monitoring import get_logger

logger = get_logger(__name__)

LOGIN_RATE_LIMIT = settings.LOGIN_RATE_LIMIT
SIGNUP_RATE_LIMIT = settings.SIGNUP_RATE_LIMIT


def get_identifier(request: Request) -> str:
    """Key requests by client address (after ``ProxyHeadersMiddleware``)."""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Answer 429 in the standard error envelope, naming the exhausted limit."""
    limit = cast(RateLimitExceeded, exc).detail
    logger.warning("Rate limit exceeded", client=get_identifier(request), path=request.url.path, limit=limit)
    return ORJSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content=error_envelope("Too many requests, please try again later", limit=limit),
    )
