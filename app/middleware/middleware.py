# app/middleware/middleware.py
"""
HTTP plumbing around the marketplace routes.

- ``lifespan``: database tables and the local uploads directory at startup,
  connection pool disposal at shutdown
- ``configure_cors``: the browser SPA origin, with credentials so the
  session cookie travels
- ``LoggingMiddleware``: one access line per request under an
  ``X-Request-ID``
- ``SecurityHeadersMiddleware``: static hardening headers
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.configs import settings
from app.db import close_db, init_db
from app.monitoring import bind_request_id, clear_context, get_logger
from app.utils.helpers import host, route_label

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
DEV_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")
DEFAULT_SECRET_KEY = "change-me-in-production"  # noqa: S105

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Prepare the database and upload storage, then release them on shutdown."""
    logger.info(f"Starting {app.title}...")

    if settings.is_production and settings.SECRET_KEY.get_secret_value() == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is the built-in default; session tokens are forgeable")

    try:
        await init_db()
    except Exception:
        logger.exception("Database initialization failed")
        raise

    if settings.STORAGE_PROVIDER == "local":
        settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)

    logger.info(
        "Services initialized",
        environment=settings.ENVIRONMENT,
        storage=settings.STORAGE_PROVIDER,
        log_to_file=settings.LOG_TO_FILE,
    )

    yield

    logger.info(f"Shutting down {app.title}...")
    await close_db()


def configure_cors(app: FastAPI) -> None:
    allowed_origins = list(DEV_ORIGINS)
    if settings.FRONTEND_URL not in allowed_origins:
        allowed_origins.append(settings.FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log the route and its outcome, tagging every event with the request id."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        clear_context()
        bind_request_id(request_id)

        start_time = perf_counter()
        logger.info(f"Request: {route_label(request)}, from ip: {host(request)}")

        try:
            response = await call_next(request)
            logger.info(
                f"Response: {response.status_code} for {request.method} {request.url.path}",
                duration_ms=round((perf_counter() - start_time) * 1000, 2),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_context()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response
