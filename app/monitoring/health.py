"""
Health checks with dependency validation.

- /health/live (Liveness): basic app responsiveness, no external deps
- /health/ready (Readiness): database connectivity

Response Format
---------------
{
    "status": "ready" | "not_ready" | "live",
    "timestamp": "2025-01-01 12:00:00",
    "version": "1.0.0",
    "checks": {"database": {"status": "pass", "response_ms": 15}}
}
"""

from asyncio import wait_for
from dataclasses import dataclass, field
from enum import StrEnum
from time import perf_counter
from typing import Any

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from app.db.database import ping_database
from app.monitoring import get_logger
from app.utils.helpers import today_str

logger = get_logger(__name__)

DATABASE_TIMEOUT = 2.0


class CheckStatus(StrEnum):
    """Status values for individual health checks."""

    PASS = "pass"
    FAIL = "fail"


class OverallStatus(StrEnum):
    """Overall health status."""

    READY = "ready"
    NOT_READY = "not_ready"
    LIVE = "live"


@dataclass
class ComponentCheck:
    """Result of an individual health check component."""

    status: CheckStatus
    response_ms: int | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status.value}
        if self.response_ms is not None:
            result["response_ms"] = self.response_ms
        if self.message is not None:
            result["message"] = self.message
        return result


@dataclass
class HealthStatus:
    """
    Complete health status response.

    Attributes
    ----------
    status : OverallStatus
        Overall health status
    timestamp : str
        Local timestamp
    version : str
        Application version
    checks : dict[str, ComponentCheck]
        Individual component checks
    """

    status: OverallStatus
    timestamp: str
    version: str
    checks: dict[str, ComponentCheck] = field(default_factory=dict)

    @property
    def is_healthy(self) -> bool:
        return self.status in (OverallStatus.READY, OverallStatus.LIVE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": {name: check.to_dict() for name, check in self.checks.items()},
        }


HealthResponse = dict[str, Any]


class HealthChecker:
    """Liveness and readiness probes for the API."""

    def __init__(self, version: str = "1.0.0") -> None:
        self.version = version

    def check_liveness(self) -> HealthStatus:
        return HealthStatus(status=OverallStatus.LIVE, timestamp=today_str(), version=self.version)

    async def check_readiness(self) -> HealthStatus:
        db_check = await self._check_database()
        status = OverallStatus.READY if db_check.status == CheckStatus.PASS else OverallStatus.NOT_READY
        return HealthStatus(
            status=status,
            timestamp=today_str(),
            version=self.version,
            checks={"database": db_check},
        )

    async def _check_database(self) -> ComponentCheck:
        start = perf_counter()
        try:
            response_ms = await wait_for(ping_database(), timeout=DATABASE_TIMEOUT)
        except TimeoutError:
            return ComponentCheck(
                status=CheckStatus.FAIL,
                response_ms=int((perf_counter() - start) * 1000),
                message="Database check timed out",
            )
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Readiness database check failed", error=type(e).__name__)
            return ComponentCheck(
                status=CheckStatus.FAIL,
                response_ms=int((perf_counter() - start) * 1000),
                message=f"Database check failed: {type(e).__name__}",
            )
        return ComponentCheck(status=CheckStatus.PASS, response_ms=response_ms)


def setup_health_routes(app: FastAPI) -> None:
    """Register ``/health/live`` and ``/health/ready`` on the application."""
    checker = HealthChecker(version=app.version)

    @app.get("/health", tags=["🩺 Health"], summary="Liveness probe", response_class=ORJSONResponse)
    @app.get("/health/live", tags=["🩺 Health"], include_in_schema=False, response_class=ORJSONResponse)
    async def liveness() -> ORJSONResponse:
        return ORJSONResponse(checker.check_liveness().to_dict(), status_code=HTTP_200_OK)

    @app.get("/health/ready", tags=["🩺 Health"], summary="Readiness probe", response_class=ORJSONResponse)
    async def readiness() -> ORJSONResponse:
        result = await checker.check_readiness()
        status_code = HTTP_200_OK if result.is_healthy else HTTP_503_SERVICE_UNAVAILABLE
        return ORJSONResponse(result.to_dict(), status_code=status_code)
