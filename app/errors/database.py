"""Persistence errors surfaced by the repositories."""

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class DatabaseError(BaseAppError):
    """Base class for failed reads and writes."""

    kind = "database"

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(DatabaseError):
    kind = "database_unavailable"

    def __init__(self, detail: str = "Failed to connect to the database") -> None:
        super().__init__(detail)


class DatabaseInitializationError(DatabaseError):
    """Raised by ``app.db.init_db`` when the tables cannot be created."""

    kind = "database_init"

    def __init__(self, detail: str = "Failed to initialize database") -> None:
        super().__init__(detail)


class DuplicateEntryError(DatabaseError):
    """
    A unique constraint rejected the write.

    Repositories translate it into a domain error where one exists, for
    example a taken email becomes ``DuplicateIdentityError``.
    """

    kind = "duplicate_entry"

    def __init__(self, detail: str = "A record with this value already exists") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


database_exception_handler = create_exception_handler(logger)
