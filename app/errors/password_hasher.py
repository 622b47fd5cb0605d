"""Errors from the argon2 password hasher."""

from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class PasswordHashingError(BaseAppError):
    """Raised when a signup or password change cannot be hashed."""

    kind = "password_hashing"

    def __init__(self, detail: str = "Password could not be secured") -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


password_hashing_exception_handler = create_exception_handler(logger)
