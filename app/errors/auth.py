"""
Authentication errors.

The four rejection kinds of caller resolution (``unauthenticated``,
``invalid_token``, ``unknown_account``, ``suspended``) are distinct types so
they can be logged apart, while the credential check during login collapses
every failure into one public message.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
)

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class UserAuthenticationError(BaseAppError):
    """Base class for authentication errors."""

    kind = "authentication"

    def __init__(
        self,
        detail: str = "Authentication failed",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)


class InvalidCredentialsError(UserAuthenticationError):
    """Raised when the email is unknown or the password does not match."""

    kind = "invalid_credentials"

    def __init__(self) -> None:
        super().__init__("Invalid credentials", HTTP_401_UNAUTHORIZED)


class UnauthenticatedError(UserAuthenticationError):
    """Raised when a request carries no credential at all."""

    kind = "unauthenticated"

    def __init__(self) -> None:
        super().__init__("No token, authorization denied", HTTP_401_UNAUTHORIZED)


class InvalidTokenError(UserAuthenticationError):
    """Raised when a token fails signature, expiry or claim checks."""

    kind = "invalid_token"

    def __init__(self, detail: str = "Token invalid or expired") -> None:
        super().__init__(detail, HTTP_401_UNAUTHORIZED)


class UnknownAccountError(UserAuthenticationError):
    """Raised when a valid token names an account that no longer exists."""

    kind = "unknown_account"

    def __init__(self) -> None:
        super().__init__("User not found", HTTP_401_UNAUTHORIZED)


class AccountSuspendedError(UserAuthenticationError):
    """Raised when a suspended account logs in or presents a token."""

    kind = "suspended"

    def __init__(self) -> None:
        super().__init__(
            "Your account has been suspended. Please contact support.",
            HTTP_403_FORBIDDEN,
        )


class DuplicateIdentityError(BaseAppError):
    """Raised on signup when the normalized email is already registered."""

    kind = "duplicate_identity"

    def __init__(self) -> None:
        super().__init__("User already exists", HTTP_400_BAD_REQUEST)


auth_exception_handler = create_exception_handler(logger)
