"""Authorization and role mutation errors."""

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class ForbiddenError(BaseAppError):
    """Raised when an authenticated caller lacks the required role or permission."""

    kind = "forbidden"

    def __init__(self, detail: str = "Access denied") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


class MisconfiguredRoleError(ForbiddenError):
    """Raised when the caller's role has no entry in the permission table."""

    kind = "misconfigured_role"

    def __init__(self, role: str) -> None:
        super().__init__(f"No permissions defined for role: {role}")


class SelfDemotionForbiddenError(ForbiddenError):
    """Raised when an admin tries to drop their own admin role."""

    kind = "self_demotion"

    def __init__(self) -> None:
        super().__init__("Cannot remove your own admin privileges")


class InvalidRoleError(BaseAppError):
    """Raised when a role value is not one of the known roles."""

    kind = "invalid_role"

    def __init__(self) -> None:
        super().__init__("Invalid role. Must be: user, manager, or admin", HTTP_400_BAD_REQUEST)


authorization_exception_handler = create_exception_handler(logger)
