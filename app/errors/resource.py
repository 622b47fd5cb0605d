"""Errors raised by marketplace resources (accounts, posts, purchases)."""

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class NotFoundError(BaseAppError):
    """Raised when a referenced account or post does not exist."""

    def __init__(self, resource: str = "Resource") -> None:
        super().__init__(f"{resource} not found", HTTP_404_NOT_FOUND)


class FreePostError(BaseAppError):
    """Raised when purchasing a post whose price is zero."""

    def __init__(self) -> None:
        super().__init__("This post is free to download", HTTP_400_BAD_REQUEST)


class AlreadyPurchasedError(BaseAppError):
    """Raised when the caller already owns a purchase of the post."""

    def __init__(self) -> None:
        super().__init__("You already purchased this post", HTTP_400_BAD_REQUEST)


class AlreadySavedError(BaseAppError):
    """Raised when a concurrent request already saved the post for the caller."""

    def __init__(self) -> None:
        super().__init__("Post already saved", HTTP_400_BAD_REQUEST)


class PurchaseRequiredError(BaseAppError):
    """Raised when downloading a paid post without a purchase."""

    def __init__(self) -> None:
        super().__init__("You must purchase this post first", HTTP_403_FORBIDDEN)


resource_exception_handler = create_exception_handler(logger)
