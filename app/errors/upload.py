"""
Errors raised while accepting post images and profile pictures.

Rejections caused by the uploaded file itself map to 4xx statuses. Failures
on our side (re-encoding, the storage backend) map to 500.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class UploadError(BaseAppError):
    """Base class for image upload failures."""

    kind = "upload"

    def __init__(
        self,
        detail: str = "Image upload failed",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class ImageTooLargeError(UploadError):
    """The file is bigger than ``IMAGE_MAX_SIZE_MB``."""

    kind = "too_large"

    def __init__(self, max_size_mb: int = 10, actual_size_mb: float | None = None) -> None:
        detail = f"Image exceeds the {max_size_mb}MB limit"
        if actual_size_mb is not None:
            detail = f"{detail} ({actual_size_mb:.1f}MB received)"
        super().__init__(detail=detail, status_code=HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        self.max_size_mb = max_size_mb


class UnsupportedImageTypeError(UploadError):
    """The declared content type is not an accepted image format."""

    kind = "unsupported_type"

    def __init__(self, content_type: str, allowed_types: list[str] | None = None) -> None:
        super().__init__(
            detail=f"Unsupported image type: {content_type}",
            status_code=HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        )
        self.content_type = content_type
        self.allowed_types = allowed_types or []


class InvalidImageError(UploadError):
    kind = "invalid_image"

    def __init__(self, detail: str = "Uploaded file is not a readable image") -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)


class ImageProcessingError(UploadError):
    kind = "processing"

    def __init__(self, detail: str = "Image could not be converted") -> None:
        super().__init__(detail=detail)


class StorageError(UploadError):
    """The storage backend (local disk or Cloudinary) refused the file."""

    kind = "storage"

    def __init__(self, detail: str = "Image could not be stored") -> None:
        super().__init__(detail=detail)


upload_exception_handler = create_exception_handler(logger)
