"""
Media upload service.

Validates uploaded images (type, size, decodability) with Pillow,
normalizes them to JPEG and hands them to the configured storage backend.
Used for post images and profile pictures.
"""

from io import BytesIO

from cloudinary.exceptions import Error as CloudinaryError
from fastapi import UploadFile
from PIL import Image

from app.configs.settings import settings
from app.errors.upload import (
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
)
from app.monitoring import get_logger
from app.services.storage import StorageService, StoredMedia, get_storage_service

logger = get_logger(__name__)

POSTS_FOLDER = "posts"
PROFILE_PICTURES_FOLDER = "profile_pictures"

STORAGE_ERRORS = (OSError, CloudinaryError, KeyError)


class MediaService:
    """
    Service for managing image uploads for posts and profile pictures.

    Handles image validation, processing, and storage operations.
    """

    def __init__(self, storage: StorageService | None = None) -> None:
        """
        Initialize the media service.

        Args:
            storage: Optional storage service instance. If not provided,
                    the default storage service will be used.
        """
        self.storage = storage or get_storage_service()
        self.max_size_bytes = settings.IMAGE_MAX_SIZE_MB * 1024 * 1024
        self.allowed_types = settings.IMAGE_ALLOWED_TYPES
        self.quality = settings.IMAGE_QUALITY

    def validate_content_type(self, content_type: str | None) -> None:
        """
        Validate the content type of the uploaded file.

        Raises:
            UnsupportedImageTypeError: If content type is not allowed
        """
        if not content_type or content_type not in self.allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.allowed_types,
            )

    def validate_file_size(self, file_data: bytes) -> None:
        """
        Validate the size of the uploaded file.

        Raises:
            ImageTooLargeError: If file exceeds maximum size
        """
        actual_size = len(file_data)
        if actual_size > self.max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.IMAGE_MAX_SIZE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    def validate_image_content(self, file_data: bytes) -> Image.Image:
        """
        Validate that the file is a decodable image.

        Returns:
            Image.Image: Validated PIL Image object

        Raises:
            InvalidImageError: If file is not a valid image
        """
        try:
            img = Image.open(BytesIO(file_data))
            img.verify()  # Verify image integrity
            # Re-open after verify (verify closes the file)
            return Image.open(BytesIO(file_data))
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise InvalidImageError from e

    def process_image(self, img: Image.Image, max_dimension: int) -> tuple[bytes, str]:
        """
        Process and optimize the image.

        Resizes to ``max_dimension``, converts to RGB if needed and
        re-encodes as JPEG.

        Returns:
            tuple[bytes, str]: Processed image bytes and content type
        """
        try:
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")

            if img.width > max_dimension or img.height > max_dimension:
                img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

            buffer = BytesIO()
            img.save(buffer, format="JPEG", quality=self.quality, optimize=True)
            return buffer.getvalue(), "image/jpeg"
        except (OSError, ValueError) as e:
            raise ImageProcessingError from e

    async def upload_image(
        self,
        folder: str,
        entity_id: str,
        file: UploadFile,
        max_dimension: int,
    ) -> StoredMedia:
        """
        Validate, process and store one uploaded image.

        Raises:
            UnsupportedImageTypeError: If file type is not allowed
            ImageTooLargeError: If file is too large
            InvalidImageError: If file is not a valid image
            ImageProcessingError: If processing fails
            StorageError: If the storage backend rejects the upload
        """
        self.validate_content_type(file.content_type)
        file_data = await file.read()
        self.validate_file_size(file_data)
        img = self.validate_image_content(file_data)
        processed_data, content_type = self.process_image(img, max_dimension)

        try:
            return await self.storage.upload(folder, entity_id, processed_data, content_type)
        except STORAGE_ERRORS as e:
            logger.exception("Storage upload failed", folder=folder, entity_id=entity_id)
            raise StorageError from e

    async def upload_post_image(self, post_id: str, file: UploadFile) -> StoredMedia:
        return await self.upload_image(POSTS_FOLDER, post_id, file, settings.IMAGE_MAX_DIMENSION)

    async def upload_profile_picture(self, user_id: str, file: UploadFile) -> StoredMedia:
        return await self.upload_image(
            PROFILE_PICTURES_FOLDER,
            user_id,
            file,
            settings.PROFILE_PICTURE_MAX_DIMENSION,
        )

    async def delete(self, public_id: str | None) -> bool:
        """
        Remove a stored file.

        Cleanup after a committed deletion must not undo it, so storage
        failures are logged and reported as ``False``.
        """
        if not public_id:
            return False
        try:
            return await self.storage.delete(public_id)
        except STORAGE_ERRORS:
            logger.exception("Storage delete failed", public_id=public_id)
            return False

    async def delete_many(self, public_ids: list[str]) -> int:
        deleted = 0
        for public_id in public_ids:
            if await self.delete(public_id):
                deleted += 1
        return deleted
