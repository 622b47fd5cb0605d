"""
Image storage backends.

``local`` writes under ``UPLOADS_DIR`` and is served by the app itself,
``cloudinary`` pushes to the CDN. Both hand back a ``StoredMedia`` whose
``public_id`` is kept on the post or account for later deletion.
"""

from app.configs.settings import settings
from app.services.storage.base import StorageService, StoredMedia
from app.services.storage.cloudinary_storage import CloudinaryStorage
from app.services.storage.local import LocalStorage


def get_storage_service() -> StorageService:
    """Build the backend selected by ``STORAGE_PROVIDER``."""
    if settings.STORAGE_PROVIDER == "cloudinary":
        return CloudinaryStorage()
    return LocalStorage()


__all__ = [
    "CloudinaryStorage",
    "LocalStorage",
    "StorageService",
    "StoredMedia",
    "get_storage_service",
]
