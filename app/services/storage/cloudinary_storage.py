"""
Cloudinary storage implementation.

This module provides a Cloudinary-based storage backend for production
use. Offers automatic image optimization and CDN delivery.
"""

import asyncio
from functools import partial
from uuid import uuid4

import cloudinary
import cloudinary.uploader

from app.configs.settings import settings
from app.services.storage.base import StoredMedia


class CloudinaryStorage:
    """
    Cloudinary storage implementation.

    Public ids live under ``CLOUDINARY_FOLDER/{folder}/{entity_id}/``.
    """

    def __init__(self) -> None:
        """Initialize Cloudinary with configured credentials."""
        api_secret = settings.CLOUDINARY_API_SECRET
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=api_secret.get_secret_value() if api_secret else None,
            secure=True,
        )
        self.folder = settings.CLOUDINARY_FOLDER

    async def upload(
        self,
        folder: str,
        entity_id: str,
        file_data: bytes,
        content_type: str,
    ) -> StoredMedia:
        """
        Upload an image to Cloudinary.

        Args:
            folder: Storage folder (e.g., "posts", "profile_pictures")
            entity_id: ID of the owning entity
            file_data: Raw file bytes
            content_type: MIME type of the file

        Returns:
            StoredMedia: Secure CDN URL and Cloudinary public id
        """
        public_id = f"{self.folder}/{folder}/{entity_id}/{uuid4()}"

        # Run blocking Cloudinary upload in thread pool
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None,
            partial(
                cloudinary.uploader.upload,
                file_data,
                public_id=public_id,
                overwrite=True,
                resource_type="image",
                transformation=[{"quality": "auto:good", "fetch_format": "auto"}],
            ),
        )

        return StoredMedia(url=result["secure_url"], public_id=result["public_id"])

    async def delete(self, public_id: str) -> bool:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None,
            partial(cloudinary.uploader.destroy, public_id, resource_type="image"),
        )
        return result.get("result") == "ok"
