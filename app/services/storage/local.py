"""
Local filesystem storage implementation.

This module provides a local storage backend for development
and testing purposes. Files are stored in the local filesystem
and served from ``UPLOADS_BASE_URL``.
"""

from pathlib import Path
from uuid import uuid4

import aiofiles

from app.configs.settings import settings
from app.services.storage.base import StoredMedia

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


class LocalStorage:
    """
    Local filesystem storage implementation.

    The public id of a file is its path relative to the uploads directory,
    e.g. ``posts/<post_id>/<media_id>.jpg``.
    """

    def __init__(self, uploads_dir: Path | None = None) -> None:
        self.uploads_dir = (uploads_dir or settings.UPLOADS_DIR).resolve()
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, public_id: str) -> Path | None:
        """Map a public id to a path, refusing anything outside the uploads dir."""
        path = (self.uploads_dir / public_id).resolve()
        if not path.is_relative_to(self.uploads_dir):
            return None
        return path

    async def upload(
        self,
        folder: str,
        entity_id: str,
        file_data: bytes,
        content_type: str,
    ) -> StoredMedia:
        """
        Write a file under ``uploads/{folder}/{entity_id}/``.

        Returns:
            StoredMedia: URL path served as static files and relative public id
        """
        media_dir = self.uploads_dir / folder / entity_id
        media_dir.mkdir(parents=True, exist_ok=True)

        extension = EXTENSIONS.get(content_type, "bin")
        file_path = media_dir / f"{uuid4()}.{extension}"

        async with aiofiles.open(file_path, "wb") as f:
            await f.write(file_data)

        public_id = file_path.relative_to(self.uploads_dir).as_posix()
        return StoredMedia(url=f"{settings.UPLOADS_BASE_URL}/{public_id}", public_id=public_id)

    async def delete(self, public_id: str) -> bool:
        file_path = self._resolve(public_id)
        if file_path is None or not file_path.is_file():
            return False
        file_path.unlink()
        return True
