"""
Base storage protocol for file storage operations.

This module defines the abstract interface for storage backends,
allowing for different implementations (local, cloudinary, S3, etc.).
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoredMedia:
    """
    A stored file.

    Attributes:
        url: Retrievable URL of the file
        public_id: Opaque handle used to delete the file later
    """

    url: str
    public_id: str


class StorageService(Protocol):
    """
    Protocol defining the interface for storage services.

    All storage implementations must implement these methods
    to ensure consistent behavior across different backends.
    """

    @abstractmethod
    async def upload(
        self,
        folder: str,
        entity_id: str,
        file_data: bytes,
        content_type: str,
    ) -> StoredMedia:
        """
        Upload a file to storage.

        Args:
            folder: Storage folder (e.g., "posts", "profile_pictures")
            entity_id: ID of the owning entity (post or account)
            file_data: Raw file bytes
            content_type: MIME type of the file

        Returns:
            StoredMedia: URL and deletable handle of the stored file
        """
        ...

    @abstractmethod
    async def delete(self, public_id: str) -> bool:
        """
        Delete a file from storage.

        Args:
            public_id: Handle returned by ``upload``

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        ...
