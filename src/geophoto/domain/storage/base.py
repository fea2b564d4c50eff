from abc import ABC, abstractmethod
from typing import Optional


class ObjectExistsError(Exception):
    """Raised when a write would overwrite an existing object."""


class StorageService(ABC):
    """Abstract base class for private object storage."""

    @abstractmethod
    async def save_file(self, content: bytes, path: str, content_type: Optional[str] = None) -> str:
        """
        Save a payload to the storage without overwriting.

        Args:
            content: The raw bytes to store.
            path: The destination path/key in the storage.
            content_type: Optional MIME type recorded with the object.

        Returns:
            The path/key where the object was saved.

        Raises:
            ObjectExistsError: An object already exists at ``path``.
        """
        pass

    @abstractmethod
    async def delete_file(self, path: str) -> bool:
        """
        Delete an object from the storage.

        Args:
            path: The path/key of the object to delete.

        Returns:
            True if an object was deleted, False if none existed.
        """
        pass

    @abstractmethod
    async def generate_signed_url(self, path: str, ttl_seconds: int) -> str:
        """
        Issue a time-limited retrieval URL for a private object.

        Args:
            path: The storage path/key.
            ttl_seconds: Lifetime of the URL.

        Returns:
            A bearer URL valid for ``ttl_seconds``.
        """
        pass
