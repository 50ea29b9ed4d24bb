"""Abstract storage interface for JSON documents kept by the application."""

from abc import ABC, abstractmethod


class AbstractStorage(ABC):
    """Abstract base class for storage providers."""

    @abstractmethod
    async def upload(self, file_content: bytes, key: str) -> None:
        """Store content under ``key``, replacing anything already there.

        Raises
        ------
            FileUploadError: If the write fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def download(self, key: str) -> bytes:
        """Return the content stored under ``key``.

        Raises
        ------
            StorageFileNotFoundError: If nothing is stored under the key.
        """
        raise NotImplementedError

    @abstractmethod
    async def exists(self, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete the content under ``key``; a missing key is not an error.

        Raises
        ------
            FileDeleteError: If the deletion fails.
        """
        raise NotImplementedError
