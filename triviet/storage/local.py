"""Local filesystem storage implementation."""

from pathlib import Path
from uuid import uuid4

import aiofiles

from .base import AbstractStorage
from .exceptions import (
    FileDeleteError,
    FileDownloadError,
    FileUploadError,
    InvalidStorageKeyError,
    StorageFileNotFoundError,
)


class LocalStorage(AbstractStorage):
    """Local filesystem storage provider."""

    def __init__(self, base_path: str | Path) -> None:
        """Initialize local storage with base path.

        Args:
            base_path: Base directory path for stored documents
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        path = (self.base_path / key).resolve()
        if not path.is_relative_to(self.base_path.resolve()):
            msg = f"Storage key escapes the storage directory: {key}"
            raise InvalidStorageKeyError(msg)
        return path

    async def upload(self, file_content: bytes, key: str) -> None:
        path = self._get_full_path(key)
        # Atomic replace through a temp file unique to this write
        tmp_path = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(file_content)
            tmp_path.replace(path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            msg = f"Failed to write file locally: {key}"
            raise FileUploadError(msg) from e

    async def download(self, key: str) -> bytes:
        path = self._get_full_path(key)
        if not path.exists():
            msg = f"File not found: {key}"
            raise StorageFileNotFoundError(msg)
        try:
            async with aiofiles.open(path, "rb") as file_obj:
                return await file_obj.read()
        except OSError as e:
            msg = f"Failed to read file locally: {key}"
            raise FileDownloadError(msg) from e

    async def exists(self, key: str) -> bool:
        return self._get_full_path(key).exists()

    async def delete(self, key: str) -> None:
        try:
            path = self._get_full_path(key)
            if path.exists():
                path.unlink()
        except OSError as e:
            msg = f"Failed to delete file locally: {key}"
            raise FileDeleteError(msg) from e
