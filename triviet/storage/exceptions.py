"""Custom exceptions for the storage module."""


class StorageError(Exception):
    """Base exception for storage operations."""


class FileUploadError(StorageError):
    """Raised when writing a document fails."""


class FileDownloadError(StorageError):
    """Raised when reading a document fails."""


class FileDeleteError(StorageError):
    """Raised when a document delete fails."""


class StorageFileNotFoundError(StorageError):
    """Raised when a document is not found in storage."""


class InvalidStorageKeyError(StorageError):
    """Raised when a key would resolve outside the storage root."""
