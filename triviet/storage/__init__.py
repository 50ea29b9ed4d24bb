"""Storage module for persisting application documents."""

from .base import AbstractStorage
from .factory import get_storage_provider
from .local import LocalStorage


__all__ = [
    "AbstractStorage",
    "LocalStorage",
    "get_storage_provider",
]
