"""Storage provider factory for creating the configured storage instance."""

from functools import lru_cache

from triviet.config import get_settings

from .base import AbstractStorage
from .local import LocalStorage


@lru_cache
def get_storage_provider() -> AbstractStorage:
    """Get the configured storage provider instance.

    Cached so the whole application shares one provider.
    """
    settings = get_settings()
    return LocalStorage(base_path=settings.LOCAL_STORAGE_PATH)
