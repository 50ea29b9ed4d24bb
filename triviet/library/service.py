import asyncio
import json
import logging
import time
from collections import defaultdict
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from triviet.exceptions import ResourceNotFoundError, StorageQuotaExceededError
from triviet.library.schemas import LibraryItem, LibraryItemCreate, LibraryUsage, UserRole
from triviet.storage.base import AbstractStorage
from triviet.storage.exceptions import StorageFileNotFoundError


logger = logging.getLogger(__name__)

_items_adapter = TypeAdapter(list[LibraryItem])

# One writer per role document at a time
_role_locks: defaultdict[UserRole, asyncio.Lock] = defaultdict(asyncio.Lock)


def _storage_key(role: UserRole) -> str:
    return f"library_{role.value}.json"


def _encode(items: list[LibraryItem]) -> bytes:
    return json.dumps([item.model_dump(mode="json") for item in items], ensure_ascii=False).encode("utf-8")


class LibraryService:
    """Per-role library of saved summaries and exercises, newest first."""

    def __init__(self, storage: AbstractStorage, limit_bytes: int) -> None:
        self._storage = storage
        self._limit_bytes = limit_bytes

    async def list_items(self, role: UserRole) -> tuple[list[LibraryItem], LibraryUsage]:
        items, used = await self._load(role)
        return items, LibraryUsage(used=used, total=self._limit_bytes)

    async def usage(self, role: UserRole) -> LibraryUsage:
        _, used = await self._load(role)
        return LibraryUsage(used=used, total=self._limit_bytes)

    async def get_item(self, role: UserRole, item_id: str) -> LibraryItem:
        items, _ = await self._load(role)
        for item in items:
            if item.id == item_id:
                return item
        raise ResourceNotFoundError("Library item", item_id)

    async def add_item(self, role: UserRole, data: LibraryItemCreate) -> LibraryItem:
        """Prepend a new item; the stored library is unchanged if it would exceed the byte limit."""
        async with _role_locks[role]:
            items, _ = await self._load(role)
            now_ms = int(time.time() * 1000)
            item = LibraryItem(id=uuid4().hex, timestamp=now_ms, **data.model_dump())
            updated = [item, *items]

            payload = _encode(updated)
            if len(payload) > self._limit_bytes:
                logger.warning(
                    "Library for %s is full: %d bytes needed, limit %d", role.value, len(payload), self._limit_bytes
                )
                raise StorageQuotaExceededError(len(payload), self._limit_bytes)

            await self._storage.upload(payload, _storage_key(role))
            logger.info("Saved '%s' (%s) to the %s library", item.name, item.type.value, role.value)
            return item

    async def remove_item(self, role: UserRole, item_id: str) -> LibraryUsage:
        async with _role_locks[role]:
            items, _ = await self._load(role)
            remaining = [item for item in items if item.id != item_id]
            if len(remaining) == len(items):
                raise ResourceNotFoundError("Library item", item_id)

            payload = _encode(remaining)
            await self._storage.upload(payload, _storage_key(role))
            return LibraryUsage(used=len(payload), total=self._limit_bytes)

    async def _load(self, role: UserRole) -> tuple[list[LibraryItem], int]:
        try:
            raw = await self._storage.download(_storage_key(role))
        except StorageFileNotFoundError:
            return [], 0

        try:
            return _items_adapter.validate_json(raw), len(raw)
        except PydanticValidationError:
            logger.exception("Failed to parse %s library data; starting empty", role.value)
            return [], 0
