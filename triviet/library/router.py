from typing import Annotated

from fastapi import APIRouter, Depends, status

from triviet.config import get_settings
from triviet.exceptions import ValidationError
from triviet.library.schemas import (
    LibraryItem,
    LibraryItemCreate,
    LibraryItemType,
    LibraryResponse,
    LibraryUsage,
    UserRole,
)
from triviet.library.service import LibraryService
from triviet.mindmaps.dependencies import MindMapServiceDep
from triviet.mindmaps.schemas import LayoutResponse, MindMapNodeSchema
from triviet.storage import get_storage_provider


router = APIRouter(prefix="/api/v1/library", tags=["library"])


def get_library_service() -> LibraryService:
    return LibraryService(get_storage_provider(), get_settings().LIBRARY_STORAGE_LIMIT_BYTES)


LibraryServiceDep = Annotated[LibraryService, Depends(get_library_service)]


@router.get("/{role}", summary="List library items")  # type: ignore[misc]
async def list_library(role: UserRole, service: LibraryServiceDep) -> LibraryResponse:
    """Get all saved items for a role, newest first, with storage usage."""
    items, usage = await service.list_items(role)
    return LibraryResponse(items=items, usage=usage)


@router.post(
    "/{role}",
    status_code=status.HTTP_201_CREATED,
    summary="Save an item to the library",
    responses={413: {"description": "Library storage limit exceeded"}},
)  # type: ignore[misc]
async def add_library_item(role: UserRole, data: LibraryItemCreate, service: LibraryServiceDep) -> LibraryItem:
    """Save content to a role's library."""
    return await service.add_item(role, data)


@router.get(
    "/{role}/{item_id}",
    responses={404: {"description": "Library item not found"}},
)  # type: ignore[misc]
async def get_library_item(role: UserRole, item_id: str, service: LibraryServiceDep) -> LibraryItem:
    """Get a single saved item."""
    return await service.get_item(role, item_id)


@router.delete(
    "/{role}/{item_id}",
    responses={404: {"description": "Library item not found"}},
)  # type: ignore[misc]
async def delete_library_item(role: UserRole, item_id: str, service: LibraryServiceDep) -> LibraryUsage:
    """Remove an item and return the updated storage usage."""
    return await service.remove_item(role, item_id)


@router.get(
    "/{role}/{item_id}/layout",
    responses={
        400: {"description": "Item is not a mind map summary"},
        404: {"description": "Library item not found"},
    },
)  # type: ignore[misc]
async def layout_library_item(
    role: UserRole,
    item_id: str,
    service: LibraryServiceDep,
    mindmaps: MindMapServiceDep,
) -> LayoutResponse:
    """Lay out the mind map stored in a saved summary."""
    item = await service.get_item(role, item_id)
    if item.type != LibraryItemType.SUMMARY or not isinstance(item.content, dict) or "mindMap" not in item.content:
        msg = f"Library item {item_id} does not contain a mind map"
        raise ValidationError(msg)
    return mindmaps.layout(MindMapNodeSchema.model_validate(item.content["mindMap"]))
