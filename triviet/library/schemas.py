from enum import Enum
from typing import Any

from pydantic import BaseModel as PydanticBaseModel, Field


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


class LibraryItemType(str, Enum):
    SUMMARY = "summary"
    EXAM = "exam"
    REVIEW_EXERCISES = "review_exercises"
    SIMILAR_EXERCISES = "similar_exercises"


class LibraryItemCreate(PydanticBaseModel):
    """Schema for saving content to a library."""

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Tóm tắt - Hàm số bậc hai",
                "type": "summary",
                "content": {"mindMap": {"title": "Hàm số bậc hai $y = ax^2$", "children": []}},
            },
        },
    }

    name: str = Field(..., min_length=1, max_length=300)
    type: LibraryItemType
    content: Any = Field(..., description="Markdown text, or an object such as {'mindMap': ...} for summaries")


class LibraryItem(LibraryItemCreate):
    """A saved library entry."""

    id: str
    timestamp: int = Field(..., description="Creation time in milliseconds since the epoch")


class LibraryUsage(PydanticBaseModel):
    used: int = Field(..., description="Bytes used by the stored library document")
    total: int = Field(..., description="Byte limit for the library document")


class LibraryResponse(PydanticBaseModel):
    items: list[LibraryItem]
    usage: LibraryUsage
