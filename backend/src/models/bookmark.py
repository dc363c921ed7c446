"""Bookmark tree Pydantic models."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field


def _blank_to_root(value):
    """Browsers send an empty string for the root level."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


ParentRef = Annotated[Optional[str], BeforeValidator(_blank_to_root)]


class Bookmark(BaseModel):
    """One row of the bookmark tree: a folder when ``url`` is empty, a link otherwise."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "0b6f1c1e-3f9a-4d8e-9a55-7c1f0e2b4d11",
                "title": "Reading list",
                "url": None,
                "description": "Articles to get through this week",
                "parent_id": None,
                "icon": "book",
                "color": "#3b82f6",
                "order": 1,
                "created_at": "2025-01-10T09:00:00Z",
                "updated_at": "2025-01-15T14:30:00Z",
            }
        },
    )

    id: str = Field(..., description="Opaque unique identifier")
    title: str = Field(..., min_length=1, description="Display title")
    url: Optional[str] = Field(None, description="Link target; null for folders")
    description: Optional[str] = None
    parent_id: Optional[str] = Field(None, description="Parent folder id; null at root")
    icon: Optional[str] = None
    color: Optional[str] = None
    order: int = Field(..., description="Position key within the sibling group")
    created_at: datetime
    updated_at: datetime

    @property
    def is_folder(self) -> bool:
        return self.url is None


class BookmarkTree(Bookmark):
    """Bookmark with its ordered children, as served to the tree view."""

    children: List["BookmarkTree"] = Field(default_factory=list)


class BookmarkCreate(BaseModel):
    """Request payload to create a bookmark or folder."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., max_length=512)
    url: Optional[str] = Field(None, max_length=4096)
    description: Optional[str] = None
    parent_id: ParentRef = Field(
        None, validation_alias=AliasChoices("parent_id", "parentId")
    )
    icon: Optional[str] = None
    color: Optional[str] = None


class BookmarkUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied.

    An explicit ``parent_id: null`` moves the node to the root, while omitting
    the key leaves the parent alone.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, max_length=512)
    url: Optional[str] = Field(None, max_length=4096)
    description: Optional[str] = None
    parent_id: ParentRef = Field(
        None, validation_alias=AliasChoices("parent_id", "parentId")
    )
    icon: Optional[str] = None
    color: Optional[str] = None
    order: Optional[int] = Field(None, strict=True)


class MoveRequest(BaseModel):
    """Drag-and-drop reparent and reposition."""

    model_config = ConfigDict(populate_by_name=True)

    source_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("source_id", "sourceId")
    )
    new_parent_id: ParentRef = Field(
        ...,
        description="Target folder id; null moves the node to the root",
        validation_alias=AliasChoices("new_parent_id", "newParentId", "targetId"),
    )
    insert_index: int = Field(
        0,
        strict=True,
        description="Position among the target's children, excluding the moved node",
        validation_alias=AliasChoices("insert_index", "insertIndex"),
    )


class OrderUpdate(BaseModel):
    """Single ``{id, order}`` pair of a bulk reorder."""

    id: str = Field(..., min_length=1)
    order: int = Field(..., strict=True)


class ReorderRequest(BaseModel):
    """Bulk order-only update."""

    model_config = ConfigDict(populate_by_name=True)

    bookmark_orders: List[OrderUpdate] = Field(
        ..., validation_alias=AliasChoices("bookmark_orders", "bookmarkOrders")
    )


class RenumberRequest(BaseModel):
    """Rewrite one sibling group to consecutive order keys."""

    model_config = ConfigDict(populate_by_name=True)

    parent_id: ParentRef = Field(
        None, validation_alias=AliasChoices("parent_id", "parentId")
    )


class ParentOption(BaseModel):
    """Folder that can receive children, with its nesting depth."""

    id: str
    title: str
    depth: int = Field(..., ge=0)


class SuccessResponse(BaseModel):
    success: bool = True


__all__ = [
    "Bookmark",
    "BookmarkTree",
    "BookmarkCreate",
    "BookmarkUpdate",
    "MoveRequest",
    "OrderUpdate",
    "ReorderRequest",
    "RenumberRequest",
    "ParentOption",
    "SuccessResponse",
]
