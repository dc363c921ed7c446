"""Pydantic models for data validation and serialization."""

from .bookmark import (
    Bookmark,
    BookmarkCreate,
    BookmarkTree,
    BookmarkUpdate,
    MoveRequest,
    OrderUpdate,
    ParentOption,
    RenumberRequest,
    ReorderRequest,
    SuccessResponse,
)

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
