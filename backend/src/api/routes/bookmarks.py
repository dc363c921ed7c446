"""HTTP API routes for the bookmark tree.

Handlers stay thin: they unpack the request model, call ``BookmarkService``
and let the shared error handlers translate service errors into the
``{error, message, detail}`` envelope.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ...models.bookmark import (
    Bookmark,
    BookmarkCreate,
    BookmarkTree,
    BookmarkUpdate,
    MoveRequest,
    ParentOption,
    RenumberRequest,
    ReorderRequest,
    SuccessResponse,
)
from ...services.bookmark_service import BookmarkService, get_bookmark_service


router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"])


@router.get("", response_model=List[BookmarkTree])
async def list_bookmarks(service: BookmarkService = Depends(get_bookmark_service)):
    """Return the whole bookmark forest with nested, ordered children."""
    return service.get_all()


@router.post("", response_model=Bookmark, status_code=status.HTTP_201_CREATED)
async def create_bookmark(
    create: BookmarkCreate,
    service: BookmarkService = Depends(get_bookmark_service),
):
    """Create a link (with ``url``) or a folder (without), placed last among its siblings."""
    return service.create(
        title=create.title,
        url=create.url,
        description=create.description,
        parent_id=create.parent_id,
        icon=create.icon,
        color=create.color,
    )


# NOTE: fixed paths below MUST be defined BEFORE the /{bookmark_id} routes
@router.get("/parents", response_model=List[ParentOption])
async def list_parent_options(service: BookmarkService = Depends(get_bookmark_service)):
    """Folders available as a parent, ordered by depth then title."""
    return service.get_parent_options()


@router.post("/move", response_model=SuccessResponse)
async def move_bookmark(
    request: MoveRequest,
    service: BookmarkService = Depends(get_bookmark_service),
):
    """
    Move a bookmark under a new parent at a given position.

    **Request Body:**
    - `source_id`: Bookmark being dragged
    - `new_parent_id`: Target folder, or `null` for the root level
    - `insert_index`: Position among the target's children (default: 0)

    **Errors:**
    - 404 if the source or target folder does not exist
    - 409 if the target is the source itself or one of its descendants
    """
    service.move(request.source_id, request.new_parent_id, request.insert_index)
    return SuccessResponse()


@router.post("/reorder", response_model=SuccessResponse)
async def reorder_bookmarks(
    request: ReorderRequest,
    service: BookmarkService = Depends(get_bookmark_service),
):
    """Set order keys in bulk; parents are left unchanged."""
    service.reorder(request.bookmark_orders)
    return SuccessResponse()


@router.post("/renumber", response_model=List[Bookmark])
async def renumber_bookmarks(
    request: RenumberRequest,
    service: BookmarkService = Depends(get_bookmark_service),
):
    """Compact one sibling group's order keys to 1..n."""
    return service.renumber(request.parent_id)


@router.get("/{bookmark_id}", response_model=Bookmark)
async def get_bookmark(
    bookmark_id: str,
    service: BookmarkService = Depends(get_bookmark_service),
):
    """Get a single bookmark row."""
    return service.get(bookmark_id)


@router.put("/{bookmark_id}", response_model=Bookmark)
async def update_bookmark(
    bookmark_id: str,
    update: BookmarkUpdate,
    service: BookmarkService = Depends(get_bookmark_service),
):
    """Update the fields present in the body; `parent_id: null` moves to the root."""
    return service.update(bookmark_id, update.model_dump(exclude_unset=True))


@router.delete("/{bookmark_id}", response_model=SuccessResponse)
async def delete_bookmark(
    bookmark_id: str,
    service: BookmarkService = Depends(get_bookmark_service),
):
    """Delete a bookmark and, for folders, everything beneath it."""
    if not service.delete(bookmark_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bookmark not found: {bookmark_id}",
        )
    return SuccessResponse()


__all__ = ["router"]
