"""Error taxonomy for bookmark tree operations."""

from __future__ import annotations

from typing import Dict, Optional


class BookmarkServiceError(Exception):
    """Base class for failures raised by the bookmark services."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BookmarkValidationError(BookmarkServiceError):
    """Input rejected before touching the store (empty title, bad index, leaf parent)."""


class BookmarkNotFoundError(BookmarkServiceError):
    """An operation referenced an id with no matching row."""


class CycleRejectedError(BookmarkServiceError):
    """A reparent would make a node its own ancestor."""


class StoreError(BookmarkServiceError):
    """The underlying SQLite store failed."""


__all__ = [
    "BookmarkServiceError",
    "BookmarkValidationError",
    "BookmarkNotFoundError",
    "CycleRejectedError",
    "StoreError",
]
