"""Service layer for the bookmark tree."""

from .bookmark_service import BookmarkService, get_bookmark_service
from .bookmark_store import BookmarkStore
from .config import AppConfig, get_config, reload_config
from .database import DatabaseService, init_database
from .errors import (
    BookmarkNotFoundError,
    BookmarkServiceError,
    BookmarkValidationError,
    CycleRejectedError,
    StoreError,
)
from .move_coordinator import MoveCoordinator
from .order_allocator import OrderAllocation, allocate, renumber
from .parent_catalog import list_parent_options
from .tree_assembler import TreeIndex, assemble

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "DatabaseService",
    "init_database",
    "BookmarkStore",
    "BookmarkService",
    "get_bookmark_service",
    "BookmarkServiceError",
    "BookmarkValidationError",
    "BookmarkNotFoundError",
    "CycleRejectedError",
    "StoreError",
    "MoveCoordinator",
    "OrderAllocation",
    "allocate",
    "renumber",
    "list_parent_options",
    "TreeIndex",
    "assemble",
]
