"""Reparent-and-reposition for bookmark nodes.

All checks run against the rows visible inside the caller's transaction and
complete before the first write, so a rejected move leaves the table as it
was. Only the moved node (plus any siblings shifted by a rebalance) is
written; its descendants keep their own parent and order.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from ..models.bookmark import Bookmark
from .bookmark_store import BookmarkStore
from .errors import BookmarkNotFoundError, BookmarkValidationError, CycleRejectedError
from .order_allocator import OrderAllocation, allocate
from .tree_assembler import TreeIndex

logger = logging.getLogger(__name__)


def check_insert_index(insert_index: object) -> int:
    # bool is an int subclass but never a meaningful position
    if isinstance(insert_index, bool) or not isinstance(insert_index, int):
        raise BookmarkValidationError(
            "insert_index must be an integer",
            {"insert_index": repr(insert_index)},
        )
    return insert_index


class MoveCoordinator:
    """Validate and apply moves within one open transaction."""

    def __init__(self, store: Optional[BookmarkStore] = None):
        self.store = store or BookmarkStore()

    def check_new_parent(
        self,
        conn: sqlite3.Connection,
        node_id: str,
        new_parent_id: Optional[str],
    ) -> Optional[Bookmark]:
        """Reject a parent that is missing, a link, the node itself or one of its descendants.

        Returns the parent row, or None for the root.
        """
        if new_parent_id is None:
            return None
        if new_parent_id == node_id:
            raise CycleRejectedError(
                "A bookmark cannot be its own parent",
                {"source_id": node_id, "new_parent_id": new_parent_id},
            )

        index = TreeIndex(self.store.list_nodes(conn))
        parent = index.by_id.get(new_parent_id)
        if parent is None:
            raise BookmarkNotFoundError(
                f"Parent bookmark not found: {new_parent_id}",
                {"id": new_parent_id},
            )
        if new_parent_id in index.descendants(node_id):
            raise CycleRejectedError(
                "Cannot move a bookmark into its own subtree",
                {"source_id": node_id, "new_parent_id": new_parent_id},
            )
        if not parent.is_folder:
            raise BookmarkValidationError(
                "Only folders can contain bookmarks",
                {"new_parent_id": new_parent_id},
            )
        return parent

    def place(
        self,
        conn: sqlite3.Connection,
        node_id: str,
        new_parent_id: Optional[str],
        insert_index: int,
    ) -> OrderAllocation:
        """Allocate a key in the target group and write any rebalance shifts."""
        siblings = self.store.list_children(conn, new_parent_id, exclude_id=node_id)
        allocation = allocate([sibling.order for sibling in siblings], insert_index)
        # shifts arrive last-first, so no two siblings share a key mid-update
        for position, new_order in allocation.shifts:
            self.store.set_order(conn, siblings[position].id, new_order)
        return allocation

    def move(
        self,
        conn: sqlite3.Connection,
        source_id: str,
        new_parent_id: Optional[str],
        insert_index: int,
    ) -> Bookmark:
        """Move ``source_id`` under ``new_parent_id`` at ``insert_index``."""
        insert_index = check_insert_index(insert_index)

        source = self.store.get_node(conn, source_id)
        if source is None:
            raise BookmarkNotFoundError(f"Bookmark not found: {source_id}", {"id": source_id})

        self.check_new_parent(conn, source_id, new_parent_id)

        allocation = self.place(conn, source_id, new_parent_id, insert_index)
        moved = self.store.update_node(
            conn,
            source_id,
            {"parent_id": new_parent_id, "order": allocation.new_order},
        )
        logger.info(
            f"Moved bookmark {source_id} under {new_parent_id or 'root'} "
            f"at index {insert_index} (order={allocation.new_order}, "
            f"shifted={len(allocation.shifts)})"
        )
        return moved


__all__ = ["MoveCoordinator", "check_insert_index"]
