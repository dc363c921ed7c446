"""BookmarkService - operations the HTTP layer exposes over the bookmark tree.

The service holds no tree state between calls: each operation reads the
current rows, and every mutation runs inside one write transaction so the
sibling snapshot it computes from cannot go stale before it is written.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from ..models.bookmark import Bookmark, BookmarkTree, OrderUpdate, ParentOption
from .bookmark_store import UPDATABLE_FIELDS, BookmarkStore
from .database import DatabaseService
from .errors import BookmarkNotFoundError, BookmarkValidationError, StoreError
from .move_coordinator import MoveCoordinator
from .order_allocator import renumber
from .parent_catalog import list_parent_options
from .tree_assembler import assemble

logger = logging.getLogger(__name__)


def _clean_title(title: Optional[str]) -> str:
    if title is None or not title.strip():
        raise BookmarkValidationError("Title is required", {"field": "title"})
    return title.strip()


def _clean_url(url: Optional[str]) -> Optional[str]:
    if url is None or not url.strip():
        return None
    return url.strip()


class BookmarkService:
    """CRUD, move, reorder and catalog operations over the bookmark tree."""

    def __init__(
        self,
        db: Optional[DatabaseService] = None,
        store: Optional[BookmarkStore] = None,
    ):
        """Initialize the bookmark service.

        Args:
            db: Database service instance. Creates new one if not provided.
            store: Row adapter. Creates new one if not provided.
        """
        self.db = db or DatabaseService()
        self.store = store or BookmarkStore()
        self.mover = MoveCoordinator(self.store)

    @contextmanager
    def _read(self, action: str) -> Iterator[sqlite3.Connection]:
        conn = self.db.connect()
        try:
            yield conn
        except sqlite3.Error as e:
            logger.error(f"Failed to {action}: {e}")
            raise StoreError(f"Failed to {action}: {str(e)}") from e
        finally:
            conn.close()

    @contextmanager
    def _write(self, action: str, **details: Any) -> Iterator[sqlite3.Connection]:
        try:
            with self.db.transaction() as conn:
                yield conn
        except sqlite3.Error as e:
            logger.error(f"Failed to {action}: {e}")
            raise StoreError(f"Failed to {action}: {str(e)}", details) from e

    def _require(self, conn: sqlite3.Connection, bookmark_id: str) -> Bookmark:
        node = self.store.get_node(conn, bookmark_id)
        if node is None:
            raise BookmarkNotFoundError(
                f"Bookmark not found: {bookmark_id}", {"id": bookmark_id}
            )
        return node

    # ========================================
    # Reads
    # ========================================

    def get_all(self) -> List[BookmarkTree]:
        """Return the bookmark forest, folders first at every level."""
        with self._read("fetch bookmarks") as conn:
            nodes = self.store.list_nodes(conn)
        return assemble(nodes)

    def get(self, bookmark_id: str) -> Bookmark:
        with self._read("fetch bookmark") as conn:
            return self._require(conn, bookmark_id)

    def get_parent_options(self) -> List[ParentOption]:
        """Folders a bookmark can be filed under, with their depth."""
        with self._read("fetch parent options") as conn:
            nodes = self.store.list_nodes(conn)
        return list_parent_options(nodes)

    # ========================================
    # Mutations
    # ========================================

    def create(
        self,
        title: Optional[str],
        url: Optional[str] = None,
        description: Optional[str] = None,
        parent_id: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Bookmark:
        """Create a bookmark (or a folder when ``url`` is empty) last in its group."""
        title = _clean_title(title)
        url = _clean_url(url)

        with self._write("create bookmark", parent_id=parent_id) as conn:
            if parent_id is not None:
                parent = self._require(conn, parent_id)
                if not parent.is_folder:
                    raise BookmarkValidationError(
                        "Only folders can contain bookmarks", {"parent_id": parent_id}
                    )
            created = self.store.insert_node(
                conn,
                {
                    "title": title,
                    "url": url,
                    "description": description,
                    "parent_id": parent_id,
                    "icon": icon,
                    "color": color,
                    "order": self.store.next_order(conn, parent_id),
                },
            )

        logger.info(f"Created {'link' if url else 'folder'} {created.id} under {parent_id or 'root'}")
        return created

    def update(self, bookmark_id: str, fields: Mapping[str, Any]) -> Bookmark:
        """Apply a partial update.

        Only keys present in ``fields`` change. A ``parent_id`` that differs
        from the current one gets the same checks as a move and lands last in
        its new group unless ``order`` is supplied too.
        """
        changes: Dict[str, Any] = dict(fields)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise BookmarkValidationError(
                f"Unknown fields: {', '.join(sorted(unknown))}", {"fields": sorted(unknown)}
            )
        if "title" in changes:
            changes["title"] = _clean_title(changes["title"])
        if "url" in changes:
            changes["url"] = _clean_url(changes["url"])
        if "order" in changes:
            order = changes["order"]
            if isinstance(order, bool) or not isinstance(order, int):
                raise BookmarkValidationError("order must be an integer", {"order": repr(order)})

        with self._write("update bookmark", id=bookmark_id) as conn:
            current = self._require(conn, bookmark_id)

            if changes.get("url") and current.is_folder and self.store.has_children(conn, bookmark_id):
                raise BookmarkValidationError(
                    "A folder with contents cannot become a link", {"id": bookmark_id}
                )

            if "parent_id" in changes:
                new_parent_id = changes["parent_id"]
                if new_parent_id == current.parent_id:
                    del changes["parent_id"]
                else:
                    self.mover.check_new_parent(conn, bookmark_id, new_parent_id)
                    if "order" not in changes:
                        changes["order"] = self.store.next_order(conn, new_parent_id)

            if not changes:
                return current
            updated = self.store.update_node(conn, bookmark_id, changes)

        logger.info(f"Updated bookmark {bookmark_id}: {', '.join(sorted(changes))}")
        return updated

    def delete(self, bookmark_id: str) -> bool:
        """Delete a bookmark; deleting a folder removes everything under it."""
        with self._write("delete bookmark", id=bookmark_id) as conn:
            deleted = self.store.delete_node(conn, bookmark_id)
        if deleted:
            logger.info(f"Deleted bookmark {bookmark_id}")
        return deleted

    def move(
        self,
        source_id: str,
        new_parent_id: Optional[str],
        insert_index: int,
    ) -> Bookmark:
        """Reparent ``source_id`` and insert it at ``insert_index`` among its new siblings."""
        with self._write(
            "move bookmark", source_id=source_id, new_parent_id=new_parent_id
        ) as conn:
            return self.mover.move(conn, source_id, new_parent_id, insert_index)

    def reorder(self, bookmark_orders: Iterable[Union[OrderUpdate, Mapping[str, Any]]]) -> None:
        """Set order keys in bulk without touching parents.

        The batch is applied atomically; an unknown id rolls back every change.
        """
        items: List[OrderUpdate] = []
        for item in bookmark_orders:
            if isinstance(item, OrderUpdate):
                items.append(item)
                continue
            bookmark_id = item.get("id")
            order = item.get("order")
            if not bookmark_id or isinstance(order, bool) or not isinstance(order, int):
                raise BookmarkValidationError("Each item must have id and order", {"item": dict(item)})
            items.append(OrderUpdate(id=bookmark_id, order=order))

        seen = set()
        for item in items:
            if item.id in seen:
                raise BookmarkValidationError(f"Duplicate id in reorder: {item.id}", {"id": item.id})
            seen.add(item.id)

        with self._write("reorder bookmarks", count=len(items)) as conn:
            for item in items:
                if not self.store.set_order(conn, item.id, item.order):
                    raise BookmarkNotFoundError(f"Bookmark not found: {item.id}", {"id": item.id})

        logger.info(f"Reordered {len(items)} bookmarks")

    def renumber(self, parent_id: Optional[str] = None) -> List[Bookmark]:
        """Rewrite one sibling group to keys 1..n, keeping its current order."""
        with self._write("renumber bookmarks", parent_id=parent_id) as conn:
            if parent_id is not None:
                self._require(conn, parent_id)
            siblings = self.store.list_children(conn, parent_id)
            for sibling, order in zip(siblings, renumber(len(siblings))):
                if sibling.order != order:
                    self.store.set_order(conn, sibling.id, order)
            result = self.store.list_children(conn, parent_id)

        logger.info(f"Renumbered {len(result)} bookmarks under {parent_id or 'root'}")
        return result


_bookmark_service: Optional[BookmarkService] = None


def get_bookmark_service() -> BookmarkService:
    """Get or create the bookmark service singleton."""
    global _bookmark_service
    if _bookmark_service is None:
        _bookmark_service = BookmarkService()
    return _bookmark_service


__all__ = ["BookmarkService", "get_bookmark_service"]
