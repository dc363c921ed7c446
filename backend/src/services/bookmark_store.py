"""Row-level access to the ``bookmarks`` table.

Every method works on a connection handed in by the caller so that a whole
move or reorder can share one transaction (see ``DatabaseService.transaction``).
"""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models.bookmark import Bookmark

COLUMNS = (
    'id, title, url, description, parent_id, icon, color, "order", created_at, updated_at'
)

# Fields a caller may change through update_node; id and created_at are fixed.
UPDATABLE_FIELDS = frozenset(
    {"title", "url", "description", "parent_id", "icon", "color", "order"}
)


def _timestamp(value: datetime) -> str:
    # Fixed-width UTC text so ORDER BY created_at sorts chronologically.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _now() -> str:
    return _timestamp(datetime.now(timezone.utc))


def _parent_clause(parent_id: Optional[str]) -> tuple[str, tuple]:
    if parent_id is None:
        return "parent_id IS NULL", ()
    return "parent_id = ?", (parent_id,)


class BookmarkStore:
    """Flat CRUD over bookmark rows."""

    def _row_to_bookmark(self, row: sqlite3.Row) -> Bookmark:
        return Bookmark(
            id=row["id"],
            title=row["title"],
            url=row["url"],
            description=row["description"],
            parent_id=row["parent_id"],
            icon=row["icon"],
            color=row["color"],
            order=row["order"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def list_nodes(self, conn: sqlite3.Connection) -> List[Bookmark]:
        cursor = conn.execute(f"SELECT {COLUMNS} FROM bookmarks")
        return [self._row_to_bookmark(row) for row in cursor.fetchall()]

    def get_node(self, conn: sqlite3.Connection, node_id: str) -> Optional[Bookmark]:
        cursor = conn.execute(f"SELECT {COLUMNS} FROM bookmarks WHERE id = ?", (node_id,))
        row = cursor.fetchone()
        return self._row_to_bookmark(row) if row else None

    def list_children(
        self,
        conn: sqlite3.Connection,
        parent_id: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> List[Bookmark]:
        """Return one sibling group ordered by order key, newest first on ties."""
        clause, params = _parent_clause(parent_id)
        if exclude_id is not None:
            clause += " AND id != ?"
            params += (exclude_id,)
        cursor = conn.execute(
            f"""
            SELECT {COLUMNS} FROM bookmarks
            WHERE {clause}
            ORDER BY "order" ASC, created_at DESC
            """,
            params,
        )
        return [self._row_to_bookmark(row) for row in cursor.fetchall()]

    def has_children(self, conn: sqlite3.Connection, node_id: str) -> bool:
        cursor = conn.execute("SELECT 1 FROM bookmarks WHERE parent_id = ? LIMIT 1", (node_id,))
        return cursor.fetchone() is not None

    def next_order(self, conn: sqlite3.Connection, parent_id: Optional[str]) -> int:
        """Order key that places a new node last in its sibling group."""
        clause, params = _parent_clause(parent_id)
        cursor = conn.execute(
            f'SELECT COALESCE(MAX("order"), 0) + 1 AS next_order FROM bookmarks WHERE {clause}',
            params,
        )
        return cursor.fetchone()["next_order"]

    def insert_node(self, conn: sqlite3.Connection, fields: Dict[str, Any]) -> Bookmark:
        node_id = fields.get("id") or str(uuid.uuid4())
        now = _now()
        created_at = fields.get("created_at")
        created = _timestamp(created_at) if created_at else now
        conn.execute(
            f"""
            INSERT INTO bookmarks ({COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                node_id,
                fields["title"],
                fields.get("url"),
                fields.get("description"),
                fields.get("parent_id"),
                fields.get("icon"),
                fields.get("color"),
                fields["order"],
                created,
                now,
            ),
        )
        return self.get_node(conn, node_id)

    def update_node(
        self, conn: sqlite3.Connection, node_id: str, fields: Dict[str, Any]
    ) -> Optional[Bookmark]:
        """Apply a partial update and refresh ``updated_at``; None if the row is missing."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        assignments = [f'"{name}" = ?' for name in fields]
        params: list[Any] = list(fields.values())
        assignments.append("updated_at = ?")
        params.append(_now())
        params.append(node_id)

        cursor = conn.execute(
            f"UPDATE bookmarks SET {', '.join(assignments)} WHERE id = ?",
            params,
        )
        if cursor.rowcount == 0:
            return None
        return self.get_node(conn, node_id)

    def set_order(self, conn: sqlite3.Connection, node_id: str, order: int) -> bool:
        cursor = conn.execute(
            'UPDATE bookmarks SET "order" = ?, updated_at = ? WHERE id = ?',
            (order, _now(), node_id),
        )
        return cursor.rowcount > 0

    def delete_node(self, conn: sqlite3.Connection, node_id: str) -> bool:
        """Delete a row; the foreign key cascade removes its whole subtree."""
        cursor = conn.execute("DELETE FROM bookmarks WHERE id = ?", (node_id,))
        return cursor.rowcount > 0

    def count(self, conn: sqlite3.Connection) -> int:
        return conn.execute("SELECT COUNT(*) FROM bookmarks").fetchone()[0]


__all__ = ["BookmarkStore", "UPDATABLE_FIELDS"]
