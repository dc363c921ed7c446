"""SQLite database helpers for the bookmark tree schema."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
import sqlite3
from typing import Iterable, Iterator, Optional

from .config import get_config

DEFAULT_TIMEOUT = 5.0

DDL_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS bookmarks (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        url TEXT,
        description TEXT,
        parent_id TEXT REFERENCES bookmarks(id) ON DELETE CASCADE,
        icon TEXT,
        color TEXT,
        "order" INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_bookmarks_parent ON bookmarks(parent_id, \"order\")",
)


class DatabaseService:
    """Manage SQLite connections and schema initialization."""

    def __init__(self, db_path: str | Path | None = None, timeout: Optional[float] = None):
        if db_path is None:
            config = get_config()
            db_path = config.database_path
            if timeout is None:
                timeout = config.database_timeout
        self.db_path = Path(db_path)
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT

    def _ensure_directory(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        """Return a sqlite3 connection with foreign keys (and cascades) enforced."""
        self._ensure_directory()
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside one write transaction.

        BEGIN IMMEDIATE takes the write lock up front, so a read-then-write
        sequence cannot interleave with another writer.
        """
        conn = self.connect()
        conn.isolation_level = None
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                # SQLite may already have rolled back (SQLITE_FULL, IOERR)
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def initialize(self, statements: Iterable[str] | None = None) -> Path:
        """Create all schema artifacts required for the bookmark tree."""
        conn = self.connect()
        try:
            with conn:  # Transactional apply of DDL
                for statement in statements or DDL_STATEMENTS:
                    conn.execute(statement)
        finally:
            conn.close()
        return self.db_path


def init_database(db_path: str | Path | None = None) -> Path:
    """Convenience wrapper used on application startup."""
    return DatabaseService(db_path).initialize()


__all__ = ["DatabaseService", "init_database", "DDL_STATEMENTS"]
