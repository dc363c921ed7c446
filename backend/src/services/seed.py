"""Seed a small demo bookmark tree for fresh installs."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .bookmark_service import BookmarkService
from .database import DatabaseService, init_database

logger = logging.getLogger(__name__)

# Folders carry "children"; entries with a url are links.
DEMO_BOOKMARKS: List[Dict[str, Any]] = [
    {
        "title": "Daily",
        "icon": "sun",
        "color": "#f59e0b",
        "children": [
            {"title": "Calendar", "url": "https://calendar.google.com"},
            {"title": "Mail", "url": "https://mail.google.com"},
        ],
    },
    {
        "title": "Development",
        "icon": "code",
        "color": "#3b82f6",
        "children": [
            {
                "title": "Python",
                "children": [
                    {"title": "Python docs", "url": "https://docs.python.org/3/"},
                    {"title": "FastAPI", "url": "https://fastapi.tiangolo.com"},
                ],
            },
            {"title": "GitHub", "url": "https://github.com"},
        ],
    },
    {"title": "Hacker News", "url": "https://news.ycombinator.com"},
]


def _seed_level(
    service: BookmarkService,
    entries: List[Dict[str, Any]],
    parent_id: Optional[str] = None,
) -> int:
    created = 0
    for entry in entries:
        node = service.create(
            title=entry["title"],
            url=entry.get("url"),
            description=entry.get("description"),
            parent_id=parent_id,
            icon=entry.get("icon"),
            color=entry.get("color"),
        )
        created += 1
        created += _seed_level(service, entry.get("children", []), node.id)
    return created


def seed_demo_bookmarks(db: Optional[DatabaseService] = None) -> int:
    """Create the demo tree when the bookmarks table is empty.

    Returns the number of bookmarks created.
    """
    db = db or DatabaseService()
    service = BookmarkService(db=db)

    conn = db.connect()
    try:
        existing = service.store.count(conn)
    finally:
        conn.close()
    if existing:
        logger.info(f"Skipping demo seed: {existing} bookmarks already present")
        return 0

    created = _seed_level(service, DEMO_BOOKMARKS)
    logger.info(f"Seeded {created} demo bookmarks")
    return created


def init_and_seed(seed_demo: bool = False) -> None:
    """
    Initialize database schema and optionally seed demo bookmarks.

    Called on application startup so the schema always exists before the
    first request.
    """
    logger.info("Initializing bookmark database...")

    db_path = init_database()
    logger.info(f"Database initialized at: {db_path}")

    if seed_demo:
        seed_demo_bookmarks()


__all__ = ["DEMO_BOOKMARKS", "seed_demo_bookmarks", "init_and_seed"]
