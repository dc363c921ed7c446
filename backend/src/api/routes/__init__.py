"""HTTP API route handlers."""

from . import bookmarks, system

__all__ = ["bookmarks", "system"]
