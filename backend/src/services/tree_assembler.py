"""Build the nested bookmark forest from flat rows.

The tree only exists as a derived view: rows carry a ``parent_id`` back
reference, and the assembler indexes them by id and by parent before
materialising ``BookmarkTree`` objects top-down.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from ..models.bookmark import Bookmark, BookmarkTree

logger = logging.getLogger(__name__)


def sibling_sort_key(node: Bookmark) -> tuple:
    """Folders before links, then ascending order, newest first on ties."""
    return (0 if node.is_folder else 1, node.order, -node.created_at.timestamp())


class TreeIndex:
    """Id map plus parent -> child-id index over one snapshot of rows."""

    def __init__(self, nodes: Iterable[Bookmark]):
        self.by_id: Dict[str, Bookmark] = {}
        for node in nodes:
            self.by_id[node.id] = node

        self.roots: List[str] = []
        self.children: Dict[str, List[str]] = {}
        self.orphans: List[str] = []
        for node in self.by_id.values():
            if node.parent_id is None:
                self.roots.append(node.id)
            elif node.parent_id in self.by_id:
                self.children.setdefault(node.parent_id, []).append(node.id)
            else:
                self.orphans.append(node.id)

    def child_ids(self, node_id: Optional[str]) -> List[str]:
        """Ids under ``node_id`` (roots for None), sorted for display."""
        ids = self.roots if node_id is None else self.children.get(node_id, [])
        return sorted(ids, key=lambda child_id: sibling_sort_key(self.by_id[child_id]))

    def descendants(self, node_id: str) -> Set[str]:
        """Every id below ``node_id``; assumes the stored tree is acyclic."""
        found: Set[str] = set()
        queue = deque(self.children.get(node_id, []))
        while queue:
            current = queue.popleft()
            if current in found:
                continue
            found.add(current)
            queue.extend(self.children.get(current, []))
        return found


def assemble(nodes: Iterable[Bookmark]) -> List[BookmarkTree]:
    """Return the root-level forest with children nested and ordered.

    Rows whose parent no longer exists are left out of the forest, as is
    anything recorded under a link, since links never hold children.
    """
    index = TreeIndex(nodes)
    if index.orphans:
        logger.debug(f"Dropping {len(index.orphans)} bookmarks with a missing parent")

    def shell(node_id: str) -> BookmarkTree:
        return BookmarkTree(**index.by_id[node_id].model_dump(exclude={"children"}))

    # Explicit stack so nesting depth is not bounded by the interpreter.
    forest = [shell(root_id) for root_id in index.child_ids(None)]
    stack = list(forest)
    while stack:
        parent = stack.pop()
        if not parent.is_folder:
            continue
        for child_id in index.child_ids(parent.id):
            child = shell(child_id)
            parent.children.append(child)
            stack.append(child)
    return forest


__all__ = ["TreeIndex", "assemble", "sibling_sort_key"]
