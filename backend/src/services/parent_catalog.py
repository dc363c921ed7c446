"""Folders that can be offered as a parent in the bookmark form."""

from __future__ import annotations

from typing import Iterable, List

from ..models.bookmark import Bookmark, ParentOption
from .tree_assembler import TreeIndex


def list_parent_options(nodes: Iterable[Bookmark]) -> List[ParentOption]:
    """Walk folders from the roots down, recording each one's depth.

    Links are skipped along with anything beneath them. Results are sorted by
    depth, then title.
    """
    index = TreeIndex(nodes)
    options: List[ParentOption] = []

    stack = [(root_id, 0) for root_id in index.roots]
    while stack:
        node_id, depth = stack.pop()
        node = index.by_id[node_id]
        if not node.is_folder:
            continue
        options.append(ParentOption(id=node.id, title=node.title, depth=depth))
        stack.extend((child_id, depth + 1) for child_id in index.children.get(node_id, []))

    options.sort(key=lambda option: (option.depth, option.title))
    return options


__all__ = ["list_parent_options"]
