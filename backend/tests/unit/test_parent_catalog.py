from datetime import datetime, timezone
from typing import Optional

from backend.src.models.bookmark import Bookmark
from backend.src.services.parent_catalog import list_parent_options

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _node(
    node_id: str,
    title: str,
    parent_id: Optional[str] = None,
    url: Optional[str] = None,
) -> Bookmark:
    return Bookmark(
        id=node_id,
        title=title,
        url=url,
        parent_id=parent_id,
        order=1,
        created_at=NOW,
        updated_at=NOW,
    )


def test_lists_folders_with_depth() -> None:
    options = list_parent_options(
        [
            _node("a", "A"),
            _node("b", "B", parent_id="a"),
            _node("c", "C", parent_id="a", url="http://x"),
        ]
    )

    assert [(o.id, o.depth) for o in options] == [("a", 0), ("b", 1)]


def test_sorted_by_depth_then_title() -> None:
    options = list_parent_options(
        [
            _node("z", "Zeta"),
            _node("a", "Alpha"),
            _node("m", "Mid", parent_id="z"),
            _node("b", "Beta", parent_id="a"),
        ]
    )

    assert [o.title for o in options] == ["Alpha", "Zeta", "Beta", "Mid"]
    assert [o.depth for o in options] == [0, 0, 1, 1]


def test_links_and_anything_beneath_them_are_skipped() -> None:
    options = list_parent_options(
        [
            _node("link", "Link", url="http://x"),
            _node("stray", "Stray", parent_id="link"),
        ]
    )

    assert options == []


def test_orphaned_folders_are_not_offered() -> None:
    options = list_parent_options(
        [
            _node("root", "Root"),
            _node("lost", "Lost", parent_id="gone"),
        ]
    )

    assert [o.id for o in options] == ["root"]


def test_deep_folder_chain_is_listed() -> None:
    depth = 1000
    nodes = [_node("n0", "N0")] + [
        _node(f"n{i}", f"N{i}", parent_id=f"n{i - 1}") for i in range(1, depth)
    ]

    options = list_parent_options(nodes)

    assert len(options) == depth
    assert [o.depth for o in options] == list(range(depth))
    assert options[-1].id == f"n{depth - 1}"
