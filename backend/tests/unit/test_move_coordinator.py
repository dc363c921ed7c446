import sqlite3
from pathlib import Path
from typing import Optional

import pytest

from backend.src.services.bookmark_service import BookmarkService
from backend.src.services.database import DatabaseService
from backend.src.services.errors import (
    BookmarkNotFoundError,
    BookmarkValidationError,
    CycleRejectedError,
    StoreError,
)
from backend.src.services.move_coordinator import MoveCoordinator


@pytest.fixture()
def db(tmp_path: Path) -> DatabaseService:
    db_service = DatabaseService(tmp_path / "dashboard.db")
    db_service.initialize()
    return db_service


@pytest.fixture()
def service(db: DatabaseService) -> BookmarkService:
    return BookmarkService(db=db)


def _add(
    service: BookmarkService,
    node_id: str,
    parent_id: Optional[str] = None,
    order: int = 1,
    url: Optional[str] = None,
) -> None:
    with service.db.transaction() as conn:
        service.store.insert_node(
            conn,
            {"id": node_id, "title": node_id.upper(), "url": url, "parent_id": parent_id, "order": order},
        )


def _row(service: BookmarkService, node_id: str):
    conn = service.db.connect()
    try:
        return service.store.get_node(conn, node_id)
    finally:
        conn.close()


def _snapshot(service: BookmarkService) -> list:
    conn = service.db.connect()
    try:
        return sorted(
            (node.model_dump() for node in service.store.list_nodes(conn)),
            key=lambda row: row["id"],
        )
    finally:
        conn.close()


def _children(service: BookmarkService, parent_id: Optional[str]) -> list[str]:
    conn = service.db.connect()
    try:
        return [node.id for node in service.store.list_children(conn, parent_id)]
    finally:
        conn.close()


@pytest.fixture()
def scenario(service: BookmarkService) -> BookmarkService:
    """a (folder) holding b (folder, order 1) and c (link, order 2)."""
    _add(service, "a", order=1)
    _add(service, "b", parent_id="a", order=1)
    _add(service, "c", parent_id="a", order=2, url="http://x")
    return service


def test_move_link_into_sibling_folder(scenario: BookmarkService) -> None:
    scenario.move("c", "b", 0)

    moved = _row(scenario, "c")
    assert moved.parent_id == "b"
    assert moved.order == 1

    forest = scenario.get_all()
    a = forest[0]
    assert [child.id for child in a.children] == ["b"]
    assert [child.id for child in a.children[0].children] == ["c"]

    options = scenario.get_parent_options()
    assert [(o.id, o.depth) for o in options] == [("a", 0), ("b", 1)]


def test_move_onto_itself_is_rejected(scenario: BookmarkService) -> None:
    before = _snapshot(scenario)

    with pytest.raises(CycleRejectedError):
        scenario.move("a", "a", 0)

    assert _snapshot(scenario) == before


def test_move_into_descendant_is_rejected(scenario: BookmarkService) -> None:
    _add(scenario, "d", parent_id="b")
    before = _snapshot(scenario)

    with pytest.raises(CycleRejectedError):
        scenario.move("a", "b", 0)
    with pytest.raises(CycleRejectedError):
        scenario.move("a", "d", 0)

    assert _snapshot(scenario) == before


def test_missing_source_is_not_found(scenario: BookmarkService) -> None:
    with pytest.raises(BookmarkNotFoundError):
        scenario.move("nope", None, 0)


def test_missing_target_is_not_found(scenario: BookmarkService) -> None:
    before = _snapshot(scenario)

    with pytest.raises(BookmarkNotFoundError):
        scenario.move("c", "nope", 0)

    assert _snapshot(scenario) == before


def test_link_cannot_become_a_parent(scenario: BookmarkService) -> None:
    with pytest.raises(BookmarkValidationError):
        scenario.move("b", "c", 0)

    assert _row(scenario, "b").parent_id == "a"


@pytest.mark.parametrize("insert_index", ["1", 1.5, True, None])
def test_malformed_insert_index(scenario: BookmarkService, insert_index) -> None:
    with pytest.raises(BookmarkValidationError):
        scenario.move("c", "b", insert_index)


def test_move_to_root_prepends(scenario: BookmarkService) -> None:
    scenario.move("b", None, 0)

    moved = _row(scenario, "b")
    assert moved.parent_id is None
    assert moved.order == 0
    assert _children(scenario, None) == ["b", "a"]


def test_descendants_keep_their_placement(scenario: BookmarkService) -> None:
    _add(scenario, "d", parent_id="b", order=7)
    before = _row(scenario, "d")

    scenario.move("b", None, 5)

    after = _row(scenario, "d")
    assert after.parent_id == "b"
    assert after.order == 7
    assert after.updated_at == before.updated_at


def test_insert_between_adjacent_keys_rebalances(service: BookmarkService) -> None:
    _add(service, "g")
    for order, node_id in enumerate(["x1", "x2", "x3"], start=1):
        _add(service, node_id, parent_id="g", order=order)
    _add(service, "m", order=2)

    service.move("m", "g", 1)

    assert _children(service, "g") == ["x1", "m", "x2", "x3"]
    orders = [_row(service, node_id).order for node_id in ["x1", "m", "x2", "x3"]]
    assert orders == [1, 2, 3, 4]


def test_repeated_move_converges(service: BookmarkService) -> None:
    _add(service, "g")
    for order, node_id in enumerate(["x1", "x2", "x3"], start=1):
        _add(service, node_id, parent_id="g", order=order)
    _add(service, "m", order=2)

    service.move("m", "g", 1)
    first = _children(service, "g")
    service.move("m", "g", 1)
    second = _children(service, "g")

    assert first == second == ["x1", "m", "x2", "x3"]
    assert _row(service, "m").parent_id == "g"


def test_reposition_within_same_group(service: BookmarkService) -> None:
    for order, node_id in enumerate(["p", "q", "r"], start=1):
        _add(service, node_id, order=order)

    service.move("r", None, 0)

    assert _children(service, None) == ["r", "p", "q"]


def test_failed_write_rolls_back_rebalance(
    service: BookmarkService, monkeypatch: pytest.MonkeyPatch
) -> None:
    _add(service, "g")
    for order, node_id in enumerate(["x1", "x2", "x3"], start=1):
        _add(service, node_id, parent_id="g", order=order)
    _add(service, "m", order=2)
    before = _snapshot(service)

    def boom(*args, **kwargs):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(service.store, "update_node", boom)

    with pytest.raises(StoreError):
        service.move("m", "g", 1)

    assert _snapshot(service) == before


def test_coordinator_runs_inside_callers_transaction(db: DatabaseService) -> None:
    service = BookmarkService(db=db)
    _add(service, "a")
    _add(service, "b", order=2)
    coordinator = MoveCoordinator(service.store)

    with db.transaction() as conn:
        moved = coordinator.move(conn, "b", "a", 0)

    assert moved.parent_id == "a"
    assert moved.order == 1
