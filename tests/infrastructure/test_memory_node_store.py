"""Tests for the in-memory node store."""

from dataclasses import replace

import pytest

from dre_config.domain.models import AccountKind, AccountNode, FlexPayload
from dre_config.infrastructure.memory_node_store import InMemoryNodeStore


def _node(
    node_id: str,
    parent_id: str | None = None,
    display_order: int = 1,
    company_id: str = "C1",
) -> AccountNode:
    return AccountNode(
        id=node_id,
        company_id=company_id,
        code=node_id.upper(),
        name=node_id,
        kind=AccountKind.FLEX,
        payload=FlexPayload(),
        parent_id=parent_id,
        display_order=display_order,
    )


def test_children_are_ordered_by_rank_then_id() -> None:
    """Ties on display order are broken by id."""
    store = InMemoryNodeStore(
        [
            _node("b", display_order=1),
            _node("c", display_order=0),
            _node("a", display_order=1),
            _node("x", company_id="C2"),
        ]
    )

    assert [node.id for node in store.roots("C1")] == ["c", "a", "b"]
    assert [node.id for node in store.roots("C2")] == ["x"]


def test_upsert_moves_node_between_sibling_lists() -> None:
    """The children index follows parent changes."""
    store = InMemoryNodeStore([_node("p"), _node("q"), _node("n", "p")])

    store.upsert(replace(store.get("n"), parent_id="q"))

    assert store.children("C1", "p") == []
    assert [node.id for node in store.children("C1", "q")] == ["n"]


def test_remove_many_counts_existing_ids() -> None:
    """Unknown ids are ignored."""
    store = InMemoryNodeStore([_node("a"), _node("b", "a")])

    assert store.remove_many(["b", "missing"]) == 1
    assert store.children("C1", "a") == []
    store.remove("missing")
    assert len(store) == 1


def test_insert_batch_is_all_or_nothing() -> None:
    """A colliding id rejects the whole batch."""
    store = InMemoryNodeStore([_node("a")])

    with pytest.raises(ValueError):
        store.insert_batch([_node("b"), _node("a")])
    with pytest.raises(ValueError):
        store.insert_batch([_node("c"), _node("c")])

    assert [node.id for node in store.list_company("C1")] == ["a"]
    assert store.insert_batch([_node("b"), _node("c", "b")]) == 2
    assert len(store) == 3


def test_replace_company_swaps_forest_and_checks_company() -> None:
    """Only the target company's nodes are replaced."""
    store = InMemoryNodeStore([_node("a"), _node("z", company_id="C2")])

    with pytest.raises(ValueError):
        store.replace_company("C1", [_node("b", company_id="C2")])
    with pytest.raises(ValueError):
        store.replace_company("C1", [_node("z")])
    assert store.get("a") is not None

    assert store.replace_company("C1", [_node("b"), _node("a")]) == 2
    assert [node.id for node in store.list_company("C1")] == ["a", "b"]
    assert store.get("z") is not None


def test_records_round_trip() -> None:
    """Stores can be rebuilt from their flat records."""
    store = InMemoryNodeStore([_node("a"), _node("b", "a", 2)])

    rebuilt = InMemoryNodeStore.from_records(store.to_records())

    assert rebuilt.to_records() == store.to_records()
    assert [node.id for node in rebuilt.children("C1", "a")] == ["b"]


def test_remove_and_upsert_restores_state_on_failure(monkeypatch) -> None:
    """A failing upsert puts removed and updated nodes back."""
    store = InMemoryNodeStore(
        [_node("a"), _node("a1", "a"), _node("b", display_order=2)]
    )
    before = store.to_records()

    def _fail(nodes):
        raise RuntimeError("write failed")

    monkeypatch.setattr(store, "upsert_many", _fail)

    with pytest.raises(RuntimeError):
        store.remove_and_upsert(
            ["a", "a1"],
            [replace(store.get("b"), name="bb"), _node("c")],
        )

    assert store.to_records() == before
    assert [node.id for node in store.children("C1", "a")] == ["a1"]


def test_remove_and_upsert_applies_both_changes() -> None:
    """Removed ids are gone and upserted nodes are stored."""
    store = InMemoryNodeStore([_node("a"), _node("b", display_order=2)])

    removed = store.remove_and_upsert(
        ["a", "missing"],
        [replace(store.get("b"), name="bb")],
    )

    assert removed == 1
    assert store.get("a") is None
    assert store.get("b").name == "bb"
