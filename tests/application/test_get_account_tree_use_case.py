"""Tests for the GetAccountTreeUseCase."""

from unittest.mock import MagicMock

from dre_config.application.use_cases.get_account_tree import (
    GetAccountTreeUseCase,
)
from dre_config.domain.models import AccountKind, AccountNode, FlexPayload
from dre_config.infrastructure.memory_node_store import InMemoryNodeStore


def _node(
    node_id: str,
    parent_id: str | None = None,
    display_order: int = 1,
    is_active: bool = True,
    visibility: tuple[str, ...] = (),
    company_id: str = "C1",
) -> AccountNode:
    return AccountNode(
        id=node_id,
        company_id=company_id,
        code=node_id.upper(),
        name=f"Linha {node_id}",
        kind=AccountKind.FLEX,
        payload=FlexPayload(),
        parent_id=parent_id,
        display_order=display_order,
        is_active=is_active,
        company_visibility=frozenset(visibility),
    )


def _rows_as_tuples(rows) -> list[tuple[str, int, bool]]:
    return [(row.node.id, row.level, row.has_children) for row in rows]


def test_execute_returns_depth_first_rows() -> None:
    """Roots are ordered by rank and followed by their children."""
    store = InMemoryNodeStore(
        [
            _node("b", display_order=2),
            _node("a", display_order=1),
            _node("a2", parent_id="a", display_order=2),
            _node("a1", parent_id="a", display_order=1),
            _node("a1x", parent_id="a1"),
            _node("other", company_id="C2"),
        ]
    )
    use_case = GetAccountTreeUseCase(store, logger=MagicMock())

    rows = use_case.execute("C1")

    assert _rows_as_tuples(rows) == [
        ("a", 0, True),
        ("a1", 1, True),
        ("a1x", 2, False),
        ("a2", 1, False),
        ("b", 0, False),
    ]


def test_execute_hides_inactive_subtrees_on_request() -> None:
    """An inactive node hides its descendants when inactive rows are off."""
    store = InMemoryNodeStore(
        [
            _node("a", is_active=False),
            _node("a1", parent_id="a"),
            _node("b", display_order=2),
        ]
    )
    use_case = GetAccountTreeUseCase(store, logger=MagicMock())

    assert [row.node.id for row in use_case.execute("C1")] == ["a", "a1", "b"]
    assert [
        row.node.id for row in use_case.execute("C1", include_inactive=False)
    ] == ["b"]


def test_execute_filters_by_company_visibility() -> None:
    """Empty visibility means enabled everywhere."""
    store = InMemoryNodeStore(
        [
            _node("shared"),
            _node("c1_only", display_order=2, visibility=("C1",)),
            _node("c2_only", display_order=3, visibility=("C2",)),
        ]
    )
    use_case = GetAccountTreeUseCase(store, logger=MagicMock())

    rows = use_case.execute("C1", visible_for="C1")

    assert [row.node.id for row in rows] == ["shared", "c1_only"]


def test_execute_survives_cycles_and_logs_warning() -> None:
    """A node reached twice is skipped with a warning."""
    logger = MagicMock()
    store = InMemoryNodeStore(
        [
            _node("root"),
            _node("x", parent_id="root"),
            _node("y", parent_id="x"),
        ]
    )
    # Corrupt the index so that y lists root as its child.
    store._children[("C1", "y")].add("root")
    use_case = GetAccountTreeUseCase(store, logger=logger)

    rows = use_case.execute("C1")

    assert [row.node.id for row in rows] == ["root", "x", "y"]
    logger.warning.assert_called_once()
