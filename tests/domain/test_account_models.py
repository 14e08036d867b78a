"""Tests for the account node models."""

import pytest

from dre_config.domain.errors import InvalidReferenceError
from dre_config.domain.models import (
    AccountKind,
    AccountNode,
    CategoryPayload,
    FlexPayload,
    FlexSign,
    IndicatorPayload,
    RevenueOrExpense,
    TotalPayload,
)


def _node(**overrides) -> AccountNode:
    values = {
        "id": "n1",
        "company_id": "C1",
        "code": "R01",
        "name": "Vendas",
        "kind": AccountKind.CATEGORY,
        "payload": CategoryPayload(("cat-1",), RevenueOrExpense.REVENUE),
        "parent_id": None,
        "display_order": 1,
    }
    values.update(overrides)
    return AccountNode(**values)


def test_payloads_drop_duplicate_ids_keeping_order() -> None:
    """Selections behave as ordered sets."""
    assert CategoryPayload(("b", "a", "b")).category_ids == ("b", "a")
    assert TotalPayload(("x", "y", "x")).selected_account_ids == ("x", "y")
    assert TotalPayload(("x", "y", "z")).without({"y"}).selected_account_ids == (
        "x",
        "z",
    )


def test_node_rejects_payload_of_another_kind() -> None:
    """A total cannot carry an indicator payload."""
    with pytest.raises(InvalidReferenceError):
        _node(kind=AccountKind.TOTAL, payload=IndicatorPayload("ind-1"))


def test_committed_node_requires_payload() -> None:
    """Only uncommitted nodes may lack a payload."""
    with pytest.raises(InvalidReferenceError):
        _node(payload=None)

    draft = _node(payload=None, is_new=True)

    assert draft.payload is None
    assert draft.category_ids == ()


def test_node_coerces_kind_and_visibility() -> None:
    """String kinds and visibility lists are normalized."""
    node = _node(
        kind="flex",
        payload=FlexPayload(FlexSign.NEGATIVE),
        company_visibility=["C1", "C2", "C1"],
    )

    assert node.kind is AccountKind.FLEX
    assert node.company_visibility == frozenset({"C1", "C2"})
    assert node.sign is FlexSign.NEGATIVE
    assert node.indicator_id is None


def test_record_round_trip_keeps_every_field() -> None:
    """to_record and from_record are inverse for each kind."""
    nodes = [
        _node(company_visibility={"C2", "C1"}, is_expanded=True),
        _node(
            id="n2",
            kind=AccountKind.INDICATOR,
            payload=IndicatorPayload("ind-1"),
            parent_id="n1",
        ),
        _node(
            id="n3",
            kind=AccountKind.TOTAL,
            payload=TotalPayload(("n1", "n2")),
            is_active=False,
        ),
        _node(id="n4", kind=AccountKind.FLEX, payload=FlexPayload()),
        _node(id="n5", payload=None, is_new=True, is_editing=True),
    ]

    for node in nodes:
        assert AccountNode.from_record(node.to_record()) == node


def test_record_uses_flat_json_friendly_values() -> None:
    """Records expose enum values and sorted lists."""
    record = _node(company_visibility={"C2", "C1"}).to_record()

    assert record["kind"] == "category"
    assert record["company_visibility"] == ["C1", "C2"]
    assert record["category_ids"] == ["cat-1"]
    assert record["revenue_or_expense"] == "revenue"
    assert record["has_payload"] is True


def test_indicator_record_without_indicator_is_invalid() -> None:
    """An indicator row without its reference cannot be loaded."""
    record = _node(
        kind=AccountKind.INDICATOR,
        payload=IndicatorPayload("ind-1"),
    ).to_record()
    record["indicator_id"] = None

    with pytest.raises(InvalidReferenceError):
        AccountNode.from_record(record)


def test_committed_name_defaults_to_name() -> None:
    """Committed nodes never fall back to a blank committed name."""
    record = _node().to_record()
    del record["committed_name"]

    assert AccountNode.from_record(record).committed_name == "Vendas"
    assert _node(payload=None, is_new=True, name="x").committed_name == ""
