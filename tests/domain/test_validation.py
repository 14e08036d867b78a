"""Tests for payload and name validation."""

import pytest

from dre_config.domain.errors import (
    CrossTenantReferenceError,
    EmptyNameError,
    InvalidReferenceError,
)
from dre_config.domain.models import (
    AccountKind,
    AccountNode,
    CategoryPayload,
    CategoryRef,
    FlexPayload,
    IndicatorPayload,
    IndicatorRef,
    RevenueOrExpense,
    TotalPayload,
)
from dre_config.domain.services.validation import (
    validate_account_name,
    validate_category_payload,
    validate_indicator_payload,
    validate_payload,
    validate_total_payload,
)


_CATEGORIES = {
    "sales": CategoryRef("sales", "Vendas", RevenueOrExpense.REVENUE),
    "fees": CategoryRef("fees", "Taxas", RevenueOrExpense.REVENUE),
    "rent": CategoryRef("rent", "Aluguel", RevenueOrExpense.EXPENSE),
}
_INDICATORS = {"ebitda": IndicatorRef("ebitda", "EBITDA")}


def _node(node_id: str, kind: AccountKind, company_id: str = "C1"):
    payloads = {
        AccountKind.CATEGORY: CategoryPayload(("sales",)),
        AccountKind.INDICATOR: IndicatorPayload("ebitda"),
        AccountKind.TOTAL: TotalPayload(("a",)),
        AccountKind.FLEX: FlexPayload(),
    }
    return AccountNode(
        id=node_id,
        company_id=company_id,
        code=node_id,
        name=node_id,
        kind=kind,
        payload=payloads[kind],
        parent_id=None,
        display_order=1,
    )


_NODES = {
    "a": _node("a", AccountKind.CATEGORY),
    "b": _node("b", AccountKind.INDICATOR),
    "t": _node("t", AccountKind.TOTAL),
    "f": _node("f", AccountKind.FLEX),
    "foreign": _node("foreign", AccountKind.CATEGORY, company_id="C2"),
}


def test_validate_account_name_trims_and_rejects_blank() -> None:
    """Names are trimmed; blank names raise."""
    assert validate_account_name("  Receita  ") == "Receita"
    for blank in ("", "   ", None):
        with pytest.raises(EmptyNameError):
            validate_account_name(blank)


def test_category_payload_inherits_type_of_first_category() -> None:
    """The selection type comes from the registry."""
    validated = validate_category_payload(
        CategoryPayload(("sales", "fees")),
        _CATEGORIES.get,
    )

    assert validated.revenue_or_expense is RevenueOrExpense.REVENUE
    assert validated.category_ids == ("sales", "fees")


@pytest.mark.parametrize(
    "category_ids",
    [(), ("missing",), ("sales", "rent")],
)
def test_category_payload_rejections(category_ids) -> None:
    """Empty, unknown and mixed selections are invalid."""
    with pytest.raises(InvalidReferenceError):
        validate_category_payload(CategoryPayload(category_ids), _CATEGORIES.get)


def test_indicator_payload_must_exist() -> None:
    """Indicators are resolved through the registry."""
    payload = IndicatorPayload("ebitda")

    assert validate_indicator_payload(payload, _INDICATORS.get) is payload
    with pytest.raises(InvalidReferenceError):
        validate_indicator_payload(IndicatorPayload("nope"), _INDICATORS.get)
    with pytest.raises(InvalidReferenceError):
        validate_indicator_payload(IndicatorPayload(""), _INDICATORS.get)


def test_total_payload_accepts_categories_and_indicators() -> None:
    """Category and indicator sources of the same company are valid."""
    payload = TotalPayload(("a", "b"))

    assert validate_total_payload("new", "C1", payload, _NODES.get) is payload


@pytest.mark.parametrize(
    ("selected", "error"),
    [
        ((), InvalidReferenceError),
        (("new",), InvalidReferenceError),
        (("missing",), InvalidReferenceError),
        (("a", "t"), InvalidReferenceError),
        (("a", "f"), InvalidReferenceError),
        (("a", "foreign"), CrossTenantReferenceError),
    ],
)
def test_total_payload_rejections(selected, error) -> None:
    """Invalid totalizer sources raise typed errors."""
    with pytest.raises(error):
        validate_total_payload("new", "C1", TotalPayload(selected), _NODES.get)


def test_validate_payload_dispatches_by_kind() -> None:
    """The dispatcher enforces presence and class of the payload."""

    def validate(kind, payload):
        return validate_payload(
            kind,
            "new",
            "C1",
            payload,
            _NODES.get,
            _CATEGORIES.get,
            _INDICATORS.get,
        )

    assert validate(AccountKind.FLEX, FlexPayload()) == FlexPayload()
    assert (
        validate(AccountKind.CATEGORY, CategoryPayload(("rent",)))
        .revenue_or_expense
        is RevenueOrExpense.EXPENSE
    )
    with pytest.raises(InvalidReferenceError):
        validate(AccountKind.CATEGORY, None)
    with pytest.raises(InvalidReferenceError):
        validate(AccountKind.INDICATOR, FlexPayload())
