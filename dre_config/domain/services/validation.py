"""Payload and name validation for account nodes."""

from collections.abc import Callable

from dre_config.domain.errors import (
    CrossTenantReferenceError,
    EmptyNameError,
    InvalidReferenceError,
)
from dre_config.domain.models.accounts import (
    PAYLOAD_TYPES,
    AccountKind,
    AccountPayload,
    CategoryPayload,
    FlexPayload,
    IndicatorPayload,
    TotalPayload,
)
from dre_config.domain.models.registry import CategoryRef, IndicatorRef
from dre_config.domain.policies.account_names import (
    is_valid_account_name,
    normalize_account_name,
)
from dre_config.domain.services.traversal import NodeLookup


CategoryLookup = Callable[[str], CategoryRef | None]
IndicatorLookup = Callable[[str], IndicatorRef | None]

_NON_TOTALIZABLE = (AccountKind.TOTAL, AccountKind.FLEX)


def validate_account_name(name: str | None) -> str:
    """Return the trimmed name or raise when it is blank.

    Raises:
        EmptyNameError: If the name is empty after trimming.
    """
    if not is_valid_account_name(name):
        raise EmptyNameError()
    return normalize_account_name(name)


def validate_category_payload(
    payload: CategoryPayload,
    get_category: CategoryLookup,
) -> CategoryPayload:
    """Check category references and derive the revenue/expense type.

    Args:
        payload: Payload to validate.
        get_category: Registry lookup for categories.

    Returns:
        CategoryPayload: Payload carrying the type of its first category.

    Raises:
        InvalidReferenceError: If the selection is empty, unknown, or mixes
            revenue and expense categories.
    """
    if not payload.category_ids:
        raise InvalidReferenceError("Category account needs a category")
    categories = []
    for category_id in payload.category_ids:
        category = get_category(category_id)
        if category is None:
            raise InvalidReferenceError(
                f"Category {category_id} does not exist",
                details={"category_id": category_id},
            )
        categories.append(category)
    expected = categories[0].revenue_or_expense
    for category in categories[1:]:
        if category.revenue_or_expense is not expected:
            raise InvalidReferenceError(
                f"Category {category.id} is {category.revenue_or_expense.value}"
                f" but the selection is {expected.value}",
                details={"category_id": category.id},
            )
    return CategoryPayload(payload.category_ids, expected)


def validate_indicator_payload(
    payload: IndicatorPayload,
    get_indicator: IndicatorLookup,
) -> IndicatorPayload:
    """Check that the indicator exists in the registry.

    Raises:
        InvalidReferenceError: If the indicator id is blank or unknown.
    """
    if not payload.indicator_id or get_indicator(payload.indicator_id) is None:
        raise InvalidReferenceError(
            f"Indicator {payload.indicator_id!r} does not exist",
            details={"indicator_id": payload.indicator_id},
        )
    return payload


def validate_total_payload(
    node_id: str,
    company_id: str,
    payload: TotalPayload,
    get_node: NodeLookup,
) -> TotalPayload:
    """Check the source list of a totalizer.

    Sources must be other existing nodes of the same company whose kind is
    neither total nor flex.

    Args:
        node_id: Id of the totalizer being validated.
        company_id: Company owning the totalizer.
        payload: Payload to validate.
        get_node: Node lookup.

    Returns:
        TotalPayload: The validated payload.

    Raises:
        InvalidReferenceError: For an empty list, self, unknown or
            non-totalizable sources.
        CrossTenantReferenceError: For a source owned by another company.
    """
    if not payload.selected_account_ids:
        raise InvalidReferenceError("Total account needs at least one source")
    for account_id in payload.selected_account_ids:
        if account_id == node_id:
            raise InvalidReferenceError(
                f"Total account {node_id} cannot include itself",
                details={"account_id": account_id},
            )
        source = get_node(account_id)
        if source is None:
            raise InvalidReferenceError(
                f"Account {account_id} does not exist",
                details={"account_id": account_id},
            )
        if source.company_id != company_id:
            raise CrossTenantReferenceError(
                f"Account {account_id} belongs to company {source.company_id}",
                details={
                    "account_id": account_id,
                    "company_id": source.company_id,
                },
            )
        if source.kind in _NON_TOTALIZABLE:
            raise InvalidReferenceError(
                f"Account {account_id} of kind {source.kind.value} "
                "cannot be totalized",
                details={"account_id": account_id},
            )
    return payload


def validate_payload(
    kind: AccountKind,
    node_id: str,
    company_id: str,
    payload: AccountPayload | None,
    get_node: NodeLookup,
    get_category: CategoryLookup,
    get_indicator: IndicatorLookup,
) -> AccountPayload:
    """Validate a payload against the rules of its kind.

    Returns:
        AccountPayload: The payload to store (category payloads gain their
        revenue/expense type).

    Raises:
        InvalidReferenceError: If the payload is missing, of the wrong class,
            or references invalid targets.
        CrossTenantReferenceError: If a total source is cross-company.
    """
    if payload is None:
        raise InvalidReferenceError(
            f"{kind.value} account {node_id} has no payload"
        )
    if not isinstance(payload, PAYLOAD_TYPES[kind]):
        raise InvalidReferenceError(
            f"{kind.value} account cannot carry {type(payload).__name__}"
        )
    if isinstance(payload, CategoryPayload):
        return validate_category_payload(payload, get_category)
    if isinstance(payload, IndicatorPayload):
        return validate_indicator_payload(payload, get_indicator)
    if isinstance(payload, TotalPayload):
        return validate_total_payload(node_id, company_id, payload, get_node)
    if isinstance(payload, FlexPayload):
        return payload
    raise InvalidReferenceError(f"Unsupported payload {payload!r}")


__all__ = [
    "CategoryLookup",
    "IndicatorLookup",
    "validate_account_name",
    "validate_category_payload",
    "validate_indicator_payload",
    "validate_total_payload",
    "validate_payload",
]
