"""Display code generation for new account nodes."""

from dre_config.domain.constants import (
    CODE_PADDING,
    EXPENSE_ROOT_PREFIX,
    FLEX_ROOT_PREFIX,
    INDICATOR_ROOT_PREFIX,
    REVENUE_ROOT_PREFIX,
    TOTAL_ROOT_PREFIX,
)
from dre_config.domain.models.accounts import AccountKind, RevenueOrExpense


_ROOT_PREFIXES = {
    AccountKind.INDICATOR: INDICATOR_ROOT_PREFIX,
    AccountKind.TOTAL: TOTAL_ROOT_PREFIX,
    AccountKind.FLEX: FLEX_ROOT_PREFIX,
}


def root_prefix(
    kind: AccountKind,
    revenue_or_expense: RevenueOrExpense | None = None,
) -> str:
    """Return the single-letter prefix used by root codes.

    Args:
        kind: Kind of the new root node.
        revenue_or_expense: Category sub-type, only used for category roots.

    Returns:
        str: Code prefix.
    """
    if kind is AccountKind.CATEGORY:
        if revenue_or_expense is RevenueOrExpense.EXPENSE:
            return EXPENSE_ROOT_PREFIX
        return REVENUE_ROOT_PREFIX
    return _ROOT_PREFIXES[kind]


def generate_code(
    kind: AccountKind,
    sibling_count: int,
    parent_code: str | None = None,
    revenue_or_expense: RevenueOrExpense | None = None,
) -> str:
    """Derive the display code of a node at insertion time.

    Codes are a presentation aid: they count siblings present when the node
    is created and are never rewritten afterwards.

    Args:
        kind: Kind of the new node.
        sibling_count: Number of existing siblings at insertion time.
        parent_code: Code of the parent, ``None`` for roots.
        revenue_or_expense: Category sub-type for category roots.

    Returns:
        str: Code such as ``R01`` or ``R01.02``.
    """
    rank = str(sibling_count + 1).zfill(CODE_PADDING)
    if parent_code is not None:
        return f"{parent_code}.{rank}"
    return f"{root_prefix(kind, revenue_or_expense)}{rank}"


__all__ = ["generate_code", "root_prefix"]
