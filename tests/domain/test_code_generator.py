"""Tests for display code generation."""

import pytest

from dre_config.domain.models import AccountKind, RevenueOrExpense
from dre_config.domain.services.code_generator import generate_code, root_prefix


@pytest.mark.parametrize(
    ("kind", "revenue_or_expense", "expected"),
    [
        (AccountKind.CATEGORY, RevenueOrExpense.REVENUE, "R"),
        (AccountKind.CATEGORY, RevenueOrExpense.EXPENSE, "D"),
        (AccountKind.CATEGORY, None, "R"),
        (AccountKind.INDICATOR, None, "I"),
        (AccountKind.TOTAL, None, "T"),
        (AccountKind.FLEX, None, "F"),
    ],
)
def test_root_prefix_per_kind(kind, revenue_or_expense, expected) -> None:
    """Each top-level kind has its own single-letter prefix."""
    assert root_prefix(kind, revenue_or_expense) == expected


def test_generate_code_pads_root_rank() -> None:
    """Root codes are prefix plus a two-digit rank."""
    assert generate_code(AccountKind.CATEGORY, 0) == "R01"
    assert generate_code(AccountKind.TOTAL, 11) == "T12"


def test_generate_code_extends_parent_code() -> None:
    """Child codes append the padded rank to the parent code."""
    assert generate_code(AccountKind.FLEX, 0, parent_code="R01") == "R01.01"
    assert (
        generate_code(AccountKind.CATEGORY, 2, parent_code="D02.01")
        == "D02.01.03"
    )


def test_generate_code_does_not_truncate_large_ranks() -> None:
    """Ranks above 99 keep every digit."""
    assert generate_code(AccountKind.INDICATOR, 120) == "I121"
