"""Reference data read from the entity registry."""

from dataclasses import dataclass

from dre_config.domain.constants import DEFAULT_CATEGORY_LEVELS
from dre_config.domain.models.accounts import RevenueOrExpense


@dataclass(frozen=True)
class CategoryRef:
    """Registry category referenced by category nodes."""

    id: str
    label: str
    revenue_or_expense: RevenueOrExpense


@dataclass(frozen=True)
class IndicatorRef:
    """Registry indicator referenced by indicator nodes."""

    id: str
    label: str


@dataclass(frozen=True)
class CompanyRef:
    """Tenant owning an account tree.

    Attributes:
        id: Company id.
        category_levels: Maximum tree depth (3, 4 or 5).
        name: Optional display name.
    """

    id: str
    category_levels: int = DEFAULT_CATEGORY_LEVELS
    name: str = ""


__all__ = ["CategoryRef", "IndicatorRef", "CompanyRef"]
