"""Port for reading registry reference data."""

from typing import Protocol

from dre_config.domain.models.registry import (
    CategoryRef,
    CompanyRef,
    IndicatorRef,
)


class EntityRegistryPort(Protocol):
    """Read-only access to categories, indicators and companies."""

    def get_category(self, category_id: str) -> CategoryRef | None:
        """Return a category by id."""

    def get_indicator(self, indicator_id: str) -> IndicatorRef | None:
        """Return an indicator by id."""

    def get_company(self, company_id: str) -> CompanyRef | None:
        """Return a company by id."""


__all__ = ["EntityRegistryPort"]
