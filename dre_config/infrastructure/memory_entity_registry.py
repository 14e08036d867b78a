"""Dictionary-backed entity registry."""

from collections.abc import Iterable

from dre_config.application.ports.entity_registry import EntityRegistryPort
from dre_config.domain.models.registry import (
    CategoryRef,
    CompanyRef,
    IndicatorRef,
)


class InMemoryEntityRegistry(EntityRegistryPort):
    """Registry holding reference data in process memory."""

    def __init__(
        self,
        companies: Iterable[CompanyRef] = (),
        categories: Iterable[CategoryRef] = (),
        indicators: Iterable[IndicatorRef] = (),
    ) -> None:
        self._companies = {company.id: company for company in companies}
        self._categories = {category.id: category for category in categories}
        self._indicators = {
            indicator.id: indicator for indicator in indicators
        }

    def add_company(self, company: CompanyRef) -> None:
        self._companies[company.id] = company

    def add_category(self, category: CategoryRef) -> None:
        self._categories[category.id] = category

    def add_indicator(self, indicator: IndicatorRef) -> None:
        self._indicators[indicator.id] = indicator

    def get_category(self, category_id: str) -> CategoryRef | None:
        return self._categories.get(category_id)

    def get_indicator(self, indicator_id: str) -> IndicatorRef | None:
        return self._indicators.get(indicator_id)

    def get_company(self, company_id: str) -> CompanyRef | None:
        return self._companies.get(company_id)


__all__ = ["InMemoryEntityRegistry"]
