"""SQLAlchemy-backed registry reading companies, categories and indicators."""

from sqlalchemy import text

from dre_config.application.ports.database import DatabaseEnginePort
from dre_config.application.ports.entity_registry import EntityRegistryPort
from dre_config.domain.constants import DEFAULT_CATEGORY_LEVELS
from dre_config.domain.models.accounts import RevenueOrExpense
from dre_config.domain.models.registry import (
    CategoryRef,
    CompanyRef,
    IndicatorRef,
)
from dre_config.domain.policies.category_levels import (
    normalize_category_levels,
)
from dre_config.infrastructure.logging.logger import get_app_logger


SELECT_COMPANY_SQL = text(
    """
    SELECT id, name, category_levels
    FROM companies
    WHERE id = :id
    """
)

SELECT_CATEGORY_SQL = text(
    """
    SELECT id, name, type
    FROM categories
    WHERE id = :id
    """
)

SELECT_INDICATOR_SQL = text(
    """
    SELECT id, name
    FROM indicators
    WHERE id = :id
    """
)


class SqlAlchemyEntityRegistry(EntityRegistryPort):
    """Registry backed by the configuration database."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        logger=None,
        default_category_levels: int = DEFAULT_CATEGORY_LEVELS,
    ) -> None:
        """Initialize the registry.

        Args:
            db_port: Port providing access to the configuration engine.
            logger: Optional logger compatible with logging.Logger-like API.
            default_category_levels: Depth used when a company row has no
                supported level count.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()
        self._default_category_levels = default_category_levels

    def get_company(self, company_id: str) -> CompanyRef | None:
        row = self._first(SELECT_COMPANY_SQL, company_id)
        if row is None:
            return None
        return CompanyRef(
            id=row.id,
            name=row.name or "",
            category_levels=normalize_category_levels(
                row.category_levels,
                logger=self._logger,
                default=self._default_category_levels,
            ),
        )

    def get_category(self, category_id: str) -> CategoryRef | None:
        row = self._first(SELECT_CATEGORY_SQL, category_id)
        if row is None:
            return None
        try:
            revenue_or_expense = RevenueOrExpense(str(row.type).lower())
        except ValueError:
            self._logger.warning(
                f"Category {row.id} has unsupported type {row.type!r}"
            )
            return None
        return CategoryRef(
            id=row.id,
            label=row.name or "",
            revenue_or_expense=revenue_or_expense,
        )

    def get_indicator(self, indicator_id: str) -> IndicatorRef | None:
        row = self._first(SELECT_INDICATOR_SQL, indicator_id)
        if row is None:
            return None
        return IndicatorRef(id=row.id, label=row.name or "")

    def _first(self, query, entity_id: str):
        engine = self._db_port.get_dre_engine()
        with engine.connect() as conn:
            return conn.execute(query, {"id": entity_id}).first()


__all__ = ["SqlAlchemyEntityRegistry"]
