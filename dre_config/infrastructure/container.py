"""Composition root for wiring infrastructure adapters."""

from dre_config.application.ports.database import DatabaseEnginePort
from dre_config.application.ports.entity_registry import EntityRegistryPort
from dre_config.application.ports.node_store import NodeStorePort
from dre_config.application.use_cases.account_tree import AccountTreeService
from dre_config.application.use_cases.clone_account_tree import (
    CloneAccountTreeUseCase,
)
from dre_config.application.use_cases.get_account_tree import (
    GetAccountTreeUseCase,
)
from dre_config.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from dre_config.infrastructure.logging.logger import get_app_logger
from dre_config.infrastructure.memory_entity_registry import (
    InMemoryEntityRegistry,
)
from dre_config.infrastructure.memory_node_store import InMemoryNodeStore
from dre_config.infrastructure.settings import AccountTreeSettings
from dre_config.infrastructure.sqlalchemy_entity_registry import (
    SqlAlchemyEntityRegistry,
)
from dre_config.infrastructure.sqlalchemy_node_store import (
    SqlAlchemyNodeStore,
)


_memory_store: InMemoryNodeStore | None = None
_memory_registry: InMemoryEntityRegistry | None = None


def _resolve_settings(
    settings: AccountTreeSettings | None,
) -> AccountTreeSettings:
    resolved = settings or AccountTreeSettings.from_env()
    if resolved.store_backend not in ("memory", "sqlalchemy"):
        raise ValueError(
            f"Unsupported DRE_STORE_BACKEND: {resolved.store_backend}"
        )
    return resolved


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_node_store(
    db_port: DatabaseEnginePort | None = None,
    settings: AccountTreeSettings | None = None,
) -> NodeStorePort:
    """Return the configured node store.

    The in-memory store is shared by every caller of the process. The
    SQLAlchemy store has its table created if needed.

    Raises:
        ValueError: If the configured backend is unknown.
    """
    global _memory_store
    resolved = _resolve_settings(settings)
    if resolved.store_backend == "memory":
        if _memory_store is None:
            _memory_store = InMemoryNodeStore()
        return _memory_store
    store = SqlAlchemyNodeStore(
        db_port or build_database_adapter(),
        logger=get_app_logger(),
    )
    store.prepare()
    return store


def build_entity_registry(
    db_port: DatabaseEnginePort | None = None,
    settings: AccountTreeSettings | None = None,
) -> EntityRegistryPort:
    """Return the configured registry of companies and reference data.

    Raises:
        ValueError: If the configured backend is unknown.
    """
    global _memory_registry
    resolved = _resolve_settings(settings)
    if resolved.store_backend == "memory":
        if _memory_registry is None:
            _memory_registry = InMemoryEntityRegistry()
        return _memory_registry
    return SqlAlchemyEntityRegistry(
        db_port or build_database_adapter(),
        logger=get_app_logger(),
        default_category_levels=resolved.default_category_levels,
    )


def build_account_tree_service(
    db_port: DatabaseEnginePort | None = None,
    settings: AccountTreeSettings | None = None,
) -> AccountTreeService:
    """Return the tree editing service wired to the configured backend."""
    return AccountTreeService(
        build_node_store(db_port, settings),
        build_entity_registry(db_port, settings),
        logger=get_app_logger(),
    )


def build_get_account_tree_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: AccountTreeSettings | None = None,
) -> GetAccountTreeUseCase:
    """Return the tree read use case."""
    return GetAccountTreeUseCase(
        build_node_store(db_port, settings),
        logger=get_app_logger(),
    )


def build_clone_account_tree_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: AccountTreeSettings | None = None,
) -> CloneAccountTreeUseCase:
    """Return the cross-company clone use case."""
    return CloneAccountTreeUseCase(
        build_node_store(db_port, settings),
        build_entity_registry(db_port, settings),
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_node_store",
    "build_entity_registry",
    "build_account_tree_service",
    "build_get_account_tree_use_case",
    "build_clone_account_tree_use_case",
]
