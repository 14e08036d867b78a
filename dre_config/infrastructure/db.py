"""Database infrastructure for the DRE configuration store.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine holding account trees and registry tables. It belongs to the
infrastructure layer because it deals with an external system.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from dre_config.application.ports.database import DatabaseEnginePort


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Values from a local ``.env`` file are loaded first.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance with a small connection pool and
        health checks enabled.
    """
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_dre_engine: Optional[Engine] = None


def get_dre_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the configuration database.

    Returns:
        Engine: Lazily initialized engine connected to ``DRE_DB_URL``.
    """
    global _dre_engine
    if _dre_engine is None:
        db_url = _get_env_var("DRE_DB_URL")
        _dre_engine = _create_engine(db_url)
    return _dre_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so adapters can depend only on the protocol.
    """

    def get_dre_engine(self) -> Engine:
        """Get the engine for the configuration database.

        Returns:
            Engine: SQLAlchemy engine connected to the configuration store.
        """
        return get_dre_engine()


__all__ = [
    "get_dre_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
