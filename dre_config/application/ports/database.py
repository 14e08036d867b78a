"""Database ports for the DRE configuration store.

This module defines the application-layer protocol for accessing the
database engine. Infrastructure implementations are expected to provide
concrete adapters that satisfy this port.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine holding account trees and registry tables.

    Adapters can depend on this protocol instead of concrete database
    drivers or configuration details.
    """

    def get_dre_engine(self) -> Engine:
        """Get the engine for the DRE configuration database.

        Returns:
            Engine: SQLAlchemy engine connected to the configuration store.
        """


__all__ = ["DatabaseEnginePort"]
