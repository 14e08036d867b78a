"""Application ports package."""

from .database import DatabaseEnginePort
from .entity_registry import EntityRegistryPort
from .node_store import NodeStorePort

__all__ = [
    "DatabaseEnginePort",
    "EntityRegistryPort",
    "NodeStorePort",
]
