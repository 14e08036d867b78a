"""Port for storing account nodes as a flat, parent-linked table."""

from collections.abc import Iterable
from typing import Protocol

from dre_config.domain.models.accounts import AccountNode


class NodeStorePort(Protocol):
    """Port exposing keyed access and sibling lookups over account nodes.

    Sequences are always ordered by display order, ties broken by id.
    """

    def get(self, node_id: str) -> AccountNode | None:
        """Return the node with the given id, if any."""

    def children(
        self,
        company_id: str,
        parent_id: str | None,
    ) -> list[AccountNode]:
        """Return the children of ``parent_id`` within a company."""

    def roots(self, company_id: str) -> list[AccountNode]:
        """Return the root nodes of a company."""

    def list_company(self, company_id: str) -> list[AccountNode]:
        """Return every node of a company."""

    def upsert(self, node: AccountNode) -> None:
        """Insert or replace a single node."""

    def upsert_many(self, nodes: list[AccountNode]) -> None:
        """Insert or replace several nodes in one write."""

    def remove(self, node_id: str) -> None:
        """Remove a single node; unknown ids are ignored."""

    def remove_many(self, node_ids: Iterable[str]) -> int:
        """Remove several nodes and return how many existed."""

    def remove_and_upsert(
        self,
        node_ids: Iterable[str],
        nodes: list[AccountNode],
    ) -> int:
        """Remove nodes and upsert others in one write; all of it or none."""

    def insert_batch(self, nodes: list[AccountNode]) -> int:
        """Insert new nodes atomically: all of them or none."""

    def replace_company(
        self,
        company_id: str,
        nodes: list[AccountNode],
    ) -> int:
        """Atomically replace every node of a company with ``nodes``."""


__all__ = ["NodeStorePort"]
