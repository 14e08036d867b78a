"""In-memory node store keyed by id with a derived children index."""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from dre_config.application.ports.node_store import NodeStorePort
from dre_config.domain.models.accounts import AccountNode
from dre_config.domain.services.ordering import sort_siblings


class InMemoryNodeStore(NodeStorePort):
    """Flat account table held in process memory.

    Children are indexed by ``(company_id, parent_id)`` so sibling lookups
    are a single hop instead of a scan over every node.
    """

    def __init__(self, nodes: Iterable[AccountNode] = ()) -> None:
        """Initialize the store.

        Args:
            nodes: Optional nodes to load.
        """
        self._nodes: dict[str, AccountNode] = {}
        self._children: defaultdict[
            tuple[str, str | None], set[str]
        ] = defaultdict(set)
        for node in nodes:
            self.upsert(node)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
    ) -> "InMemoryNodeStore":
        """Build a store from flat records (see ``AccountNode.to_record``)."""
        return cls(AccountNode.from_record(record) for record in records)

    def to_records(self) -> list[dict[str, Any]]:
        """Return every node as a flat record, ordered by company and rank."""
        nodes = sorted(
            self._nodes.values(),
            key=lambda node: (node.company_id, node.display_order, node.id),
        )
        return [node.to_record() for node in nodes]

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, node_id: str) -> AccountNode | None:
        return self._nodes.get(node_id)

    def children(
        self,
        company_id: str,
        parent_id: str | None,
    ) -> list[AccountNode]:
        ids = self._children.get((company_id, parent_id), ())
        return sort_siblings(self._nodes[node_id] for node_id in ids)

    def roots(self, company_id: str) -> list[AccountNode]:
        return self.children(company_id, None)

    def list_company(self, company_id: str) -> list[AccountNode]:
        return sort_siblings(
            node
            for node in self._nodes.values()
            if node.company_id == company_id
        )

    def upsert(self, node: AccountNode) -> None:
        previous = self._nodes.get(node.id)
        if previous is not None:
            self._unindex(previous)
        self._nodes[node.id] = node
        self._children[(node.company_id, node.parent_id)].add(node.id)

    def upsert_many(self, nodes: list[AccountNode]) -> None:
        for node in nodes:
            self.upsert(node)

    def remove(self, node_id: str) -> None:
        node = self._nodes.pop(node_id, None)
        if node is not None:
            self._unindex(node)

    def remove_many(self, node_ids: Iterable[str]) -> int:
        removed = 0
        for node_id in list(node_ids):
            if node_id in self._nodes:
                self.remove(node_id)
                removed += 1
        return removed

    def remove_and_upsert(
        self,
        node_ids: Iterable[str],
        nodes: list[AccountNode],
    ) -> int:
        """Remove then upsert, restoring both on failure."""
        ids = list(node_ids)
        previous = [
            self._nodes[node_id]
            for node_id in [*ids, *(node.id for node in nodes)]
            if node_id in self._nodes
        ]
        added = [node.id for node in nodes if node.id not in self._nodes]
        removed = self.remove_many(ids)
        try:
            self.upsert_many(nodes)
        except Exception:
            self.remove_many(added)
            for node in previous:
                self.upsert(node)
            raise
        return removed

    def insert_batch(self, nodes: list[AccountNode]) -> int:
        """Insert new nodes; nothing is written when any id collides.

        Raises:
            ValueError: If an id already exists or repeats inside the batch.
        """
        self._check_new_ids(nodes, existing=self._nodes)
        written: list[str] = []
        try:
            for node in nodes:
                self.upsert(node)
                written.append(node.id)
        except Exception:
            self.remove_many(written)
            raise
        return len(written)

    def replace_company(
        self,
        company_id: str,
        nodes: list[AccountNode],
    ) -> int:
        """Swap a company's forest for ``nodes``, restoring it on failure.

        Raises:
            ValueError: If a node belongs to another company or an id
                collides with a node outside the replaced forest.
        """
        previous = self.list_company(company_id)
        kept = {
            node_id: node
            for node_id, node in self._nodes.items()
            if node.company_id != company_id
        }
        for node in nodes:
            if node.company_id != company_id:
                raise ValueError(
                    f"Node {node.id} belongs to company {node.company_id}, "
                    f"not {company_id}"
                )
        self._check_new_ids(nodes, existing=kept)
        self.remove_many(node.id for node in previous)
        try:
            return self.insert_batch(nodes)
        except Exception:
            for node in previous:
                self.upsert(node)
            raise

    def _unindex(self, node: AccountNode) -> None:
        key = (node.company_id, node.parent_id)
        siblings = self._children.get(key)
        if siblings is None:
            return
        siblings.discard(node.id)
        if not siblings:
            del self._children[key]

    @staticmethod
    def _check_new_ids(
        nodes: list[AccountNode],
        existing: Mapping[str, AccountNode],
    ) -> None:
        seen: set[str] = set()
        for node in nodes:
            if node.id in existing or node.id in seen:
                raise ValueError(f"Duplicate account id in batch: {node.id}")
            seen.add(node.id)


__all__ = ["InMemoryNodeStore"]
