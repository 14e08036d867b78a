"""Use case for copying one company's account tree into another company.

The clone runs in two passes:

* every eligible source node is assigned a fresh id, parents first;
* copies are built with parent and totalizer references remapped through
  the id map, then written in a single atomic batch.
"""

from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass, replace

from dre_config.application.ports.entity_registry import EntityRegistryPort
from dre_config.application.ports.node_store import NodeStorePort
from dre_config.domain.errors import (
    DepthExceededError,
    NotFoundError,
    SelfCloneError,
)
from dre_config.domain.models.accounts import AccountNode, TotalPayload
from dre_config.domain.services.ordering import (
    next_display_order,
    sort_siblings,
)
from dre_config.infrastructure.logging.logger import get_app_logger
from dre_config.utils.ids import new_node_id


@dataclass(frozen=True)
class CloneAccountTreeResult:
    """Result of a clone run.

    Attributes:
        source_company_id: Company the tree was read from.
        target_company_id: Company receiving the copies.
        source_count: Number of nodes stored for the source company.
        cloned_count: Number of nodes written for the target company.
        id_map: Source id to target id for every cloned node.
    """

    source_company_id: str
    target_company_id: str
    source_count: int
    cloned_count: int
    id_map: dict[str, str]


@dataclass(frozen=True)
class _Placement:
    node: AccountNode
    depth: int
    detached: bool


class CloneAccountTreeUseCase:
    """Copy a company's account forest into another company.

    Uncommitted nodes and their subtrees are not copied. Node kinds, codes,
    names, ordering, flags and payloads are kept; only ids, parent links and
    totalizer sources are rewritten.
    """

    def __init__(
        self,
        node_store: NodeStorePort,
        registry: EntityRegistryPort,
        logger=None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            node_store: Port storing the flat account table.
            registry: Port resolving companies.
            logger: Optional logger compatible with logging.Logger-like API.
            id_factory: Optional generator for new node ids.
        """
        self._store = node_store
        self._registry = registry
        self._logger = logger or get_app_logger()
        self._new_id = id_factory or new_node_id

    def execute(
        self,
        source_company_id: str,
        target_company_id: str,
        replace_existing: bool = False,
    ) -> CloneAccountTreeResult:
        """Clone the source forest into the target company.

        Args:
            source_company_id: Company to copy from.
            target_company_id: Company to copy into.
            replace_existing: When True, the target's current nodes are
                replaced in the same transaction; otherwise the copies are
                appended next to them.

        Returns:
            CloneAccountTreeResult: Summary with the id map.

        Raises:
            SelfCloneError: If source and target are the same company.
            NotFoundError: If either company is unknown.
            DepthExceededError: If the source tree is deeper than the target
                company allows.
        """
        if source_company_id == target_company_id:
            raise SelfCloneError(
                details={"company_id": source_company_id},
            )
        target = None
        for company_id in (source_company_id, target_company_id):
            company = self._registry.get_company(company_id)
            if company is None:
                raise NotFoundError("company", company_id)
            target = company

        source_nodes = self._store.list_company(source_company_id)
        placements = self._parents_first(source_nodes)
        deepest = max((p.depth for p in placements), default=0)
        if placements and deepest >= target.category_levels:
            raise DepthExceededError(deepest, target.category_levels)

        id_map = {p.node.id: self._new_id() for p in placements}
        first_order = 1
        if not replace_existing:
            first_order = next_display_order(
                self._store.roots(target_company_id)
            )
        # Roots join the target root list after its current last rank.
        root_orders = {
            node.id: first_order + rank
            for rank, node in enumerate(
                sort_siblings(p.node for p in placements if p.depth == 0)
            )
        }
        clones = [
            self._clone_node(p, target_company_id, id_map, root_orders)
            for p in placements
        ]
        if replace_existing:
            cloned_count = self._store.replace_company(target_company_id, clones)
        else:
            cloned_count = self._store.insert_batch(clones)

        self._logger.info(
            f"Cloned {cloned_count} of {len(source_nodes)} accounts from "
            f"company {source_company_id} to {target_company_id}"
        )
        return CloneAccountTreeResult(
            source_company_id=source_company_id,
            target_company_id=target_company_id,
            source_count=len(source_nodes),
            cloned_count=cloned_count,
            id_map=id_map,
        )

    def _parents_first(self, nodes: list[AccountNode]) -> list[_Placement]:
        """Order committed nodes breadth-first so parents precede children.

        Args:
            nodes: Every node of the source company.

        Returns:
            list[_Placement]: Nodes with their depth in the copied forest.
        """
        by_id = {node.id: node for node in nodes}
        children: defaultdict[str, list[AccountNode]] = defaultdict(list)
        roots = []
        for node in nodes:
            if node.parent_id is None:
                roots.append(node)
            elif node.parent_id not in by_id:
                self._logger.warning(
                    f"Account {node.id} points to missing parent "
                    f"{node.parent_id}; cloned as a root"
                )
                roots.append(node)
            else:
                children[node.parent_id].append(node)

        placements: list[_Placement] = []
        visited: set[str] = set()
        queue = deque(
            (node, 0, node.parent_id is not None) for node in roots
        )
        pending = list(nodes)
        while True:
            while queue:
                node, depth, detached = queue.popleft()
                if node.id in visited:
                    continue
                visited.add(node.id)
                if node.is_new:
                    self._mark_subtree(node.id, children, visited)
                    continue
                placements.append(_Placement(node, depth, detached))
                queue.extend(
                    (child, depth + 1, False) for child in children[node.id]
                )
            # Nodes left over sit on a parent cycle; break it at the first one.
            leftover = next(
                (node for node in pending if node.id not in visited),
                None,
            )
            if leftover is None:
                break
            self._logger.warning(
                f"Account {leftover.id} is part of a parent cycle; "
                "cloned as a root"
            )
            queue.append((leftover, 0, True))

        skipped = len(nodes) - len(placements)
        if skipped:
            self._logger.warning(
                f"Skipped {skipped} uncommitted accounts and their "
                "descendants while cloning"
            )
        return placements

    @staticmethod
    def _mark_subtree(
        root_id: str,
        children: dict[str, list[AccountNode]],
        visited: set[str],
    ) -> None:
        stack = [root_id]
        while stack:
            for child in children.get(stack.pop(), ()):
                if child.id not in visited:
                    visited.add(child.id)
                    stack.append(child.id)

    def _clone_node(
        self,
        placement: _Placement,
        target_company_id: str,
        id_map: dict[str, str],
        root_orders: dict[str, int],
    ) -> AccountNode:
        node = placement.node
        parent_id = None
        if not placement.detached and node.parent_id is not None:
            parent_id = id_map[node.parent_id]
        payload = node.payload
        if isinstance(payload, TotalPayload):
            payload = self._remap_total(node, payload, id_map)
        return replace(
            node,
            id=id_map[node.id],
            company_id=target_company_id,
            parent_id=parent_id,
            display_order=root_orders.get(node.id, node.display_order),
            payload=payload,
            is_editing=False,
            committed_name=node.name,
        )

    def _remap_total(
        self,
        node: AccountNode,
        payload: TotalPayload,
        id_map: dict[str, str],
    ) -> TotalPayload:
        remapped = tuple(
            id_map[source_id]
            for source_id in payload.selected_account_ids
            if source_id in id_map
        )
        dropped = len(payload.selected_account_ids) - len(remapped)
        if dropped:
            self._logger.warning(
                f"Dropped {dropped} sources of total {node.code} ({node.id}) "
                "that were not cloned"
            )
        return TotalPayload(remapped)


__all__ = ["CloneAccountTreeUseCase", "CloneAccountTreeResult"]
