"""Use case service for building and editing a company's account tree.

The service owns every mutation of the tree: it validates against the node
store and the entity registry, then writes through the store. Nodes start
in a transient state after ``insert`` and are committed by ``rename``.
"""

from collections.abc import Callable, Iterable
from dataclasses import replace

from dre_config.application.ports.entity_registry import EntityRegistryPort
from dre_config.application.ports.node_store import NodeStorePort
from dre_config.domain.errors import (
    AccountTreeError,
    CrossTenantReferenceError,
    CyclicStructureError,
    DepthExceededError,
    InvalidReferenceError,
    NotFoundError,
)
from dre_config.domain.models.accounts import (
    PAYLOAD_TYPES,
    AccountKind,
    AccountNode,
    AccountPayload,
    FlexPayload,
    MoveDirection,
    TotalPayload,
)
from dre_config.domain.models.registry import CompanyRef
from dre_config.domain.policies.account_names import normalize_account_name
from dre_config.domain.services.code_generator import (
    generate_code,
    root_prefix,
)
from dre_config.domain.services.ordering import next_display_order
from dre_config.domain.services.traversal import (
    ChildrenLookup,
    collect_subtree_ids,
    compute_depth,
    find_descendant,
    is_descendant,
    subtree_height,
    walk_tree,
)
from dre_config.domain.services.validation import (
    validate_account_name,
    validate_payload,
    validate_total_payload,
)
from dre_config.infrastructure.logging.logger import get_app_logger
from dre_config.utils.ids import new_node_id


_NON_TOTALIZABLE = (AccountKind.TOTAL, AccountKind.FLEX)


class AccountTreeService:
    """Insert, edit, reorder and delete account nodes of a company."""

    def __init__(
        self,
        node_store: NodeStorePort,
        registry: EntityRegistryPort,
        logger=None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            node_store: Port storing the flat account table.
            registry: Port resolving companies, categories and indicators.
            logger: Optional logger compatible with logging.Logger-like API.
            id_factory: Optional generator for new node ids.
        """
        self._store = node_store
        self._registry = registry
        self._logger = logger or get_app_logger()
        self._new_id = id_factory or new_node_id

    # Lookups

    def get(self, account_id: str) -> AccountNode:
        """Return a node or raise ``NotFoundError``."""
        node = self._store.get(account_id)
        if node is None:
            raise NotFoundError("account", account_id)
        return node

    def children(
        self,
        company_id: str,
        parent_id: str | None = None,
    ) -> list[AccountNode]:
        """Return the ordered children of ``parent_id`` (roots for None)."""
        return self._store.children(company_id, parent_id)

    def depth(self, account_id: str) -> int:
        """Return the depth of a node, roots at 0."""
        self.get(account_id)
        return compute_depth(account_id, self._store.get)

    def find_descendant(
        self,
        company_id: str,
        account_id: str,
        root_candidates: Iterable[AccountNode] | None = None,
    ) -> AccountNode | None:
        """Search for ``account_id`` below the candidates (company roots).

        The search keeps a visited set, so it terminates on a malformed store.
        """
        roots = (
            self._store.roots(company_id)
            if root_candidates is None
            else list(root_candidates)
        )
        return find_descendant(
            roots,
            account_id,
            self._children_lookup(company_id),
        )

    def search(self, company_id: str, term: str) -> list[AccountNode]:
        """Return nodes whose name or code contains ``term``, render order.

        Args:
            company_id: Company whose tree is searched.
            term: Case-insensitive substring.

        Returns:
            list[AccountNode]: Matching nodes, depth-first.
        """
        needle = normalize_account_name(term).lower()
        if not needle:
            return []
        return [
            node
            for node, _level in walk_tree(
                self._store.roots(company_id),
                self._children_lookup(company_id),
                logger=self._logger,
            )
            if needle in node.name.lower() or needle in node.code.lower()
        ]

    def available_parents(
        self,
        company_id: str,
        account_id: str | None = None,
    ) -> list[AccountNode]:
        """Return nodes that can receive a child, or receive ``account_id``.

        A candidate is excluded when it is the account itself, one of its
        descendants, or too deep for the account's subtree to fit under the
        company's category levels.

        Args:
            company_id: Company owning the tree.
            account_id: Optional node about to be reparented.

        Returns:
            list[AccountNode]: Candidates in render order.
        """
        company = self._require_company(company_id)
        children_of = self._children_lookup(company_id)
        moving_height = 0
        if account_id is not None:
            self.get(account_id)
            moving_height = subtree_height(account_id, children_of)
        candidates = []
        for candidate, level in walk_tree(
            self._store.roots(company_id),
            children_of,
            logger=self._logger,
        ):
            if account_id is not None and (
                candidate.id == account_id
                or is_descendant(account_id, candidate.id, self._store.get)
            ):
                continue
            if level + 1 + moving_height >= company.category_levels:
                continue
            candidates.append(candidate)
        return candidates

    def totalizable_accounts(
        self,
        company_id: str,
        exclude_id: str | None = None,
    ) -> list[AccountNode]:
        """Return nodes a totalizer may reference (not total, not flex)."""
        return [
            node
            for node, _level in walk_tree(
                self._store.roots(company_id),
                self._children_lookup(company_id),
                logger=self._logger,
            )
            if node.kind not in _NON_TOTALIZABLE and node.id != exclude_id
        ]

    # Creation and edit lifecycle

    def insert(
        self,
        company_id: str,
        kind: AccountKind | str,
        parent_id: str | None = None,
        payload: AccountPayload | None = None,
        name: str = "",
    ) -> AccountNode:
        """Insert a new node in the transient editing state.

        Args:
            company_id: Owning company.
            kind: Node kind.
            parent_id: Optional parent in the same company.
            payload: Optional kind-specific payload, validated when given.
            name: Optional initial label; committed later by ``rename``.

        Returns:
            AccountNode: The inserted, uncommitted node.

        Raises:
            NotFoundError: If the company or parent does not exist.
            CrossTenantReferenceError: If the parent is another company's.
            DepthExceededError: If the node would exceed category levels.
            InvalidReferenceError: If the payload is invalid.
        """
        company = self._require_company(company_id)
        kind = AccountKind(kind)
        parent = None
        depth = 0
        if parent_id is not None:
            parent = self.get(parent_id)
            if parent.company_id != company_id:
                raise CrossTenantReferenceError(
                    f"Parent {parent_id} belongs to company {parent.company_id}",
                    details={"parent_id": parent_id},
                )
            depth = compute_depth(parent.id, self._store.get) + 1
        if depth >= company.category_levels:
            raise DepthExceededError(depth, company.category_levels)

        node_id = self._new_id()
        if payload is None and kind is AccountKind.FLEX:
            payload = FlexPayload()
        if payload is not None:
            payload = validate_payload(
                kind,
                node_id,
                company_id,
                payload,
                self._store.get,
                self._registry.get_category,
                self._registry.get_indicator,
            )

        siblings = self._store.children(company_id, parent_id)
        node = AccountNode(
            id=node_id,
            company_id=company_id,
            code=generate_code(
                kind,
                len(siblings),
                parent_code=parent.code if parent is not None else None,
                revenue_or_expense=getattr(payload, "revenue_or_expense", None),
            ),
            name=normalize_account_name(name),
            kind=kind,
            payload=payload,
            parent_id=parent_id,
            display_order=next_display_order(siblings),
            is_new=True,
            is_editing=True,
        )
        self._store.upsert(node)
        self._logger.info(
            f"Inserted {kind.value} account {node.code} ({node.id}) "
            f"for company {company_id} at depth {depth}"
        )
        return node

    def create(
        self,
        company_id: str,
        kind: AccountKind | str,
        name: str,
        parent_id: str | None = None,
        payload: AccountPayload | None = None,
    ) -> AccountNode:
        """Insert and commit a node in one step.

        The inserted node is discarded when the commit fails, so a failed
        create leaves no trace in the store.
        """
        node = self.insert(
            company_id,
            kind,
            parent_id=parent_id,
            payload=payload,
            name=name,
        )
        try:
            return self.rename(node.id, name)
        except AccountTreeError:
            self.cancel_edit(node.id)
            raise

    def start_edit(
        self,
        account_id: str,
        draft_name: str | None = None,
    ) -> AccountNode:
        """Mark a node as being renamed, optionally storing a draft label.

        The draft is not validated; ``rename`` commits a name and
        ``cancel_edit`` restores the committed one.
        """
        node = self.get(account_id)
        name = node.name if draft_name is None else draft_name
        updated = replace(node, name=name, is_editing=True)
        self._store.upsert(updated)
        return updated

    def rename(self, account_id: str, new_name: str) -> AccountNode:
        """Commit a new name and clear the transient flags.

        Committing a new node also validates its payload.

        Raises:
            NotFoundError: If the node does not exist.
            EmptyNameError: If the trimmed name is empty.
            InvalidReferenceError: If a new node's payload is missing or
                invalid.
        """
        node = self.get(account_id)
        name = validate_account_name(new_name)
        payload = node.payload
        if node.is_new:
            payload = self._validate(node, payload)
        updated = replace(
            node,
            name=name,
            committed_name=name,
            payload=payload,
            is_new=False,
            is_editing=False,
        )
        self._store.upsert(updated)
        if node.is_new:
            self._logger.info(f"Committed account {updated.code} ({node.id})")
        return updated

    def cancel_edit(self, account_id: str) -> AccountNode | None:
        """Abandon an edit.

        A node that was never committed is deleted; a committed node gets its
        last committed name back.

        Returns:
            AccountNode | None: The reverted node, or None when deleted.
        """
        node = self.get(account_id)
        if node.is_new:
            self.delete(node.id)
            return None
        reverted = replace(node, name=node.committed_name, is_editing=False)
        self._store.upsert(reverted)
        return reverted

    def update_payload(
        self,
        account_id: str,
        payload: AccountPayload,
    ) -> AccountNode:
        """Replace the kind-specific payload of a node.

        A category root that is still uncommitted has its code prefix
        re-derived from the new payload, so an expense root inserted without
        categories ends up as ``D0x``. Committed codes are never rewritten.

        Raises:
            InvalidReferenceError: If the payload does not fit the node's
                kind (switching kind is delete and recreate) or references
                invalid targets.
        """
        node = self.get(account_id)
        if not isinstance(payload, PAYLOAD_TYPES[node.kind]):
            raise InvalidReferenceError(
                f"{node.kind.value} account {node.id} cannot take "
                f"{type(payload).__name__}; delete and recreate to change kind",
                details={"kind": node.kind.value},
            )
        payload = self._validate(node, payload)
        code = node.code
        # Uncommitted category roots take the prefix of their final type.
        if (
            node.is_new
            and node.parent_id is None
            and node.kind is AccountKind.CATEGORY
        ):
            code = root_prefix(node.kind, payload.revenue_or_expense) + code[1:]
        updated = replace(node, payload=payload, code=code)
        self._store.upsert(updated)
        return updated

    def validate_total(self, node: AccountNode) -> TotalPayload:
        """Validate a totalizer's source list before commit.

        Raises:
            InvalidReferenceError: If the node is not a total, or its sources
                are empty, unknown, totals or flex lines.
            CrossTenantReferenceError: If a source is another company's.
        """
        if not isinstance(node.payload, TotalPayload):
            raise InvalidReferenceError(
                f"Account {node.id} is not a total",
                details={"kind": node.kind.value},
            )
        return validate_total_payload(
            node.id,
            node.company_id,
            node.payload,
            self._store.get,
        )

    # Flags

    def toggle_active(self, account_id: str) -> AccountNode:
        """Flip ``is_active`` on a single node; children are untouched."""
        node = self.get(account_id)
        updated = replace(node, is_active=not node.is_active)
        self._store.upsert(updated)
        return updated

    def toggle_expanded(self, account_id: str) -> AccountNode:
        node = self.get(account_id)
        updated = replace(node, is_expanded=not node.is_expanded)
        self._store.upsert(updated)
        return updated

    def set_company_visibility(
        self,
        account_id: str,
        company_ids: Iterable[str],
    ) -> AccountNode:
        """Replace the set of companies for which the node is enabled.

        Raises:
            NotFoundError: If the node or one of the companies is unknown.
        """
        node = self.get(account_id)
        visibility = frozenset(company_ids)
        for company_id in sorted(visibility):
            self._require_company(company_id)
        updated = replace(node, company_visibility=visibility)
        self._store.upsert(updated)
        return updated

    # Structure

    def move(
        self,
        account_id: str,
        direction: MoveDirection | str,
    ) -> list[AccountNode]:
        """Swap a node's display order with its neighbor.

        Only the two adjacent siblings change; moving past either end of the
        sibling list is a no-op.

        Returns:
            list[AccountNode]: The two updated nodes, or an empty list.
        """
        direction = MoveDirection(direction)
        node = self.get(account_id)
        siblings = self._store.children(node.company_id, node.parent_id)
        index = next(
            position
            for position, sibling in enumerate(siblings)
            if sibling.id == node.id
        )
        neighbor_index = index - 1 if direction is MoveDirection.UP else index + 1
        if neighbor_index < 0 or neighbor_index >= len(siblings):
            return []
        neighbor = siblings[neighbor_index]
        moved = replace(node, display_order=neighbor.display_order)
        swapped = replace(neighbor, display_order=node.display_order)
        self._store.upsert_many([moved, swapped])
        self._logger.info(
            f"Moved account {node.code} {direction.value}: "
            f"{node.display_order} <-> {neighbor.display_order}"
        )
        return [moved, swapped]

    def reparent(
        self,
        account_id: str,
        new_parent_id: str | None,
    ) -> AccountNode:
        """Move a node and its subtree under another parent (or to root).

        The node is appended after its new siblings; its code is kept.

        Raises:
            NotFoundError: If the node or the new parent does not exist.
            CrossTenantReferenceError: If the new parent is another company's.
            CyclicStructureError: If the new parent is the node or below it.
            DepthExceededError: If the subtree would exceed category levels.
        """
        node = self.get(account_id)
        if new_parent_id == node.parent_id:
            return node
        company = self._require_company(node.company_id)
        new_depth = 0
        if new_parent_id is not None:
            parent = self.get(new_parent_id)
            if parent.company_id != node.company_id:
                raise CrossTenantReferenceError(
                    f"Parent {new_parent_id} belongs to company "
                    f"{parent.company_id}",
                    details={"parent_id": new_parent_id},
                )
            if parent.id == node.id or is_descendant(
                node.id, parent.id, self._store.get
            ):
                raise CyclicStructureError(
                    f"Account {node.id} cannot move below itself",
                    details={"id": node.id, "parent_id": new_parent_id},
                )
            new_depth = compute_depth(parent.id, self._store.get) + 1
        deepest = new_depth + subtree_height(
            node.id,
            self._children_lookup(node.company_id),
        )
        if deepest >= company.category_levels:
            raise DepthExceededError(deepest, company.category_levels)
        siblings = self._store.children(node.company_id, new_parent_id)
        updated = replace(
            node,
            parent_id=new_parent_id,
            display_order=next_display_order(siblings),
        )
        self._store.upsert(updated)
        self._logger.info(
            f"Reparented account {node.code} under {new_parent_id or 'root'}"
        )
        return updated

    def delete(self, account_id: str) -> list[str]:
        """Delete a node with its subtree and prune totalizer references.

        Returns:
            list[str]: Removed ids, the node first.

        Raises:
            NotFoundError: If the node does not exist.
        """
        node = self.get(account_id)
        removed_ids = collect_subtree_ids(
            node.id,
            self._children_lookup(node.company_id),
        )
        removed = set(removed_ids)
        pruned = []
        for other in self._store.list_company(node.company_id):
            if other.id in removed or not isinstance(other.payload, TotalPayload):
                continue
            if removed.isdisjoint(other.selected_account_ids):
                continue
            payload = other.payload.without(removed)
            if not payload.selected_account_ids:
                self._logger.warning(
                    f"Total account {other.code} ({other.id}) has no "
                    "remaining sources"
                )
            pruned.append(replace(other, payload=payload))
        self._store.remove_and_upsert(removed_ids, pruned)
        self._logger.info(
            f"Deleted {len(removed_ids)} accounts under {node.code} "
            f"and pruned {len(pruned)} totals"
        )
        return removed_ids

    # Helpers

    def _require_company(self, company_id: str) -> CompanyRef:
        company = self._registry.get_company(company_id)
        if company is None:
            raise NotFoundError("company", company_id)
        return company

    def _children_lookup(self, company_id: str) -> ChildrenLookup:
        return lambda parent_id: self._store.children(company_id, parent_id)

    def _validate(
        self,
        node: AccountNode,
        payload: AccountPayload | None,
    ) -> AccountPayload:
        return validate_payload(
            node.kind,
            node.id,
            node.company_id,
            payload,
            self._store.get,
            self._registry.get_category,
            self._registry.get_indicator,
        )


__all__ = ["AccountTreeService"]
