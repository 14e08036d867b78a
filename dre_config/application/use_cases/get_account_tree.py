"""Use case to read a company's account tree in render order."""

from dre_config.application.ports.node_store import NodeStorePort
from dre_config.domain.models.accounts import AccountNode
from dre_config.domain.models.tree import AccountTreeRow
from dre_config.domain.services.traversal import walk_tree
from dre_config.infrastructure.logging.logger import get_app_logger


class GetAccountTreeUseCase:
    """Flatten a company's forest into depth-first rows for display."""

    def __init__(self, node_store: NodeStorePort, logger=None) -> None:
        """Initialize the use case with its required dependencies."""
        self._store = node_store
        self._logger = logger or get_app_logger()

    def execute(
        self,
        company_id: str,
        include_inactive: bool = True,
        visible_for: str | None = None,
    ) -> list[AccountTreeRow]:
        """Return the tree rows of a company.

        A hidden node hides its whole subtree.

        Args:
            company_id: Company whose tree is read.
            include_inactive: When False, inactive nodes are hidden.
            visible_for: Optional company the line must be enabled for. Lines
                with an empty visibility set are enabled for every company.

        Returns:
            list[AccountTreeRow]: Rows in depth-first render order.
        """
        children_cache: dict[str, list[AccountNode]] = {}

        def children_of(node_id: str) -> list[AccountNode]:
            if node_id not in children_cache:
                children_cache[node_id] = self._store.children(
                    company_id,
                    node_id,
                )
            return children_cache[node_id]

        def is_shown(node: AccountNode) -> bool:
            if not include_inactive and not node.is_active:
                return False
            if visible_for is not None and node.company_visibility:
                return visible_for in node.company_visibility
            return True

        rows = [
            AccountTreeRow(
                node=node,
                level=level,
                has_children=bool(children_of(node.id)),
            )
            for node, level in walk_tree(
                [node for node in self._store.roots(company_id) if is_shown(node)],
                lambda node_id: [
                    child for child in children_of(node_id) if is_shown(child)
                ],
                logger=self._logger,
            )
        ]
        self._logger.info(
            f"Read {len(rows)} account rows for company {company_id}"
        )
        return rows


__all__ = ["GetAccountTreeUseCase"]
