"""Read models for rendering an account tree."""

from dataclasses import dataclass

from dre_config.domain.models.accounts import AccountNode


@dataclass(frozen=True)
class AccountTreeRow:
    """A node positioned in render order.

    Attributes:
        node: The account node.
        level: Depth of the node, roots at 0.
        has_children: Whether the node has children in the store.
    """

    node: AccountNode
    level: int
    has_children: bool


__all__ = ["AccountTreeRow"]
