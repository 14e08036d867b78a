"""Sibling ordering helpers."""

from collections.abc import Iterable

from dre_config.domain.models.accounts import AccountNode


def sibling_sort_key(node: AccountNode) -> tuple[int, str]:
    """Sort by display order, ties broken by id."""
    return (node.display_order, node.id)


def sort_siblings(nodes: Iterable[AccountNode]) -> list[AccountNode]:
    """Return nodes in render order."""
    return sorted(nodes, key=sibling_sort_key)


def next_display_order(siblings: Iterable[AccountNode]) -> int:
    """Return the display order for a node appended after ``siblings``."""
    orders = [node.display_order for node in siblings]
    return max(orders) + 1 if orders else 1


__all__ = ["sibling_sort_key", "sort_siblings", "next_display_order"]
