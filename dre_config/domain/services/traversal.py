"""Traversal helpers over a flat, parent-linked account table.

The forest invariant is only enforced when a mutation happens, so every
walk here keeps a visited set and terminates on a malformed table.
"""

from collections.abc import Callable, Iterable, Iterator, Sequence
from logging import Logger

from dre_config.domain.errors import CyclicStructureError
from dre_config.domain.models.accounts import AccountNode


NodeLookup = Callable[[str], AccountNode | None]
ChildrenLookup = Callable[[str], Sequence[AccountNode]]


def compute_depth(node_id: str, get_node: NodeLookup) -> int:
    """Return the depth of a node, roots at 0.

    A parent id that no longer resolves ends the walk as if the node above
    it were a root.

    Args:
        node_id: Node to measure.
        get_node: Lookup returning a node by id.

    Returns:
        int: Number of ancestors.

    Raises:
        CyclicStructureError: If the parent chain loops.
    """
    depth = 0
    visited = {node_id}
    current = get_node(node_id)
    while current is not None and current.parent_id is not None:
        if current.parent_id in visited:
            raise CyclicStructureError(
                f"Parent chain of {node_id} loops at {current.parent_id}",
                details={"id": node_id, "loop_at": current.parent_id},
            )
        visited.add(current.parent_id)
        parent = get_node(current.parent_id)
        if parent is None:
            break
        depth += 1
        current = parent
    return depth


def is_descendant(
    ancestor_id: str,
    node_id: str,
    get_node: NodeLookup,
) -> bool:
    """Return True when ``ancestor_id`` appears above ``node_id``."""
    visited = {node_id}
    current = get_node(node_id)
    while current is not None and current.parent_id is not None:
        if current.parent_id == ancestor_id:
            return True
        if current.parent_id in visited:
            return False
        visited.add(current.parent_id)
        current = get_node(current.parent_id)
    return False


def walk_tree(
    roots: Iterable[AccountNode],
    children_of: ChildrenLookup,
    logger: Logger | None = None,
) -> Iterator[tuple[AccountNode, int]]:
    """Yield nodes depth-first in render order with their relative level.

    Args:
        roots: Starting nodes, already in render order.
        children_of: Lookup returning the ordered children of a node id.
        logger: Optional logger warned when a node is reached twice.

    Yields:
        tuple[AccountNode, int]: Node and its level below the roots.
    """
    visited: set[str] = set()
    stack = [(node, 0) for node in reversed(list(roots))]
    while stack:
        node, level = stack.pop()
        if node.id in visited:
            if logger is not None:
                logger.warning(
                    f"Account {node.id} reached twice while walking the tree"
                )
            continue
        visited.add(node.id)
        yield node, level
        children = children_of(node.id)
        stack.extend((child, level + 1) for child in reversed(children))


def collect_subtree_ids(
    root_id: str,
    children_of: ChildrenLookup,
) -> list[str]:
    """Return ``root_id`` followed by every descendant id, preorder."""
    collected: list[str] = []
    visited: set[str] = set()
    stack = [root_id]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        collected.append(current)
        stack.extend(child.id for child in reversed(children_of(current)))
    return collected


def subtree_height(root_id: str, children_of: ChildrenLookup) -> int:
    """Return how many levels lie below ``root_id`` (0 for a leaf)."""
    height = 0
    visited = {root_id}
    stack = [(root_id, 0)]
    while stack:
        current, level = stack.pop()
        height = max(height, level)
        for child in children_of(current):
            if child.id in visited:
                continue
            visited.add(child.id)
            stack.append((child.id, level + 1))
    return height


def find_descendant(
    root_candidates: Iterable[AccountNode],
    target_id: str,
    children_of: ChildrenLookup,
) -> AccountNode | None:
    """Depth-first search for ``target_id`` below the given candidates.

    Args:
        root_candidates: Nodes where the search starts (included).
        target_id: Id to look for.
        children_of: Lookup returning the ordered children of a node id.

    Returns:
        AccountNode | None: The node when reachable, otherwise None.
    """
    for node, _level in walk_tree(root_candidates, children_of):
        if node.id == target_id:
            return node
    return None


__all__ = [
    "NodeLookup",
    "ChildrenLookup",
    "compute_depth",
    "is_descendant",
    "walk_tree",
    "collect_subtree_ids",
    "subtree_height",
    "find_descendant",
]
