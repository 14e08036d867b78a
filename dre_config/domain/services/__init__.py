"""Domain services package."""

from .code_generator import generate_code, root_prefix
from .ordering import next_display_order, sibling_sort_key, sort_siblings
from .traversal import (
    collect_subtree_ids,
    compute_depth,
    find_descendant,
    is_descendant,
    subtree_height,
    walk_tree,
)
from .validation import (
    validate_account_name,
    validate_category_payload,
    validate_indicator_payload,
    validate_payload,
    validate_total_payload,
)

__all__ = [
    "collect_subtree_ids",
    "compute_depth",
    "find_descendant",
    "generate_code",
    "is_descendant",
    "next_display_order",
    "root_prefix",
    "sibling_sort_key",
    "sort_siblings",
    "subtree_height",
    "validate_account_name",
    "validate_category_payload",
    "validate_indicator_payload",
    "validate_payload",
    "validate_total_payload",
    "walk_tree",
]
