"""Domain policies package."""

from .account_names import is_valid_account_name, normalize_account_name
from .category_levels import normalize_category_levels

__all__ = [
    "is_valid_account_name",
    "normalize_account_name",
    "normalize_category_levels",
]
