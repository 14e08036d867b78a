"""Domain constants for the DRE account tree."""

ALLOWED_CATEGORY_LEVELS = (3, 4, 5)

DEFAULT_CATEGORY_LEVELS = 3

CODE_PADDING = 2

REVENUE_ROOT_PREFIX = "R"
EXPENSE_ROOT_PREFIX = "D"
INDICATOR_ROOT_PREFIX = "I"
TOTAL_ROOT_PREFIX = "T"
FLEX_ROOT_PREFIX = "F"


__all__ = [
    "ALLOWED_CATEGORY_LEVELS",
    "DEFAULT_CATEGORY_LEVELS",
    "CODE_PADDING",
    "REVENUE_ROOT_PREFIX",
    "EXPENSE_ROOT_PREFIX",
    "INDICATOR_ROOT_PREFIX",
    "TOTAL_ROOT_PREFIX",
    "FLEX_ROOT_PREFIX",
]
