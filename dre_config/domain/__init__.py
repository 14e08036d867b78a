"""Domain package for the DRE account tree rules and models."""

from .constants import ALLOWED_CATEGORY_LEVELS, DEFAULT_CATEGORY_LEVELS
from .errors import (
    AccountTreeError,
    CrossTenantReferenceError,
    CyclicStructureError,
    DepthExceededError,
    EmptyNameError,
    InvalidReferenceError,
    NotFoundError,
    SelfCloneError,
)
from .models import (
    AccountKind,
    AccountNode,
    AccountTreeRow,
    CategoryPayload,
    CategoryRef,
    CompanyRef,
    FlexPayload,
    FlexSign,
    IndicatorPayload,
    IndicatorRef,
    MoveDirection,
    RevenueOrExpense,
    TotalPayload,
)

__all__ = [
    "ALLOWED_CATEGORY_LEVELS",
    "DEFAULT_CATEGORY_LEVELS",
    "AccountTreeError",
    "CrossTenantReferenceError",
    "CyclicStructureError",
    "DepthExceededError",
    "EmptyNameError",
    "InvalidReferenceError",
    "NotFoundError",
    "SelfCloneError",
    "AccountKind",
    "AccountNode",
    "AccountTreeRow",
    "CategoryPayload",
    "CategoryRef",
    "CompanyRef",
    "FlexPayload",
    "FlexSign",
    "IndicatorPayload",
    "IndicatorRef",
    "MoveDirection",
    "RevenueOrExpense",
    "TotalPayload",
]
