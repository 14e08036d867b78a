"""Domain models package."""

from .accounts import (
    PAYLOAD_TYPES,
    AccountKind,
    AccountNode,
    AccountPayload,
    CategoryPayload,
    FlexPayload,
    FlexSign,
    IndicatorPayload,
    MoveDirection,
    RevenueOrExpense,
    TotalPayload,
)
from .registry import CategoryRef, CompanyRef, IndicatorRef
from .tree import AccountTreeRow

__all__ = [
    "AccountKind",
    "AccountNode",
    "AccountPayload",
    "AccountTreeRow",
    "CategoryPayload",
    "CategoryRef",
    "CompanyRef",
    "FlexPayload",
    "FlexSign",
    "IndicatorPayload",
    "IndicatorRef",
    "MoveDirection",
    "PAYLOAD_TYPES",
    "RevenueOrExpense",
    "TotalPayload",
]
