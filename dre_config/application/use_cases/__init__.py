"""Application use cases package."""

from .account_tree import AccountTreeService
from .clone_account_tree import (
    CloneAccountTreeResult,
    CloneAccountTreeUseCase,
)
from .get_account_tree import GetAccountTreeUseCase

__all__ = [
    "AccountTreeService",
    "CloneAccountTreeUseCase",
    "CloneAccountTreeResult",
    "GetAccountTreeUseCase",
]
