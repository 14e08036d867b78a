"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

from dre_config.domain.constants import DEFAULT_CATEGORY_LEVELS
from dre_config.domain.policies.category_levels import (
    normalize_category_levels,
)
from dre_config.infrastructure.logging.logger import get_app_logger


SUPPORTED_BACKENDS = ("memory", "sqlalchemy")


@dataclass(frozen=True)
class AccountTreeSettings:
    """Settings for the account tree backends.

    Attributes:
        store_backend: Backend identifier (memory or sqlalchemy).
        default_category_levels: Depth used for companies without a
            configured level count.
    """

    store_backend: str = "sqlalchemy"
    default_category_levels: int = DEFAULT_CATEGORY_LEVELS

    @classmethod
    def from_env(cls) -> "AccountTreeSettings":
        """Build settings from environment variables.

        Returns:
            AccountTreeSettings: Settings sourced from environment variables.
        """
        logger = get_app_logger()
        backend = os.getenv("DRE_STORE_BACKEND", "sqlalchemy").strip().lower()
        if backend not in SUPPORTED_BACKENDS:
            logger.warning(
                f"Unknown DRE_STORE_BACKEND '{backend}'. "
                f"Expected one of {', '.join(SUPPORTED_BACKENDS)}."
            )
        levels = normalize_category_levels(
            os.getenv("DRE_DEFAULT_CATEGORY_LEVELS"),
            logger=logger,
        )
        return cls(store_backend=backend, default_category_levels=levels)


__all__ = ["AccountTreeSettings", "SUPPORTED_BACKENDS"]
