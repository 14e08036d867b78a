"""Policy for the per-company maximum tree depth."""

from logging import Logger

from dre_config.domain.constants import (
    ALLOWED_CATEGORY_LEVELS,
    DEFAULT_CATEGORY_LEVELS,
)


def normalize_category_levels(
    raw_levels,
    logger: Logger | None = None,
    default: int = DEFAULT_CATEGORY_LEVELS,
) -> int:
    """Return a supported category level count.

    Args:
        raw_levels: Value read from a registry or the environment.
        logger: Optional logger warned when the value is replaced.
        default: Level count used for missing or unsupported values.

    Returns:
        int: One of the allowed level counts.
    """
    if raw_levels is None or raw_levels == "":
        return default
    try:
        levels = int(raw_levels)
    except (TypeError, ValueError):
        levels = None
    if levels in ALLOWED_CATEGORY_LEVELS:
        return levels
    if logger is not None:
        logger.warning(
            f"Unsupported category levels {raw_levels!r}; using {default}"
        )
    return default


__all__ = ["normalize_category_levels"]
