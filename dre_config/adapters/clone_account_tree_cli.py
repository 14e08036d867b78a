"""CLI adapter to clone one company's DRE account tree into another.

The source and target companies are read from ``DRE_CLONE_SOURCE`` and
``DRE_CLONE_TARGET``. Set ``DRE_CLONE_REPLACE=1`` to replace the target's
existing tree instead of appending to it.
"""

import os

from dre_config.domain.errors import AccountTreeError
from dre_config.infrastructure.container import (
    build_clone_account_tree_use_case,
)
from dre_config.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


_TRUE_VALUES = ("1", "true", "yes")


def main() -> None:
    """Run the clone use case for the configured pair of companies."""
    logger = get_app_logger()
    source = os.getenv("DRE_CLONE_SOURCE", "").strip()
    target = os.getenv("DRE_CLONE_TARGET", "").strip()
    if not source or not target:
        logger.warning(
            "DRE_CLONE_SOURCE and DRE_CLONE_TARGET are required to clone."
        )
        return
    replace_existing = (
        os.getenv("DRE_CLONE_REPLACE", "").strip().lower() in _TRUE_VALUES
    )
    get_usage_logger().info(
        f"clone requested: {source} -> {target} (replace={replace_existing})"
    )

    use_case = build_clone_account_tree_use_case()
    try:
        result = use_case.execute(
            source,
            target,
            replace_existing=replace_existing,
        )
    except AccountTreeError as exc:
        logger.error(f"Clone failed [{exc.error_code}]: {exc.message}")
        return

    print(
        f"Cloned {result.cloned_count} of {result.source_count} accounts "
        f"from {result.source_company_id} to {result.target_company_id}."
    )


if __name__ == "__main__":  # pragma: no cover
    main()
