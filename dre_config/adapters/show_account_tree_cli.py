"""CLI adapter printing a company's DRE account tree."""

import os

from dre_config.infrastructure.container import (
    build_get_account_tree_use_case,
)
from dre_config.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


def main() -> None:
    """Print the tree of ``DRE_COMPANY_ID`` in render order."""
    logger = get_app_logger()
    company_id = os.getenv("DRE_COMPANY_ID", "").strip()
    if not company_id:
        logger.warning("DRE_COMPANY_ID is required to show an account tree.")
        return
    include_inactive = os.getenv("DRE_INCLUDE_INACTIVE", "1").strip() != "0"
    get_usage_logger().info(f"show requested: {company_id}")

    use_case = build_get_account_tree_use_case()
    rows = use_case.execute(company_id, include_inactive=include_inactive)
    if not rows:
        print(f"No accounts configured for company {company_id}.")
        return

    for row in rows:
        node = row.node
        status = "" if node.is_active else " (inactive)"
        print(
            f"{'  ' * row.level}{node.code} {node.name} "
            f"[{node.kind.value}]{status}"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
