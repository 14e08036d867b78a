"""Domain errors raised by account tree operations.

Every error is recoverable: callers decide whether to surface it to a user.
The ``error_code`` and ``to_dict`` helpers let an API layer translate them
without knowing each subclass.
"""

from typing import Any


class AccountTreeError(Exception):
    """Base class for account tree failures."""

    error_code: str = "ACCOUNT_TREE_ERROR"
    message: str = "Account tree operation failed"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.__class__.message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable view of the error."""
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class NotFoundError(AccountTreeError):
    """An operation referenced an unknown id."""

    error_code = "NOT_FOUND"
    message = "Referenced entity was not found"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(
            message=f"{entity} {entity_id} not found",
            details={"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class DepthExceededError(AccountTreeError):
    """An insert or move would exceed the company's category levels."""

    error_code = "DEPTH_EXCEEDED"
    message = "Maximum tree depth exceeded"

    def __init__(self, depth: int, category_levels: int) -> None:
        super().__init__(
            message=(
                f"Depth {depth} is not allowed; company supports "
                f"{category_levels} levels"
            ),
            details={"depth": depth, "category_levels": category_levels},
        )
        self.depth = depth
        self.category_levels = category_levels


class EmptyNameError(AccountTreeError):
    """A commit was attempted with a blank name."""

    error_code = "EMPTY_NAME"
    message = "Account name must not be blank"


class InvalidReferenceError(AccountTreeError):
    """A payload references a missing or type-incompatible target."""

    error_code = "INVALID_REFERENCE"
    message = "Account payload references an invalid target"


class CrossTenantReferenceError(AccountTreeError):
    """An operation would link nodes of different companies."""

    error_code = "CROSS_TENANT_REFERENCE"
    message = "Accounts of different companies cannot be linked"


class SelfCloneError(AccountTreeError):
    """A clone was requested with identical source and target."""

    error_code = "SELF_CLONE"
    message = "Source and target company must differ"


class CyclicStructureError(AccountTreeError):
    """A cycle was found, or an operation would create one."""

    error_code = "CYCLIC_STRUCTURE"
    message = "Account hierarchy contains a cycle"


__all__ = [
    "AccountTreeError",
    "NotFoundError",
    "DepthExceededError",
    "EmptyNameError",
    "InvalidReferenceError",
    "CrossTenantReferenceError",
    "SelfCloneError",
    "CyclicStructureError",
]
