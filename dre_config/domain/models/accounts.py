"""Domain models for DRE account nodes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Union

from dre_config.domain.errors import InvalidReferenceError


class AccountKind(str, Enum):
    """Closed set of account node kinds."""

    CATEGORY = "category"
    INDICATOR = "indicator"
    TOTAL = "total"
    FLEX = "flex"


class RevenueOrExpense(str, Enum):
    """Sub-type shared by the categories of a category node."""

    REVENUE = "revenue"
    EXPENSE = "expense"


class FlexSign(str, Enum):
    """Sign applied to a manually entered flex line."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class MoveDirection(str, Enum):
    """Direction for sibling reordering."""

    UP = "up"
    DOWN = "down"


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    """Return values as a tuple without duplicates, keeping first order."""
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class CategoryPayload:
    """Reference to one or more registry categories.

    Attributes:
        category_ids: Registry category ids, first selection first.
        revenue_or_expense: Type inherited from the first category. Filled
            in by validation when the registry is consulted.
    """

    category_ids: tuple[str, ...]
    revenue_or_expense: RevenueOrExpense | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "category_ids", _unique(self.category_ids))


@dataclass(frozen=True)
class IndicatorPayload:
    """Reference to exactly one registry indicator."""

    indicator_id: str


@dataclass(frozen=True)
class TotalPayload:
    """Aggregate of other account nodes of the same company."""

    selected_account_ids: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "selected_account_ids",
            _unique(self.selected_account_ids),
        )

    def without(self, account_ids: Iterable[str]) -> "TotalPayload":
        """Return a payload with the given ids removed."""
        removed = set(account_ids)
        return TotalPayload(
            tuple(
                account_id
                for account_id in self.selected_account_ids
                if account_id not in removed
            )
        )


@dataclass(frozen=True)
class FlexPayload:
    """Manual line with an explicit sign."""

    sign: FlexSign = FlexSign.POSITIVE


AccountPayload = Union[
    CategoryPayload,
    IndicatorPayload,
    TotalPayload,
    FlexPayload,
]

PAYLOAD_TYPES: dict[AccountKind, type] = {
    AccountKind.CATEGORY: CategoryPayload,
    AccountKind.INDICATOR: IndicatorPayload,
    AccountKind.TOTAL: TotalPayload,
    AccountKind.FLEX: FlexPayload,
}


@dataclass(frozen=True)
class AccountNode:
    """One line of a company's DRE configuration tree.

    Nodes are immutable; operations store a replaced copy so that a partial
    update touches a single record.

    Attributes:
        id: Opaque unique identifier.
        company_id: Owning company.
        code: Display code derived at creation time.
        name: Display label.
        kind: Node kind, fixed for the node's lifetime.
        payload: Kind-specific payload. ``None`` only while ``is_new``.
        parent_id: Parent node id in the same company, ``None`` for roots.
        display_order: Rank among siblings.
        is_active: Independent activation flag.
        is_expanded: UI expansion flag.
        company_visibility: Companies for which the line is enabled.
        is_new: Created but never committed.
        is_editing: Rename in progress.
        committed_name: Last committed name, restored on cancel. Committed
            nodes default it to ``name``.
    """

    id: str
    company_id: str
    code: str
    name: str
    kind: AccountKind
    payload: AccountPayload | None
    parent_id: str | None
    display_order: int
    is_active: bool = True
    is_expanded: bool = False
    company_visibility: frozenset[str] = field(default_factory=frozenset)
    is_new: bool = False
    is_editing: bool = False
    committed_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", AccountKind(self.kind))
        object.__setattr__(
            self,
            "company_visibility",
            frozenset(self.company_visibility),
        )
        if not self.is_new and not self.committed_name:
            object.__setattr__(self, "committed_name", self.name)
        if self.payload is None:
            if not self.is_new:
                raise InvalidReferenceError(
                    f"Committed {self.kind.value} account {self.id} "
                    "requires a payload"
                )
            return
        expected = PAYLOAD_TYPES[self.kind]
        if not isinstance(self.payload, expected):
            raise InvalidReferenceError(
                f"{self.kind.value} account {self.id} cannot carry "
                f"{type(self.payload).__name__}",
                details={"kind": self.kind.value},
            )

    @property
    def is_root(self) -> bool:
        """Return True when the node has no parent."""
        return self.parent_id is None

    @property
    def category_ids(self) -> tuple[str, ...]:
        if isinstance(self.payload, CategoryPayload):
            return self.payload.category_ids
        return ()

    @property
    def indicator_id(self) -> str | None:
        if isinstance(self.payload, IndicatorPayload):
            return self.payload.indicator_id
        return None

    @property
    def selected_account_ids(self) -> tuple[str, ...]:
        if isinstance(self.payload, TotalPayload):
            return self.payload.selected_account_ids
        return ()

    @property
    def sign(self) -> FlexSign | None:
        if isinstance(self.payload, FlexPayload):
            return self.payload.sign
        return None

    @property
    def revenue_or_expense(self) -> RevenueOrExpense | None:
        if isinstance(self.payload, CategoryPayload):
            return self.payload.revenue_or_expense
        return None

    def to_record(self) -> dict[str, Any]:
        """Return a flat, JSON-compatible record of the node."""
        return {
            "id": self.id,
            "company_id": self.company_id,
            "code": self.code,
            "name": self.name,
            "kind": self.kind.value,
            "parent_id": self.parent_id,
            "display_order": self.display_order,
            "is_active": self.is_active,
            "is_expanded": self.is_expanded,
            "company_visibility": sorted(self.company_visibility),
            "is_new": self.is_new,
            "is_editing": self.is_editing,
            "committed_name": self.committed_name,
            "has_payload": self.payload is not None,
            "category_ids": list(self.category_ids),
            "revenue_or_expense": (
                self.revenue_or_expense.value
                if self.revenue_or_expense is not None
                else None
            ),
            "indicator_id": self.indicator_id,
            "selected_account_ids": list(self.selected_account_ids),
            "sign": self.sign.value if self.sign is not None else None,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "AccountNode":
        """Build a node from a record produced by ``to_record``.

        Args:
            record: Flat mapping with the node fields.

        Returns:
            AccountNode: Rebuilt node.

        Raises:
            InvalidReferenceError: If the payload columns do not fit the kind.
        """
        kind = AccountKind(record["kind"])
        payload = (
            _payload_from_record(kind, record)
            if record.get("has_payload", True)
            else None
        )
        return cls(
            id=record["id"],
            company_id=record["company_id"],
            code=record.get("code") or "",
            name=record.get("name") or "",
            kind=kind,
            payload=payload,
            parent_id=record.get("parent_id"),
            display_order=int(record["display_order"]),
            is_active=bool(record.get("is_active", True)),
            is_expanded=bool(record.get("is_expanded", False)),
            company_visibility=frozenset(
                record.get("company_visibility") or ()
            ),
            is_new=bool(record.get("is_new", False)),
            is_editing=bool(record.get("is_editing", False)),
            committed_name=record.get("committed_name") or "",
        )


def _payload_from_record(
    kind: AccountKind,
    record: Mapping[str, Any],
) -> AccountPayload:
    if kind is AccountKind.CATEGORY:
        raw_type = record.get("revenue_or_expense")
        return CategoryPayload(
            category_ids=tuple(record.get("category_ids") or ()),
            revenue_or_expense=(
                RevenueOrExpense(raw_type) if raw_type else None
            ),
        )
    if kind is AccountKind.INDICATOR:
        indicator_id = record.get("indicator_id")
        if not indicator_id:
            raise InvalidReferenceError(
                f"Indicator account {record.get('id')} has no indicator_id"
            )
        return IndicatorPayload(indicator_id=indicator_id)
    if kind is AccountKind.TOTAL:
        return TotalPayload(
            selected_account_ids=tuple(
                record.get("selected_account_ids") or ()
            )
        )
    raw_sign = record.get("sign")
    return FlexPayload(
        sign=FlexSign(raw_sign) if raw_sign else FlexSign.POSITIVE
    )


__all__ = [
    "AccountKind",
    "RevenueOrExpense",
    "FlexSign",
    "MoveDirection",
    "CategoryPayload",
    "IndicatorPayload",
    "TotalPayload",
    "FlexPayload",
    "AccountPayload",
    "PAYLOAD_TYPES",
    "AccountNode",
]
