"""Data models for ``tencents``.

Transactions are the canonical, immutable records produced by the decoder.
Categories and render rows are derived views; they are rebuilt from the
transaction set whenever filters or the expanded set change and are never
persisted on their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

type TransactionKind = Literal["expense", "income"]
type KindFilter = Literal["expense", "income", "all"]

TRANSACTION_KINDS: tuple[str, ...] = ("expense", "income")
KIND_FILTERS: tuple[str, ...] = ("expense", "income", "all")

# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single decoded transaction row.

    ``date`` keeps the source text; it is guaranteed to parse as a calendar
    date when the record comes out of the decoder. ``name`` is the category
    label after destination-name resolution and ``note`` (possibly empty) is
    the subcategory label. ``currency``, ``icon``, ``recurring`` and
    ``destination_icon`` ride along untouched; aggregation ignores them.
    ``destination_icon`` is ``None`` when the source had no such column.
    """

    date: str
    name: str
    amount: float
    kind: TransactionKind
    note: str = ""
    icon: str = ""
    currency: str = ""
    recurring: str = ""
    destination_icon: str | None = None


@dataclass(frozen=True, slots=True)
class Subcategory:
    label: str
    amount: float


@dataclass(frozen=True, slots=True)
class Category:
    """One aggregation bucket per distinct transaction name.

    ``subcategories`` is ``None`` when no transaction in the bucket carried a
    note. Otherwise the subcategory amounts add up to ``total_amount``; the
    ``Other`` entry absorbs the unnoted transactions.
    """

    name: str
    total_amount: float
    subcategories: tuple[Subcategory, ...] | None = None

    @property
    def has_subcategories(self) -> bool:
        return bool(self.subcategories)


@dataclass(frozen=True, slots=True)
class RenderRow:
    """A flattened line of the category tree.

    ``kind`` tags the variant: ``"category"`` rows carry ``has_children``;
    ``"subcategory"`` rows carry the owning category name in ``parent``.
    """

    kind: Literal["category", "subcategory"]
    name: str
    amount: float
    has_children: bool = False
    parent: str | None = None

    @property
    def is_subcategory(self) -> bool:
        return self.kind == "subcategory"


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive date bounds as entered by the user (unparsed strings).

    The range only applies when both bounds are non-empty.
    """

    start: str | None = None
    end: str | None = None

    @property
    def is_active(self) -> bool:
        return bool(self.start) and bool(self.end)


@dataclass(frozen=True, slots=True)
class Filters:
    date_range: DateRange = field(default_factory=DateRange)
    kind: KindFilter = "expense"

    def __post_init__(self) -> None:
        if self.kind not in KIND_FILTERS:
            raise ValueError(f"kind must be one of {', '.join(KIND_FILTERS)}; got {self.kind!r}")


DEFAULT_FILTERS = Filters()


# ---------------------------------------------------------------------------
# DTOs for the persisted dataset
# ---------------------------------------------------------------------------


class StoredTransaction(BaseModel):
    """On-disk shape of a saved transaction.

    Mirrors the record fields with the key names used by exported files
    (``type`` and ``destinationIcon``). Amounts written by older tools may be
    strings, so numeric coercion stays enabled.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    date: str
    icon: str = ""
    name: str
    note: str = ""
    amount: float = 0.0
    currency: str = ""
    kind: TransactionKind = Field(alias="type")
    recurring: str = ""
    destination_icon: str | None = Field(default=None, alias="destinationIcon")

    @field_validator("icon", "note", "currency", "recurring", mode="before")
    @classmethod
    def _none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("amount", mode="before")
    @classmethod
    def _blank_amount_is_zero(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0.0
        return v

    @classmethod
    def from_transaction(cls, tx: Transaction) -> StoredTransaction:
        return cls(
            date=tx.date,
            icon=tx.icon,
            name=tx.name,
            note=tx.note,
            amount=tx.amount,
            currency=tx.currency,
            kind=tx.kind,
            recurring=tx.recurring,
            destination_icon=tx.destination_icon,
        )

    def to_transaction(self) -> Transaction:
        return Transaction(
            date=self.date,
            name=self.name,
            amount=self.amount,
            kind=self.kind,
            note=self.note,
            icon=self.icon,
            currency=self.currency,
            recurring=self.recurring,
            destination_icon=self.destination_icon,
        )


__all__ = [
    "Category",
    "DEFAULT_FILTERS",
    "DateRange",
    "Filters",
    "KIND_FILTERS",
    "KindFilter",
    "RenderRow",
    "StoredTransaction",
    "Subcategory",
    "TRANSACTION_KINDS",
    "Transaction",
    "TransactionKind",
]
