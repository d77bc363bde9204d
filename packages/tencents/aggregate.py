"""Filtering and category/subcategory aggregation.

``aggregate`` is a pure function of its inputs: it re-filters and re-groups the
full transaction set on every call and never fails for decoded transactions.

Grouping walks the filtered transactions in input order:

- The first transaction with a given ``name`` opens the category. A non-empty
  note seeds a single subcategory; without a note the category has none.
- Later transactions add to the category total. The first noted transaction in
  a category that has no subcategories yet materializes an ``Other`` bucket
  holding everything seen so far, so subcategory amounts always add up to the
  category total. From then on unnoted amounts go to ``Other`` and noted ones
  go to their own label.

Both levels are sorted by amount, descending; ``sorted`` is stable so ties keep
first-seen order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from .dates import parse_calendar_date
from .models import DEFAULT_FILTERS, Category, Filters, Subcategory, Transaction

OTHER_LABEL = "Other"

# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def _in_range(tx: Transaction, start: date | None, end: date | None) -> bool:
    if start is None or end is None:
        return False
    d = parse_calendar_date(tx.date)
    if d is None:
        return False
    return start <= d <= end


def filter_transactions(
    transactions: Iterable[Transaction], filters: Filters = DEFAULT_FILTERS
) -> list[Transaction]:
    """Apply the date-range and kind filters, preserving input order.

    The range is active only when both bounds are non-empty. While active,
    a transaction is kept only if both bounds and its own date parse and the
    date lies within ``[start, end]``.
    """

    rng = filters.date_range
    start = end = None
    if rng.is_active:
        start = parse_calendar_date(rng.start)
        end = parse_calendar_date(rng.end)
    out: list[Transaction] = []
    for tx in transactions:
        if rng.is_active and not _in_range(tx, start, end):
            continue
        if filters.kind != "all" and tx.kind != filters.kind:
            continue
        out.append(tx)
    return out


def search_transactions(transactions: Iterable[Transaction], term: str) -> list[Transaction]:
    """Case-insensitive substring search over ``name`` and ``note``."""

    needle = term.strip().lower()
    if not needle:
        return list(transactions)
    return [tx for tx in transactions if needle in tx.name.lower() or needle in tx.note.lower()]


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class _Bucket:
    """Mutable accumulator; lives only inside one ``aggregate`` call."""

    name: str
    total: float
    # ``None`` until the first noted transaction; insertion-ordered afterwards.
    subs: dict[str, float] | None = field(default=None)

    def add(self, amount: float, note: str) -> None:
        before = self.total
        self.total += amount
        if self.subs is None:
            if note:
                # A note literally named "Other" merges into the bucket.
                self.subs = {OTHER_LABEL: before}
                self.subs[note] = self.subs.get(note, 0.0) + amount
            return
        label = note or OTHER_LABEL
        self.subs[label] = self.subs.get(label, 0.0) + amount

    def freeze(self) -> Category:
        subs: tuple[Subcategory, ...] | None = None
        if self.subs is not None:
            ordered = sorted(self.subs.items(), key=lambda kv: kv[1], reverse=True)
            subs = tuple(Subcategory(label, amount) for label, amount in ordered)
        return Category(name=self.name, total_amount=self.total, subcategories=subs)


def group_transactions(transactions: Iterable[Transaction]) -> list[Category]:
    """Group already-filtered transactions into sorted categories."""

    buckets: dict[str, _Bucket] = {}
    for tx in transactions:
        note = tx.note.strip()
        bucket = buckets.get(tx.name)
        if bucket is None:
            buckets[tx.name] = _Bucket(
                name=tx.name,
                total=tx.amount,
                subs={note: tx.amount} if note else None,
            )
        else:
            bucket.add(tx.amount, note)

    categories = [b.freeze() for b in buckets.values()]
    return sorted(categories, key=lambda c: c.total_amount, reverse=True)


def aggregate(
    transactions: Iterable[Transaction], filters: Filters | None = None
) -> list[Category]:
    """Filter then group ``transactions`` into categories with subcategories."""

    return group_transactions(filter_transactions(transactions, filters or DEFAULT_FILTERS))


__all__ = [
    "OTHER_LABEL",
    "aggregate",
    "filter_transactions",
    "group_transactions",
    "search_transactions",
]
