"""CSV export of a transaction set.

The layout is fixed (``Date,Icon,Name,Note,Amount,Currency,Type,Recurring``)
and values are joined with plain commas. Embedded commas are not escaped, so a
value containing one shifts the columns of that line.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Transaction

EXPORT_HEADER: tuple[str, ...] = (
    "Date",
    "Icon",
    "Name",
    "Note",
    "Amount",
    "Currency",
    "Type",
    "Recurring",
)


def format_amount(amount: float) -> str:
    # Whole amounts print without a trailing ".0".
    if amount.is_integer():
        return str(int(amount))
    return repr(amount)


def export_csv(transactions: Iterable[Transaction]) -> str:
    lines = [",".join(EXPORT_HEADER)]
    for tx in transactions:
        lines.append(
            ",".join(
                (
                    tx.date,
                    tx.icon,
                    tx.name,
                    tx.note,
                    format_amount(tx.amount),
                    tx.currency,
                    tx.kind,
                    tx.recurring,
                )
            )
        )
    return "\n".join(lines) + "\n"


__all__ = ["EXPORT_HEADER", "export_csv", "format_amount"]
