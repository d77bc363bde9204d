"""Public API surface for the ``tencents`` package.

The four pipeline stages are re-exported from their modules:

- :func:`resolve_schema` maps a header row onto canonical fields;
- :func:`decode_row` turns one data row into a :class:`Transaction`;
- :func:`aggregate` filters and groups transactions into categories;
- :func:`flatten` produces the ordered rows for a set of expanded categories.

:func:`load_transactions_from_csv` wires the first two together for a file on
disk.
"""

from __future__ import annotations

from os import PathLike

from .aggregate import aggregate, filter_transactions, search_transactions
from .decoder import decode_csv, decode_row
from .flatten import flatten, toggle, toggle_category
from .models import Transaction
from .schema import resolve_schema
from .sources import read_csv_text


def load_transactions_from_csv(
    csv_path: str | PathLike[str], *, strict_amounts: bool = False
) -> list[Transaction]:
    """Read and decode a CSV export in one blocking call.

    Raises ``ReadError`` when the file cannot be read, ``SchemaError`` for a
    bad header and ``RowValidationError`` for the first invalid row.
    """

    return decode_csv(read_csv_text(csv_path), strict_amounts=strict_amounts)


__all__ = [
    "aggregate",
    "decode_csv",
    "decode_row",
    "filter_transactions",
    "flatten",
    "load_transactions_from_csv",
    "resolve_schema",
    "search_transactions",
    "toggle",
    "toggle_category",
]
