"""CSV → ``Transaction`` decoding.

Parsing follows RFC 4180 via the stdlib :mod:`csv` module (quoted fields may
hold commas and newlines). Cells are trimmed before use and completely blank
lines are skipped.

Decoding a file is all-or-nothing: :func:`decode_csv` raises on the first bad
row and never returns a partial list.
"""

from __future__ import annotations

import csv
import math
import re
from collections.abc import Iterator, Sequence
from io import StringIO

from .dates import parse_calendar_date
from .errors import RowValidationError, SchemaError
from .logging_setup import get_logger
from .models import TRANSACTION_KINDS, Transaction
from .schema import ColumnMapping, resolve_schema

_logger = get_logger("tencents.decoder")

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# ---------------------------------------------------------------------------
# Cell helpers
# ---------------------------------------------------------------------------


def _cell(cells: Sequence[str], mapping: ColumnMapping, field: str) -> str | None:
    """Return the trimmed cell for ``field``, ``None`` when the column is unmapped.

    Short rows read as empty strings past their last cell.
    """

    idx = mapping.get(field)
    if idx is None:
        return None
    if idx >= len(cells):
        return ""
    return (cells[idx] or "").strip()


def parse_amount(raw: str) -> float | None:
    """Parse a decimal amount; ``None`` when the text is not a finite number."""

    text = raw.strip()
    if not _DECIMAL_RE.fullmatch(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


# ---------------------------------------------------------------------------
# Row decoding
# ---------------------------------------------------------------------------


def decode_row(
    cells: Sequence[str],
    mapping: ColumnMapping,
    *,
    line: int | None = None,
    strict_amounts: bool = False,
) -> Transaction:
    """Decode one data row using a mapping from :func:`resolve_schema`.

    Rules
    -----
    - The effective name is the ``destinationName`` cell when that column exists
      and is non-empty, otherwise the ``name`` cell.
    - ``date``, effective name, ``amount`` and ``type`` cells must be non-empty.
    - ``date`` must parse as a calendar date.
    - ``type`` must be exactly ``expense`` or ``income``.
    - A non-numeric amount becomes ``0.0`` unless ``strict_amounts`` is set, in
      which case it is rejected.
    - Optional columns absent from the header read as ``""``
      (``destination_icon`` stays ``None``).
    """

    date = _cell(cells, mapping, "date") or ""
    amount_raw = _cell(cells, mapping, "amount") or ""
    kind = _cell(cells, mapping, "type") or ""
    name = _cell(cells, mapping, "destinationName") or _cell(cells, mapping, "name") or ""

    if not date or not name or not amount_raw or not kind:
        raise RowValidationError("Missing required fields", rule="required", line=line)
    if parse_calendar_date(date) is None:
        raise RowValidationError(f"Invalid date format: {date!r}", rule="date", line=line)
    if kind not in TRANSACTION_KINDS:
        raise RowValidationError(
            'Type must be either "expense" or "income"', rule="type", line=line
        )

    amount = parse_amount(amount_raw)
    if amount is None:
        if strict_amounts:
            raise RowValidationError(
                f"Invalid amount: {amount_raw!r}", rule="amount", line=line
            )
        _logger.debug("line %s: unparsable amount %r defaulted to 0", line, amount_raw)
        amount = 0.0

    return Transaction(
        date=date,
        name=name,
        amount=amount,
        kind=kind,  # type: ignore[arg-type]
        note=_cell(cells, mapping, "note") or "",
        icon=_cell(cells, mapping, "icon") or "",
        currency=_cell(cells, mapping, "currency") or "",
        recurring=_cell(cells, mapping, "recurring") or "",
        destination_icon=_cell(cells, mapping, "destinationIcon"),
    )


# ---------------------------------------------------------------------------
# Whole-file decoding
# ---------------------------------------------------------------------------


def _iter_records(csv_text: str) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line, cells)`` for every non-blank CSV record."""

    with StringIO(csv_text) as f:
        reader = csv.reader(f)
        for cells in reader:
            if all(not (c or "").strip() for c in cells):
                continue
            yield reader.line_num, cells


def decode_csv(csv_text: str, *, strict_amounts: bool = False) -> list[Transaction]:
    """Decode a whole CSV document into transactions.

    The first non-blank record is the header. Raises :class:`SchemaError` when
    there is no header or required columns are missing, and
    :class:`RowValidationError` for the first invalid data row; no partial
    result is ever returned.
    """

    records = _iter_records(csv_text.removeprefix("\ufeff"))
    try:
        _, header = next(records)
    except StopIteration:
        raise SchemaError("CSV is empty", missing=()) from None
    except csv.Error as exc:
        raise SchemaError(f"Failed to parse CSV header: {exc}") from exc

    mapping = resolve_schema(header)

    transactions: list[Transaction] = []
    try:
        for line, cells in records:
            transactions.append(
                decode_row(cells, mapping, line=line, strict_amounts=strict_amounts)
            )
    except csv.Error as exc:
        raise RowValidationError(f"Malformed CSV: {exc}", rule="format") from exc

    _logger.info("decoded %d transactions", len(transactions))
    return transactions


__all__ = ["decode_csv", "decode_row", "parse_amount"]
