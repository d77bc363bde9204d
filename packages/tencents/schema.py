"""Header-row resolution onto the canonical transaction fields.

Two export layouts are in circulation and both must import without any
version flag:

- legacy: ``Date, Icon, Name, Note, Amount, Currency, Type, Recurring``
- newer: ``Date, Source Icon, Source Name, Destination Icon,
  Destination Name, Note, Amount, Currency, Type, Recurring``

Headers are matched case-insensitively after trimming. When several columns
alias the same canonical field, the leftmost one wins.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from .errors import SchemaError

type ColumnMapping = Mapping[str, int]
"""Canonical field name → zero-based column index."""

# Canonical field → accepted header aliases (lower-case).
FIELD_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "date": ("date",),
        "icon": ("icon", "source icon"),
        "name": ("name", "source name"),
        "destinationName": ("destination name",),
        "destinationIcon": ("destination icon",),
        "note": ("note",),
        "amount": ("amount",),
        "currency": ("currency",),
        "type": ("type",),
        "recurring": ("recurring",),
    }
)

REQUIRED_FIELDS: tuple[str, ...] = ("date", "name", "amount", "type")

_ALIAS_TO_FIELD: dict[str, str] = {
    alias: canonical for canonical, aliases in FIELD_ALIASES.items() for alias in aliases
}


def resolve_schema(header_row: Sequence[str]) -> ColumnMapping:
    """Map ``header_row`` onto canonical fields.

    Raises
    ------
    SchemaError
        When the header row is empty or any of ``date``, ``name`` (or
        ``destination name``), ``amount`` or ``type`` has no matching column. ``SchemaError.missing`` lists every
        missing field.
    """

    headers = [h.strip().lower() for h in header_row]
    if not any(headers):
        raise SchemaError("CSV appears to have no header row", missing=REQUIRED_FIELDS)

    mapping: dict[str, int] = {}
    for idx, header in enumerate(headers):
        canonical = _ALIAS_TO_FIELD.get(header)
        if canonical is not None and canonical not in mapping:
            mapping[canonical] = idx

    # A destination name column stands in for a missing name column.
    missing = [
        f
        for f in REQUIRED_FIELDS
        if f not in mapping and not (f == "name" and "destinationName" in mapping)
    ]
    if missing:
        raise SchemaError(
            "CSV missing required field: " + ", ".join(missing),
            missing=missing,
        )
    return MappingProxyType(mapping)


__all__ = ["ColumnMapping", "FIELD_ALIASES", "REQUIRED_FIELDS", "resolve_schema"]
