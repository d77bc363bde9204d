"""Error taxonomy for transaction import.

All three errors are fatal to a single import and leave any previously loaded
dataset untouched. Aggregation and flattening never raise.
"""

from __future__ import annotations

from collections.abc import Sequence


class SchemaError(ValueError):
    """The header row is missing, or required columns could not be resolved."""

    def __init__(self, message: str, *, missing: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.missing: tuple[str, ...] = tuple(missing)


class RowValidationError(ValueError):
    """A data row violates a required-field, date, type or amount rule.

    ``rule`` is one of ``"required"``, ``"date"``, ``"type"``, ``"amount"`` or
    ``"format"`` (the CSV itself is malformed).
    ``line`` is the 1-based line in the source file when known.
    """

    def __init__(self, message: str, *, rule: str, line: int | None = None) -> None:
        self.rule = rule
        self.line = line
        self.reason = message
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class ReadError(OSError):
    """File content could not be obtained."""


__all__ = ["ReadError", "RowValidationError", "SchemaError"]
