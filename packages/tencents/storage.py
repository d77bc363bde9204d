"""Saved-dataset persistence (a small file-backed key-value store).

The store keeps one JSON document per key under a root directory:

  ``<store_root>/<key>.json``

The default root is ``./.tencents`` under the current working directory;
``TENCENTS_STORE_DIR`` overrides it. Writes go to ``.tmp`` first and are then
moved into place with ``os.replace``.

The stored document is a JSON list of transaction objects using the export
field names (``date, icon, name, note, amount, currency, type, recurring`` and
``destinationIcon`` when known). Nothing beyond the record fields is encoded.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .logging_setup import get_logger
from .models import StoredTransaction, Transaction

STORE_DIR_ENV = "TENCENTS_STORE_DIR"
DEFAULT_KEY = "expenses"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")
_STORED_LIST = TypeAdapter(list[StoredTransaction])

_logger = get_logger("tencents.storage")

# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize_transactions(transactions: Iterable[Transaction]) -> str:
    items = [
        StoredTransaction.from_transaction(tx).model_dump(by_alias=True, exclude_none=True)
        for tx in transactions
    ]
    return json.dumps(items, ensure_ascii=False)


def deserialize_transactions(text: str) -> list[Transaction]:
    """Validate stored JSON and rebuild transactions.

    Raises ``ValueError`` (a pydantic ``ValidationError``) when the document is
    not a list of transaction objects.
    """

    stored = _STORED_LIST.validate_json(text)
    return [item.to_transaction() for item in stored]


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


def _get_store_root() -> Path:
    root = os.getenv(STORE_DIR_ENV)
    if root and root.strip():
        return Path(root).expanduser().resolve()
    return (Path.cwd() / ".tencents").resolve()


def _validate_key(key: str) -> str:
    # Keys become file names; keep them to a safe alphabet.
    if not _KEY_RE.fullmatch(key) or key in {".", ".."}:
        raise ValueError(f"Invalid store key: {key!r}")
    return key


class TransactionStore:
    """Persist a saved transaction set under a key."""

    def __init__(self, root: str | os.PathLike[str] | None = None, *, key: str = DEFAULT_KEY):
        self.root = Path(root) if root is not None else _get_store_root()
        self.key = _validate_key(key)

    @property
    def path(self) -> Path:
        return self.root / f"{self.key}.json"

    def load(self) -> list[Transaction]:
        """Return the saved set; empty when nothing has been saved yet.

        A document that no longer validates raises ``ValueError``.
        """

        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        try:
            return deserialize_transactions(text)
        except ValidationError as exc:
            raise ValueError(f"Saved dataset at {self.path} is invalid: {exc}") from exc

    def save(self, transactions: Iterable[Transaction]) -> int:
        """Replace the saved set; returns the number of transactions written."""

        items = list(transactions)
        self.root.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".json.tmp")
        tmp.write_text(serialize_transactions(items), encoding="utf-8")
        os.replace(tmp, self.path)
        _logger.info("saved %d transactions to %s", len(items), self.path)
        return len(items)

    def clear(self) -> bool:
        """Delete the saved set; ``False`` when there was nothing to delete."""

        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        _logger.info("cleared saved dataset %s", self.path)
        return True


__all__ = [
    "DEFAULT_KEY",
    "STORE_DIR_ENV",
    "TransactionStore",
    "deserialize_transactions",
    "serialize_transactions",
]
