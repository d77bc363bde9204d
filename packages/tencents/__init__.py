"""Public interface for the ``tencents`` package.

Only re-exports live here; see :mod:`tencents.api` for the pipeline entry
points.
"""

from .aggregate import OTHER_LABEL
from .api import (
    aggregate,
    decode_csv,
    decode_row,
    filter_transactions,
    flatten,
    load_transactions_from_csv,
    resolve_schema,
    search_transactions,
    toggle,
    toggle_category,
)
from .controller import Dashboard
from .errors import ReadError, RowValidationError, SchemaError
from .export import export_csv
from .models import (
    Category,
    DateRange,
    Filters,
    RenderRow,
    Subcategory,
    Transaction,
)
from .storage import TransactionStore, deserialize_transactions, serialize_transactions

__all__ = [
    # Pipeline
    "resolve_schema",
    "decode_row",
    "decode_csv",
    "load_transactions_from_csv",
    "aggregate",
    "filter_transactions",
    "search_transactions",
    "flatten",
    "toggle",
    "toggle_category",
    "OTHER_LABEL",
    # State, persistence and export
    "Dashboard",
    "TransactionStore",
    "serialize_transactions",
    "deserialize_transactions",
    "export_csv",
    # Models
    "Transaction",
    "Category",
    "Subcategory",
    "RenderRow",
    "DateRange",
    "Filters",
    # Errors
    "SchemaError",
    "RowValidationError",
    "ReadError",
]
