"""Dashboard state: the canonical transaction set and its views.

``Dashboard`` owns three values and only ever replaces them wholesale:

- ``transactions``: the canonical set from the last successful import;
- ``filters``: the active date range and kind;
- ``expanded``: category names whose subcategories are shown.

``categories`` and ``rows`` are recomputed from those snapshots on access.

File loads carry a token from :meth:`Dashboard.begin_load`. Only the most
recently issued token may install its result, so when a second file replaces a
first one that is still being read, whichever read finishes last cannot
overwrite the newer request.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable

from .aggregate import aggregate
from .decoder import decode_csv
from .errors import ReadError
from .flatten import flatten, toggle, toggle_category
from .logging_setup import get_logger
from .models import (
    DEFAULT_FILTERS,
    Category,
    DateRange,
    Filters,
    KindFilter,
    RenderRow,
    Transaction,
)
from .sources import ContentProvider

_logger = get_logger("tencents.controller")


class Dashboard:
    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        *,
        filters: Filters = DEFAULT_FILTERS,
        strict_amounts: bool = False,
    ) -> None:
        self._transactions: tuple[Transaction, ...] = tuple(transactions)
        self._filters = filters
        self._expanded: frozenset[str] = frozenset()
        self._strict_amounts = strict_amounts
        self._tokens = itertools.count(1)
        self._latest_token = 0

    # ---- snapshots ---------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transactions

    @property
    def filters(self) -> Filters:
        return self._filters

    @property
    def expanded(self) -> frozenset[str]:
        return self._expanded

    @property
    def categories(self) -> list[Category]:
        return aggregate(self._transactions, self._filters)

    @property
    def rows(self) -> list[RenderRow]:
        return flatten(self.categories, self._expanded)

    # ---- loading -----------------------------------------------------------

    def begin_load(self) -> int:
        """Issue a new load token; any earlier token becomes stale."""

        self._latest_token = next(self._tokens)
        return self._latest_token

    def is_current(self, token: int) -> bool:
        return token == self._latest_token

    def apply_load(self, token: int, csv_text: str) -> bool:
        """Decode ``csv_text`` and install it if ``token`` is still current.

        Returns ``False`` (without decoding) for a stale token. Decode errors
        propagate and leave the current dataset untouched.
        """

        if not self.is_current(token):
            _logger.debug(
                "discarding stale load result (token %d, latest %d)", token, self._latest_token
            )
            return False
        transactions = decode_csv(csv_text, strict_amounts=self._strict_amounts)
        self.replace_transactions(transactions)
        return True

    async def load(self, provider: ContentProvider) -> bool:
        """Read, decode and install a file; ``False`` when superseded meanwhile.

        ``ReadError``, ``SchemaError`` and ``RowValidationError`` propagate with
        the previous dataset left in place. A read that fails after a newer load
        was issued is logged and reported as ``False``.
        """

        token = self.begin_load()
        try:
            text = await provider()
        except ReadError:
            if self.is_current(token):
                raise
            _logger.debug("discarding failed stale load (token %d)", token)
            return False
        return self.apply_load(token, text)

    def replace_transactions(self, transactions: Iterable[Transaction]) -> None:
        self._transactions = tuple(transactions)
        _logger.info("dataset replaced (%d transactions)", len(self._transactions))

    def clear(self) -> None:
        """Drop the dataset and expansion state; pending loads become stale."""

        self.begin_load()
        self._transactions = ()
        self._expanded = frozenset()

    # ---- filters & expansion ----------------------------------------------

    def set_filters(
        self,
        *,
        start: str | None = None,
        end: str | None = None,
        kind: KindFilter | None = None,
    ) -> Filters:
        """Replace the date range; ``kind`` is kept unless given."""

        self._filters = Filters(
            date_range=DateRange(start=start, end=end),
            kind=kind if kind is not None else self._filters.kind,
        )
        return self._filters

    def reset_filters(self) -> Filters:
        self._filters = DEFAULT_FILTERS
        return self._filters

    def toggle(self, row: RenderRow) -> frozenset[str]:
        self._expanded = toggle(self._expanded, row, self.categories)
        return self._expanded

    def toggle_category(self, name: str) -> frozenset[str]:
        self._expanded = toggle_category(self._expanded, name, self.categories)
        return self._expanded


__all__ = ["Dashboard"]
