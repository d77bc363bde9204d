"""Flatten aggregated categories into an ordered, expand-aware row list."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import Category, RenderRow


def flatten(categories: Iterable[Category], expanded: Iterable[str] = ()) -> list[RenderRow]:
    """Return the rows to render, in category order.

    Each category yields one ``"category"`` row. When its name is in
    ``expanded`` and it has subcategories, its ``"subcategory"`` rows follow
    immediately, in subcategory order.
    """

    open_names = frozenset(expanded)
    rows: list[RenderRow] = []
    for cat in categories:
        rows.append(
            RenderRow(
                kind="category",
                name=cat.name,
                amount=cat.total_amount,
                has_children=cat.has_subcategories,
            )
        )
        if cat.name in open_names and cat.subcategories:
            rows.extend(
                RenderRow(kind="subcategory", name=sub.label, amount=sub.amount, parent=cat.name)
                for sub in cat.subcategories
            )
    return rows


def toggle_category(
    expanded: Iterable[str], name: str, categories: Sequence[Category]
) -> frozenset[str]:
    """Add or remove ``name`` from the expanded set.

    Only categories with at least one subcategory can be toggled; any other
    name returns the set unchanged.
    """

    current = frozenset(expanded)
    target = next((c for c in categories if c.name == name), None)
    if target is None or not target.has_subcategories:
        return current
    return current - {name} if name in current else current | {name}


def toggle(
    expanded: Iterable[str], row: RenderRow, categories: Sequence[Category]
) -> frozenset[str]:
    """Toggle the category behind ``row``; subcategory rows are a no-op."""

    if row.is_subcategory:
        return frozenset(expanded)
    return toggle_category(expanded, row.name, categories)


__all__ = ["flatten", "toggle", "toggle_category"]
