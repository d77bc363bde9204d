"""Terminal helpers for browsing the category tree (prompt_toolkit-based).

Kept apart from aggregation so the prompts can be driven by a pipe input in
tests. ``format_rows`` renders flattened rows as a text listing;
``select_category_to_toggle`` asks which category to expand or collapse.
"""

from __future__ import annotations

from collections.abc import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import ValidationError, Validator

from .models import RenderRow

BAR_WIDTH = 30


def _fmt_amount(amount: float) -> str:
    return f"{amount:,.2f}"


def format_rows(
    rows: Sequence[RenderRow],
    expanded: frozenset[str] = frozenset(),
    *,
    currency: str = "",
    bar_width: int = BAR_WIDTH,
) -> str:
    """Render rows as an indented listing with proportional bars.

    Category rows with children are marked ``+`` (collapsed) or ``-``
    (expanded). Bars scale to the largest category amount.
    """

    if not rows:
        return "No transactions found"

    peak = max((abs(r.amount) for r in rows if not r.is_subcategory), default=0.0)
    label_width = max(len(r.name) + (4 if r.is_subcategory else 2) for r in rows)
    prefix = f"{currency} " if currency else ""

    lines: list[str] = []
    for r in rows:
        if r.is_subcategory:
            label = f"  └─ {r.name}"
        elif r.has_children:
            label = f"{'-' if r.name in expanded else '+'} {r.name}"
        else:
            label = f"  {r.name}"
        bar = "█" * round(bar_width * abs(r.amount) / peak) if peak else ""
        lines.append(f"{label:<{label_width + 2}} {prefix}{_fmt_amount(r.amount):>14}  {bar}")
    return "\n".join(lines)


def _match(choices: Sequence[str], text: str) -> str | None:
    """Exact (case-insensitive) match, else the only prefix match."""

    lower = text.strip().lower()
    if not lower:
        return None
    for c in choices:
        if c.lower() == lower:
            return c
    prefixed = [c for c in choices if c.lower().startswith(lower)]
    return prefixed[0] if len(prefixed) == 1 else None


def select_category_to_toggle(
    rows: Sequence[RenderRow],
    *,
    session: PromptSession | None = None,
    message: str = "Expand/collapse category (Enter on empty input to quit): ",
) -> str | None:
    """Prompt for a category to toggle; ``None`` means the user is done.

    Only categories with subcategories are offered. Input matches
    case-insensitively and a unique prefix is enough. Esc or Ctrl+C also
    return ``None``.
    """

    choices = [r.name for r in rows if not r.is_subcategory and r.has_children]
    if not choices:
        return None

    kb = KeyBindings()

    @kb.add("escape", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised interactively
        event.app.exit(result="")

    @kb.add("c-c", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised interactively
        event.app.exit(result="")

    class _ChoiceValidator(Validator):
        def validate(self, document) -> None:
            text = document.text
            if text.strip() and _match(choices, text) is None:
                raise ValidationError(message=f"No single expandable category matches {text!r}")

    if session is None:
        sess: PromptSession = PromptSession(key_bindings=kb)
    else:
        sess = PromptSession(
            input=getattr(session, "input", None),
            output=getattr(session, "output", None),
            key_bindings=kb,
        )

    result = sess.prompt(
        message,
        completer=WordCompleter(choices, ignore_case=True, match_middle=True, sentence=True),
        validator=_ChoiceValidator(),
        validate_while_typing=False,
        key_bindings=kb,
        style=Style.from_dict({"completion-menu.completion.current": "bg:#4f46e5 #ffffff"}),
    )
    return _match(choices, result or "")


__all__ = ["format_rows", "select_category_to_toggle"]
