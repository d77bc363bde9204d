"""CLI for the ``tencents`` package.

Command handlers (``cmd_*``) hold the logic and return a process exit code;
the Typer commands below are thin wrappers around them. Environment variables
(``TENCENTS_STORE_DIR``, ``TENCENTS_LOG_LEVEL``) may come from a local ``.env``,
loaded with ``python-dotenv`` by the root callback.

Errors are written to stderr as ``Error: ...`` and yield exit status 1.
"""

from __future__ import annotations

import asyncio
import sys
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .aggregate import search_transactions
from .controller import Dashboard
from .errors import ReadError, RowValidationError, SchemaError
from .export import export_csv
from .logging_setup import configure_logging
from .sources import file_provider
from .storage import TransactionStore
from .term_ui import format_rows, select_category_to_toggle


class KindChoice(str, Enum):
    expense = "expense"
    income = "income"
    all = "all"


# ---- Helpers -----------------------------------------------------------------


def _error(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _open_dashboard(
    csv_path: str | None,
    *,
    saved: bool,
    strict_amounts: bool = False,
) -> Dashboard:
    """Build a dashboard from a CSV file or from the saved dataset.

    Import errors propagate to the caller unchanged.
    """

    dashboard = Dashboard(strict_amounts=strict_amounts)
    if saved:
        dashboard.replace_transactions(TransactionStore().load())
    elif csv_path is not None:
        asyncio.run(dashboard.load(file_provider(csv_path)))
    return dashboard


def _apply_view(
    dashboard: Dashboard,
    *,
    start: str | None,
    end: str | None,
    kind: str,
    expand: list[str] | None,
) -> None:
    dashboard.set_filters(start=start, end=end, kind=kind)  # type: ignore[arg-type]
    for name in expand or ():
        if name not in dashboard.expanded:
            dashboard.toggle_category(name)


def _check_source(csv_path: str | None, saved: bool) -> str | None:
    if saved and csv_path:
        return "use either --csv-path or --saved, not both"
    if not saved and not csv_path:
        return "provide --csv-path or --saved"
    return None


# ---- Command handlers --------------------------------------------------------


def cmd_summary(
    csv_path: str | None,
    *,
    saved: bool = False,
    start: str | None = None,
    end: str | None = None,
    kind: str = "expense",
    expand: list[str] | None = None,
    currency: str = "",
    strict_amounts: bool = False,
) -> int:
    """Print the category tree for a CSV file (or the saved dataset)."""

    problem = _check_source(csv_path, saved)
    if problem:
        return _error(problem)
    try:
        dashboard = _open_dashboard(csv_path, saved=saved, strict_amounts=strict_amounts)
    except (ReadError, SchemaError, RowValidationError, ValueError) as e:
        return _error(str(e))

    _apply_view(dashboard, start=start, end=end, kind=kind, expand=expand)
    print(format_rows(dashboard.rows, dashboard.expanded, currency=currency))
    return 0


def cmd_explore(
    csv_path: str | None,
    *,
    saved: bool = False,
    start: str | None = None,
    end: str | None = None,
    kind: str = "expense",
    currency: str = "",
    session=None,
) -> int:
    """Interactively expand and collapse categories until the user quits."""

    problem = _check_source(csv_path, saved)
    if problem:
        return _error(problem)
    try:
        dashboard = _open_dashboard(csv_path, saved=saved)
    except (ReadError, SchemaError, RowValidationError, ValueError) as e:
        return _error(str(e))

    _apply_view(dashboard, start=start, end=end, kind=kind, expand=None)
    while True:
        rows = dashboard.rows
        print(format_rows(rows, dashboard.expanded, currency=currency))
        choice = select_category_to_toggle(rows, session=session)
        if choice is None:
            return 0
        dashboard.toggle_category(choice)


def cmd_save(csv_path: str, *, strict_amounts: bool = False) -> int:
    """Import ``csv_path`` and replace the saved dataset with it."""

    try:
        dashboard = _open_dashboard(csv_path, saved=False, strict_amounts=strict_amounts)
    except (ReadError, SchemaError, RowValidationError) as e:
        return _error(str(e))

    try:
        count = TransactionStore().save(dashboard.transactions)
    except OSError as e:
        return _error(f"failed to save dataset: {e}")
    print(f"Saved {count} transactions")
    return 0


def cmd_saved(*, search: str = "") -> int:
    """List saved transactions, optionally filtered by a search term."""

    try:
        items = TransactionStore().load()
    except ValueError as e:
        return _error(str(e))
    if not items:
        print("No saved transactions")
        return 0

    for tx in search_transactions(items, search):
        note = f" • {tx.note}" if tx.note else ""
        print(f"{tx.date}\t{tx.kind}\t{tx.name}{note}\t{tx.currency} {tx.amount:,.2f}".rstrip())
    return 0


def cmd_export(*, output: str | None = None) -> int:
    """Write the saved dataset as CSV to ``output`` (stdout when omitted)."""

    try:
        items = TransactionStore().load()
    except ValueError as e:
        return _error(str(e))

    text = export_csv(items)
    if output is None:
        sys.stdout.write(text)
        return 0
    try:
        Path(output).write_text(text, encoding="utf-8")
    except OSError as e:
        return _error(f"failed to write {output}: {e}")
    print(f"Exported {len(items)} transactions to {output}")
    return 0


def cmd_clear() -> int:
    removed = TransactionStore().clear()
    print("Cleared saved transactions" if removed else "Nothing to clear")
    return 0


# ---- Typer app ---------------------------------------------------------------

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Group transaction CSV exports into categories and subcategories.",
)

# Module-level option objects keep calls out of parameter defaults (ruff B008).
CSV_PATH_OPTION: OptionInfo = typer.Option(
    "--csv-path",
    help="Path to a transaction CSV export",
    dir_okay=False,
    file_okay=True,
    exists=False,  # missing files are reported by the handler
)
SAVED_OPTION: OptionInfo = typer.Option("--saved", help="Use the saved dataset.")
START_OPTION: OptionInfo = typer.Option(help="Range start date (inclusive).")
END_OPTION: OptionInfo = typer.Option(help="Range end date (inclusive).")
KIND_OPTION: OptionInfo = typer.Option(help="Transaction kind to include.")
CURRENCY_OPTION: OptionInfo = typer.Option(help="Currency label printed before amounts.")
STRICT_OPTION: OptionInfo = typer.Option(
    help="Reject rows whose amount is not a number instead of reading them as 0."
)


@app.command("summary")
def summary_cmd(
    csv_path: Annotated[Path | None, CSV_PATH_OPTION] = None,
    *,
    saved: Annotated[bool, SAVED_OPTION] = False,
    start: Annotated[str | None, START_OPTION] = None,
    end: Annotated[str | None, END_OPTION] = None,
    kind: Annotated[KindChoice, KIND_OPTION] = KindChoice.expense,
    expand: Annotated[
        list[str] | None, typer.Option("--expand", help="Category to show expanded.")
    ] = None,
    currency: Annotated[str, CURRENCY_OPTION] = "",
    strict_amounts: Annotated[bool, STRICT_OPTION] = False,
) -> None:
    raise typer.Exit(
        cmd_summary(
            str(csv_path) if csv_path else None,
            saved=saved,
            start=start,
            end=end,
            kind=kind.value,
            expand=expand,
            currency=currency,
            strict_amounts=strict_amounts,
        )
    )


@app.command("explore")
def explore_cmd(
    csv_path: Annotated[Path | None, CSV_PATH_OPTION] = None,
    *,
    saved: Annotated[bool, SAVED_OPTION] = False,
    start: Annotated[str | None, START_OPTION] = None,
    end: Annotated[str | None, END_OPTION] = None,
    kind: Annotated[KindChoice, KIND_OPTION] = KindChoice.expense,
    currency: Annotated[str, CURRENCY_OPTION] = "",
) -> None:
    raise typer.Exit(
        cmd_explore(
            str(csv_path) if csv_path else None,
            saved=saved,
            start=start,
            end=end,
            kind=kind.value,
            currency=currency,
        )
    )


@app.command("save")
def save_cmd(
    csv_path: Annotated[Path, typer.Option("--csv-path", help="CSV export to save")],
    *,
    strict_amounts: Annotated[bool, STRICT_OPTION] = False,
) -> None:
    raise typer.Exit(cmd_save(str(csv_path), strict_amounts=strict_amounts))


@app.command("saved")
def saved_cmd(
    search: Annotated[str, typer.Option(help="Filter by name or note.")] = "",
) -> None:
    raise typer.Exit(cmd_saved(search=search))


@app.command("export")
def export_cmd(
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Destination file (default stdout).")
    ] = None,
) -> None:
    raise typer.Exit(cmd_export(output=str(output) if output else None))


@app.command("clear")
def clear_cmd(
    yes: Annotated[bool, typer.Option("--yes", help="Skip the confirmation prompt.")] = False,
) -> None:
    if not yes and not typer.confirm("Are you sure you want to clear all saved expenses?"):
        raise typer.Exit(1)
    raise typer.Exit(cmd_clear())


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    log_level: Annotated[
        str | None, typer.Option(help="Log level (falls back to TENCENTS_LOG_LEVEL).")
    ] = None,
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover
    app()
