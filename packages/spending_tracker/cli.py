# ruff: noqa: I001
"""CLI for the ``spending_tracker`` package.

A thin Typer console over :mod:`spending_tracker.api` for importing bank CSV
exports and managing expense accounts from a terminal. Environment variables
(``DATABASE_URL``, ``SPENDING_TRACKER_LOG_LEVEL``,
``SPENDING_TRACKER_DEFAULT_USER_ID``) are loaded from a local ``.env`` with
``python-dotenv`` before any command runs. Business logic lives in the
package modules; this file only parses options and renders results.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .categories import SpendingCategory
from .logging_setup import configure_logging
from .models import ParseResult

app = typer.Typer(
    name="spending-tracker",
    no_args_is_help=True,
    add_completion=False,
    help="Import bank CSV exports into expense accounts and reconcile manual entries.",
)
accounts_app = typer.Typer(no_args_is_help=True, help="Manage expense accounts.")
app.add_typer(accounts_app, name="accounts")

console = Console()
err_console = Console(stderr=True)

UserIdOption = Annotated[
    int,
    typer.Option(
        "--user-id",
        envvar="SPENDING_TRACKER_DEFAULT_USER_ID",
        help="Acting user id (falls back to SPENDING_TRACKER_DEFAULT_USER_ID).",
    ),
]
DatabaseUrlOption = Annotated[
    str | None,
    typer.Option("--database-url", help="Override DATABASE_URL (falls back to env var)."),
]


def _fmt_cents(cents: int) -> str:
    return f"${cents // 100:,}.{cents % 100:02d}"


def _render_preview(result: ParseResult) -> None:
    if result.import_candidates:
        table = Table(title="New expenses")
        table.add_column("#", justify="right")
        table.add_column("Date")
        table.add_column("Merchant")
        table.add_column("Amount", justify="right")
        table.add_column("Category")
        for i, row in enumerate(result.import_candidates):
            table.add_row(
                str(i), row.date, row.merchant, _fmt_cents(row.amount), row.category.label
            )
        console.print(table)

    if result.match_candidates:
        table = Table(title="Matches with manual entries")
        table.add_column("#", justify="right")
        table.add_column("Manual entry")
        table.add_column("Bank row")
        table.add_column("Amount", justify="right")
        for i, m in enumerate(result.match_candidates):
            table.add_row(
                str(i),
                f"{m.expense_date} {m.expense_merchant}",
                f"{m.csv_date} {m.csv_merchant}",
                _fmt_cents(m.amount),
            )
        console.print(table)

    uncategorized = sum(
        1 for r in result.import_candidates if r.category is SpendingCategory.UNCATEGORIZED
    )
    if uncategorized:
        console.print(f"[yellow]{uncategorized} new expense(s) need a category.[/yellow]")


@app.callback()
def _root(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log at DEBUG level.")
    ] = False,
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging("DEBUG" if verbose else None)


@app.command("import-csv")
def import_csv_cmd(
    csv_path: Annotated[
        Path,
        typer.Option("--csv-path", dir_okay=False, help="Path to the bank CSV export."),
    ],
    account_id: Annotated[int, typer.Option("--account-id", help="Target expense account.")],
    user_id: UserIdOption,
    database_url: DatabaseUrlOption = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Preview only; do not write anything.")
    ] = False,
) -> None:
    """Preview a CSV import and, unless ``--dry-run``, import every candidate."""

    # Deferred imports keep `--help` fast and free of DB setup
    from db.client import session_scope

    from .api import commit_import, parse_csv_import
    from .authz import AuthorizationError, get_owned_account

    try:
        with session_scope(database_url=database_url) as session:
            # Refuse to preview into an account the user does not own.
            get_owned_account(session, user_id=user_id, account_id=account_id)
            result = parse_csv_import(
                csv_path, user_id=user_id, account_id=account_id, session=session
            )
    except (AuthorizationError, LookupError, RuntimeError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    if result.feedback:
        console.print(result.feedback)
    _render_preview(result)

    if dry_run or result.is_empty:
        return

    try:
        summary = commit_import(
            result, user_id=user_id, account_id=account_id, database_url=database_url
        )
    except (AuthorizationError, LookupError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(
        f"[green]Imported {summary.created} new expense(s), "
        f"reconciled {summary.matched} manual entr{'y' if summary.matched == 1 else 'ies'}.[/green]"
    )


@accounts_app.command("list")
def accounts_list_cmd(user_id: UserIdOption, database_url: DatabaseUrlOption = None) -> None:
    """List the user's expense accounts."""

    from db.client import session_scope

    from .accounts import list_accounts
    from .persistence import count_expenses, sum_expenses

    table = Table(title="Expense accounts")
    table.add_column("Id", justify="right")
    table.add_column("Name")
    table.add_column("Expenses", justify="right")
    table.add_column("Total", justify="right")
    with session_scope(database_url=database_url) as session:
        for account in list_accounts(session, user_id=user_id):
            table.add_row(
                str(account.id),
                account.name,
                str(count_expenses(session, user_id=user_id, account_id=account.id)),
                _fmt_cents(sum_expenses(session, user_id=user_id, account_id=account.id)),
            )
    console.print(table)


@accounts_app.command("create")
def accounts_create_cmd(
    name: Annotated[str, typer.Argument(help="Display name of the new account.")],
    user_id: UserIdOption,
    database_url: DatabaseUrlOption = None,
) -> None:
    """Create an expense account."""

    from db.client import session_scope

    from .accounts import create_account

    try:
        with session_scope(database_url=database_url) as session:
            account = create_account(session, user_id=user_id, name=name)
            account_id = account.id
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    console.print(f"Created account {account_id}: {name.strip()}")


@accounts_app.command("delete")
def accounts_delete_cmd(
    account_id: Annotated[int, typer.Argument(help="Account to delete (with its expenses).")],
    user_id: UserIdOption,
    database_url: DatabaseUrlOption = None,
) -> None:
    """Delete an expense account and all of its expenses."""

    from db.client import session_scope

    from .accounts import delete_account
    from .authz import AuthorizationError

    try:
        with session_scope(database_url=database_url) as session:
            delete_account(session, user_id=user_id, account_id=account_id)
    except (AuthorizationError, LookupError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    console.print(f"Deleted account {account_id}")


if __name__ == "__main__":  # pragma: no cover
    app()
