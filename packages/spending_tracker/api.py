"""Public API for the ``spending_tracker`` package.

Host applications (web views, background jobs, the CLI) call these functions
rather than the modules behind them. Each function opens its own
``session_scope`` unless a session is passed in, so a caller can either fire
and forget or compose several calls in one transaction.
"""

from __future__ import annotations

from collections.abc import Mapping
from os import PathLike
from typing import Any

from db.client import session_scope
from sqlalchemy.orm import Session

from .importer import commit_import as _commit_import
from .importer import parse_csv_file, parse_csv_text
from .models import CommitSummary, ParseResult, RowSelection


def parse_csv_import(
    csv_path: str | PathLike[str],
    *,
    user_id: int,
    account_id: int,
    session: Session | None = None,
    database_url: str | None = None,
) -> ParseResult:
    """Preview an import of the CSV file at ``csv_path`` into ``account_id``."""

    if session is not None:
        return parse_csv_file(session, csv_path, user_id=user_id, account_id=account_id)
    with session_scope(database_url=database_url) as s:
        return parse_csv_file(s, csv_path, user_id=user_id, account_id=account_id)


def parse_csv_import_text(
    csv_text: str,
    *,
    user_id: int,
    account_id: int,
    session: Session | None = None,
    database_url: str | None = None,
) -> ParseResult:
    """Preview an import of already-loaded CSV text (e.g., an upload body)."""

    if session is not None:
        return parse_csv_text(session, csv_text, user_id=user_id, account_id=account_id)
    with session_scope(database_url=database_url) as s:
        return parse_csv_text(s, csv_text, user_id=user_id, account_id=account_id)


def commit_import(
    result: ParseResult | Mapping[str, Any],
    *,
    user_id: int,
    account_id: int,
    selected_rows: RowSelection = None,
    selected_matches: RowSelection = None,
    session: Session | None = None,
    database_url: str | None = None,
) -> CommitSummary:
    """Persist the selected candidates of a previewed import.

    ``result`` may be the :class:`ParseResult` itself or its JSON-decoded dict
    (``ParseResult.model_dump(mode="json")``) as kept by a web session.
    """

    kwargs = {
        "user_id": user_id,
        "account_id": account_id,
        "result": result,
        "selected_rows": selected_rows,
        "selected_matches": selected_matches,
    }
    if session is not None:
        return _commit_import(session, **kwargs)
    with session_scope(database_url=database_url) as s:
        return _commit_import(s, **kwargs)


__all__ = [
    "commit_import",
    "parse_csv_import",
    "parse_csv_import_text",
]
