"""CSV expense import: parse, reconcile and commit.

Parsing a bank export classifies each usable row as one of

- already imported: its reference number is stored on the account; dropped,
  which makes re-importing a file a no-op;
- a match candidate: a manual expense with the same amount is waiting in the
  account's unimported pool; confirming flags that expense as imported;
- an import candidate: a new expense, with a category guessed from the
  user's history at the same merchant.

Only structural problems (unreadable file, no header, missing columns) are
reported back, as a human-readable ``feedback`` string. Individual bad rows
are dropped silently: the preview shows what can be imported, not every
malformed line.
"""

from __future__ import annotations

import csv
from collections.abc import Mapping, Sequence
from os import PathLike
from typing import Any, TypeVar

from db.models.expenses import Expense
from sqlalchemy.orm import Session

from .authz import ensure_owner, get_owned_account
from .categories import SpendingCategory
from .ingest.adapters.bank_csv import normalize_rows, scan_rows
from .ingest.columns import detect_columns
from .ingest.utils import read_csv_file, split_csv_text
from .logging_setup import get_logger
from .models import CommitSummary, MatchCandidate, ParsedRow, ParseResult, RowSelection
from .persistence import (
    create_expense,
    existing_reference_numbers,
    latest_category_for_merchant,
    load_unimported_pool,
    mark_expense_imported,
)
from .reconcile import UnimportedPool
from .reference import ReferenceAssigner

logger = get_logger("spending_tracker.importer")

FEEDBACK_UNREADABLE = "Could not read the file."
FEEDBACK_EMPTY = "The file appears to be empty."
FEEDBACK_NO_COLUMNS = "Could not detect Date, Description, or Amount columns in this file."
FEEDBACK_ALREADY_IMPORTED = "All transactions in this file have already been imported."

_T = TypeVar("_T")


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------


def parse_csv_text(
    session: Session, csv_text: str, *, user_id: int, account_id: int
) -> ParseResult:
    """Parse CSV text destined for ``account_id`` and classify its rows.

    Read-only: every query is scoped to ``user_id`` and ``account_id``, and
    nothing is written until :func:`commit_import`.
    """

    try:
        header, rows = split_csv_text(csv_text)
    except csv.Error as exc:
        logger.warning("CSV could not be parsed: %s", exc)
        return ParseResult.empty(FEEDBACK_UNREADABLE)

    if header is None:
        return ParseResult.empty(FEEDBACK_EMPTY)

    columns = detect_columns(header)
    if columns is None:
        logger.info("No date/description/amount columns in header %r", header)
        return ParseResult.empty(FEEDBACK_NO_COLUMNS)

    existing_refs = existing_reference_numbers(session, user_id=user_id, account_id=account_id)
    pool = UnimportedPool(load_unimported_pool(session, user_id=user_id, account_id=account_id))

    scan = scan_rows(rows, columns)
    references = ReferenceAssigner()
    categories: dict[str, SpendingCategory] = {}

    import_candidates: list[ParsedRow] = []
    match_candidates: list[MatchCandidate] = []
    already_imported = 0
    normalized = 0

    for row in normalize_rows(scan):
        normalized += 1
        reference_number = references.assign(row.raw.cells, row.raw.bank_reference)
        if reference_number in existing_refs:
            already_imported += 1
            continue

        matched = pool.consume(row.amount_cents)
        if matched is not None:
            match_candidates.append(
                MatchCandidate(
                    expense_id=matched.id,
                    expense_merchant=matched.merchant,
                    expense_date=matched.date,
                    csv_merchant=row.raw.merchant,
                    csv_date=row.date,
                    amount=row.amount_cents,
                    reference_number=reference_number,
                )
            )
            continue

        merchant = row.raw.merchant
        if merchant not in categories:
            categories[merchant] = latest_category_for_merchant(
                session, user_id=user_id, merchant=merchant
            )
        import_candidates.append(
            ParsedRow(
                date=row.date,
                merchant=merchant,
                amount=row.amount_cents,
                category=categories[merchant],
                reference_number=reference_number,
            )
        )

    feedback = ""
    if not import_candidates and not match_candidates and len(scan) > 0:
        feedback = FEEDBACK_ALREADY_IMPORTED

    logger.info(
        "Parsed CSV for account %s: %d data rows, %d usable, %d new, %d matched, "
        "%d already imported",
        account_id,
        len(rows),
        len(scan),
        len(import_candidates),
        len(match_candidates),
        already_imported,
    )
    logger.debug(
        "Account %s import (%s): %d rows dropped while scanning, %d while normalizing",
        account_id,
        "signed" if scan.has_negative_amounts else "debit-only",
        len(rows) - len(scan),
        len(scan) - normalized,
    )

    return ParseResult(
        import_candidates=import_candidates,
        match_candidates=match_candidates,
        feedback=feedback,
    )


def parse_csv_file(
    session: Session, csv_path: str | PathLike[str], *, user_id: int, account_id: int
) -> ParseResult:
    """Read ``csv_path`` and delegate to :func:`parse_csv_text`.

    An unreadable file (missing, permission denied, not UTF-8) yields an empty
    result with feedback instead of an exception.
    """

    try:
        csv_text = read_csv_file(csv_path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read CSV file %s: %s", csv_path, exc)
        return ParseResult.empty(FEEDBACK_UNREADABLE)
    return parse_csv_text(session, csv_text, user_id=user_id, account_id=account_id)


# ---------------------------------------------------------------------------
# Commit
# ---------------------------------------------------------------------------


def _select(items: Sequence[_T], selection: RowSelection) -> tuple[list[_T], int]:
    """Pick ``items`` by index; ``None`` selects everything.

    Out-of-range indices are ignored (and counted); repeated indices are used
    once.
    """

    if selection is None:
        return list(items), 0
    picked: list[_T] = []
    ignored = 0
    for index in dict.fromkeys(selection):
        if 0 <= index < len(items):
            picked.append(items[index])
        else:
            ignored += 1
    return picked, ignored


def commit_import(
    session: Session,
    *,
    user_id: int,
    account_id: int,
    result: ParseResult | Mapping[str, Any],
    selected_rows: RowSelection = None,
    selected_matches: RowSelection = None,
) -> CommitSummary:
    """Persist the selected candidates of a previous :func:`parse_csv_text` call.

    - Each selected import candidate becomes a new imported expense carrying
      its reference number.
    - Each selected match candidate flags the existing manual expense as
      imported and attaches the reference number; merchant, date and amount
      stay as the user typed them. Deselected matches are not touched, and a
      manual expense that was reconciled since the preview keeps its existing
      reference number (counted as skipped).

    Ownership of the account and of every selected manual expense is checked
    before anything is written; a violation raises
    :class:`~spending_tracker.authz.AuthorizationError` and nothing is
    changed. Candidates are then written one by one; the caller owns the
    transaction.
    """

    parsed = result if isinstance(result, ParseResult) else ParseResult.model_validate(result)

    get_owned_account(session, user_id=user_id, account_id=account_id)

    rows, skipped_rows = _select(parsed.import_candidates, selected_rows)
    matches, skipped_matches = _select(parsed.match_candidates, selected_matches)

    resolved: list[MatchCandidate] = []
    vanished = 0
    for match in matches:
        expense = session.get(Expense, match.expense_id)
        if expense is None:
            vanished += 1
            continue
        ensure_owner(expense.user_id, user_id, what=f"expense {match.expense_id}")
        resolved.append(match)

    created = 0
    for row in rows:
        create_expense(
            session,
            user_id=user_id,
            account_id=account_id,
            merchant=row.merchant,
            amount=row.amount,
            date=row.date,
            category=row.category,
            is_imported=True,
            reference_number=row.reference_number,
        )
        created += 1

    matched = 0
    for match in resolved:
        updated = mark_expense_imported(
            session,
            user_id=user_id,
            expense_id=match.expense_id,
            reference_number=match.reference_number,
        )
        if updated:
            matched += 1
        else:
            logger.warning(
                "Expense %s was already reconciled; keeping its reference number",
                match.expense_id,
            )
            vanished += 1

    summary = CommitSummary(
        created=created,
        matched=matched,
        skipped=skipped_rows + skipped_matches + vanished,
    )
    logger.info(
        "Committed import into account %s: %d created, %d matched, %d skipped",
        account_id,
        summary.created,
        summary.matched,
        summary.skipped,
    )
    return summary


__all__ = [
    "FEEDBACK_ALREADY_IMPORTED",
    "FEEDBACK_EMPTY",
    "FEEDBACK_NO_COLUMNS",
    "FEEDBACK_UNREADABLE",
    "commit_import",
    "parse_csv_file",
    "parse_csv_text",
]
