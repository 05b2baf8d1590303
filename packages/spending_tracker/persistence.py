"""Persistence queries used by the importer and the services.

Functions here read and write ``expenses`` through the shared ORM models in
``db.models.expenses``. Every query is scoped to an owner (and, where it
matters, an account). Functions flush but never commit; the caller owns the
transaction (see ``db.client.session_scope``).
"""

from __future__ import annotations

from datetime import date

from db.models.expenses import Expense
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from .categories import SpendingCategory
from .reconcile import PoolEntry


def _to_date(raw: str | date) -> date:
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(raw.strip())


# ---------------------------------------------------------------------------
# Reads used while parsing an import
# ---------------------------------------------------------------------------


def existing_reference_numbers(session: Session, *, user_id: int, account_id: int) -> set[str]:
    """Reference numbers already recorded for this user's account."""

    stmt = select(Expense.reference_number).where(
        Expense.user_id == user_id,
        Expense.expense_account_id == account_id,
        Expense.reference_number.is_not(None),
    )
    return {ref for ref in session.execute(stmt).scalars() if ref is not None}


def load_unimported_pool(session: Session, *, user_id: int, account_id: int) -> list[PoolEntry]:
    """Manual (not yet imported) expenses of the account, in insertion order."""

    stmt = (
        select(Expense.id, Expense.amount, Expense.merchant, Expense.date)
        .where(
            Expense.user_id == user_id,
            Expense.expense_account_id == account_id,
            Expense.is_imported.is_(False),
        )
        .order_by(Expense.id)
    )
    return [
        PoolEntry(id=row.id, amount=row.amount, merchant=row.merchant, date=row.date.isoformat())
        for row in session.execute(stmt)
    ]


def latest_category_for_merchant(
    session: Session, *, user_id: int, merchant: str
) -> SpendingCategory:
    """Category of the user's most recent categorized expense at ``merchant``.

    Looks across all of the user's accounts. Exact merchant match; the most
    recent date wins, then the most recently created row.
    """

    stmt = (
        select(Expense.category)
        .where(
            Expense.user_id == user_id,
            Expense.merchant == merchant,
            Expense.category.is_not(None),
        )
        .order_by(Expense.date.desc(), Expense.id.desc())
        .limit(1)
    )
    return SpendingCategory.from_storage(session.execute(stmt).scalar_one_or_none())


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def create_expense(
    session: Session,
    *,
    user_id: int,
    account_id: int,
    merchant: str,
    amount: int,
    date: str | date,
    category: SpendingCategory = SpendingCategory.UNCATEGORIZED,
    is_imported: bool = False,
    reference_number: str | None = None,
    notes: str | None = None,
) -> Expense:
    """Insert one expense row and flush so its ``id`` is available."""

    expense = Expense(
        user_id=user_id,
        expense_account_id=account_id,
        merchant=merchant,
        amount=amount,
        date=_to_date(date),
        category=category.to_storage(),
        is_imported=is_imported,
        reference_number=reference_number,
        notes=notes,
    )
    session.add(expense)
    session.flush()
    return expense


def mark_expense_imported(
    session: Session, *, user_id: int, expense_id: int, reference_number: str
) -> int:
    """Flag a manual expense as imported and attach ``reference_number``.

    Merchant, date and amount are left untouched. Scoped to the owner and to
    expenses not yet imported; returns the number of rows updated, so 0 means
    the expense is gone or was reconciled by another import in the meantime.
    """

    stmt = (
        update(Expense)
        .where(
            Expense.id == expense_id,
            Expense.user_id == user_id,
            Expense.is_imported.is_(False),
        )
        .values(is_imported=True, reference_number=reference_number, updated_at=func.now())
    )
    result = session.execute(stmt)
    return result.rowcount or 0


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def _filtered(
    stmt,
    *,
    user_id: int,
    account_id: int | None,
    category: SpendingCategory | None,
    start: date | None,
    end: date | None,
):
    stmt = stmt.where(Expense.user_id == user_id)
    if account_id is not None:
        stmt = stmt.where(Expense.expense_account_id == account_id)
    if category is SpendingCategory.UNCATEGORIZED:
        stmt = stmt.where(Expense.category.is_(None))
    elif category is not None:
        stmt = stmt.where(Expense.category == category.value)
    if start is not None:
        stmt = stmt.where(Expense.date >= start)
    if end is not None:
        stmt = stmt.where(Expense.date <= end)
    return stmt


def sum_expenses(
    session: Session,
    *,
    user_id: int,
    account_id: int | None = None,
    category: SpendingCategory | None = None,
    start: date | None = None,
    end: date | None = None,
) -> int:
    """Total amount in cents. ``UNCATEGORIZED`` filters on a NULL category."""

    stmt = _filtered(
        select(func.coalesce(func.sum(Expense.amount), 0)),
        user_id=user_id,
        account_id=account_id,
        category=category,
        start=start,
        end=end,
    )
    return int(session.execute(stmt).scalar_one())


def count_expenses(
    session: Session,
    *,
    user_id: int,
    account_id: int | None = None,
    category: SpendingCategory | None = None,
    start: date | None = None,
    end: date | None = None,
) -> int:
    stmt = _filtered(
        select(func.count(Expense.id)),
        user_id=user_id,
        account_id=account_id,
        category=category,
        start=start,
        end=end,
    )
    return int(session.execute(stmt).scalar_one())


__all__ = [
    "count_expenses",
    "create_expense",
    "existing_reference_numbers",
    "latest_category_for_merchant",
    "load_unimported_pool",
    "mark_expense_imported",
    "sum_expenses",
]
