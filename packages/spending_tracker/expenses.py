"""Manual expense entry, editing and listing.

Manual expenses are what the user types in by hand: not imported, no
reference number. They sit in the account's unimported pool until a CSV
import reconciles them (see :mod:`spending_tracker.importer`).
"""

from __future__ import annotations

import datetime as dt

from db.models.expenses import Expense
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from .authz import get_owned_account, get_owned_expense
from .categories import SpendingCategory
from .models import MAX_AMOUNT_CENTS, MAX_TEXT_LENGTH
from .persistence import create_expense


class ExpenseUpdate(BaseModel):
    """Partial update of an expense; only fields explicitly set are applied.

    ``category=None`` and ``notes=None`` clear those fields; ``None`` for
    merchant, amount, date or account is ignored.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    merchant: str | None = Field(default=None, min_length=1, max_length=MAX_TEXT_LENGTH)
    amount: int | None = Field(default=None, gt=0, le=MAX_AMOUNT_CENTS, strict=True)
    date: dt.date | None = None
    category: SpendingCategory | None = None
    notes: str | None = None
    account_id: int | None = None


def _validate_manual_fields(merchant: str, amount_cents: int) -> str:
    m = merchant.strip()
    if not m:
        raise ValueError("Merchant cannot be empty")
    if len(m) > MAX_TEXT_LENGTH:
        raise ValueError(f"Merchant must be at most {MAX_TEXT_LENGTH} characters")
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int):
        raise ValueError("Amount must be a positive number of cents")
    if not 0 < amount_cents <= MAX_AMOUNT_CENTS:
        raise ValueError(f"Amount must be between 1 and {MAX_AMOUNT_CENTS} cents")
    return m


def add_manual_expense(
    session: Session,
    *,
    user_id: int,
    account_id: int,
    merchant: str,
    amount_cents: int,
    date: dt.date | str,
    category: SpendingCategory = SpendingCategory.UNCATEGORIZED,
    notes: str | None = None,
) -> Expense:
    """Record an expense typed in by the user (not imported, no reference)."""

    get_owned_account(session, user_id=user_id, account_id=account_id)
    return create_expense(
        session,
        user_id=user_id,
        account_id=account_id,
        merchant=_validate_manual_fields(merchant, amount_cents),
        amount=amount_cents,
        date=date,
        category=category,
        is_imported=False,
        reference_number=None,
        notes=notes.strip() if notes and notes.strip() else None,
    )


def update_expense(
    session: Session, *, user_id: int, expense_id: int, changes: ExpenseUpdate
) -> Expense:
    """Apply ``changes`` to one of the user's expenses.

    Moving the expense to another account requires owning that account too.
    """

    expense = get_owned_expense(session, user_id=user_id, expense_id=expense_id)
    provided = changes.model_fields_set

    if "account_id" in provided and changes.account_id is not None:
        get_owned_account(session, user_id=user_id, account_id=changes.account_id)
        expense.expense_account_id = changes.account_id
    if "merchant" in provided and changes.merchant is not None:
        expense.merchant = changes.merchant
    if "amount" in provided and changes.amount is not None:
        expense.amount = changes.amount
    if "date" in provided and changes.date is not None:
        expense.date = changes.date
    if "category" in provided:
        category = changes.category or SpendingCategory.UNCATEGORIZED
        expense.category = category.to_storage()
    if "notes" in provided:
        expense.notes = changes.notes or None

    session.flush()
    return expense


def delete_expense(session: Session, *, user_id: int, expense_id: int) -> None:
    expense = get_owned_expense(session, user_id=user_id, expense_id=expense_id)
    session.delete(expense)
    session.flush()


def list_expenses(
    session: Session,
    *,
    user_id: int,
    account_id: int | None = None,
    uncategorized_only: bool = False,
) -> list[Expense]:
    """The user's expenses, newest first."""

    stmt = select(Expense).where(Expense.user_id == user_id)
    if account_id is not None:
        stmt = stmt.where(Expense.expense_account_id == account_id)
    if uncategorized_only:
        stmt = stmt.where(Expense.category.is_(None))
    stmt = stmt.order_by(Expense.date.desc(), Expense.id.desc())
    return list(session.execute(stmt).scalars())


__all__ = [
    "ExpenseUpdate",
    "add_manual_expense",
    "delete_expense",
    "list_expenses",
    "update_expense",
]
