"""Ownership checks for accounts and expenses.

Every mutation in this package is preceded by one of these checks. A record
owned by somebody else is a hard failure (``AuthorizationError``), never a
silent skip; a record that does not exist raises a ``LookupError`` subclass.
"""

from __future__ import annotations

from db.models.expenses import Expense, ExpenseAccount
from sqlalchemy.orm import Session


class AuthorizationError(PermissionError):
    """The acting user does not own the record being touched."""


class AccountNotFoundError(LookupError):
    pass


class ExpenseNotFoundError(LookupError):
    pass


def ensure_owner(owner_id: int, user_id: int, *, what: str) -> None:
    if owner_id != user_id:
        raise AuthorizationError(f"user {user_id} does not own {what}")


def get_owned_account(session: Session, *, user_id: int, account_id: int) -> ExpenseAccount:
    """Load an account and verify it belongs to ``user_id``."""

    account = session.get(ExpenseAccount, account_id)
    if account is None:
        raise AccountNotFoundError(f"expense account {account_id} does not exist")
    ensure_owner(account.user_id, user_id, what=f"expense account {account_id}")
    return account


def get_owned_expense(session: Session, *, user_id: int, expense_id: int) -> Expense:
    """Load an expense and verify it belongs to ``user_id``."""

    expense = session.get(Expense, expense_id)
    if expense is None:
        raise ExpenseNotFoundError(f"expense {expense_id} does not exist")
    ensure_owner(expense.user_id, user_id, what=f"expense {expense_id}")
    return expense


__all__ = [
    "AccountNotFoundError",
    "AuthorizationError",
    "ExpenseNotFoundError",
    "ensure_owner",
    "get_owned_account",
    "get_owned_expense",
]
