"""Expense account service operations.

Accounts group a user's expenses by where the money was spent from (a
checking account, a credit card). Each operation takes the acting user's id
and checks ownership before touching anything. Deleting an account deletes
its expenses.
"""

from __future__ import annotations

from db.models.expenses import ExpenseAccount
from sqlalchemy import select
from sqlalchemy.orm import Session

from .authz import get_owned_account
from .logging_setup import get_logger

logger = get_logger("spending_tracker.accounts")

_MAX_NAME_LEN = 255


def normalize_account_name(name: str) -> str:
    """Trim and collapse whitespace; raise ``ValueError`` when empty or too long."""

    n = " ".join(name.strip().split())
    if not n:
        raise ValueError("Account name cannot be empty")
    if len(n) > _MAX_NAME_LEN:
        raise ValueError(f"Account name must be at most {_MAX_NAME_LEN} characters")
    return n


def create_account(session: Session, *, user_id: int, name: str) -> ExpenseAccount:
    account = ExpenseAccount(user_id=user_id, name=normalize_account_name(name))
    session.add(account)
    session.flush()
    logger.info("Created expense account %s for user %s", account.id, user_id)
    return account


def list_accounts(session: Session, *, user_id: int) -> list[ExpenseAccount]:
    stmt = (
        select(ExpenseAccount)
        .where(ExpenseAccount.user_id == user_id)
        .order_by(ExpenseAccount.name, ExpenseAccount.id)
    )
    return list(session.execute(stmt).scalars())


def rename_account(
    session: Session, *, user_id: int, account_id: int, name: str
) -> ExpenseAccount:
    account = get_owned_account(session, user_id=user_id, account_id=account_id)
    account.name = normalize_account_name(name)
    session.flush()
    return account


def delete_account(session: Session, *, user_id: int, account_id: int) -> None:
    """Delete an account and, by cascade, all of its expenses."""

    account = get_owned_account(session, user_id=user_id, account_id=account_id)
    session.delete(account)
    session.flush()
    logger.info("Deleted expense account %s for user %s", account_id, user_id)


__all__ = [
    "create_account",
    "delete_account",
    "list_accounts",
    "normalize_account_name",
    "rename_account",
]
