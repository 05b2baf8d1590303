"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the expense-tracking models used by ``spending_tracker``.
"""

from .expenses import Base, Expense, ExpenseAccount, User

__all__ = [
    "Base",
    "User",
    "ExpenseAccount",
    "Expense",
]
