"""Public interface for the ``spending_tracker`` package.

This module only re-exports the package's API functions, services and public
models; there is no runtime logic here.
"""

from .accounts import create_account, delete_account, list_accounts, rename_account
from .api import commit_import, parse_csv_import, parse_csv_import_text
from .authz import AccountNotFoundError, AuthorizationError, ExpenseNotFoundError
from .categories import SpendingCategory
from .expenses import (
    ExpenseUpdate,
    add_manual_expense,
    delete_expense,
    list_expenses,
    update_expense,
)
from .models import CommitSummary, MatchCandidate, ParsedRow, ParseResult

__all__ = [
    # Import API
    "parse_csv_import",
    "parse_csv_import_text",
    "commit_import",
    # Accounts / expenses
    "create_account",
    "list_accounts",
    "rename_account",
    "delete_account",
    "add_manual_expense",
    "update_expense",
    "delete_expense",
    "list_expenses",
    "ExpenseUpdate",
    # Models / types
    "SpendingCategory",
    "ParsedRow",
    "MatchCandidate",
    "ParseResult",
    "CommitSummary",
    # Errors
    "AuthorizationError",
    "AccountNotFoundError",
    "ExpenseNotFoundError",
]
