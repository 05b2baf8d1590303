# ruff: noqa: I001
"""Track CSV imports on expenses (is_imported, reference_number).

Revision ID: 0002_import_tracking
Revises: 0001_expense_core
Create Date: 2026-02-15
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


revision: str = "0002_import_tracking"
down_revision: str | None = "0001_expense_core"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column(
        "expenses",
        sa.Column("is_imported", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    op.add_column("expenses", sa.Column("reference_number", sa.String(255), nullable=True))
    # Re-import detection looks up reference numbers per account.
    op.create_index(
        "ix_expenses_account_reference",
        "expenses",
        ["expense_account_id", "reference_number"],
    )


def downgrade() -> None:
    op.drop_index("ix_expenses_account_reference", table_name="expenses")
    op.drop_column("expenses", "reference_number")
    op.drop_column("expenses", "is_imported")
