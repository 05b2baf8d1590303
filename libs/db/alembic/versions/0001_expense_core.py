# ruff: noqa: I001
"""Users, expense accounts and expenses.

Revision ID: 0001_expense_core
Revises: None
Create Date: 2026-02-14
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_expense_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# BIGINT ids on Postgres; SQLite only autoincrements an INTEGER primary key.
_ID = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", _ID, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )

    op.create_table(
        "expense_accounts",
        sa.Column("id", _ID, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            _ID,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_expense_accounts_user_id", "expense_accounts", ["user_id"])

    op.create_table(
        "expenses",
        sa.Column("id", _ID, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            _ID,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "expense_account_id",
            _ID,
            sa.ForeignKey("expense_accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("merchant", sa.String(255), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("category", sa.String(32), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
        sa.CheckConstraint(
            "category IS NULL OR category in ('fixed_costs','investments','savings','guilt_free')",
            name="ck_expenses_category",
        ),
    )
    op.create_index("ix_expenses_user_id_date", "expenses", ["user_id", "date"])
    op.create_index("ix_expenses_expense_account_id", "expenses", ["expense_account_id"])


def downgrade() -> None:
    op.drop_index("ix_expenses_expense_account_id", table_name="expenses")
    op.drop_index("ix_expenses_user_id_date", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("ix_expense_accounts_user_id", table_name="expense_accounts")
    op.drop_table("expense_accounts")
    op.drop_table("users")
