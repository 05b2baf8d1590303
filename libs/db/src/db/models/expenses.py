from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


# ---------------------------
# Owners: users
# ---------------------------


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )

    accounts: Mapped[list[ExpenseAccount]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )


# ---------------------------
# Accounts: expense_accounts
# ---------------------------


class ExpenseAccount(Base):
    __tablename__ = "expense_accounts"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=func.now(),
    )

    user: Mapped[User] = relationship(back_populates="accounts")
    # Deleting an account removes its expenses (ORM cascade plus FK ON DELETE).
    expenses: Mapped[list[Expense]] = relationship(
        back_populates="account", cascade="all, delete-orphan", passive_deletes=True
    )


# ---------------------------
# Core: expenses
# ---------------------------


class Expense(Base):
    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expense_account_id: Mapped[int] = mapped_column(
        ForeignKey("expense_accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    merchant: Mapped[str] = mapped_column(String(255), nullable=False)
    # Minor currency units (cents); direction is implied by being an expense.
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # Stored as the enum value of ``spending_tracker.categories.SpendingCategory``;
    # NULL means uncategorized. The service layer converts at this boundary.
    category: Mapped[str | None] = mapped_column(String(32), nullable=True)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_imported: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    # Bank-provided id or content hash; set for every imported row.
    reference_number: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=func.now(),
    )

    account: Mapped[ExpenseAccount] = relationship(back_populates="expenses")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
        CheckConstraint(
            "category IS NULL OR category in ('fixed_costs','investments','savings','guilt_free')",
            name="ck_expenses_category",
        ),
        Index("ix_expenses_user_id_date", "user_id", "date"),
        Index("ix_expenses_account_reference", "expense_account_id", "reference_number"),
    )


__all__ = [
    "Base",
    "User",
    "ExpenseAccount",
    "Expense",
]
