"""Spending categories and their storage boundary.

Expenses carry one of four spending-plan buckets. Inside the package the
category is always a :class:`SpendingCategory`; the database column holds the
enum value or NULL. ``from_storage``/``to_storage`` are the only places where
raw strings are accepted or produced.
"""

from __future__ import annotations

from enum import StrEnum


class SpendingCategory(StrEnum):
    FIXED_COSTS = "fixed_costs"
    INVESTMENTS = "investments"
    SAVINGS = "savings"
    GUILT_FREE = "guilt_free"
    # Never persisted; stored as NULL.
    UNCATEGORIZED = "uncategorized"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_categorized(self) -> bool:
        return self is not SpendingCategory.UNCATEGORIZED

    @classmethod
    def choices(cls) -> tuple[SpendingCategory, ...]:
        """Storable categories in display order."""

        return (cls.FIXED_COSTS, cls.INVESTMENTS, cls.SAVINGS, cls.GUILT_FREE)

    @classmethod
    def from_storage(cls, value: str | None) -> SpendingCategory:
        """Convert a database value into a category.

        ``None`` and blank strings mean uncategorized. Anything else must be one
        of the storable values; unknown strings raise ``ValueError``.
        """

        if value is None:
            return cls.UNCATEGORIZED
        s = value.strip().lower()
        if not s:
            return cls.UNCATEGORIZED
        for member in cls.choices():
            if member.value == s:
                return member
        raise ValueError(f"Unknown spending category: {value!r}")

    def to_storage(self) -> str | None:
        return self.value if self.is_categorized else None


_LABELS: dict[SpendingCategory, str] = {
    SpendingCategory.FIXED_COSTS: "Fixed Costs",
    SpendingCategory.INVESTMENTS: "Investments",
    SpendingCategory.SAVINGS: "Savings",
    SpendingCategory.GUILT_FREE: "Guilt-Free Spending",
    SpendingCategory.UNCATEGORIZED: "Uncategorized",
}


__all__ = ["SpendingCategory"]
