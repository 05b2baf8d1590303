"""Heuristic column detection for bank CSV exports.

Banks name the same concept differently ("Posted Date", "Transaction Date",
"Payee", "Debit", ...). Each logical field has an ordered list of candidate
header names; the first candidate present in the header row wins, regardless
of where that header sits in the row. Matching is exact after lower-casing
and trimming.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

DATE_HEADERS: tuple[str, ...] = (
    "date",
    "transaction date",
    "posted date",
    "posting date",
    "post date",
)
MERCHANT_HEADERS: tuple[str, ...] = (
    "description",
    "merchant",
    "name",
    "memo",
    "payee",
    "transaction",
)
AMOUNT_HEADERS: tuple[str, ...] = ("amount", "debit", "total", "charge")
REFERENCE_HEADERS: tuple[str, ...] = (
    "reference number",
    "transaction id",
    "reference",
    "ref",
)
STATUS_HEADERS: tuple[str, ...] = ("status",)


def normalize_headers(headers: Sequence[str]) -> list[str]:
    return [h.strip().lower() for h in headers]


def detect_column(headers: Sequence[str], candidates: Sequence[str]) -> int | None:
    """Return the index of the first candidate found in ``headers``, else ``None``.

    ``headers`` must already be normalized (see :func:`normalize_headers`).
    When a header appears twice, its first position is used.
    """

    for candidate in candidates:
        try:
            return headers.index(candidate)
        except ValueError:
            continue
    return None


@dataclass(frozen=True, slots=True)
class ColumnMap:
    date: int
    merchant: int
    amount: int
    reference: int | None = None
    status: int | None = None

    @property
    def highest_required(self) -> int:
        return max(self.date, self.merchant, self.amount)


def detect_columns(headers: Sequence[str]) -> ColumnMap | None:
    """Detect all logical columns; ``None`` when date, merchant or amount is missing."""

    normalized = normalize_headers(headers)
    date_col = detect_column(normalized, DATE_HEADERS)
    merchant_col = detect_column(normalized, MERCHANT_HEADERS)
    amount_col = detect_column(normalized, AMOUNT_HEADERS)
    if date_col is None or merchant_col is None or amount_col is None:
        return None
    return ColumnMap(
        date=date_col,
        merchant=merchant_col,
        amount=amount_col,
        reference=detect_column(normalized, REFERENCE_HEADERS),
        status=detect_column(normalized, STATUS_HEADERS),
    )


__all__ = [
    "ColumnMap",
    "detect_column",
    "detect_columns",
    "normalize_headers",
]
