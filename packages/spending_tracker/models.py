"""Data models for CSV import and reconciliation.

Parse output (``ParsedRow``, ``MatchCandidate``, ``ParseResult``) is modelled
with pydantic because the host application keeps it between the "preview"
request and the "confirm" request, typically as JSON in the user's session or
page state. The commit path validates it again on the way back in, so a
tampered payload fails loudly rather than writing junk.

Internal, never-serialized values (raw CSV rows, commit summaries) are plain
frozen dataclasses.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date as _date
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .categories import SpendingCategory

# Column limits of ``expenses``: BIGINT amount, VARCHAR(255) text.
MAX_AMOUNT_CENTS = 2**63 - 1
MAX_TEXT_LENGTH = 255


def _check_iso_date(v: str) -> str:
    try:
        _date.fromisoformat(v)
    except ValueError as exc:
        raise ValueError(f"expected an ISO YYYY-MM-DD date, got {v!r}") from exc
    return v


# ---------------------------------------------------------------------------
# Parse output
# ---------------------------------------------------------------------------


class ParsedRow(BaseModel):
    """A CSV row classified as a genuinely new expense (an import candidate)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    date: str
    merchant: str = Field(max_length=MAX_TEXT_LENGTH)
    amount: int = Field(
        gt=0, le=MAX_AMOUNT_CENTS, description="Minor currency units (cents), always positive"
    )
    category: SpendingCategory = SpendingCategory.UNCATEGORIZED
    reference_number: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)

    @field_validator("date")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        return _check_iso_date(v)


class MatchCandidate(BaseModel):
    """A CSV row paired with an unreconciled manual expense of the same amount.

    Both sides' merchant/date are carried for review; only ``is_imported`` and
    ``reference_number`` of the manual expense change on confirmation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    expense_id: int
    expense_merchant: str = Field(max_length=MAX_TEXT_LENGTH)
    expense_date: str
    csv_merchant: str = Field(max_length=MAX_TEXT_LENGTH)
    csv_date: str
    amount: int = Field(gt=0, le=MAX_AMOUNT_CENTS)
    reference_number: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)

    @field_validator("expense_date", "csv_date")
    @classmethod
    def _iso_dates(cls, v: str) -> str:
        return _check_iso_date(v)


class ParseResult(BaseModel):
    """Everything a caller needs to preview an import."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    import_candidates: list[ParsedRow] = Field(default_factory=list)
    match_candidates: list[MatchCandidate] = Field(default_factory=list)
    feedback: str = ""

    @classmethod
    def empty(cls, feedback: str) -> ParseResult:
        return cls(feedback=feedback)

    @property
    def is_empty(self) -> bool:
        return not self.import_candidates and not self.match_candidates


# ---------------------------------------------------------------------------
# Internal values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawRow:
    """One data row after the first (whole-file) scan.

    ``raw_amount`` keeps its sign; whether positives are credits can only be
    decided once every row has been seen.
    """

    raw_amount: float
    merchant: str
    date_str: str
    bank_reference: str | None
    cells: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RawScan:
    """Output of the first pass: the surviving rows plus the file-level sign flag."""

    rows: tuple[RawRow, ...]
    has_negative_amounts: bool

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True, slots=True)
class NormalizedRow:
    """A raw row that passed sign, amount and date normalization."""

    raw: RawRow
    date: str
    amount_cents: int


@dataclass(frozen=True, slots=True)
class CommitSummary:
    created: int = 0
    matched: int = 0
    skipped: int = 0


RowSelection: TypeAlias = Sequence[int] | None
"""Indices into a candidate list; ``None`` selects every candidate."""


__all__ = [
    "MAX_AMOUNT_CENTS",
    "MAX_TEXT_LENGTH",
    "ParsedRow",
    "MatchCandidate",
    "ParseResult",
    "RawRow",
    "RawScan",
    "NormalizedRow",
    "CommitSummary",
    "RowSelection",
]
