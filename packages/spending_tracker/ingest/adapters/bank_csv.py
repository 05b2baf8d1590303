"""Adapter for loosely structured bank/card CSV exports.

Works in two phases because the sign convention belongs to the whole file:

1. :func:`scan_rows` walks every data row once, drops malformed and
   non-cleared rows, parses the signed amount and records whether *any* row
   is negative.
2. :func:`normalize_rows` is a pure filter/map over that scan. In a signed
   export (at least one negative amount) positive rows are credits/payments
   and are dropped; in a debit-only export every positive row is kept. It then
   converts to positive integer cents, drops zero and out-of-range amounts and
   normalizes the date to ``YYYY-MM-DD``.

Nothing here raises on bad cells: unparseable amounts become ``0.0`` (and are
later dropped as zero), unparseable dates drop the row.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Iterator, Sequence
from decimal import ROUND_HALF_UP, Decimal

from dateutil import parser as date_parser

from ...models import MAX_AMOUNT_CENTS, MAX_TEXT_LENGTH, NormalizedRow, RawRow, RawScan
from ..columns import ColumnMap

_AMOUNT_JUNK = str.maketrans("", "", ",$ ")
# Leading numeric prefix: "12.50USD" parses as 12.5.
_NUMERIC_PREFIX_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
# Largest amount whose cents still fit the BIGINT column.
_MAX_AMOUNT = MAX_AMOUNT_CENTS / 100


def parse_amount(raw: str) -> float:
    """Parse an amount cell into a signed float.

    Commas, dollar signs and spaces are stripped first. Text without a numeric
    prefix, and exponents that overflow a float (``1e400``), parse as ``0.0``.
    """

    s = raw.translate(_AMOUNT_JUNK)
    m = _NUMERIC_PREFIX_RE.match(s)
    if m is None:
        return 0.0
    try:
        value = float(m.group(0))
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def to_cents(amount: float) -> int:
    """Round ``amount * 100`` half away from zero.

    The product is first reduced to 15 significant digits so binary noise
    such as ``1.005 * 100 == 100.49999999999999`` rounds the way a human
    reading the statement expects.
    """

    scaled = Decimal(f"{amount * 100:.15g}")
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_date(raw: str) -> str | None:
    """Leniently parse a date cell into ``YYYY-MM-DD``; ``None`` when impossible.

    Accepts the usual export shapes (``M/D/YYYY``, ``YYYY-MM-DD``,
    ``Feb 3, 2026``, timestamps). Month-first is assumed for ambiguous
    numeric dates.
    """

    s = raw.strip()
    if not s:
        return None
    try:
        return date_parser.parse(s).date().isoformat()
    except (ValueError, OverflowError):
        return None


def _cell(row: Sequence[str], index: int | None) -> str | None:
    if index is None or index >= len(row):
        return None
    return row[index]


def scan_rows(rows: Iterable[Sequence[str]], columns: ColumnMap) -> RawScan:
    """First pass over all data rows (header excluded)."""

    kept: list[RawRow] = []
    has_negative = False

    for row in rows:
        if len(row) <= columns.highest_required:
            continue

        status = _cell(row, columns.status)
        if status is not None and status.strip().lower() != "cleared":
            continue

        raw_amount = parse_amount(row[columns.amount])
        if raw_amount < 0:
            has_negative = True

        bank_ref = _cell(row, columns.reference)
        if bank_ref is not None:
            bank_ref = bank_ref.strip()
            # Too long to store; the row falls back to a content hash.
            if len(bank_ref) > MAX_TEXT_LENGTH:
                bank_ref = None
        kept.append(
            RawRow(
                raw_amount=raw_amount,
                merchant=row[columns.merchant].strip()[:MAX_TEXT_LENGTH],
                date_str=row[columns.date].strip(),
                bank_reference=bank_ref,
                cells=tuple(row),
            )
        )

    return RawScan(rows=tuple(kept), has_negative_amounts=has_negative)


def normalize_rows(scan: RawScan) -> Iterator[NormalizedRow]:
    """Second pass: sign convention, cents conversion, amount range and date filtering."""

    for raw in scan.rows:
        if scan.has_negative_amounts and raw.raw_amount > 0:
            continue

        amount = abs(raw.raw_amount)
        if amount <= 0 or amount > _MAX_AMOUNT:
            continue

        cents = to_cents(amount)
        if cents <= 0 or cents > MAX_AMOUNT_CENTS:
            continue

        iso_date = parse_date(raw.date_str)
        if iso_date is None:
            continue

        yield NormalizedRow(raw=raw, date=iso_date, amount_cents=cents)


__all__ = [
    "normalize_rows",
    "parse_amount",
    "parse_date",
    "scan_rows",
    "to_cents",
]
