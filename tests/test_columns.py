from __future__ import annotations

from spending_tracker.ingest.columns import (
    AMOUNT_HEADERS,
    ColumnMap,
    detect_column,
    detect_columns,
    normalize_headers,
)


def test_standard_headers() -> None:
    assert detect_columns(["Date", "Description", "Amount"]) == ColumnMap(
        date=0, merchant=1, amount=2
    )


def test_alternative_header_names() -> None:
    cols = detect_columns(["Transaction Date", "Merchant", "Debit"])
    assert cols is not None
    assert (cols.date, cols.merchant, cols.amount) == (0, 1, 2)

    cols = detect_columns(["Posting Date", "Payee", "Charge"])
    assert cols is not None
    assert (cols.date, cols.merchant, cols.amount) == (0, 1, 2)


def test_headers_are_trimmed_and_case_insensitive() -> None:
    cols = detect_columns(["  AMOUNT ", "DATE", " name"])
    assert cols is not None
    assert (cols.date, cols.merchant, cols.amount) == (1, 2, 0)


def test_candidate_order_beats_header_order() -> None:
    # "description" precedes "memo" in the candidate list, so it wins even
    # though "Memo" comes first in the file.
    cols = detect_columns(["Memo", "Description", "Date", "Amount"])
    assert cols is not None
    assert cols.merchant == 1


def test_optional_reference_and_status_columns() -> None:
    cols = detect_columns(["Posted Date", "Reference Number", "Payee", "Amount", "Status"])
    assert cols is not None
    assert cols.reference == 1
    assert cols.status == 4
    assert cols.highest_required == 3

    plain = detect_columns(["Date", "Description", "Amount"])
    assert plain is not None
    assert plain.reference is None
    assert plain.status is None


def test_missing_required_column_returns_none() -> None:
    assert detect_columns(["Date", "Description", "Balance"]) is None
    assert detect_columns(["Description", "Amount"]) is None
    assert detect_columns([]) is None


def test_substring_headers_do_not_match() -> None:
    assert detect_columns(["Date", "Description", "Amount (USD)"]) is None


def test_detect_column_uses_first_position_of_duplicate_header() -> None:
    headers = normalize_headers(["Amount", "Date", "Amount"])
    assert detect_column(headers, AMOUNT_HEADERS) == 0
