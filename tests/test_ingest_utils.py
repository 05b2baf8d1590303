from __future__ import annotations

import csv
from pathlib import Path

import pytest

from spending_tracker.ingest.utils import decode_csv_bytes, read_csv_file, split_csv_text


def test_split_header_and_rows() -> None:
    header, rows = split_csv_text('Date,Description,Amount\n2026-02-01,"A, B",-1\r\n')
    assert header == ["Date", "Description", "Amount"]
    assert rows == [["2026-02-01", "A, B", "-1"]]


def test_split_empty_text() -> None:
    assert split_csv_text("") == (None, [])


def test_blank_first_line_gives_empty_header() -> None:
    header, _ = split_csv_text("\nDate,Description,Amount\n")
    assert header == []


def test_embedded_newlines_and_doubled_quotes() -> None:
    _, rows = split_csv_text('a,b\n"line one\nline two","say ""hi"""\n')
    assert rows == [["line one\nline two", 'say "hi"']]


def test_reader_errors_surface() -> None:
    oversized = "x" * (csv.field_size_limit() + 1)
    with pytest.raises(csv.Error):
        split_csv_text(f"a,b\n1,{oversized}\n")


def test_byte_order_mark_is_dropped(tmp_path: Path) -> None:
    body = "Date,Description,Amount\n".encode("utf-8-sig")
    assert decode_csv_bytes(body).startswith("Date")

    path = tmp_path / "bom.csv"
    path.write_bytes(body)
    assert read_csv_file(path).startswith("Date")
    assert split_csv_text("\ufeffDate,Amount\n")[0] == ["Date", "Amount"]


def test_non_utf8_bytes_raise() -> None:
    with pytest.raises(UnicodeDecodeError):
        decode_csv_bytes(b"Caf\xe9,1\n")
