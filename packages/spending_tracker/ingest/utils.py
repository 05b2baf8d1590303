"""Ingest utilities shared by the importer, the API and the CLI.

CSV files are small and fully buffered: they are read into memory as text and
split into a header row plus data rows with the stdlib :mod:`csv` module
(RFC 4180 quoting, embedded newlines, doubled quotes). A UTF-8 byte order mark,
common in spreadsheet exports, is dropped.
"""

from __future__ import annotations

import csv
import io
from os import PathLike
from pathlib import Path


def read_csv_file(csv_path: str | PathLike[str]) -> str:
    """Return the whole file as text.

    Raises ``OSError`` when the file cannot be opened and
    ``UnicodeDecodeError`` when it is not UTF-8.
    """

    return Path(csv_path).read_text(encoding="utf-8-sig")


def decode_csv_bytes(data: bytes) -> str:
    """Decode an uploaded file body (UTF-8, optional BOM)."""

    return data.decode("utf-8-sig")


def split_csv_text(csv_text: str) -> tuple[list[str] | None, list[list[str]]]:
    """Split CSV text into ``(header, rows)``.

    ``header`` is ``None`` for an empty file. A blank first line yields an empty
    header list, which later fails column detection. Raises ``csv.Error`` for
    malformed input the reader cannot recover from.
    """

    if csv_text.startswith("\ufeff"):
        csv_text = csv_text[1:]
    with io.StringIO(csv_text, newline="") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None:
            return None, []
        return header, [row for row in reader]


__all__ = ["decode_csv_bytes", "read_csv_file", "split_csv_text"]
