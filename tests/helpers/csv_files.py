"""Build small CSV exports in memory for importer tests."""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from pathlib import Path


def make_csv(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buf.getvalue()


def write_csv(path: Path, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Path:
    path.write_text(make_csv(headers, rows), encoding="utf-8")
    return path
