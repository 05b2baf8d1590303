"""Stable reference numbers for imported rows.

Every imported expense stores a reference number so that importing the same
file again is a no-op. A bank-provided identifier is authoritative when the
export has one. Otherwise the reference is derived from the raw CSV line:

    xxh3_128_hexdigest("|".join(cells) + "|" + str(occurrence))

``occurrence`` counts how many times that exact line has been seen so far in
the current file, starting at 1. Two identical lines (the same coffee twice in
one day) therefore get different references instead of the second one being
mistaken for a re-import, while re-reading the same file reproduces the same
sequence of references.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import xxhash

_SEP = "|"


def line_key(cells: Sequence[str]) -> str:
    return _SEP.join(cells)


def hash_reference(cells: Sequence[str], occurrence: int) -> str:
    """Content hash for one CSV line and its 1-based occurrence index."""

    if occurrence < 1:
        raise ValueError("occurrence is 1-based")
    payload = f"{line_key(cells)}{_SEP}{occurrence}"
    return xxhash.xxh3_128_hexdigest(payload.encode("utf-8"))


class ReferenceAssigner:
    """Assign reference numbers to the rows of a single file, in file order.

    One instance per parse call; the occurrence counter is file-scoped.
    """

    def __init__(self) -> None:
        self._seen: Counter[str] = Counter()

    def assign(self, cells: Sequence[str], bank_reference: str | None) -> str:
        if bank_reference:
            return bank_reference
        key = line_key(cells)
        self._seen[key] += 1
        return hash_reference(cells, self._seen[key])


__all__ = ["ReferenceAssigner", "hash_reference", "line_key"]
