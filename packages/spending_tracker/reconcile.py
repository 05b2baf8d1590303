"""Consumable pool of manual expenses used to reconcile an import.

People often type an expense in by hand before the bank statement arrives.
When the statement is imported, each CSV row is paired with at most one
manual expense of the same amount, and each manual expense with at most one
row. Merchant and date are not compared: banks label merchants differently
and post days later than the purchase.

The pool is loaded once per parse call and consumed in memory; re-querying
the database per row would hand out the same manual expense twice.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PoolEntry:
    id: int
    amount: int
    merchant: str
    date: str


class UnimportedPool:
    """Ordered, consumable collection of :class:`PoolEntry` items."""

    def __init__(self, entries: Iterable[PoolEntry]) -> None:
        self._entries: list[PoolEntry] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PoolEntry]:
        return iter(self._entries)

    def consume(self, amount: int) -> PoolEntry | None:
        """Remove and return the first entry whose amount equals ``amount``."""

        for i, entry in enumerate(self._entries):
            if entry.amount == amount:
                del self._entries[i]
                return entry
        return None


__all__ = ["PoolEntry", "UnimportedPool"]
