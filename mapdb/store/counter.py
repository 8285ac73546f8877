"""Durable entry counter.

Tracks the number of durable keys incrementally so that size queries never
scan the durable store. The count is advisory: writers outside this process
are invisible to it. MapDB.recount() rebuilds it from a full scan.
"""

from __future__ import annotations


class EntryCounter:
    def __init__(self, initial: int = 0) -> None:
        self._count = max(initial, 0)

    @property
    def count(self) -> int:
        return self._count

    def increment(self) -> int:
        self._count += 1
        return self._count

    def decrement(self) -> int:
        """Decrement, never going below zero."""
        if self._count > 0:
            self._count -= 1
        return self._count

    def reset(self, count: int = 0) -> None:
        self._count = max(count, 0)
