"""Per-key operation serialization.

Overlapping operations on the same key run one at a time, in the order they
asked for the lock (asyncio.Lock wakes waiters FIFO). Distinct keys never
contend. A key's lock is dropped as soon as nobody holds or awaits it.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class _KeyEntry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.users = 0


class KeyLock:
    def __init__(self) -> None:
        self._entries: dict[Any, _KeyEntry] = {}

    def __len__(self) -> int:
        """Number of keys currently held or awaited."""
        return len(self._entries)

    def locked(self, key: Any) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.lock.locked()

    @asynccontextmanager
    async def hold(self, key: Any) -> AsyncIterator[None]:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _KeyEntry()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]
