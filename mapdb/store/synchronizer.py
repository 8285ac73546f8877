"""Startup synchronization: durable store -> mirror.

Runs once when a store with both memory and durability opens. Entries are
copied in the durable store's scan order. Keys the facade has already
written or deleted since the sync started are skipped, so a write made while
syncing is never overwritten by an older durable value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from mapdb.ports.durable_store_port import DurableStorePort
    from mapdb.store.mirror import MirrorContainer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncReport:
    """Outcome of one startup synchronization."""

    scanned: int
    loaded: int

    @property
    def skipped(self) -> int:
        return self.scanned - self.loaded


class StartupSynchronizer:
    def __init__(
        self,
        durable: DurableStorePort,
        mirror: MirrorContainer,
        *,
        skip: Callable[[Any], bool] | None = None,
    ) -> None:
        self._durable = durable
        self._mirror = mirror
        self._skip = skip or (lambda _key: False)

    async def run(self) -> SyncReport:
        """Drain the durable store into the mirror.

        Raises:
            DurableIOError: If the scan fails part-way. Entries already
                copied stay in the mirror.
        """
        scanned = 0
        loaded = 0
        async for key, value in self._durable.scan():
            scanned += 1
            if self._skip(key):
                continue
            self._mirror.set(key, value)
            loaded += 1
        logger.debug(
            "Startup sync of %s: scanned=%d loaded=%d",
            self._durable.location,
            scanned,
            loaded,
        )
        return SyncReport(scanned=scanned, loaded=loaded)
