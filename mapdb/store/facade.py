"""MapDB - key-value store over an in-memory mirror and a durable store.

Capabilities are chosen independently:

    memory_enabled  durability_enabled  behaviour
    --------------  ------------------  ------------------------------------
    False           False               empty mirror, size 0, nothing kept
    True            False               plain synchronous mapping
    False           True                durable only; sync reads see nothing
    True            True                mirror + durable, synced on open

Every call returns a StoreOperation: ``op.value`` is the mirror result,
``await op`` is the durable outcome. Durable work of overlapping calls on
the same key is serialized per key.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
from typing import TYPE_CHECKING, Any

from mapdb.infra.factory import create_durable_store
from mapdb.shared.errors import (
    DurableUnavailableError,
    KeyNotFoundError,
    MapDBError,
    StoreClosedError,
)
from mapdb.shared.logging.error_handler import log_structured_error
from mapdb.store.config import StoreConfig
from mapdb.store.counter import EntryCounter
from mapdb.store.keylock import KeyLock
from mapdb.store.mirror import MirrorContainer
from mapdb.store.operation import StoreOperation
from mapdb.store.synchronizer import StartupSynchronizer

if TYPE_CHECKING:
    from collections.abc import Coroutine, ItemsView, Iterator, KeysView, ValuesView
    from types import TracebackType

    from mapdb.ports.durable_store_port import DurableStorePort

logger = logging.getLogger(__name__)


class StoreState(enum.Enum):
    """Store readiness: OPENING -> SYNCING -> READY | DEGRADED, then CLOSED."""

    OPENING = "opening"
    SYNCING = "syncing"
    READY = "ready"
    DEGRADED = "degraded"
    CLOSED = "closed"


class MapDB:
    """Mapping-style store with optional memory mirror and durable backing."""

    def __init__(
        self,
        config: StoreConfig | None = None,
        *,
        durable_store: DurableStorePort | None = None,
        **options: Any,
    ) -> None:
        if config is None:
            config = StoreConfig(**options)
        elif options:
            config = StoreConfig(**{**config.model_dump(), **options})
        self.config = config
        self.mirror = MirrorContainer()
        self.open_error: MapDBError | None = None

        self._counter = EntryCounter()
        self._locks = KeyLock()
        self._pending: set[asyncio.Task[Any]] = set()
        self._durable: DurableStorePort | None = None
        self._sync_task: asyncio.Task[Any] | None = None
        self._clear_task: asyncio.Task[Any] | None = None
        self._synced = asyncio.Event()
        self._synced.set()
        self._touched: set[Any] | None = None
        self._cleared_while_syncing = False

        if config.durability_enabled:
            self._durable = durable_store or create_durable_store(config)
            self._state = StoreState.OPENING
        else:
            self._state = StoreState.READY

    @classmethod
    async def create(
        cls,
        config: StoreConfig | None = None,
        *,
        durable_store: DurableStorePort | None = None,
        **options: Any,
    ) -> MapDB:
        """Build and open a store in one step."""
        store = cls(config, durable_store=durable_store, **options)
        await store.open()
        return store

    # -- Lifecycle --

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def memory_enabled(self) -> bool:
        return self.config.memory_enabled

    @property
    def durability_enabled(self) -> bool:
        """True only while the durable store is open and usable."""
        return (
            self._state in (StoreState.SYNCING, StoreState.READY)
            and self._durable is not None
            and self._durable.is_open
        )

    async def open(self) -> StoreState:
        """Open the durable store and, with memory enabled, sync it into the mirror.

        Never raises for an unavailable durable store: the store degrades to
        memory-only and the error is kept on ``open_error``.
        """
        if self._state is not StoreState.OPENING:
            return self._state
        assert self._durable is not None

        try:
            await self._durable.open()
        except DurableUnavailableError as exc:
            self._degrade(exc)
            return self._state

        if self.config.memory_enabled:
            await self._synchronize(self._durable)
            return self._state

        self._state = StoreState.READY
        logger.info("Store opened (durable only): %s", self.config.location)
        if self.config.count_on_open:
            try:
                await self.recount()
            except MapDBError as exc:
                log_structured_error(
                    logger,
                    exc,
                    location=self.config.location,
                    operation="recount",
                    level=logging.WARNING,
                )
        return self._state

    async def _synchronize(self, durable: DurableStorePort) -> None:
        self._state = StoreState.SYNCING
        self._synced.clear()
        self._touched = set()
        self._cleared_while_syncing = False
        synchronizer = StartupSynchronizer(durable, self.mirror, skip=self._skip_sync)
        self._sync_task = asyncio.get_running_loop().create_task(
            synchronizer.run(), name=f"mapdb.sync:{self.config.location}"
        )
        try:
            report = await self._sync_task
        except asyncio.CancelledError:
            if self._state is not StoreState.CLOSED:
                await durable.close()
                self._state = StoreState.CLOSED
                raise
            return
        except MapDBError as exc:
            await durable.close()
            self._degrade(exc)
            return
        finally:
            self._sync_task = None
            self._touched = None
            self._synced.set()

        self._counter.reset(report.scanned)
        self._state = StoreState.READY
        logger.info(
            "Store opened: %s (synced %d entries, %d skipped)",
            self.config.location,
            report.loaded,
            report.skipped,
        )

    def _skip_sync(self, key: Any) -> bool:
        return self._cleared_while_syncing or (self._touched is not None and key in self._touched)

    def _touch(self, key: Any) -> None:
        if self._touched is not None:
            self._touched.add(key)

    def _degrade(self, exc: MapDBError) -> None:
        self.open_error = exc
        self._state = StoreState.DEGRADED
        log_structured_error(
            logger,
            exc,
            location=self.config.location,
            operation="open",
            context={"backend": self.config.backend, "memory_enabled": self.memory_enabled},
            level=logging.WARNING,
        )

    async def close(self) -> None:
        """Cancel an unfinished sync, wait for in-flight durable work, release the store."""
        if self._state is StoreState.CLOSED:
            return
        sync_task = self._sync_task
        if sync_task is not None and not sync_task.done():
            self._state = StoreState.CLOSED
            sync_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sync_task
            self._synced.set()
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        self._state = StoreState.CLOSED
        if self._durable is not None:
            await self._durable.close()
        self._synced.set()
        logger.info("Store closed: %s", self.config.location)

    async def __aenter__(self) -> MapDB:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -- Size --

    @property
    def entry_count(self) -> int:
        """Incrementally maintained number of durable entries."""
        return self._counter.count

    @property
    def size(self) -> int:
        """Entry count for an open durable store without a mirror, else mirror size."""
        if self.memory_enabled or not self.durability_enabled:
            return self.mirror.size
        return self._counter.count

    def __len__(self) -> int:
        return self.size

    async def recount(self) -> int:
        """Rebuild the entry count from a full durable scan.

        Without durability, returns the current size unchanged.
        """
        if not self.durability_enabled:
            return self.size
        durable = await self._ready_durable()
        count = 0
        async for _entry in durable.scan():
            count += 1
        self._counter.reset(count)
        return count

    # -- Operations --

    def clear(self) -> StoreOperation[None, None]:
        """Remove every entry. Durable clear also resets the entry count.

        The durable clear runs after all durable work issued before it, and
        durable work issued after it waits for it.
        """
        self.mirror.clear()
        if self._touched is not None:
            self._cleared_while_syncing = True
        if not self.durability_enabled:
            return StoreOperation.settled(None, None)
        earlier = tuple(self._pending)
        self._clear_task = self._spawn(self._durable_clear(earlier), "clear")
        return StoreOperation(None, task=self._clear_task)

    def delete(self, key: Any) -> StoreOperation[bool, bool]:
        """Remove a key.

        ``value`` says whether the key was in the mirror; awaiting says
        whether a durable entry was removed.
        """
        existed_in_memory = self.mirror.delete(key)
        self._touch(key)
        if not self.durability_enabled:
            return StoreOperation.settled(existed_in_memory, existed_in_memory)
        task = self._spawn(self._durable_delete(key, self._clear_task), f"delete:{key!r}")
        return StoreOperation(existed_in_memory, task=task)

    def get(self, key: Any) -> StoreOperation[Any, Any]:
        """Look up a key.

        ``value`` is the mirrored value (None when absent); awaiting performs
        a durable lookup when durability is enabled.
        """
        value = self.mirror.get(key)
        if not self.durability_enabled:
            return StoreOperation.settled(value, value)
        return StoreOperation.deferred(
            value,
            lambda: self._spawn(self._durable_get(key, self._clear_task), f"get:{key!r}"),
        )

    def has(self, key: Any) -> StoreOperation[bool, bool]:
        present = self.mirror.has(key)
        if not self.durability_enabled:
            return StoreOperation.settled(present, present)
        return StoreOperation.deferred(
            present,
            lambda: self._spawn(self._durable_has(key, self._clear_task), f"has:{key!r}"),
        )

    def set(self, key: Any, value: Any) -> StoreOperation[MapDB, None]:
        """Store a value.

        ``value`` is the store itself rather than the bare mirror, so calls
        chain on the object that owns both sides. Awaiting completes after
        the durable write.
        """
        if self.memory_enabled:
            self.mirror.set(key, value)
            self._touch(key)
        if not self.durability_enabled:
            return StoreOperation.settled(self, None)
        task = self._spawn(self._durable_set(key, value, self._clear_task), f"set:{key!r}")
        return StoreOperation(self, task=task)

    # -- Durable halves --

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
        """Run durable work as a task that close() waits for."""
        task = asyncio.get_running_loop().create_task(coro, name=f"mapdb.{name}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _ready_durable(self, after: asyncio.Task[Any] | None = None) -> DurableStorePort:
        if after is not None and not after.done():
            await asyncio.wait([after])
        await self._synced.wait()
        if not self.durability_enabled:
            raise StoreClosedError(self.config.location)
        assert self._durable is not None
        return self._durable

    async def _probe(self, durable: DurableStorePort, key: Any) -> bool:
        try:
            await durable.get(key)
        except KeyNotFoundError:
            return False
        return True

    # ``after`` is the clear issued before this call, if any.

    async def _durable_set(self, key: Any, value: Any, after: asyncio.Task[Any] | None) -> None:
        async with self._locks.hold(key):
            durable = await self._ready_durable(after)
            existed = await self._probe(durable, key)
            await durable.put(key, value)
            if not existed:
                self._counter.increment()

    async def _durable_delete(self, key: Any, after: asyncio.Task[Any] | None) -> bool:
        async with self._locks.hold(key):
            durable = await self._ready_durable(after)
            if not await self._probe(durable, key):
                return False
            await durable.delete(key)
            self._counter.decrement()
            return True

    async def _durable_get(self, key: Any, after: asyncio.Task[Any] | None) -> Any:
        async with self._locks.hold(key):
            durable = await self._ready_durable(after)
            try:
                return await durable.get(key)
            except KeyNotFoundError:
                return None

    async def _durable_has(self, key: Any, after: asyncio.Task[Any] | None) -> bool:
        async with self._locks.hold(key):
            durable = await self._ready_durable(after)
            return await self._probe(durable, key)

    async def _durable_clear(self, earlier: tuple[asyncio.Task[Any], ...]) -> None:
        if earlier:
            await asyncio.wait(earlier)
        durable = await self._ready_durable()
        await durable.clear()
        self._counter.reset()

    # -- Enumeration (mirror only) --

    def __iter__(self) -> Iterator[Any]:
        return iter(self.mirror)

    def __contains__(self, key: object) -> bool:
        return key in self.mirror

    def __getitem__(self, key: Any) -> Any:
        if key not in self.mirror:
            raise KeyError(key)
        return self.mirror.get(key)

    def keys(self) -> KeysView[Any]:
        return self.mirror.keys()

    def values(self) -> ValuesView[Any]:
        return self.mirror.values()

    def items(self) -> ItemsView[Any, Any]:
        return self.mirror.items()

    def __repr__(self) -> str:
        return (
            f"MapDB(location={self.config.location!r}, state={self._state.value}, "
            f"memory={self.memory_enabled}, durable={self.durability_enabled}, size={self.size})"
        )
