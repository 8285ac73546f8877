"""SQLite implementation of DurableStorePort via SQLAlchemy asyncio.

- One data file per location directory: <location>/mapdb.sqlite3
- Schema created on open (single kv_entries table)
- Scans use keyset pagination in short sessions, in bytewise key order
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from mapdb.infra.db import create_db_engine, create_session_factory, sqlite_url
from mapdb.infra.models import Base, KVEntry
from mapdb.ports.durable_store_port import DurableStorePort
from mapdb.shared.encoding import KeyValueCodec
from mapdb.shared.errors import (
    DurableIOError,
    DurableUnavailableError,
    KeyNotFoundError,
    StoreClosedError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


class SqliteDurableStore(DurableStorePort):
    """DurableStorePort backed by an embedded SQLite file."""

    def __init__(
        self,
        location: str = "database",
        *,
        key_encoding: str = "utf-8",
        value_encoding: str = "utf-8",
        scan_batch_size: int = 256,
    ) -> None:
        self.location = location
        self._codec = KeyValueCodec(key_encoding, value_encoding)
        self._scan_batch_size = scan_batch_size
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def open(self) -> None:
        if self._engine is not None:
            return
        engine: AsyncEngine | None = None
        try:
            engine = create_db_engine(sqlite_url(self.location))
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (OSError, SQLAlchemyError) as exc:
            if engine is not None:
                await engine.dispose()
            raise DurableUnavailableError(
                self.location, f"Cannot open SQLite store at {self.location}: {exc}"
            ) from exc
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        logger.info("SQLite durable store opened: %s", self.location)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("SQLite durable store closed: %s", self.location)

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise StoreClosedError(self.location)
        return self._session_factory

    async def get(self, key: Any) -> Any:
        raw_key = self._codec.encode_key(key)
        sessions = self._sessions()
        try:
            async with sessions() as session:
                row = await session.get(KVEntry, raw_key)
        except SQLAlchemyError as exc:
            raise DurableIOError("get", str(exc), key=key) from exc
        if row is None:
            raise KeyNotFoundError(key)
        return self._codec.decode_value(row.value)

    async def put(self, key: Any, value: Any) -> None:
        raw_key = self._codec.encode_key(key)
        raw_value = self._codec.encode_value(value, key=key)
        stmt = sqlite_insert(KVEntry).values(key=raw_key, value=raw_value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[KVEntry.key],
            set_={"value": stmt.excluded.value},
        )
        await self._execute("put", stmt, key=key)

    async def delete(self, key: Any) -> None:
        raw_key = self._codec.encode_key(key)
        await self._execute("delete", sa.delete(KVEntry).where(KVEntry.key == raw_key), key=key)

    async def clear(self) -> None:
        await self._execute("clear", sa.delete(KVEntry))

    async def _execute(self, operation: str, stmt: sa.Executable, *, key: Any = None) -> None:
        sessions = self._sessions()
        try:
            async with sessions() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            raise DurableIOError(operation, str(exc), key=key) from exc

    async def scan(self) -> AsyncIterator[tuple[Any, Any]]:
        last_key: bytes | None = None
        while True:
            stmt = sa.select(KVEntry.key, KVEntry.value).order_by(KVEntry.key)
            if last_key is not None:
                stmt = stmt.where(KVEntry.key > last_key)
            stmt = stmt.limit(self._scan_batch_size)

            sessions = self._sessions()
            try:
                async with sessions() as session:
                    rows = (await session.execute(stmt)).all()
            except SQLAlchemyError as exc:
                raise DurableIOError("scan", str(exc)) from exc

            for raw_key, raw_value in rows:
                yield self._codec.decode_key(raw_key), self._codec.decode_value(raw_value)

            if len(rows) < self._scan_batch_size:
                return
            last_key = rows[-1][0]
