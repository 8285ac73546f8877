"""Redis implementation of DurableStorePort.

- Every key lives under the "<location>:" namespace
- clear() removes only this namespace
- Scans follow SCAN order (no ordering guarantee), fetched in MGET batches
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

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

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(rb"([*?\[\]\\])")


class RedisDurableStore(DurableStorePort):
    """DurableStorePort backed by a Redis server.

    The client is created on open() and verified with PING, so an unreachable
    server degrades the store instead of failing on the first write.
    """

    def __init__(
        self,
        location: str = "database",
        *,
        redis_url: str = "redis://localhost:6379/0",
        key_encoding: str = "utf-8",
        value_encoding: str = "utf-8",
        scan_batch_size: int = 256,
    ) -> None:
        self.location = location
        self._redis_url = redis_url
        self._codec = KeyValueCodec(key_encoding, value_encoding)
        self._scan_batch_size = scan_batch_size
        self._prefix = location.encode("utf-8") + b":"
        self._match = _GLOB_SPECIAL.sub(rb"\\\1", self._prefix) + b"*"
        self._client: aioredis.Redis | None = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def open(self) -> None:
        if self._client is not None:
            return
        client: aioredis.Redis | None = None
        try:
            client = aioredis.from_url(self._redis_url, decode_responses=False)  # type: ignore[no-untyped-call]
            await client.ping()
        except (RedisError, OSError, ValueError) as exc:
            if client is not None:
                await client.aclose()
            raise DurableUnavailableError(
                self.location, f"Cannot reach Redis for {self.location}: {exc}"
            ) from exc
        self._client = client
        logger.info("Redis durable store opened: %s", self.location)

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis durable store closed: %s", self.location)

    def _connected(self) -> aioredis.Redis:
        if self._client is None:
            raise StoreClosedError(self.location)
        return self._client

    def _namespaced(self, key: Any) -> bytes:
        return self._prefix + self._codec.encode_key(key)

    async def get(self, key: Any) -> Any:
        client = self._connected()
        name = self._namespaced(key)
        try:
            raw = await client.get(name)
        except RedisError as exc:
            raise DurableIOError("get", str(exc), key=key) from exc
        if raw is None:
            raise KeyNotFoundError(key)
        return self._codec.decode_value(raw)

    async def put(self, key: Any, value: Any) -> None:
        client = self._connected()
        name = self._namespaced(key)
        encoded = self._codec.encode_value(value, key=key)
        try:
            await client.set(name, encoded)
        except RedisError as exc:
            raise DurableIOError("put", str(exc), key=key) from exc

    async def delete(self, key: Any) -> None:
        client = self._connected()
        name = self._namespaced(key)
        try:
            await client.delete(name)
        except RedisError as exc:
            raise DurableIOError("delete", str(exc), key=key) from exc

    async def clear(self) -> None:
        client = self._connected()
        try:
            batch: list[bytes] = []
            async for name in client.scan_iter(match=self._match, count=self._scan_batch_size):
                batch.append(name)
                if len(batch) >= self._scan_batch_size:
                    await client.delete(*batch)
                    batch = []
            if batch:
                await client.delete(*batch)
        except RedisError as exc:
            raise DurableIOError("clear", str(exc)) from exc

    async def scan(self) -> AsyncIterator[tuple[Any, Any]]:
        client = self._connected()
        batch: list[bytes] = []
        try:
            async for name in client.scan_iter(match=self._match, count=self._scan_batch_size):
                batch.append(name)
                if len(batch) >= self._scan_batch_size:
                    for entry in await self._fetch(client, batch):
                        yield entry
                    batch = []
            if batch:
                for entry in await self._fetch(client, batch):
                    yield entry
        except RedisError as exc:
            raise DurableIOError("scan", str(exc)) from exc

    async def _fetch(self, client: aioredis.Redis, names: list[bytes]) -> list[tuple[Any, Any]]:
        values = await client.mget(names)
        offset = len(self._prefix)
        # a key deleted between SCAN and MGET comes back as None
        return [
            (self._codec.decode_key(name[offset:]), self._codec.decode_value(raw))
            for name, raw in zip(names, values, strict=True)
            if raw is not None
        ]
