"""Durable adapter selection from store configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapdb.infra.redis_store import RedisDurableStore
from mapdb.infra.sqlite_store import SqliteDurableStore

if TYPE_CHECKING:
    from mapdb.ports.durable_store_port import DurableStorePort
    from mapdb.store.config import StoreConfig


def create_durable_store(config: StoreConfig) -> DurableStorePort:
    if config.backend == "redis":
        return RedisDurableStore(
            config.location,
            redis_url=config.redis_url,
            key_encoding=config.key_encoding,
            value_encoding=config.value_encoding,
            scan_batch_size=config.scan_batch_size,
        )
    return SqliteDurableStore(
        config.location,
        key_encoding=config.key_encoding,
        value_encoding=config.value_encoding,
        scan_batch_size=config.scan_batch_size,
    )
