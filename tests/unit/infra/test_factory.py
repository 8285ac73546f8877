"""Durable adapter selection."""

from __future__ import annotations

import pytest

from mapdb.infra.factory import create_durable_store
from mapdb.infra.redis_store import RedisDurableStore
from mapdb.infra.sqlite_store import SqliteDurableStore
from mapdb.store.config import StoreConfig
from mapdb.store.facade import MapDB, StoreState


@pytest.mark.unit
class TestCreateDurableStore:
    def test_sqlite_by_default(self) -> None:
        store = create_durable_store(StoreConfig(location="data/cache"))
        assert isinstance(store, SqliteDurableStore)
        assert store.location == "data/cache"
        assert store.is_open is False

    def test_redis_backend(self) -> None:
        config = StoreConfig(backend="redis", location="cache", redis_url="redis://r:6379/1")
        store = create_durable_store(config)
        assert isinstance(store, RedisDurableStore)
        assert store._redis_url == "redis://r:6379/1"

    def test_encodings_forwarded(self) -> None:
        store = create_durable_store(StoreConfig(key_encoding="latin-1", value_encoding="json"))
        assert isinstance(store, SqliteDurableStore)
        assert store._codec.key_codec.name == "iso8859-1"
        assert store._codec.value_codec.name == "json"

    def test_facade_builds_adapter_only_when_durable(self) -> None:
        assert MapDB(memory_enabled=True)._durable is None
        store = MapDB(durability_enabled=True, backend="redis")
        assert isinstance(store._durable, RedisDurableStore)
        assert store.state is StoreState.OPENING
