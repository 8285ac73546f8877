"""MapDB end to end on the SQLite backend."""

from __future__ import annotations

from pathlib import Path

import pytest

from mapdb import MapDB, StoreConfig, StoreState
from mapdb.shared.errors import DurableUnavailableError, EncodingError


@pytest.mark.integration
class TestMapDBOnSqlite:
    async def test_persists_across_reopen(self, location: str) -> None:
        async with MapDB(durability_enabled=True, location=location) as store:
            await store.set("a", "1")
            await store.set("b", "2")
            await store.delete("a")

        async with MapDB(memory_enabled=True, durability_enabled=True, location=location) as store:
            assert dict(store.items()) == {"b": "2"}
            assert store.entry_count == 1

    async def test_startup_sync_with_json_values(self, location: str) -> None:
        config = StoreConfig(
            memory_enabled=True,
            durability_enabled=True,
            location=location,
            value_encoding="json",
        )
        async with MapDB(config) as store:
            await store.set("a", 1)
            await store.set("b", 2)

        async with MapDB(config) as store:
            assert store.state is StoreState.READY
            assert store.get("a").value == 1
            assert store.get("b").value == 2
            assert store.size == 2

    async def test_unawaited_writes_reach_disk_on_close(self, location: str) -> None:
        store = await MapDB.create(durability_enabled=True, location=location)
        for i in range(20):
            store.set(f"k{i}", str(i))
        await store.close()

        reopened = await MapDB.create(durability_enabled=True, location=location, count_on_open=True)
        assert reopened.entry_count == 20
        assert await reopened.get("k7") == "7"
        await reopened.close()

    async def test_clear_empties_file(self, location: str) -> None:
        async with MapDB(memory_enabled=True, durability_enabled=True, location=location) as store:
            await store.set("a", "1")
            await store.clear()

        async with MapDB(durability_enabled=True, location=location) as store:
            assert await store.has("a") is False
            assert await store.recount() == 0

    async def test_unusable_location_degrades(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        store = await MapDB.create(
            memory_enabled=True, durability_enabled=True, location=str(blocker)
        )
        assert store.state is StoreState.DEGRADED
        assert isinstance(store.open_error, DurableUnavailableError)
        store.set("k", "v")
        assert store.get("k").value == "v"
        await store.close()

    async def test_encoding_error_keeps_mirror_value(self, location: str) -> None:
        store = await MapDB.create(
            memory_enabled=True, durability_enabled=True, location=location
        )
        with pytest.raises(EncodingError):
            await store.set("k", 42)
        assert store.get("k").value == 42
        assert store.entry_count == 0
        assert await store.has("k") is False
        await store.close()
