"""Root conftest - shared fixtures for all test layers.

Markers:
    @pytest.mark.unit        - No external deps
    @pytest.mark.integration - Real SQLite files on disk
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from mapdb.store.config import StoreConfig
from mapdb.store.facade import MapDB
from tests.fakes import FakeDurableStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


@pytest.fixture
def fake_durable() -> FakeDurableStore:
    return FakeDurableStore()


@pytest.fixture
def dual_config() -> StoreConfig:
    return StoreConfig(memory_enabled=True, durability_enabled=True, location="fake")


@pytest.fixture
async def dual_store(
    dual_config: StoreConfig, fake_durable: FakeDurableStore
) -> AsyncGenerator[MapDB, None]:
    """Opened store with both mirror and (fake) durable storage."""
    store = MapDB(dual_config, durable_store=fake_durable)
    await store.open()
    yield store
    await store.close()


@pytest.fixture
async def durable_only_store(fake_durable: FakeDurableStore) -> AsyncGenerator[MapDB, None]:
    store = MapDB(durable_store=fake_durable, durability_enabled=True, location="fake")
    await store.open()
    yield store
    await store.close()


@pytest.fixture
def memory_store() -> MapDB:
    return MapDB(memory_enabled=True)
