"""Integration test conftest - fixtures backed by real SQLite files.

Every store lives in its own pytest tmp_path directory, so no test sees
another test's data.

Usage:
    pytest tests/integration/ -m integration
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from mapdb.infra.sqlite_store import SqliteDurableStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path


@pytest.fixture
def location(tmp_path: Path) -> str:
    return str(tmp_path / "store")


@pytest.fixture
async def sqlite_store(location: str) -> AsyncGenerator[SqliteDurableStore, None]:
    """Opened SQLite durable store with utf-8 keys and values."""
    store = SqliteDurableStore(location)
    await store.open()
    yield store
    await store.close()
