"""Async SQLite engine and session factory.

Provides:
- sqlite_url(): data file URL for a store location
- create_db_engine(): AsyncEngine factory (aiosqlite)
- create_session_factory(): async_sessionmaker bound to engine
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

DATA_FILE = "mapdb.sqlite3"


def sqlite_url(location: str) -> str:
    """Build the aiosqlite URL of the data file inside a location directory.

    The directory is created if missing.
    """
    directory = Path(location)
    directory.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{directory / DATA_FILE}"


def create_db_engine(
    url: str,
    *,
    busy_timeout: float = 30.0,
    echo: bool = False,
) -> AsyncEngine:
    """Create an async SQLAlchemy engine for aiosqlite.

    Connections run in WAL mode so the short scan batches do not block writers.

    Args:
        url: Database URL (must use the sqlite+aiosqlite:// scheme).
        busy_timeout: Seconds a connection waits on a locked database.
        echo: Whether to log SQL statements.

    Returns:
        Configured AsyncEngine instance.
    """
    engine = create_async_engine(
        url,
        echo=echo,
        connect_args={"timeout": busy_timeout},
    )

    @sa.event.listens_for(engine.sync_engine, "connect")
    def _set_pragmas(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine.

    Sessions are configured with expire_on_commit=False to allow
    accessing attributes after commit without re-fetching.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
