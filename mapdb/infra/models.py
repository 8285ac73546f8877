"""SQLAlchemy ORM models for the SQLite durable store.

Keys and values are stored as codec-encoded bytes; BLOB comparison gives the
bytewise key order used by scans.
"""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for mapdb ORM models."""


class KVEntry(Base):
    """One durable key/value entry."""

    __tablename__ = "kv_entries"

    key: Mapped[bytes] = mapped_column(sa.LargeBinary, primary_key=True)
    value: Mapped[bytes] = mapped_column(sa.LargeBinary, nullable=False)
