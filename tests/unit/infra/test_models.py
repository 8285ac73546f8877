"""ORM model schema assertion tests.

Verifies the kv_entries table the SQLite store creates on open.
"""

from __future__ import annotations

import pytest
import sqlalchemy as sa

from mapdb.infra.models import Base, KVEntry


def _col_names(model) -> set[str]:
    """Extract column names from a SQLAlchemy model."""
    return {c.name for c in model.__table__.columns}


@pytest.mark.unit
class TestKVEntryModel:
    def test_tablename(self) -> None:
        assert KVEntry.__tablename__ == "kv_entries"

    def test_columns(self) -> None:
        assert _col_names(KVEntry) == {"key", "value"}

    def test_key_is_binary_primary_key(self) -> None:
        key = KVEntry.__table__.c.key
        assert key.primary_key is True
        assert isinstance(key.type, sa.LargeBinary)

    def test_value_not_nullable(self) -> None:
        value = KVEntry.__table__.c.value
        assert value.nullable is False
        assert isinstance(value.type, sa.LargeBinary)

    def test_registered_on_metadata(self) -> None:
        assert set(Base.metadata.tables) == {"kv_entries"}
