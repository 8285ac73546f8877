"""mapdb - embedded key-value store with a mapping interface.

Keeps entries in an in-process mirror, in a durable store (SQLite or Redis),
or both, behind one get/set/delete/clear/iterate contract.
"""

from mapdb.shared.errors import (
    DurableIOError,
    DurableUnavailableError,
    EncodingError,
    KeyNotFoundError,
    MapDBError,
    StoreClosedError,
)
from mapdb.store import MapDB, StoreConfig, StoreOperation, StoreState

__all__ = [
    "DurableIOError",
    "DurableUnavailableError",
    "EncodingError",
    "KeyNotFoundError",
    "MapDB",
    "MapDBError",
    "StoreClosedError",
    "StoreConfig",
    "StoreOperation",
    "StoreState",
]
