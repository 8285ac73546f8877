"""Store layer: the MapDB facade and the pieces it coordinates."""

from mapdb.store.config import StoreConfig
from mapdb.store.counter import EntryCounter
from mapdb.store.facade import MapDB, StoreState
from mapdb.store.keylock import KeyLock
from mapdb.store.mirror import MirrorContainer
from mapdb.store.operation import StoreOperation
from mapdb.store.synchronizer import StartupSynchronizer, SyncReport

__all__ = [
    "EntryCounter",
    "KeyLock",
    "MapDB",
    "MirrorContainer",
    "StartupSynchronizer",
    "StoreConfig",
    "StoreOperation",
    "StoreState",
    "SyncReport",
]
