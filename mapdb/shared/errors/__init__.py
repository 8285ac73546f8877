"""Unified error hierarchy for mapdb.

All store errors inherit from MapDBError. Durable adapters translate engine
exceptions into these types; the facade propagates them unchanged to the
caller awaiting the affected operation.
"""

from __future__ import annotations

from typing import Any


class MapDBError(Exception):
    """Base error for all mapdb exceptions."""

    def __init__(self, message: str, code: str = "MAPDB_ERROR") -> None:
        self.code = code
        super().__init__(message)


# -- Durable store errors (raised by DurableStorePort implementations) --


class KeyNotFoundError(MapDBError):
    """Durable lookup miss.

    Never surfaced to facade callers: translated to None / False results.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Key not found: {key!r}", code="NOT_FOUND")


class DurableUnavailableError(MapDBError):
    """The durable store could not be opened."""

    def __init__(self, location: str, message: str = "") -> None:
        self.location = location
        super().__init__(
            message or f"Durable store at {location} is unavailable",
            code="DURABLE_UNAVAILABLE",
        )


class DurableIOError(MapDBError):
    """A durable get/put/delete/clear/scan failed for a reason other than a miss."""

    def __init__(self, operation: str, message: str, *, key: Any = None) -> None:
        self.operation = operation
        self.key = key
        super().__init__(f"Durable {operation} failed: {message}", code="DURABLE_IO")


class EncodingError(DurableIOError):
    """A key or value cannot be represented by the configured codec."""

    def __init__(self, codec: str, message: str, *, key: Any = None) -> None:
        self.codec = codec
        super().__init__("encode", f"{codec}: {message}", key=key)
        self.code = "ENCODING"


class StoreClosedError(MapDBError):
    """Durable work was requested after the store was closed."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Store at {location} is closed", code="STORE_CLOSED")


__all__ = [
    "DurableIOError",
    "DurableUnavailableError",
    "EncodingError",
    "KeyNotFoundError",
    "MapDBError",
    "StoreClosedError",
]
