"""DurableStorePort - Durable key-value engine interface.

Soft dependency of the store facade. A failed open degrades the store to
memory-only; it never takes the store down.

Implementations encode keys/values with the configured codecs, complete every
call asynchronously, and distinguish a miss (KeyNotFoundError) from any other
failure (DurableIOError).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class DurableStorePort(ABC):
    """Port: durable get/put/delete/clear/scan."""

    location: str

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the durable handle is currently held."""

    @abstractmethod
    async def open(self) -> None:
        """Acquire the durable handle.

        Raises:
            DurableUnavailableError: If the engine cannot be opened.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the durable handle (no-op if not open)."""

    @abstractmethod
    async def get(self, key: Any) -> Any:
        """Retrieve the value stored for a key.

        Args:
            key: Store key.

        Returns:
            The decoded stored value.

        Raises:
            KeyNotFoundError: If no entry exists for the key.
            DurableIOError: On any other failure.
        """

    @abstractmethod
    async def put(self, key: Any, value: Any) -> None:
        """Store a value, replacing any previous value.

        Args:
            key: Store key.
            value: Value to store (must be encodable by the value codec).
        """

    @abstractmethod
    async def delete(self, key: Any) -> None:
        """Delete the entry for a key (no-op if absent).

        Args:
            key: Store key.
        """

    @abstractmethod
    async def clear(self) -> None:
        """Delete every entry owned by this store."""

    @abstractmethod
    def scan(self) -> AsyncIterator[tuple[Any, Any]]:
        """Lazily iterate over all (key, value) entries.

        Entries are yielded in the engine's natural order. The scan progresses
        in short batches instead of holding one long read.
        """
