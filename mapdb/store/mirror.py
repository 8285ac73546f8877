"""In-process mirror of store entries.

Insertion-ordered; overwriting a key keeps its original position.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import ItemsView, Iterator, KeysView, ValuesView


class MirrorContainer:
    """Synchronous ordered mapping holding the memory-resident entries."""

    def __init__(self) -> None:
        self._entries: dict[Any, Any] = {}

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[Any]:
        return iter(self._entries)

    def get(self, key: Any) -> Any | None:
        return self._entries.get(key)

    def has(self, key: Any) -> bool:
        return key in self._entries

    def set(self, key: Any, value: Any) -> None:
        self._entries[key] = value

    def delete(self, key: Any) -> bool:
        """Remove a key. Returns True if it was present."""
        if key in self._entries:
            del self._entries[key]
            return True
        return False

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> KeysView[Any]:
        return self._entries.keys()

    def values(self) -> ValuesView[Any]:
        return self._entries.values()

    def items(self) -> ItemsView[Any, Any]:
        return self._entries.items()
