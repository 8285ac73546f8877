"""Result type returned by every store call.

A StoreOperation carries two results:

- ``value``: available immediately, reflects only the in-memory mirror.
- ``await op``: the durable outcome (or the memory outcome when durability
  is off). Durable errors are raised here and nowhere else.

Three flavours:

- settled: no durable work; awaiting returns a fixed outcome.
- task-backed: durable work already running as a task. If nobody awaits
  it, its error is logged at DEBUG and dropped.
- deferred: the factory starts the durable work (a coroutine or a task) on
  first await; never started if the caller only reads ``value``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Generator

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class StoreOperation(Generic[T, R]):
    """Synchronous mirror value plus awaitable durable outcome."""

    __slots__ = ("_factory", "_observed", "_outcome", "_task", "value")

    def __init__(
        self,
        value: T,
        *,
        outcome: R | None = None,
        task: asyncio.Task[R] | None = None,
        factory: Callable[[], Awaitable[R]] | None = None,
    ) -> None:
        self.value = value
        self._outcome = outcome
        self._task = task
        self._factory = factory
        self._observed = False
        if task is not None:
            task.add_done_callback(self._drop_unobserved)

    @classmethod
    def settled(cls, value: T, outcome: R) -> StoreOperation[T, R]:
        return cls(value, outcome=outcome)

    @classmethod
    def deferred(
        cls,
        value: T,
        factory: Callable[[], Awaitable[R]],
    ) -> StoreOperation[T, R]:
        return cls(value, factory=factory)

    def done(self) -> bool:
        """Whether the durable outcome is available without waiting."""
        if self._task is not None:
            return self._task.done()
        return self._factory is None

    def __await__(self) -> Generator[Any, None, R]:
        return self._result().__await__()

    async def _result(self) -> R:
        self._observed = True
        if self._factory is not None:
            factory, self._factory = self._factory, None
            self._task = asyncio.ensure_future(factory())
        if self._task is not None:
            return await self._task
        return self._outcome  # type: ignore[return-value]

    def _drop_unobserved(self, task: asyncio.Task[R]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None and not self._observed:
            logger.debug("Dropped durable error from unawaited %s: %s", task.get_name(), exc)

    def __repr__(self) -> str:
        return f"StoreOperation(value={self.value!r}, done={self.done()})"
