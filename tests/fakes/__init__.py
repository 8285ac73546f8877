"""Shared Fake adapters for testing without unittest.mock.

All Fake implementations follow the Port DI adapter pattern:
real Python classes with preset behaviour, no AsyncMock/MagicMock.
"""

from tests.fakes.durable import FakeDurableStore
from tests.fakes.fake_redis import FakeRedis

__all__ = [
    "FakeDurableStore",
    "FakeRedis",
]
