"""Store configuration.

Validated once when a store is built and frozen afterwards; each store owns
its own config. Field aliases accept the camelCase option names
(memoryEnabled, durabilityEnabled, keyEncoding, ...).
"""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mapdb.shared.encoding import get_codec

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


class StoreConfig(BaseModel):
    """Capability flags and durable storage options for one store."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    memory_enabled: bool = Field(default=False, alias="memoryEnabled")
    durability_enabled: bool = Field(default=False, alias="durabilityEnabled")
    location: str = "database"
    key_encoding: str = Field(default="utf-8", alias="keyEncoding")
    value_encoding: str = Field(default="utf-8", alias="valueEncoding")
    backend: Literal["sqlite", "redis"] = "sqlite"
    redis_url: str = Field(default="redis://localhost:6379/0", alias="redisUrl")
    count_on_open: bool = Field(default=False, alias="countOnOpen")
    scan_batch_size: int = Field(default=256, gt=0, alias="scanBatchSize")

    @field_validator("location")
    @classmethod
    def location_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "location cannot be empty"
            raise ValueError(msg)
        return v.strip()

    @field_validator("key_encoding", "value_encoding")
    @classmethod
    def encoding_known(cls, v: str) -> str:
        get_codec(v)
        return v.strip().lower()

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Build a config from MAPDB_* environment variables."""
        return cls(
            memory_enabled=_env_flag("MAPDB_MEMORY"),
            durability_enabled=_env_flag("MAPDB_DURABLE"),
            location=os.environ.get("MAPDB_LOCATION", "database"),
            key_encoding=os.environ.get("MAPDB_KEY_ENCODING", "utf-8"),
            value_encoding=os.environ.get("MAPDB_VALUE_ENCODING", "utf-8"),
            backend=os.environ.get("MAPDB_BACKEND", "sqlite"),  # type: ignore[arg-type]
            redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
            count_on_open=_env_flag("MAPDB_COUNT_ON_OPEN"),
            scan_batch_size=int(os.environ.get("MAPDB_SCAN_BATCH_SIZE", "256")),
        )
