"""Port interfaces - Layer boundary contracts.

Ports:
    DurableStorePort - Durable key-value engine (soft dep, degradable)
"""

from mapdb.ports.durable_store_port import DurableStorePort

__all__ = [
    "DurableStorePort",
]
