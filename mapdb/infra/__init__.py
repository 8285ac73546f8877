"""Infrastructure layer package.

Implements DurableStorePort with concrete adapters (SQLite, Redis).
The store layer obtains adapters only through infra.factory.create_durable_store.
"""
