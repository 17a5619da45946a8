"""
Storage module - key-value stores for persisted game values.

- MemoryStore: session-scoped, in process
- SqliteStore: sqlite file with a metadata(key, value) table

Use `tabletop.utils.factory.create_store()` or instantiate directly.
"""

from tabletop.storage.kv_store import KeyValueStore, MemoryStore, SqliteStore

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "SqliteStore",
]
