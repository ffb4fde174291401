"""Persisted key-value storage with per-key exclusive access.

The repository registry keeps its repository list under a single key. Two
backends implement :class:`KeyValueStore`:

- :class:`SqlKeyValueStore` persists values through SQLAlchemy (SQLite via
  aiosqlite locally, Postgres via asyncpg in deployments).
- :class:`MemoryKeyValueStore` keeps values in process memory.

Usage
-----
::

    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from appstore.store import SqlKeyValueStore, init_store_storage

    engine = create_async_engine("sqlite+aiosqlite:///appstore.db")
    await init_store_storage(engine)
    store = SqlKeyValueStore(async_sessionmaker(engine, expire_on_commit=False))

"""

from appstore.store.errors import StoreDecodeError, StoreError, StoreValueError
from appstore.store.memory import MemoryKeyValueStore
from appstore.store.protocol import KeyValueStore, Reader, Writer
from appstore.store.sql import SqlKeyValueStore
from appstore.store.storage import StoreEntry, init_store_storage

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "Reader",
    "SqlKeyValueStore",
    "StoreDecodeError",
    "StoreEntry",
    "StoreError",
    "StoreValueError",
    "Writer",
    "init_store_storage",
]
