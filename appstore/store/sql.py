"""Key-value store persisted through SQLAlchemy."""

from __future__ import annotations

import typing as typ

import msgspec

from appstore.common.time import utcnow
from appstore.store.errors import StoreDecodeError, StoreValueError
from appstore.store.locks import ExclusiveAccessMixin, KeyedLocks
from appstore.store.storage import StoreEntry

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class SqlKeyValueStore(ExclusiveAccessMixin):
    """Store JSON values in the ``store_entries`` table.

    Each ``set`` runs in its own transaction and is committed before the call
    returns. Values are encoded with ``msgspec.json`` so anything msgspec can
    serialise (lists, dicts, strings, numbers, structs) may be stored.

    Parameters
    ----------
    session_factory
        Async session factory bound to a database initialised with
        :func:`appstore.store.init_store_storage`.

    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Bind the store to a session factory."""
        self._session_factory = session_factory
        self._locks = KeyedLocks()

    async def get(self, key: str) -> typ.Any:  # noqa: ANN401 - JSON value
        """Return the decoded value for ``key`` or ``None`` when absent.

        Raises
        ------
        StoreDecodeError
            If the stored payload is not valid JSON.

        """
        async with self._session_factory() as session:
            entry = await session.get(StoreEntry, key)
            if entry is None:
                return None
            payload = entry.value

        try:
            return msgspec.json.decode(payload)
        except msgspec.DecodeError as exc:
            raise StoreDecodeError(key) from exc

    async def set(self, key: str, value: typ.Any) -> None:  # noqa: ANN401 - JSON value
        """Encode ``value`` and upsert it under ``key``.

        Raises
        ------
        StoreValueError
            If ``value`` is ``None`` or cannot be encoded.

        """
        if value is None:
            raise StoreValueError.none_value(key)
        try:
            payload = msgspec.json.encode(value).decode("utf-8")
        except TypeError as exc:
            raise StoreValueError.unencodable(key, str(exc)) from exc

        async with self._session_factory() as session, session.begin():
            entry = await session.get(StoreEntry, key)
            if entry is None:
                session.add(StoreEntry(key=key, value=payload))
            else:
                entry.value = payload
                entry.updated_at = utcnow()
