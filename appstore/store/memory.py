"""In-process key-value store for development and tests."""

from __future__ import annotations

import copy
import typing as typ

from appstore.store.errors import StoreValueError
from appstore.store.locks import ExclusiveAccessMixin, KeyedLocks


class MemoryKeyValueStore(ExclusiveAccessMixin):
    """Dictionary-backed store honouring the ``KeyValueStore`` contract.

    Values are deep-copied in both directions so callers can never mutate
    stored state through a reference they hold. Nothing survives the process.

    Examples
    --------
    >>> store = MemoryKeyValueStore({"app_repositories": ["https://a"]})
    >>> await store.get("app_repositories")
    ['https://a']

    """

    def __init__(self, initial: typ.Mapping[str, typ.Any] | None = None) -> None:
        """Seed the store with an optional mapping of initial values."""
        self._data: dict[str, typ.Any] = copy.deepcopy(dict(initial or {}))
        self._locks = KeyedLocks()

    async def get(self, key: str) -> typ.Any:  # noqa: ANN401 - JSON value
        """Return a copy of the value for ``key`` or ``None``."""
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: typ.Any) -> None:  # noqa: ANN401 - JSON value
        """Store a copy of ``value`` under ``key``."""
        if value is None:
            raise StoreValueError.none_value(key)
        self._data[key] = copy.deepcopy(value)
