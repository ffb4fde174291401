"""Per-key asyncio locking shared by the store backends."""

from __future__ import annotations

import asyncio
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from appstore.store.protocol import Reader, Writer


class KeyedLocks:
    """Lazily created ``asyncio.Lock`` instances, one per key."""

    def __init__(self) -> None:
        """Start with no locks; they are created on first use."""
        self._locks: dict[str, asyncio.Lock] = {}

    def for_key(self, key: str) -> asyncio.Lock:
        """Return the lock guarding ``key``."""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock


class ExclusiveAccessMixin:
    """Implement ``with_exclusive_access`` on top of ``get``/``set``.

    The lock is process-local: exclusivity holds for every caller sharing the
    same store instance on one event loop.
    """

    _locks: KeyedLocks
    get: Reader
    set: Writer

    async def with_exclusive_access[T](
        self,
        key: str,
        fn: cabc.Callable[[Reader, Writer], cabc.Awaitable[T]],
    ) -> T:
        """Run ``fn(read, write)`` while holding the lock for ``key``."""
        async with self._locks.for_key(key):
            return await fn(self.get, self.set)
