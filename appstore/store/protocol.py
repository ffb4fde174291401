"""Key-value store protocol consumed by the repository registry."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

type Reader = cabc.Callable[[str], cabc.Awaitable[typ.Any]]
type Writer = cabc.Callable[[str, typ.Any], cabc.Awaitable[None]]


@typ.runtime_checkable
class KeyValueStore(typ.Protocol):
    """Durable key-value storage with per-key exclusive access.

    ``get`` returns ``None`` for keys that were never written, so ``None`` is
    not a storable value. ``with_exclusive_access`` is the only safe way to
    compose a read-modify-write sequence: no two calls for the same key run
    their callbacks concurrently.

    Examples
    --------
    >>> async def append(read: Reader, write: Writer) -> None:
    ...     items = await read("items") or []
    ...     await write("items", [*items, "new"])
    >>> await store.with_exclusive_access("items", append)

    """

    async def get(self, key: str) -> typ.Any:  # noqa: ANN401 - JSON value
        """Return the stored value for ``key`` or ``None`` when absent."""
        ...

    async def set(self, key: str, value: typ.Any) -> None:  # noqa: ANN401 - JSON value
        """Durably overwrite the value stored for ``key``."""
        ...

    async def with_exclusive_access[T](
        self,
        key: str,
        fn: cabc.Callable[[Reader, Writer], cabc.Awaitable[T]],
    ) -> T:
        """Run ``fn(read, write)`` while holding the lock for ``key``."""
        ...
