"""Repository source protocol."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

type ManifestEntry = cabc.Mapping[str, typ.Any]
type SourceFactory = cabc.Callable[[str], RepositorySource]


@typ.runtime_checkable
class RepositorySource(typ.Protocol):
    """Handle on one app repository, identified by its URL.

    Sources are cheap, short-lived objects built from a URL each time the
    registry reads its repository list. Whatever cache a source maintains
    lives outside the object.

    Implementations should:

    - leave previously cached state intact when ``refresh`` fails
    - answer ``read_manifests`` from the local cache without network access
    - raise on failure rather than returning partial results

    """

    url: str

    async def refresh(self) -> None:
        """Pull the repository and update its local cache."""
        ...

    async def read_manifests(self) -> cabc.Sequence[ManifestEntry]:
        """Return one manifest per app found in the cached repository."""
        ...
