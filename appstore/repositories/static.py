"""In-memory repository source backend.

Serves manifests from a mapping held in memory instead of fetching anything.
It is the development backend for the runtime and the workhorse of the test
suite. Point ``APPSTORE_SOURCE_FACTORY`` at
``appstore.repositories.static:static_source_factory`` to run the service
with every repository reporting an empty app list.

Examples
--------
>>> factory = StaticSourceFactory({"https://apps.example/index": [{"id": "demo"}]})
>>> source = factory("https://apps.example/index")
>>> await source.refresh()
>>> await source.read_manifests()
[{'id': 'demo'}]

"""

from __future__ import annotations

import collections
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from appstore.repositories.protocol import ManifestEntry


class StaticRepositorySource:
    """Repository source answering from its factory's catalogue."""

    def __init__(self, url: str, factory: StaticSourceFactory) -> None:
        """Bind the source to ``url`` and the factory that owns its state."""
        self.url = url
        self._factory = factory

    async def refresh(self) -> None:
        """Record the refresh; there is nothing to fetch."""
        self._factory.refresh_counts[self.url] += 1

    async def read_manifests(self) -> list[ManifestEntry]:
        """Return the manifests catalogued for this URL, if any."""
        return list(self._factory.catalogue.get(self.url, ()))

    def __repr__(self) -> str:
        """Return a debug representation naming the URL."""
        return f"StaticRepositorySource({self.url!r})"


class StaticSourceFactory:
    """Callable building :class:`StaticRepositorySource` handles.

    Attributes
    ----------
    catalogue
        Manifests served per repository URL. Unknown URLs serve no apps.
    refresh_counts
        How many times each URL has been refreshed through this factory.

    """

    def __init__(
        self,
        catalogue: cabc.Mapping[str, cabc.Sequence[ManifestEntry]] | None = None,
    ) -> None:
        """Create a factory serving ``catalogue``."""
        self.catalogue: dict[str, list[ManifestEntry]] = {
            url: list(entries) for url, entries in (catalogue or {}).items()
        }
        self.refresh_counts: collections.Counter[str] = collections.Counter()

    def __call__(self, url: str) -> StaticRepositorySource:
        """Return a source for ``url``."""
        return StaticRepositorySource(url, self)


static_source_factory = StaticSourceFactory()
