"""Repository registry: the persisted repository list and its refresh loop.

The registry owns one key in a :class:`~appstore.store.KeyValueStore`
holding the ordered list of app repository URLs. It refreshes every listed
repository on a fixed interval, aggregates their manifests on demand, and
serialises additions and removals through the store's exclusive-access
primitive so concurrent mutations never lose an update.

Usage
-----
::

    registry = RepositoryRegistry(
        RegistryDependencies(store=store, source_factory=source_factory),
        RegistryConfig(default_repository="https://apps.example/index"),
    )
    await registry.start()
    apps = await registry.registry()
    await registry.add_repository("https://apps.example/community")
    await registry.stop()

"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import typing as typ

from appstore.logging import get_logger, log_info, log_warning
from appstore.registry.errors import (
    AlreadyExistsError,
    InvalidRepositoryURLError,
    NotFoundError,
    UninitializedError,
)
from appstore.registry.models import RefreshSummary, RegistryState, RepositoryOutcome
from appstore.registry.observability import RegistryEventLogger
from appstore.repositories import RepositoryOperation, RepositoryOperationError
from appstore.scheduling import run_every

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from appstore.config import RegistryConfig
    from appstore.repositories import ManifestEntry, RepositorySource, SourceFactory
    from appstore.scheduling import PeriodicTask, Scheduler
    from appstore.store import KeyValueStore, Reader, Writer

logger = get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class RegistryDependencies:
    """Collaborators required by :class:`RepositoryRegistry`.

    Attributes
    ----------
    store
        Persisted key-value store holding the repository list.
    source_factory
        Builds a repository source from a URL.
    scheduler
        Arms the periodic refresh; defaults to :func:`run_every`.
    event_logger
        Structured event sink for registry lifecycle and failures.

    """

    store: KeyValueStore
    source_factory: SourceFactory
    scheduler: Scheduler = run_every
    event_logger: RegistryEventLogger = dc.field(default_factory=RegistryEventLogger)


def _validate_url(url: str) -> None:
    if not url or not url.strip():
        raise InvalidRepositoryURLError(url)


class RepositoryRegistry:
    """Manage the list of app repositories and the registry built from them.

    Lifecycle is ``UNINITIALISED -> RUNNING -> STOPPED``. Reads and mutations
    stay available in every state once the list exists; only the periodic
    refresh depends on the registry running.

    Parameters
    ----------
    dependencies
        Store, source factory, scheduler and event logger.
    config
        Default repository, refresh interval and store key.

    """

    def __init__(
        self,
        dependencies: RegistryDependencies,
        config: RegistryConfig,
    ) -> None:
        """Configure the registry; nothing is read until :meth:`start`."""
        self._store = dependencies.store
        self._source_factory = dependencies.source_factory
        self._scheduler = dependencies.scheduler
        self._events = dependencies.event_logger
        self._config = config
        self._state = RegistryState.UNINITIALISED
        self._refresh_task: PeriodicTask | None = None
        self._lifecycle_lock = asyncio.Lock()

    @property
    def state(self) -> RegistryState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def config(self) -> RegistryConfig:
        """Return the configuration the registry was built with."""
        return self._config

    async def start(self) -> None:
        """Seed the list if needed, refresh once, then refresh periodically.

        The first periodic tick fires one full interval after the initial
        pass. Calling ``start()`` while already running is a no-op.

        Raises
        ------
        UninitializedError
            If the list vanished between seeding and the initial refresh.

        """
        async with self._lifecycle_lock:
            if self._state is RegistryState.RUNNING:
                log_warning(logger, "Repository registry already running")
                return

            log_info(logger, "Initialising repositories")
            await self.ensure_initialised()
            await self.refresh()
            log_info(logger, "Repositories initialised")

            interval_s = self._config.update_interval_s
            self._refresh_task = self._scheduler(
                interval_s, self.refresh, run_instantly=False
            )
            self._state = RegistryState.RUNNING
            self._events.log_started(interval_s=interval_s)

    async def stop(self) -> None:
        """Cancel periodic refreshing; an in-flight pass runs to completion."""
        async with self._lifecycle_lock:
            task, self._refresh_task = self._refresh_task, None
            if task is None:
                return
            task.cancel()
            self._state = RegistryState.STOPPED
            self._events.log_stopped()

    async def ensure_initialised(self) -> bool:
        """Write ``[default_repository]`` if the list has never been stored.

        Returns
        -------
        bool
            True if this call created the list.

        """
        key = self._config.store_key
        default = self._config.default_repository

        async def seed(read: Reader, write: Writer) -> bool:
            if await read(key) is not None:
                return False
            await write(key, [default])
            return True

        created = await self._store.with_exclusive_access(key, seed)
        if created:
            self._events.log_seeded(key=key, url=default)
        return created

    def _require_list(self, urls: cabc.Sequence[str] | None) -> list[str]:
        if urls is None:
            raise UninitializedError(self._config.store_key)
        return list(urls)

    async def list_repositories(self) -> list[str]:
        """Return the persisted repository URLs in list order.

        Raises
        ------
        UninitializedError
            If the list has never been stored.

        """
        return self._require_list(await self._store.get(self._config.store_key))

    async def list_sources(self) -> list[RepositorySource]:
        """Build one source per persisted URL, preserving list order.

        Raises
        ------
        UninitializedError
            If the list has never been stored.

        """
        return [self._source_factory(url) for url in await self.list_repositories()]

    async def refresh(self) -> None:
        """Refresh every repository in turn, containing per-repository failures.

        Repositories are refreshed sequentially in list order. A failure is
        logged with its URL and the pass moves on to the next repository.

        Raises
        ------
        UninitializedError
            If the list has never been stored.

        """
        sources = await self.list_sources()
        outcomes: list[RepositoryOutcome] = []
        for source in sources:
            outcomes.append(await self._refresh_source(source))
        self._events.log_refresh_completed(
            summary=RefreshSummary.from_outcomes(outcomes)
        )

    async def _refresh_source(self, source: RepositorySource) -> RepositoryOutcome:
        try:
            await source.refresh()
        except Exception as exc:  # noqa: BLE001 - isolate repository failures
            error = RepositoryOperationError.wrap(
                source.url, RepositoryOperation.REFRESH, exc
            )
            self._events.log_refresh_failed(error=error)
            return RepositoryOutcome(source.url, error=error)
        return RepositoryOutcome(source.url)

    async def registry(self) -> list[list[ManifestEntry]]:
        """Return the cached manifests of every readable repository.

        Manifests are read from all repositories concurrently. Repositories
        whose read fails are logged and left out; the remaining entries keep
        the order of the repository list.

        Raises
        ------
        UninitializedError
            If the list has never been stored.

        """
        sources = await self.list_sources()
        outcomes = await asyncio.gather(
            *(self._read_source(source) for source in sources)
        )
        return [list(outcome.manifests) for outcome in outcomes if outcome.ok]

    async def _read_source(self, source: RepositorySource) -> RepositoryOutcome:
        try:
            manifests = await source.read_manifests()
        except Exception as exc:  # noqa: BLE001 - isolate repository failures
            error = RepositoryOperationError.wrap(
                source.url, RepositoryOperation.READ_MANIFESTS, exc
            )
            self._events.log_read_failed(error=error)
            return RepositoryOutcome(source.url, error=error)
        return RepositoryOutcome(source.url, manifests=tuple(manifests))

    async def add_repository(self, url: str) -> None:
        """Append ``url`` to the list and refresh the new repository.

        The list update happens under the store's exclusive-access lock. The
        new repository is refreshed after the lock is released and before
        this method returns.

        Raises
        ------
        InvalidRepositoryURLError
            If ``url`` is empty or blank.
        AlreadyExistsError
            If ``url`` is already listed; the list is left unchanged.
        UninitializedError
            If the list has never been stored.
        RepositoryOperationError
            If the initial refresh of the new repository fails. The URL stays
            listed and is retried on the next periodic pass.

        """
        _validate_url(url)
        key = self._config.store_key

        async def append(read: Reader, write: Writer) -> None:
            urls = self._require_list(await read(key))
            if url in urls:
                raise AlreadyExistsError(url)
            await write(key, list(dict.fromkeys([*urls, url])))

        await self._store.with_exclusive_access(key, append)
        self._events.log_repository_added(url=url)

        source = self._source_factory(url)
        try:
            await source.refresh()
        except Exception as exc:
            error = RepositoryOperationError.wrap(url, RepositoryOperation.REFRESH, exc)
            self._events.log_refresh_failed(error=error)
            if error is exc:
                raise
            raise error from exc

    async def remove_repository(self, url: str) -> None:
        """Remove ``url`` from the list.

        Cached data belonging to the repository is left in place.

        Raises
        ------
        NotFoundError
            If ``url`` is not listed; the list is left unchanged.
        UninitializedError
            If the list has never been stored.

        """
        key = self._config.store_key

        async def drop(read: Reader, write: Writer) -> None:
            urls = self._require_list(await read(key))
            if url not in urls:
                raise NotFoundError(url)
            await write(key, [existing for existing in urls if existing != url])

        await self._store.with_exclusive_access(key, drop)
        self._events.log_repository_removed(url=url)
