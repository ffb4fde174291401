"""Unit tests for adding and removing repositories.

Usage
-----
Run with pytest::

    pytest tests/unit/test_registry_mutations.py

"""

from __future__ import annotations

import asyncio
import typing as typ

import pytest

from appstore.registry import (
    AlreadyExistsError,
    InvalidRepositoryURLError,
    NotFoundError,
    RegistryDependencies,
    RepositoryRegistry,
    UninitializedError,
)
from appstore.repositories import RepositoryOperation, RepositoryOperationError
from tests.helpers.sources import (
    DEFAULT_REPOSITORY,
    FetchError,
    ManualScheduler,
    RepositoryBehaviour,
)

if typ.TYPE_CHECKING:
    from appstore.config import RegistryConfig
    from appstore.store import SqlKeyValueStore
    from tests.helpers.sources import FakeSourceFactory
    from tests.helpers.stores import YieldingMemoryStore

KEY = "app_repositories"
A = "https://a.example"
B = "https://b.example"


class TestAddRepository:
    """Behaviour of add_repository()."""

    @pytest.mark.asyncio
    async def test_add_appends_and_refreshes(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
        source_factory: FakeSourceFactory,
    ) -> None:
        """The URL is appended and refreshed exactly once."""
        await memory_store.set(KEY, [DEFAULT_REPOSITORY])

        await registry.add_repository(A)

        assert await memory_store.get(KEY) == [DEFAULT_REPOSITORY, A], (
            "expected URL appended at the end"
        )
        assert source_factory.refreshed() == [A], "expected one refresh of A"

    @pytest.mark.asyncio
    async def test_duplicate_add_is_rejected(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
        source_factory: FakeSourceFactory,
    ) -> None:
        """A listed URL raises and leaves list and sources untouched."""
        await memory_store.set(KEY, [DEFAULT_REPOSITORY, A])

        with pytest.raises(AlreadyExistsError) as excinfo:
            await registry.add_repository(A)

        assert excinfo.value.url == A, "expected the duplicate URL on the error"
        assert await memory_store.get(KEY) == [DEFAULT_REPOSITORY, A], (
            "expected list unchanged"
        )
        assert source_factory.refreshed() == [], "expected no refresh"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["", "   "])
    async def test_blank_url_is_rejected(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
        url: str,
    ) -> None:
        """Empty or whitespace URLs never reach the store."""
        await memory_store.set(KEY, [])

        with pytest.raises(InvalidRepositoryURLError):
            await registry.add_repository(url)

        assert await memory_store.get(KEY) == [], "expected list unchanged"

    @pytest.mark.asyncio
    async def test_add_before_initialisation_raises(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
    ) -> None:
        """Adding to an absent list does not create it."""
        with pytest.raises(UninitializedError):
            await registry.add_repository(A)

        assert await memory_store.get(KEY) is None, "expected list still absent"

    @pytest.mark.asyncio
    async def test_failed_initial_refresh_keeps_url(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
        source_factory: FakeSourceFactory,
    ) -> None:
        """A refresh failure propagates while the URL stays listed."""
        await memory_store.set(KEY, [])
        cause = FetchError("404 Not Found")
        source_factory.behaviours[A] = RepositoryBehaviour(refresh_error=cause)

        with pytest.raises(RepositoryOperationError) as excinfo:
            await registry.add_repository(A)

        error = excinfo.value
        assert error.url == A, "expected failing URL on the error"
        assert error.operation is RepositoryOperation.REFRESH, "expected refresh op"
        assert error.__cause__ is cause, "expected original error chained"
        assert await memory_store.get(KEY) == [A], "expected URL to stay listed"


class TestRemoveRepository:
    """Behaviour of remove_repository()."""

    @pytest.mark.asyncio
    async def test_remove_deletes_url(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
    ) -> None:
        """Only the named URL is removed and order is preserved."""
        await memory_store.set(KEY, [DEFAULT_REPOSITORY, A, B])

        await registry.remove_repository(A)

        assert await memory_store.get(KEY) == [DEFAULT_REPOSITORY, B], (
            "expected A removed"
        )

    @pytest.mark.asyncio
    async def test_remove_missing_url_raises(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
    ) -> None:
        """Removing an unlisted URL raises and leaves the list alone."""
        await memory_store.set(KEY, [DEFAULT_REPOSITORY])

        with pytest.raises(NotFoundError) as excinfo:
            await registry.remove_repository(A)

        assert excinfo.value.url == A, "expected missing URL on the error"
        assert await memory_store.get(KEY) == [DEFAULT_REPOSITORY], (
            "expected list unchanged"
        )

    @pytest.mark.asyncio
    async def test_remove_default_repository_is_allowed(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
    ) -> None:
        """The default repository can be removed and is not re-seeded."""
        await memory_store.set(KEY, [DEFAULT_REPOSITORY])

        await registry.remove_repository(DEFAULT_REPOSITORY)
        await registry.ensure_initialised()

        assert await memory_store.get(KEY) == [], "expected list to stay empty"

    @pytest.mark.asyncio
    async def test_remove_before_initialisation_raises(
        self,
        registry: RepositoryRegistry,
    ) -> None:
        """Removing from an absent list is reported."""
        with pytest.raises(UninitializedError):
            await registry.remove_repository(A)


class TestConcurrentMutations:
    """Mutations serialised through the store's exclusive access."""

    @pytest.mark.asyncio
    async def test_concurrent_adds_lose_nothing_in_memory(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
    ) -> None:
        """Every concurrently added URL ends up in the list exactly once."""
        await memory_store.set(KEY, [])
        urls = [f"https://repo-{index}.example" for index in range(10)]

        await asyncio.gather(*(registry.add_repository(url) for url in urls))

        stored = await memory_store.get(KEY)
        assert sorted(stored) == sorted(urls), "expected no lost update"
        assert len(stored) == len(set(stored)), "expected no duplicates"

    @pytest.mark.asyncio
    async def test_concurrent_adds_lose_nothing_in_sql(
        self,
        sql_store: SqlKeyValueStore,
        source_factory: FakeSourceFactory,
        registry_config: RegistryConfig,
    ) -> None:
        """The SQL store serialises concurrent adds the same way."""
        sql_registry = RepositoryRegistry(
            RegistryDependencies(
                store=sql_store,
                source_factory=source_factory,
                scheduler=ManualScheduler(),
            ),
            registry_config,
        )
        await sql_store.set(KEY, [])
        urls = [f"https://repo-{index}.example" for index in range(5)]

        await asyncio.gather(*(sql_registry.add_repository(url) for url in urls))

        stored = await sql_store.get(KEY)
        assert sorted(stored) == sorted(urls), "expected no lost update"

    @pytest.mark.asyncio
    async def test_concurrent_add_and_remove(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
    ) -> None:
        """A remove racing an add never resurrects or drops the wrong URL."""
        await memory_store.set(KEY, [DEFAULT_REPOSITORY])

        await asyncio.gather(
            registry.add_repository(A),
            registry.remove_repository(DEFAULT_REPOSITORY),
        )

        assert await memory_store.get(KEY) == [A], "expected both mutations applied"

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_adds(
        self,
        registry: RepositoryRegistry,
        memory_store: YieldingMemoryStore,
    ) -> None:
        """Of two identical concurrent adds exactly one succeeds."""
        await memory_store.set(KEY, [])

        results = await asyncio.gather(
            registry.add_repository(A),
            registry.add_repository(A),
            return_exceptions=True,
        )

        errors = [result for result in results if isinstance(result, Exception)]
        assert len(errors) == 1, f"expected one rejection, got {results}"
        assert isinstance(errors[0], AlreadyExistsError), "expected AlreadyExists"
        assert await memory_store.get(KEY) == [A], "expected a single entry"
