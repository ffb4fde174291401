"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from appstore.config import RegistryConfig
from appstore.registry import RegistryDependencies, RepositoryRegistry
from appstore.store import SqlKeyValueStore, init_store_storage
from tests.helpers.sources import (
    DEFAULT_REPOSITORY,
    FakeSourceFactory,
    ManualScheduler,
)
from tests.helpers.stores import YieldingMemoryStore

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> typ.AsyncIterator[AsyncEngine]:
    """Yield an aiosqlite engine with the store tables created."""
    sqlite_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'appstore_test.db'}"
    )
    try:
        await init_store_storage(sqlite_engine)
        yield sqlite_engine
    finally:
        await sqlite_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return a session factory bound to the test database."""
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def sql_store(session_factory: async_sessionmaker[AsyncSession]) -> SqlKeyValueStore:
    """Return a SQL-backed store on the test database."""
    return SqlKeyValueStore(session_factory)


@pytest.fixture
def memory_store() -> YieldingMemoryStore:
    """Return an empty in-memory store that yields on every call."""
    return YieldingMemoryStore()


@pytest.fixture
def source_factory() -> FakeSourceFactory:
    """Return a fake source factory with no scripted failures."""
    return FakeSourceFactory()


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Return a scheduler whose ticks are fired by hand."""
    return ManualScheduler()


@pytest.fixture
def registry_config() -> RegistryConfig:
    """Return a registry configuration seeding the example repository."""
    return RegistryConfig(default_repository=DEFAULT_REPOSITORY, update_interval_s=60)


@pytest.fixture
def registry(
    memory_store: YieldingMemoryStore,
    source_factory: FakeSourceFactory,
    scheduler: ManualScheduler,
    registry_config: RegistryConfig,
) -> RepositoryRegistry:
    """Return a registry wired to the memory store and fake sources."""
    return RepositoryRegistry(
        RegistryDependencies(
            store=memory_store,
            source_factory=source_factory,
            scheduler=scheduler,
        ),
        registry_config,
    )
