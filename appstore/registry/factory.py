"""Assemble a :class:`RepositoryRegistry` from environment configuration.

Usage
-----
::

    from appstore.registry.factory import build_registry

    registry = build_registry(session_factory)

"""

from __future__ import annotations

import typing as typ

from appstore.config import RegistryConfig
from appstore.registry.service import RegistryDependencies, RepositoryRegistry
from appstore.repositories import create_source_factory
from appstore.store import SqlKeyValueStore

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from appstore.repositories import SourceFactory

__all__ = ["build_registry"]


def build_registry(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    config: RegistryConfig | None = None,
    source_factory: SourceFactory | None = None,
) -> RepositoryRegistry:
    """Build a registry backed by the SQL store.

    Parameters
    ----------
    session_factory
        Async session factory for a database initialised with
        :func:`appstore.store.init_store_storage`.
    config
        Registry configuration; read from ``APPSTORE_*`` variables when
        omitted.
    source_factory
        Repository source backend; resolved from ``APPSTORE_SOURCE_FACTORY``
        when omitted.

    Raises
    ------
    ConfigError
        If the registry environment configuration is invalid.
    SourceConfigError
        If no source factory is supplied and none can be loaded.

    """
    dependencies = RegistryDependencies(
        store=SqlKeyValueStore(session_factory),
        source_factory=source_factory or create_source_factory(),
    )
    return RepositoryRegistry(dependencies, config or RegistryConfig.from_env())
