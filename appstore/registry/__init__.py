"""Repository registry for app store sources.

The registry keeps the ordered list of app repository URLs in a persisted
key-value store. It provides:

- A periodic refresh of every listed repository, isolating failures
- An aggregate view of all repositories' cached app manifests
- Serialised addition and removal of repositories

Usage
-----
Start the registry and read the aggregate::

    from appstore.registry import RegistryDependencies, RepositoryRegistry

    registry = RepositoryRegistry(
        RegistryDependencies(store=store, source_factory=source_factory),
        config,
    )
    await registry.start()
    for manifests in await registry.registry():
        print(len(manifests))

Manage repositories::

    await registry.add_repository("https://apps.example/community")
    await registry.remove_repository("https://apps.example/community")

"""

from appstore.registry.errors import (
    AlreadyExistsError,
    InvalidRepositoryURLError,
    NotFoundError,
    RegistryError,
    UninitializedError,
)
from appstore.registry.models import RefreshSummary, RegistryState, RepositoryOutcome
from appstore.registry.observability import RegistryEventLogger, RegistryEventType
from appstore.registry.service import RegistryDependencies, RepositoryRegistry

__all__ = [
    "AlreadyExistsError",
    "InvalidRepositoryURLError",
    "NotFoundError",
    "RefreshSummary",
    "RegistryDependencies",
    "RegistryError",
    "RegistryEventLogger",
    "RegistryEventType",
    "RegistryState",
    "RepositoryOutcome",
    "RepositoryRegistry",
    "UninitializedError",
]
