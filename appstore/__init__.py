"""App store repository registry service.

``appstore`` keeps the list of app repositories an app store tracks, keeps
each repository's cached metadata fresh on a fixed interval, and serves the
aggregate registry of app manifests over HTTP.

Subpackages
-----------
store
    Persisted key-value storage with per-key exclusive access.
repositories
    Repository source protocol and backends.
registry
    The repository registry: refresh loop, aggregation and mutations.
api
    Falcon ASGI application exposing the registry.

"""

from appstore.config import RegistryConfig
from appstore.registry import RegistryDependencies, RepositoryRegistry

__all__ = ["RegistryConfig", "RegistryDependencies", "RepositoryRegistry"]
