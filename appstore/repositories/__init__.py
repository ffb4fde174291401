"""App repository sources.

A repository source pulls one app repository into a local cache and reads
app manifests back out of it. The registry only sees the
:class:`RepositorySource` protocol; concrete backends are plugged in through a
:data:`SourceFactory` callable.
"""

from appstore.repositories.errors import (
    RepositoryOperation,
    RepositoryOperationError,
    SourceConfigError,
)
from appstore.repositories.factory import create_source_factory, load_source_factory
from appstore.repositories.protocol import (
    ManifestEntry,
    RepositorySource,
    SourceFactory,
)
from appstore.repositories.static import StaticRepositorySource, StaticSourceFactory

__all__ = [
    "ManifestEntry",
    "RepositoryOperation",
    "RepositoryOperationError",
    "RepositorySource",
    "SourceConfigError",
    "SourceFactory",
    "StaticRepositorySource",
    "StaticSourceFactory",
    "create_source_factory",
    "load_source_factory",
]
