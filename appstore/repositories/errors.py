"""Errors raised while operating on individual repositories."""

from __future__ import annotations

import enum


class RepositoryOperation(enum.StrEnum):
    """Operations the registry performs against a repository source."""

    REFRESH = "refresh"
    READ_MANIFESTS = "read_manifests"


class RepositoryOperationError(Exception):
    """Raised when a single repository cannot be refreshed or read.

    The registry wraps whatever a source raises in this error so failures
    carry the repository URL and the operation that failed.

    Attributes
    ----------
    url
        Repository URL the operation targeted.
    operation
        Which source operation failed.
    reason
        Text of the underlying error.

    """

    def __init__(self, url: str, operation: RepositoryOperation, reason: str) -> None:
        """Record the failing repository, operation and reason."""
        self.url = url
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed for {url}: {reason}")

    @classmethod
    def wrap(
        cls, url: str, operation: RepositoryOperation, exc: Exception
    ) -> RepositoryOperationError:
        """Return ``exc`` unchanged if already wrapped, else wrap it."""
        if isinstance(exc, RepositoryOperationError):
            return exc
        error = cls(url, operation, str(exc) or type(exc).__name__)
        error.__cause__ = exc
        return error


class SourceConfigError(Exception):
    """Raised when the repository source backend cannot be configured."""

    @classmethod
    def missing_factory(cls) -> SourceConfigError:
        """Return an error for an unset ``APPSTORE_SOURCE_FACTORY``."""
        return cls("APPSTORE_SOURCE_FACTORY must be set to 'module:attribute'")

    @classmethod
    def invalid_path(cls, path: str) -> SourceConfigError:
        """Return an error for an import path without ``module:attribute``."""
        return cls(f"Invalid source factory path {path!r}; expected 'module:attribute'")

    @classmethod
    def unresolvable(cls, path: str, reason: str) -> SourceConfigError:
        """Return an error for an import path that cannot be loaded."""
        return cls(f"Cannot load source factory {path!r}: {reason}")

    @classmethod
    def not_callable(cls, path: str) -> SourceConfigError:
        """Return an error for a path that does not name a callable."""
        return cls(f"Source factory {path!r} is not callable")
