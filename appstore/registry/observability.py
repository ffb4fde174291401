"""Structured log events for the repository registry.

Events are emitted as ``[event.type] key=value ...`` messages through
femtologging so they can be grepped or parsed downstream.

Usage
-----
>>> events = RegistryEventLogger()
>>> events.log_repository_added(url="https://apps.example/index")

"""

from __future__ import annotations

import enum
import typing as typ

from appstore.logging import get_logger, log_error, log_info

if typ.TYPE_CHECKING:
    from appstore.registry.models import RefreshSummary
    from appstore.repositories import RepositoryOperationError

logger = get_logger(__name__)


class RegistryEventType(enum.StrEnum):
    """Structured log event types for registry lifecycle and operations."""

    REGISTRY_STARTED = "registry.started"
    REGISTRY_STOPPED = "registry.stopped"
    REGISTRY_SEEDED = "registry.seeded"
    REFRESH_COMPLETED = "registry.refresh.completed"
    REPOSITORY_REFRESH_FAILED = "registry.repository.refresh_failed"
    REPOSITORY_READ_FAILED = "registry.repository.read_failed"
    REPOSITORY_ADDED = "registry.repository.added"
    REPOSITORY_REMOVED = "registry.repository.removed"


class RegistryEventLogger:
    """Emit structured registry events via femtologging."""

    def log_started(self, *, interval_s: float) -> None:
        """Log that the registry is running and its refresh interval."""
        log_info(
            logger,
            "[%s] interval_s=%s",
            RegistryEventType.REGISTRY_STARTED,
            interval_s,
        )

    def log_stopped(self) -> None:
        """Log that periodic refreshing has been cancelled."""
        log_info(logger, "[%s]", RegistryEventType.REGISTRY_STOPPED)

    def log_seeded(self, *, key: str, url: str) -> None:
        """Log the one-time creation of the repository list."""
        log_info(
            logger,
            "[%s] key=%s url=%s",
            RegistryEventType.REGISTRY_SEEDED,
            key,
            url,
        )

    def log_refresh_completed(self, *, summary: RefreshSummary) -> None:
        """Log the counts of one refresh pass."""
        log_info(
            logger,
            "[%s] refreshed=%d failed=%d",
            RegistryEventType.REFRESH_COMPLETED,
            summary.refreshed,
            summary.failed,
        )

    def log_refresh_failed(self, *, error: RepositoryOperationError) -> None:
        """Log a repository that could not be refreshed.

        Parameters
        ----------
        error
            The wrapped failure, carrying the URL and reason.

        """
        log_error(
            logger,
            "[%s] url=%s error=%s",
            RegistryEventType.REPOSITORY_REFRESH_FAILED,
            error.url,
            error.reason,
            exc_info=error,
        )

    def log_read_failed(self, *, error: RepositoryOperationError) -> None:
        """Log a repository whose manifests could not be read."""
        log_error(
            logger,
            "[%s] url=%s error=%s",
            RegistryEventType.REPOSITORY_READ_FAILED,
            error.url,
            error.reason,
            exc_info=error,
        )

    def log_repository_added(self, *, url: str) -> None:
        """Log a repository appended to the list."""
        log_info(logger, "[%s] url=%s", RegistryEventType.REPOSITORY_ADDED, url)

    def log_repository_removed(self, *, url: str) -> None:
        """Log a repository removed from the list."""
        log_info(logger, "[%s] url=%s", RegistryEventType.REPOSITORY_REMOVED, url)
