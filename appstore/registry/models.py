"""Value objects produced by the repository registry."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from appstore.repositories import ManifestEntry, RepositoryOperationError


class RegistryState(enum.StrEnum):
    """Lifecycle of a :class:`~appstore.registry.RepositoryRegistry`."""

    UNINITIALISED = "uninitialised"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclasses.dataclass(slots=True, frozen=True)
class RepositoryOutcome:
    """Result of one operation against one repository.

    Exactly one of ``manifests`` and ``error`` is meaningful: a failed
    operation carries its error, a successful read carries its manifests and
    a successful refresh carries neither.
    """

    url: str
    manifests: tuple[ManifestEntry, ...] = ()
    error: RepositoryOperationError | None = None

    @property
    def ok(self) -> bool:
        """Return True when the operation succeeded."""
        return self.error is None


@dataclasses.dataclass(slots=True)
class RefreshSummary:
    """Counts describing one refresh pass."""

    refreshed: int = 0
    failed: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: typ.Iterable[RepositoryOutcome]) -> RefreshSummary:
        """Tally successes and failures from per-repository outcomes."""
        summary = cls()
        for outcome in outcomes:
            if outcome.ok:
                summary.refreshed += 1
            else:
                summary.failed += 1
        return summary
