"""Liveness and readiness probe resources.

Usage
-----
::

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(registry))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from appstore.registry import RegistryState

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from appstore.registry import RepositoryRegistry

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe; always answers ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe reflecting the registry lifecycle.

    Without a registry (health-only mode) the service is always ready. With
    one, it is ready only while the registry is running, so traffic is held
    back until the initial refresh pass has completed.
    """

    def __init__(self, registry: RepositoryRegistry | None = None) -> None:
        """Configure the probe with an optional registry."""
        self._registry = registry

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready."""
        if self._registry is None or self._registry.state is RegistryState.RUNNING:
            resp.media = {"status": "ready"}
            resp.status = HTTPStatus.OK
            return

        resp.media = {"status": str(self._registry.state)}
        resp.status = HTTPStatus.SERVICE_UNAVAILABLE
