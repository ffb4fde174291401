"""Application factory for the app store Falcon ASGI application.

Usage
-----
Create a health-only app (no registry)::

    app = create_app()

Create a full app with registry endpoints::

    from appstore.api.app import AppDependencies, create_app

    app = create_app(AppDependencies(registry=registry))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from appstore.api.errors import register_error_handlers
from appstore.api.health import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from appstore.registry import RepositoryRegistry

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    registry
        Repository registry backing the domain endpoints. When ``None`` only
        the health endpoints are registered.
    engine
        Engine backing the registry store; its tables are created on
        startup and it is disposed on shutdown.
    manage_lifecycle
        Start and stop the registry with the ASGI lifespan. Disable when the
        caller drives the registry lifecycle itself.

    """

    registry: RepositoryRegistry | None = None
    engine: AsyncEngine | None = None
    manage_lifecycle: bool = True


def create_app(dependencies: AppDependencies | None = None) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or without a
        registry, only ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    registry = deps.registry
    middleware: list[object] = []

    if registry is not None and deps.manage_lifecycle:
        from appstore.api.middleware import RegistryLifecycle

        middleware.append(RegistryLifecycle(registry, deps.engine))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(registry))

    if registry is not None:
        from appstore.api.resources import RegistryResource, RepositoriesResource

        app.add_route("/repositories", RepositoriesResource(registry))
        app.add_route("/registry", RegistryResource(registry))

    register_error_handlers(app)
    return app
