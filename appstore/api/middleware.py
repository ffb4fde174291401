"""ASGI lifespan middleware tying the registry to the server lifecycle."""

from __future__ import annotations

import typing as typ

from appstore.logging import get_logger, log_info
from appstore.store import init_store_storage

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from appstore.registry import RepositoryRegistry

__all__ = ["RegistryLifecycle"]

logger = get_logger(__name__)


class RegistryLifecycle:
    """Start the registry on ASGI startup and stop it on shutdown.

    Startup blocks until the initial refresh pass completes, so the server
    only accepts traffic once every repository has been visited once.

    Parameters
    ----------
    registry
        Registry whose lifecycle follows the application's.
    engine
        Optional engine backing the registry's store. When given, the store
        tables are created before the registry starts and the engine is
        disposed after it stops.

    """

    def __init__(
        self,
        registry: RepositoryRegistry,
        engine: AsyncEngine | None = None,
    ) -> None:
        """Bind the middleware to ``registry`` and its optional engine."""
        self._registry = registry
        self._engine = engine

    async def process_startup(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Prepare storage and start the registry when the server starts."""
        if self._engine is not None:
            await init_store_storage(self._engine)
        log_info(logger, "Starting repository registry")
        await self._registry.start()

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Stop periodic refreshing when the server shuts down."""
        log_info(logger, "Stopping repository registry")
        await self._registry.stop()
        if self._engine is not None:
            await self._engine.dispose()
