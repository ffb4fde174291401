"""App store runtime entrypoint.

This module provides the ASGI application factory served by Granian. It
delegates to :func:`appstore.api.app.create_app` while keeping the
``appstore.runtime:create_app`` entrypoint stable.

When ``APPSTORE_DATABASE_URL`` is set, the runtime builds the repository
registry (SQL store plus the configured source backend) and the app serves
the registry endpoints. Otherwise it starts in health-only mode.

Configuration is driven by environment variables:

- ``APPSTORE_HOST``: Bind address (default ``0.0.0.0``)
- ``APPSTORE_PORT``: Listen port (default ``8080``)
- ``APPSTORE_LOG_LEVEL``: Log level (default ``INFO``)
- ``APPSTORE_DATABASE_URL``: Database URL (optional; enables the registry)
- ``APPSTORE_SOURCE_FACTORY``: ``module:attribute`` of the source backend
- ``APPSTORE_DEFAULT_REPOSITORY``, ``APPSTORE_UPDATE_INTERVAL``,
  ``APPSTORE_STORE_KEY``: see :class:`appstore.config.RegistryConfig`

Run the service directly with ``python -m appstore.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from appstore.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid APPSTORE_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment.

    Returns
    -------
    falcon.asgi.App
        Health-only app when ``APPSTORE_DATABASE_URL`` is unset, otherwise an
        app whose lifespan starts and stops the repository registry.

    Raises
    ------
    ConfigError
        If the registry configuration is invalid.
    SourceConfigError
        If ``APPSTORE_SOURCE_FACTORY`` is missing or cannot be loaded.

    """
    from appstore.api.app import AppDependencies
    from appstore.api.app import create_app as _create_api_app

    database_url = os.environ.get("APPSTORE_DATABASE_URL")
    if database_url is None:
        return _create_api_app()

    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from appstore.registry.factory import build_registry

    engine = create_async_engine(database_url)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    registry = build_registry(session_factory)

    return _create_api_app(AppDependencies(registry=registry, engine=engine))


def main() -> None:
    """Start the app store runtime server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("APPSTORE_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("APPSTORE_PORT", "8080"))
    log_level_str = os.environ.get("APPSTORE_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid APPSTORE_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting app store runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "appstore.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
