"""Falcon error handlers translating registry errors into HTTP responses.

Usage
-----
Register every handler on the Falcon app::

    from appstore.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from appstore.registry import (
    AlreadyExistsError,
    InvalidRepositoryURLError,
    NotFoundError,
    UninitializedError,
)
from appstore.repositories import RepositoryOperationError

if typ.TYPE_CHECKING:
    from falcon.asgi import App, Request, Response

__all__ = [
    "InvalidInputError",
    "handle_already_exists",
    "handle_invalid_input",
    "handle_invalid_url",
    "handle_not_found",
    "handle_repository_operation",
    "handle_uninitialized",
    "register_error_handlers",
]


class InvalidInputError(Exception):
    """Raised for request bodies that should map to HTTP 400.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.

    """

    def __init__(self, reason: str) -> None:
        """Initialise with the validation failure reason."""
        self.reason = reason
        super().__init__(reason)


def _problem(resp: Response, status: str, title: str, description: str) -> None:
    resp.status = status
    resp.media = {"title": title, "description": description}


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to HTTP 400."""
    _problem(resp, falcon.HTTP_400, "Invalid input", ex.reason)


async def handle_invalid_url(
    _req: Request,
    resp: Response,
    ex: InvalidRepositoryURLError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidRepositoryURLError`` to HTTP 400."""
    _problem(resp, falcon.HTTP_400, "Invalid input", str(ex))


async def handle_already_exists(
    _req: Request,
    resp: Response,
    ex: AlreadyExistsError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AlreadyExistsError`` to HTTP 409."""
    _problem(resp, falcon.HTTP_409, "Repository already exists", str(ex))


async def handle_not_found(
    _req: Request,
    resp: Response,
    ex: NotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``NotFoundError`` to HTTP 404."""
    _problem(resp, falcon.HTTP_404, "Repository not found", str(ex))


async def handle_uninitialized(
    _req: Request,
    resp: Response,
    ex: UninitializedError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``UninitializedError`` to HTTP 503; the registry has not started."""
    _problem(resp, falcon.HTTP_503, "Registry not initialised", str(ex))


async def handle_repository_operation(
    _req: Request,
    resp: Response,
    ex: RepositoryOperationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``RepositoryOperationError`` to HTTP 502.

    The request itself succeeded in changing the list; only the upstream
    repository could not be reached or parsed.
    """
    _problem(resp, falcon.HTTP_502, "Repository operation failed", str(ex))


def register_error_handlers(app: App) -> None:
    """Register all registry error handlers on ``app``."""
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(InvalidRepositoryURLError, handle_invalid_url)
    app.add_error_handler(AlreadyExistsError, handle_already_exists)
    app.add_error_handler(NotFoundError, handle_not_found)
    app.add_error_handler(UninitializedError, handle_uninitialized)
    app.add_error_handler(RepositoryOperationError, handle_repository_operation)
