"""Registry API resources.

Routes
------
``GET /repositories``
    List repository URLs in persisted order.
``POST /repositories``
    Add a repository; body ``{"url": "..."}``.
``DELETE /repositories``
    Remove a repository; body ``{"url": "..."}``.
``GET /registry``
    Aggregate cached manifests of every readable repository.

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

from appstore.api.errors import InvalidInputError

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from appstore.registry import RepositoryRegistry

__all__ = ["RegistryResource", "RepositoriesResource", "RepositoryPayload"]


class RepositoryPayload(msgspec.Struct, forbid_unknown_fields=True):
    """Request body naming one repository."""

    url: str


async def _read_payload(req: Request) -> RepositoryPayload:
    """Decode the request body into a :class:`RepositoryPayload`.

    Raises
    ------
    InvalidInputError
        If the body is missing, not JSON, or does not match the payload.

    """
    body = await req.stream.read()
    try:
        return msgspec.json.decode(body, type=RepositoryPayload)
    except msgspec.DecodeError as exc:
        raise InvalidInputError(str(exc) or "request body is required") from exc


class RepositoriesResource:
    """Collection resource for the persisted repository list."""

    def __init__(self, registry: RepositoryRegistry) -> None:
        """Bind the resource to ``registry``."""
        self._registry = registry

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Return ``{"repositories": [...]}``."""
        resp.media = {"repositories": await self._registry.list_repositories()}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: Request, resp: Response) -> None:
        """Add the repository named in the body and refresh it."""
        payload = await _read_payload(req)
        await self._registry.add_repository(payload.url)
        resp.media = {"url": payload.url}
        resp.status = falcon.HTTP_201

    async def on_delete(self, req: Request, resp: Response) -> None:
        """Remove the repository named in the body."""
        payload = await _read_payload(req)
        await self._registry.remove_repository(payload.url)
        resp.status = falcon.HTTP_204


class RegistryResource:
    """Read-only aggregate of cached manifests."""

    def __init__(self, registry: RepositoryRegistry) -> None:
        """Bind the resource to ``registry``."""
        self._registry = registry

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Return ``{"registry": [[manifest, ...], ...]}``."""
        resp.media = {"registry": await self._registry.registry()}
        resp.status = falcon.HTTP_200
