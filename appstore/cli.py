"""Command-line management of the persisted app repository list."""

from __future__ import annotations

import argparse
import asyncio
import os
import typing as typ

import msgspec
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from appstore.config import ConfigError
from appstore.registry import RegistryError
from appstore.registry.factory import build_registry
from appstore.repositories import RepositoryOperationError, SourceConfigError
from appstore.store import init_store_storage

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from appstore.registry import RepositoryRegistry


async def _cmd_init(registry: RepositoryRegistry, _args: argparse.Namespace) -> None:
    created = await registry.ensure_initialised()
    state = "created" if created else "already present"
    print(f"repository list {state}")


async def _cmd_list(registry: RepositoryRegistry, _args: argparse.Namespace) -> None:
    for url in await registry.list_repositories():
        print(url)


async def _cmd_add(registry: RepositoryRegistry, args: argparse.Namespace) -> None:
    await registry.add_repository(args.url)
    print(f"added {args.url}")


async def _cmd_remove(registry: RepositoryRegistry, args: argparse.Namespace) -> None:
    await registry.remove_repository(args.url)
    print(f"removed {args.url}")


async def _cmd_refresh(registry: RepositoryRegistry, _args: argparse.Namespace) -> None:
    await registry.refresh()
    print(f"refreshed {len(await registry.list_repositories())} repositories")


async def _cmd_registry(
    registry: RepositoryRegistry, _args: argparse.Namespace
) -> None:
    encoded = msgspec.json.encode(await registry.registry())
    print(msgspec.json.format(encoded, indent=2).decode("utf-8"))


_COMMANDS: dict[
    str,
    cabc.Callable[[RepositoryRegistry, argparse.Namespace], cabc.Awaitable[None]],
] = {
    "init": _cmd_init,
    "list": _cmd_list,
    "add": _cmd_add,
    "remove": _cmd_remove,
    "refresh": _cmd_refresh,
    "registry": _cmd_registry,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appstore-repos",
        description="Manage the app repositories tracked by the app store.",
    )
    parser.add_argument(
        "--database-url",
        default=os.environ.get("APPSTORE_DATABASE_URL"),
        help="SQLAlchemy async URL of the store (default: APPSTORE_DATABASE_URL)",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("init", help="Seed the list with the default repository")
    commands.add_parser("list", help="Print repository URLs in order")
    add = commands.add_parser("add", help="Add a repository and refresh it")
    add.add_argument("url")
    remove = commands.add_parser("remove", help="Remove a repository")
    remove.add_argument("url")
    commands.add_parser("refresh", help="Refresh every repository once")
    commands.add_parser("registry", help="Print cached manifests as JSON")
    return parser


async def _run(args: argparse.Namespace) -> int:
    engine = create_async_engine(args.database_url)
    try:
        await init_store_storage(engine)
        registry = build_registry(async_sessionmaker(engine, expire_on_commit=False))
        await _COMMANDS[args.command](registry, args)
    except (RegistryError, RepositoryOperationError) as exc:
        print(f"error: {exc}")
        return 1
    finally:
        await engine.dispose()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run one repository management command.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when the registry rejects the command or
        the configuration is invalid.

    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.database_url:
        parser.error("--database-url or APPSTORE_DATABASE_URL is required")

    try:
        return asyncio.run(_run(args))
    except (ConfigError, SourceConfigError) as exc:
        print(f"configuration error: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
