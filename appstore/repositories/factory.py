"""Resolve the repository source backend from configuration."""

from __future__ import annotations

import importlib
import os
import typing as typ

from appstore.repositories.errors import SourceConfigError

if typ.TYPE_CHECKING:
    from appstore.repositories.protocol import SourceFactory


def load_source_factory(path: str) -> SourceFactory:
    """Import a source factory from a ``module:attribute`` path.

    Parameters
    ----------
    path
        Import path such as ``appstore.repositories.static:static_source_factory``.
        The attribute may be dotted to reach nested objects.

    Returns
    -------
    SourceFactory
        Callable mapping a repository URL to a source.

    Raises
    ------
    SourceConfigError
        If the path is malformed, cannot be imported, or is not callable.

    """
    module_name, sep, attribute = path.strip().partition(":")
    if not sep or not module_name or not attribute:
        raise SourceConfigError.invalid_path(path)

    try:
        target: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise SourceConfigError.unresolvable(path, str(exc)) from exc

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise SourceConfigError.unresolvable(path, str(exc)) from exc

    if not callable(target):
        raise SourceConfigError.not_callable(path)
    return typ.cast("SourceFactory", target)


def create_source_factory() -> SourceFactory:
    """Build the source factory named by ``APPSTORE_SOURCE_FACTORY``.

    Raises
    ------
    SourceConfigError
        If the variable is unset or does not resolve to a callable.

    """
    raw_path = os.environ.get("APPSTORE_SOURCE_FACTORY", "").strip()
    if not raw_path:
        raise SourceConfigError.missing_factory()
    return load_source_factory(raw_path)
