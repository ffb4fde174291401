"""Configuration for the repository registry.

Usage
-----
Build a configuration directly:

>>> config = RegistryConfig(default_repository="https://apps.example/index")
>>> config.update_interval_s
300.0

Or load it from the environment:

>>> import os
>>> os.environ["APPSTORE_DEFAULT_REPOSITORY"] = "https://apps.example/index"
>>> os.environ["APPSTORE_UPDATE_INTERVAL"] = "10m"
>>> RegistryConfig.from_env().update_interval_s
600.0

"""

from __future__ import annotations

import dataclasses as dc
import os

from appstore.common.duration import parse_duration

_DEFAULT_UPDATE_INTERVAL_S = 300.0
_DEFAULT_STORE_KEY = "app_repositories"


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""

    @classmethod
    def missing(cls, env_var: str) -> ConfigError:
        """Return an error for a required variable that is unset or blank."""
        return cls(f"{env_var} must be set")

    @classmethod
    def invalid(cls, env_var: str, raw: str, reason: str) -> ConfigError:
        """Return an error for a variable whose value cannot be used."""
        return cls(f"{env_var}={raw!r} is invalid: {reason}")


@dc.dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Settings for :class:`appstore.registry.RepositoryRegistry`.

    Attributes
    ----------
    default_repository
        URL seeded into the repository list the first time the registry
        starts against an empty store.
    update_interval_s
        Seconds between periodic refresh passes. Default is five minutes.
    store_key
        Key under which the repository list is persisted.

    """

    default_repository: str
    update_interval_s: float = _DEFAULT_UPDATE_INTERVAL_S
    store_key: str = _DEFAULT_STORE_KEY

    def __post_init__(self) -> None:
        """Reject configurations the registry cannot run with."""
        if not self.default_repository.strip():
            msg = "default_repository must not be blank"
            raise ValueError(msg)
        if self.update_interval_s <= 0:
            msg = f"update_interval_s must be positive, got: {self.update_interval_s}"
            raise ValueError(msg)
        if not self.store_key:
            msg = "store_key must not be empty"
            raise ValueError(msg)

    @staticmethod
    def _parse_interval(env_var: str) -> float:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return _DEFAULT_UPDATE_INTERVAL_S
        try:
            return parse_duration(raw)
        except ValueError as exc:
            raise ConfigError.invalid(env_var, raw, str(exc)) from exc

    @classmethod
    def from_env(cls) -> RegistryConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``APPSTORE_DEFAULT_REPOSITORY``: Required default repository URL.
        - ``APPSTORE_UPDATE_INTERVAL``: Optional refresh interval as a
          duration string (``"5m"``, ``"90s"``, ``"300"``).
        - ``APPSTORE_STORE_KEY``: Optional persisted key for the list.

        Raises
        ------
        ConfigError
            If the default repository is missing or the interval is invalid.

        """
        default_repository = os.environ.get("APPSTORE_DEFAULT_REPOSITORY", "").strip()
        if not default_repository:
            raise ConfigError.missing("APPSTORE_DEFAULT_REPOSITORY")

        store_key = os.environ.get("APPSTORE_STORE_KEY", "").strip()

        return cls(
            default_repository=default_repository,
            update_interval_s=cls._parse_interval("APPSTORE_UPDATE_INTERVAL"),
            store_key=store_key or _DEFAULT_STORE_KEY,
        )
