"""Errors specific to the repository registry."""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for registry errors."""


class UninitializedError(RegistryError):
    """Raised when the persisted repository list does not exist yet."""

    def __init__(self, key: str) -> None:
        """Initialise with the store key that was absent."""
        self.key = key
        super().__init__(f"Repository list {key!r} is not initialised")


class AlreadyExistsError(RegistryError):
    """Raised when adding a repository URL that is already listed."""

    def __init__(self, url: str) -> None:
        """Initialise with the duplicate URL."""
        self.url = url
        super().__init__(f"Repository {url} already exists")


class NotFoundError(RegistryError):
    """Raised when removing a repository URL that is not listed."""

    def __init__(self, url: str) -> None:
        """Initialise with the missing URL."""
        self.url = url
        super().__init__(f"Repository {url} does not exist")


class InvalidRepositoryURLError(RegistryError, ValueError):
    """Raised when a repository URL is empty or blank."""

    def __init__(self, url: str) -> None:
        """Initialise with the rejected value."""
        self.url = url
        super().__init__(f"Invalid repository URL: {url!r}")
