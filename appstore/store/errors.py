"""Errors raised by key-value store backends."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for store errors."""


class StoreValueError(StoreError, ValueError):
    """Raised when a value cannot be persisted."""

    @classmethod
    def none_value(cls, key: str) -> StoreValueError:
        """Return an error for an attempt to persist ``None``."""
        return cls(f"Cannot store None under {key!r}; None marks an absent key")

    @classmethod
    def unencodable(cls, key: str, reason: str) -> StoreValueError:
        """Return an error for a value msgspec cannot encode."""
        return cls(f"Cannot encode value for {key!r}: {reason}")


class StoreDecodeError(StoreError):
    """Raised when a persisted value cannot be decoded."""

    def __init__(self, key: str) -> None:
        """Record the key whose stored payload is corrupt."""
        self.key = key
        super().__init__(f"Stored value for {key!r} is not valid JSON")
