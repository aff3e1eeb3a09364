"""Exception hierarchy for persistent-set."""

from __future__ import annotations


class PersistentSetError(Exception):
    """Base exception for all persistent-set errors."""


class DecodeError(PersistentSetError):
    """A stored entry could not be decoded back into a member value."""

    def __init__(self, key: str, raw_entry: str) -> None:
        super().__init__(f"Could not decode entry {raw_entry!r} stored under {key!r}")
        self.key = key
        self.raw_entry = raw_entry


class StoreError(PersistentSetError):
    """Raised when a list store backend operation fails."""

    def __init__(self, message: str, key: str = "") -> None:
        super().__init__(message)
        self.key = key


class StoreUnavailableError(StoreError):
    """Reads fail: the backend is unreachable or returned unusable data."""


class StoreWriteError(StoreError):
    """A write or delete did not complete; memory and store may have diverged."""


__all__ = [
    "PersistentSetError",
    "DecodeError",
    "StoreError",
    "StoreUnavailableError",
    "StoreWriteError",
]
