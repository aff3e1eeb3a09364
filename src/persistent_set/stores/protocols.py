"""List store protocol — the contract every backend implements."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IListStore(Protocol):
    """Protocol for key-value stores holding one list of strings per key."""

    async def get_list(self, key: str) -> list[str] | None:
        """Return the list stored under ``key``, or None if the key was never written."""
        ...

    async def set_list(self, key: str, values: list[str]) -> None:
        """Atomically replace whatever is stored under ``key`` with ``values``."""
        ...

    async def remove(self, key: str) -> None:
        """Delete ``key`` entirely (no-op if not found)."""
        ...

    async def aclose(self) -> None:
        """Release any connections the store opened itself."""
        ...
