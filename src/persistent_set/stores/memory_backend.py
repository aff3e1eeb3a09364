"""In-memory list store — dict-backed, ideal for tests."""

from __future__ import annotations

import logging

log = logging.getLogger(__name__)


class MemoryListStore:
    """Stores lists in a plain dict — nothing touches disk."""

    def __init__(self, initial: dict[str, list[str]] | None = None) -> None:
        self._store: dict[str, list[str]] = {k: list(v) for k, v in (initial or {}).items()}

    async def get_list(self, key: str) -> list[str] | None:
        values = self._store.get(key)
        return list(values) if values is not None else None

    async def set_list(self, key: str, values: list[str]) -> None:
        self._store[key] = list(values)
        log.debug("Saved %d entries under %s to memory store", len(values), key)

    async def remove(self, key: str) -> None:
        self._store.pop(key, None)
        log.debug("Removed %s from memory store", key)

    async def aclose(self) -> None:
        """No-op — nothing to release."""
