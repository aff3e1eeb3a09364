"""Redis-backed list store with async support.

Requires optional dependency: ``pip install persistent-set[redis]``
"""

from __future__ import annotations

import json
import logging
from typing import Any

from persistent_set.exceptions import StoreUnavailableError, StoreWriteError

log = logging.getLogger(__name__)


def _redis_error_type() -> type[Exception]:
    try:
        from redis.exceptions import RedisError  # type: ignore[import-untyped]
    except ImportError:
        raise ImportError(
            "Redis is required for the Redis list store backend. "
            "Install it with: pip install persistent-set[redis]"
        ) from None
    return RedisError


class RedisListStore:
    """Async Redis list store using ``redis.asyncio``.

    Each list is kept as a single JSON-array string value, so replacing it is
    one ``SET`` and an empty list stays distinguishable from a missing key.
    """

    def __init__(self, url: str = "", prefix: str = "pset:", client: Any | None = None) -> None:
        self._url = url or "redis://localhost:6379"
        self._prefix = prefix
        self._client: Any | None = client
        self._owns_client = client is None
        self._error_type = _redis_error_type()

    def _get_client(self) -> Any:
        """Lazy-initialize the Redis async client."""
        if self._client is not None:
            return self._client
        import redis.asyncio as aioredis  # type: ignore[import-untyped]

        self._client = aioredis.from_url(self._url, decode_responses=True)
        return self._client

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get_list(self, key: str) -> list[str] | None:
        client = self._get_client()
        try:
            raw = await client.get(self._full_key(key))
        except self._error_type as exc:
            raise StoreUnavailableError(f"Redis read failed for {key}: {exc}", key=key) from exc
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise StoreUnavailableError(f"Redis value for {key} is not JSON", key=key) from exc
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise StoreUnavailableError(f"Redis value for {key} is not a JSON array of strings", key=key)
        return data

    async def set_list(self, key: str, values: list[str]) -> None:
        client = self._get_client()
        try:
            await client.set(self._full_key(key), json.dumps(list(values)))
        except self._error_type as exc:
            raise StoreWriteError(f"Redis write failed for {key}: {exc}", key=key) from exc
        log.debug("Saved %d entries under %s to redis", len(values), self._full_key(key))

    async def remove(self, key: str) -> None:
        client = self._get_client()
        try:
            await client.delete(self._full_key(key))
        except self._error_type as exc:
            raise StoreWriteError(f"Redis delete failed for {key}: {exc}", key=key) from exc
        log.debug("Removed %s from redis", self._full_key(key))

    async def aclose(self) -> None:
        """Close the client this store created; an injected client is left open."""
        if self._client is None or not self._owns_client:
            return
        client, self._client = self._client, None
        await client.aclose()
        log.debug("Closed redis connection to %s", self._url)
