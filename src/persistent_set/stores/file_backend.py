"""File-based list store — one JSON array per key on the local filesystem."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from persistent_set.exceptions import StoreUnavailableError, StoreWriteError

log = logging.getLogger(__name__)


class FileListStore:
    """Stores each key as a JSON file in a local directory.

    Writes land in a temp file first and are moved over the target with
    ``os.replace``, so readers never observe a half-written list. Disk I/O
    runs on a worker thread.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    def _key_path(self, key: str) -> Path:
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self._base / f"{safe_key}.json"

    def _read_sync(self, key: str) -> list[str] | None:
        path = self._key_path(key)
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StoreUnavailableError(f"Could not read {path}: {exc}", key=key) from exc
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise StoreUnavailableError(f"{path} does not hold a JSON array of strings", key=key)
        return data

    def _write_sync(self, key: str, values: list[str]) -> Path:
        path = self._key_path(key)
        tmp_name = ""
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self._base, prefix=".", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(values, fh)
            os.replace(tmp_name, path)
        except OSError as exc:
            raise StoreWriteError(f"Could not write {path}: {exc}", key=key) from exc
        finally:
            # Already gone after a successful replace.
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        return path

    def _remove_sync(self, key: str) -> Path:
        path = self._key_path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StoreWriteError(f"Could not delete {path}: {exc}", key=key) from exc
        return path

    async def get_list(self, key: str) -> list[str] | None:
        return await asyncio.to_thread(self._read_sync, key)

    async def set_list(self, key: str, values: list[str]) -> None:
        path = await asyncio.to_thread(self._write_sync, key, list(values))
        log.debug("Saved %d entries under %s to %s", len(values), key, path)

    async def remove(self, key: str) -> None:
        path = await asyncio.to_thread(self._remove_sync, key)
        log.debug("Removed %s (%s)", key, path)

    async def aclose(self) -> None:
        """No-op — files are closed after every call."""
