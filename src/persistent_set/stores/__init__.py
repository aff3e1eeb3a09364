"""Pluggable list store backends: factory + backend implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from persistent_set.stores.file_backend import FileListStore
from persistent_set.stores.memory_backend import MemoryListStore
from persistent_set.stores.protocols import IListStore

if TYPE_CHECKING:
    from persistent_set.core.config import StoreConfig

__all__ = [
    "create_store",
    "IListStore",
    "FileListStore",
    "MemoryListStore",
]


def create_store(settings: object | None = None) -> IListStore:
    """Create a list store from settings.

    Args:
        settings: An ``AppSettings`` or ``StoreConfig`` instance.
            If None, returns an empty MemoryListStore.
    """
    config: StoreConfig | None = None

    if settings is not None:
        config = getattr(settings, "store", None)
        if config is None and hasattr(settings, "backend"):
            config = settings  # type: ignore[assignment]

    if config is None:
        return MemoryListStore()

    backend = config.backend
    if backend == "memory":
        return MemoryListStore()
    elif backend == "file":
        return FileListStore(config.store_path)
    elif backend == "redis":
        from persistent_set.stores.redis_backend import RedisListStore

        return RedisListStore(url=config.redis_url, prefix=config.key_prefix)
    elif backend == "s3":
        from persistent_set.stores.s3_backend import S3ListStore

        return S3ListStore(
            bucket=config.s3_bucket,
            prefix=config.s3_prefix,
            region=config.s3_region,
            kms_key_id=config.kms_key_id,
        )
    else:
        raise ValueError(f"Unknown list store backend: {backend!r}")
