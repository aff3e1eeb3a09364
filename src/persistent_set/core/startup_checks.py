"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from persistent_set.core.config import AppSettings

log = logging.getLogger(__name__)


def validate_settings(settings: AppSettings) -> None:
    """Validate settings before a store is built. Raises ValueError on fatal misconfig."""
    _check_s3(settings)
    _check_redis(settings)
    _check_memory(settings)


def _check_s3(settings: AppSettings) -> None:
    if settings.store.backend == "s3" and not settings.store.s3_bucket:
        raise ValueError(
            "PSET_STORE_S3_BUCKET is required when PSET_STORE_BACKEND=s3."
        )


def _check_redis(settings: AppSettings) -> None:
    if settings.store.backend == "redis" and not settings.store.redis_url.startswith(
        ("redis://", "rediss://", "unix://")
    ):
        raise ValueError(
            f"PSET_STORE_REDIS_URL must be a redis://, rediss:// or unix:// URL, "
            f"got {settings.store.redis_url!r}."
        )


def _check_memory(settings: AppSettings) -> None:
    """Warn that the memory backend forgets everything on exit."""
    if settings.store.backend == "memory":
        log.warning(
            "PSET_STORE_BACKEND=memory: sets will not survive this process. "
            "Set PSET_STORE_BACKEND=file, redis or s3 for durable storage."
        )
