"""Nested pydantic-settings configuration for persistent-set.

Each sub-config reads its own ``PSET_<GROUP>_*`` env vars::

    export PSET_STORE_BACKEND=redis
    export PSET_STORE_REDIS_URL=redis://cache:6379/0
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class StoreConfig(BaseSettings):
    """List store backend configuration.

    Env vars use ``PSET_STORE_`` prefix.
    """

    model_config = {"env_prefix": "PSET_STORE_"}

    backend: Literal["memory", "file", "redis", "s3"] = "memory"
    store_path: Path = Path("./sets")
    redis_url: str = "redis://localhost:6379"
    key_prefix: str = "pset:"
    s3_bucket: str = ""
    s3_prefix: str = "sets/"
    s3_region: str = "us-east-2"
    kms_key_id: str = ""


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``PSET_OBSERVABILITY_`` prefix. ``json_logs`` left unset
    means JSON lines whenever stderr is not a terminal.
    """

    model_config = {"env_prefix": "PSET_OBSERVABILITY_"}

    log_level: str = "INFO"
    json_logs: Optional[bool] = None


class AppSettings(BaseSettings):
    """Top-level settings aggregating all sub-configs."""

    store: StoreConfig = StoreConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
