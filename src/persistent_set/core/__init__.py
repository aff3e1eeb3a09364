"""Configuration and startup checks."""

from __future__ import annotations

from persistent_set.core.config import AppSettings, ObservabilityConfig, StoreConfig
from persistent_set.core.startup_checks import validate_settings

__all__ = ["AppSettings", "ObservabilityConfig", "StoreConfig", "validate_settings"]
