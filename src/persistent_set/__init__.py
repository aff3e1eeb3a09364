"""persistent-set: an in-memory set mirrored to a key-value store.

Usage::

    from persistent_set import PersistentSet, MemoryListStore, scalar_codec

    store = MemoryListStore()
    favorites = await PersistentSet.create("favorites", store, codec=scalar_codec(int))
    await favorites.add(42)
"""

from __future__ import annotations

from persistent_set.codecs import STRING_CODEC, Codec, json_codec, model_codec, scalar_codec
from persistent_set.core.config import AppSettings, ObservabilityConfig, StoreConfig
from persistent_set.exceptions import (
    DecodeError,
    PersistentSetError,
    StoreError,
    StoreUnavailableError,
    StoreWriteError,
)
from persistent_set.member_set import MemberSet
from persistent_set.persistent_set import PersistentSet
from persistent_set.stores import FileListStore, IListStore, MemoryListStore, create_store
from persistent_set.string_set import create_string_set

__all__ = [
    "PersistentSet",
    "MemberSet",
    "create_string_set",
    # Codecs
    "Codec",
    "STRING_CODEC",
    "scalar_codec",
    "json_codec",
    "model_codec",
    # Stores
    "IListStore",
    "MemoryListStore",
    "FileListStore",
    "create_store",
    # Settings
    "AppSettings",
    "StoreConfig",
    "ObservabilityConfig",
    # Errors
    "PersistentSetError",
    "DecodeError",
    "StoreError",
    "StoreUnavailableError",
    "StoreWriteError",
]
