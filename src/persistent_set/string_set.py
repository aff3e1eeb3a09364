"""Convenience constructor for sets of plain strings."""

from __future__ import annotations

from typing import Iterable, Optional

from persistent_set.codecs import STRING_CODEC
from persistent_set.persistent_set import PersistentSet
from persistent_set.stores.protocols import IListStore


async def create_string_set(
    key: str,
    store: IListStore,
    seed_if_empty: Optional[Iterable[str]] = None,
) -> PersistentSet[str]:
    """Load or seed a set of strings stored verbatim under ``key``."""
    return await PersistentSet.create(
        key,
        store,
        codec=STRING_CODEC,
        seed_if_empty=seed_if_empty,
    )
