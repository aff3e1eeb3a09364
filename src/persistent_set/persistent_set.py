"""A set of values mirrored to a list store so it survives process restarts.

The in-memory members are the single source of truth while an instance is
alive; the store only ever holds the full encoding of the members as of the
last size-changing mutation, or nothing at all after ``clear()``.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, Hashable, Iterable, Iterator, Optional, TypeVar

from persistent_set.codecs import Codec
from persistent_set.exceptions import DecodeError
from persistent_set.member_set import MemberSet, same
from persistent_set.stores.protocols import IListStore

log = logging.getLogger(__name__)

T = TypeVar("T")


def _resolve_codec(
    encode: Optional[Callable[[T], str]],
    decode: Optional[Callable[[str], T]],
    codec: Optional[Codec[T]],
) -> tuple[Callable[[T], str], Callable[[str], T]]:
    if codec is not None:
        if encode is not None or decode is not None:
            raise ValueError("Pass either codec= or encode=/decode=, not both")
        return codec.encode, codec.decode
    if encode is None or decode is None:
        raise ValueError("Both encode= and decode= are required when no codec= is given")
    return encode, decode


def _decode_all(key: str, raw: list[str], decode: Callable[[str], T]) -> list[T]:
    """Decode every stored entry; one bad entry fails the whole load."""
    values: list[T] = []
    for entry in raw:
        try:
            values.append(decode(entry))
        except Exception as exc:
            raise DecodeError(key, entry) from exc
    return values


class PersistentSet(Generic[T]):
    """Set of ``T`` persisted as a list of strings under one store key.

    Build instances with :meth:`create`; the constructor expects members that
    are already loaded.

    Members are unique by ``identity(value)``, which defaults to the value
    itself (``__eq__``/``__hash__``). Every mutation that changes the size
    rewrites the whole list in the store before returning; mutations that
    change nothing never touch the store.

    Each instance assumes it is the only writer of its key. Two instances on
    the same key are not reconciled: whichever writes last wins.
    """

    def __init__(
        self,
        key: str,
        store: IListStore,
        members: MemberSet[T],
        encode: Callable[[T], str],
        decode: Callable[[str], T],
    ) -> None:
        self._key = key
        self._store = store
        self._members = members
        self._encode = encode
        self._decode = decode

    @classmethod
    async def create(
        cls,
        key: str,
        store: IListStore,
        *,
        encode: Optional[Callable[[T], str]] = None,
        decode: Optional[Callable[[str], T]] = None,
        codec: Optional[Codec[T]] = None,
        seed_if_empty: Optional[Iterable[T]] = None,
        identity: Optional[Callable[[T], Hashable]] = None,
    ) -> PersistentSet[T]:
        """Load the set stored at ``key``, or seed it if the key was never written.

        Args:
            key: Store key holding the encoded members.
            store: Backend implementing ``IListStore``.
            encode: Converts a member to its stored string.
            decode: Inverse of ``encode``.
            codec: A ``Codec`` bundling ``encode`` and ``decode``.
            seed_if_empty: Initial members, used only when ``key`` is absent.
                They are written to the store before this returns.
            identity: Optional equality capability. Two members are the same
                element iff their identities are equal, which allows
                unhashable member types.

        Raises:
            DecodeError: A stored entry could not be decoded.
            StoreError: The store could not be read, or the seed not written.
        """
        encode, decode = _resolve_codec(encode, decode, codec)
        members: MemberSet[T] = MemberSet(identity=identity or same)

        raw = await store.get_list(key)
        if raw is not None:
            members |= _decode_all(key, raw, decode)
            log.debug("Loaded %d members from %s", len(members), key)
        elif seed_if_empty is not None:
            members |= seed_if_empty
            await store.set_list(key, [encode(v) for v in members])
            log.debug("Seeded %s with %d members", key, len(members))

        return cls(key, store, members, encode, decode)

    @property
    def key(self) -> str:
        return self._key

    @property
    def length(self) -> int:
        return len(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, value: object) -> bool:
        return value in self._members

    def __iter__(self) -> Iterator[T]:
        # Snapshot, so callers may mutate the set while iterating.
        return iter(list(self._members))

    def __repr__(self) -> str:
        return f"PersistentSet(key={self._key!r}, size={len(self._members)})"

    def contains(self, value: T) -> bool:
        """In-memory membership check; never touches the store."""
        return value in self._members

    def lookup(self, value: T) -> Optional[T]:
        """Return the stored member equal to ``value`` (not ``value`` itself), or None."""
        return self._members.lookup(value)

    async def to_set(self, *, reload: bool = False) -> MemberSet[T]:
        """Return a copy of the members as a ``MemberSet``.

        The copy uses the same identity as this set, so it holds unhashable
        members too and compares equal to a builtin ``set`` of the same
        elements. Changing it never affects this instance or the store.

        With ``reload=True`` the store is read and decoded instead, which
        shows writes made by other instances on the same key. The reloaded
        view is not merged into this instance.

        Raises:
            DecodeError: ``reload=True`` and a stored entry could not be decoded.
        """
        if not reload:
            return self._members.copy()

        raw = await self._store.get_list(self._key)
        if raw is None:
            return MemberSet(identity=self._members.identity)
        return MemberSet(_decode_all(self._key, raw, self._decode), self._members.identity)

    async def add(self, value: T) -> bool:
        """Add ``value``. Returns True if it was not already present.

        The full set is persisted only when ``value`` was new.
        """
        before = len(self._members)
        self._members.add(value)
        if len(self._members) == before:
            return False
        await self._persist()
        return True

    async def add_all(self, values: Iterable[T]) -> None:
        """Add every value, persisting at most once.

        No write happens when ``values`` is empty or already fully present.
        """
        before = len(self._members)
        self._members |= values
        if len(self._members) != before:
            await self._persist()

    async def remove(self, value: T) -> bool:
        """Remove ``value``. Returns True if it was present.

        Values that cannot be members (unhashable, or equal to nothing) are a
        no-op returning False.
        """
        if value not in self._members:
            return False
        self._members.discard(value)
        await self._persist()
        return True

    async def remove_where(self, predicate: Callable[[T], bool]) -> None:
        """Remove every member for which ``predicate`` returns True.

        ``predicate`` is called once per member and must not mutate the set.
        """
        doomed = [value for value in self._members if predicate(value)]
        for value in doomed:
            self._members.discard(value)
        if doomed:
            await self._persist()

    async def clear(self) -> None:
        """Empty the set and delete its key from the store.

        The key is removed rather than set to an empty list, so a later
        ``create`` sees it as never written and may seed it again.
        """
        self._members.clear()
        await self._store.remove(self._key)
        log.debug("Cleared %s", self._key)

    async def _persist(self) -> None:
        encoded = [self._encode(value) for value in self._members]
        await self._store.set_list(self._key, encoded)
        log.debug("Persisted %d members to %s", len(encoded), self._key)
