"""Mutable set whose elements are unique by an identity function."""

from __future__ import annotations

from collections.abc import MutableSet
from typing import Callable, Hashable, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")

_UNHASHABLE = object()


def same(value: T) -> T:
    return value


class MemberSet(MutableSet[T]):
    """Set of ``T`` keyed by ``identity(value)`` instead of the value itself.

    Keeps the first instance added for each identity, so ``lookup`` hands back
    that instance. Elements need not be hashable when ``identity`` maps them
    to something that is. Compares equal to any other set with the same
    elements, including builtin ``set``.
    """

    def __init__(self, items: Iterable[T] = (), identity: Callable[[T], Hashable] = same) -> None:
        self._identity = identity
        self._items: dict[Hashable, T] = {}
        for item in items:
            self._items.setdefault(identity(item), item)

    def _from_iterable(self, it: Iterable[T]) -> MemberSet[T]:  # type: ignore[override]
        return MemberSet(it, self._identity)

    @property
    def identity(self) -> Callable[[T], Hashable]:
        return self._identity

    def _ident(self, value: object) -> Hashable:
        """Identity of ``value``, or ``_UNHASHABLE`` when it cannot be an element at all."""
        try:
            ident = self._identity(value)  # type: ignore[arg-type]
            hash(ident)
        except TypeError:
            return _UNHASHABLE
        return ident

    def __contains__(self, value: object) -> bool:
        ident = self._ident(value)
        return ident is not _UNHASHABLE and ident in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"MemberSet({list(self._items.values())!r})"

    def add(self, value: T) -> None:
        """Add ``value`` unless an element with the same identity is present.

        Raises:
            TypeError: ``identity(value)`` is unhashable.
        """
        self._items.setdefault(self._identity(value), value)

    def discard(self, value: T) -> None:
        ident = self._ident(value)
        if ident is not _UNHASHABLE:
            self._items.pop(ident, None)

    def lookup(self, value: T) -> Optional[T]:
        """Return the stored element with the same identity as ``value``, or None."""
        ident = self._ident(value)
        if ident is _UNHASHABLE:
            return None
        return self._items.get(ident)

    def clear(self) -> None:
        self._items.clear()

    def copy(self) -> MemberSet[T]:
        return MemberSet(self._items.values(), self._identity)
