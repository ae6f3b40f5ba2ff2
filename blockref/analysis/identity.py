"""
Identity-keyed sets.

Style objects are shared, externally-owned handles. Two references collapse
into one member only when they are the *same* instance, never because they
compare equal. Python's built-in ``set`` uses ``__eq__``/``__hash__``, so the
analysis keeps its aggregates in these containers instead.
"""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


class FrozenIdentitySet(Generic[T]):
    """Immutable, insertion-ordered set of objects compared by identity."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[T] = ()):
        # id(obj) -> obj; holding the object keeps its id() stable.
        self._items: dict[int, T] = {}
        for item in items:
            self._items.setdefault(id(item), item)

    def __contains__(self, item: object) -> bool:
        return id(item) in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._items.values())!r})"

    def issuperset_of(self, items: Iterable[object]) -> bool:
        """True if every given object is a member (vacuously true for no objects)."""
        return all(id(item) in self._items for item in items)

    def union(self, *others: Iterable[T]) -> "IdentitySet[T]":
        result: IdentitySet[T] = IdentitySet(self)
        for other in others:
            result.update(other)
        return result

    def frozen(self) -> "FrozenIdentitySet[T]":
        return FrozenIdentitySet(self._items.values())


class IdentitySet(FrozenIdentitySet[T]):
    """Mutable, insertion-ordered set of objects compared by identity."""

    __slots__ = ()

    def add(self, item: T) -> bool:
        """Add an item. Returns True if it was not already a member."""
        key = id(item)
        if key in self._items:
            return False
        self._items[key] = item
        return True

    def update(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def clear(self) -> None:
        self._items.clear()
