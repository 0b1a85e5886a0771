"""A map-like container for maps with few entries."""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, Optional, Tuple, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class SmallMap(Generic[K, V]):
    """An insertion-ordered list of key/value pairs with linear lookup.

    Keys only need to support equality, not hashing.
    """

    __slots__ = ("_pairs",)

    def __init__(self, items: Optional[Iterable[Tuple[K, V]]] = None) -> None:
        self._pairs: list[list] = []
        for key, value in items or ():
            self.insert(key, value)

    def insert(self, key: K, value: V) -> None:
        """Set key to value, replacing an existing entry in place."""
        for pair in self._pairs:
            if pair[0] == key:
                pair[1] = value
                return
        self._pairs.append([key, value])

    def get(self, key, default=None):
        """Return the value for key, or default when absent."""
        for k, v in self._pairs:
            if k == key:
                return v
        return default

    def __contains__(self, key) -> bool:
        return any(k == key for k, _ in self._pairs)

    def __iter__(self) -> Iterator[Tuple[K, V]]:
        for k, v in self._pairs:
            yield k, v

    def __len__(self) -> int:
        return len(self._pairs)

    def values(self) -> Iterator[V]:
        """Iterate over the values in insertion order."""
        for _, v in self._pairs:
            yield v

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SmallMap):
            return NotImplemented
        return self._pairs == other._pairs

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SmallMap({[tuple(p) for p in self._pairs]!r})"