"""Column-level indexes from values of one sort to table offsets."""

from __future__ import annotations

from typing import Hashable, Iterable, Iterator, Optional


class ColumnIndex:
    """Maps each value of a column to the offsets of rows holding it."""

    def __init__(self, sort: str) -> None:
        self.sort = sort
        self._ids: dict[Hashable, list[int]] = {}

    def add(self, value: Hashable, offset: int) -> None:
        """Record that the row at ``offset`` holds ``value``."""
        self._ids.setdefault(value, []).append(offset)

    def clear(self) -> None:
        """Forget every value."""
        self._ids.clear()

    def __len__(self) -> int:
        return len(self._ids)

    def get(self, value: Hashable) -> Optional[tuple[int, ...]]:
        """The offsets recorded for ``value``, or None if there are none."""
        offsets = self._ids.get(value)
        return None if offsets is None else tuple(offsets)

    def items(self) -> Iterator[tuple[Hashable, tuple[int, ...]]]:
        """Iterate over ``(value, offsets)`` pairs."""
        for value, offsets in self._ids.items():
            yield value, tuple(offsets)

    def to_canonicalize(self, dirty_ids: Iterable[Hashable]) -> Iterator[int]:
        """Offsets of the rows that hold any of ``dirty_ids``."""
        for value in dirty_ids:
            yield from self._ids.get(value, ())


class CompositeColumnIndex:
    """A set of column indexes, one per sort seen in a column."""

    def __init__(self) -> None:
        self._indexes: list[ColumnIndex] = []

    def add(self, sort: str, value: Hashable, offset: int) -> None:
        """Record ``value`` of ``sort`` at ``offset`` in the index for that sort."""
        for index in self._indexes:
            if index.sort == sort:
                index.add(value, offset)
                return
        index = ColumnIndex(sort)
        index.add(value, offset)
        self._indexes.append(index)

    def clear(self) -> None:
        """Empty every index, keeping one per sort."""
        for index in self._indexes:
            index.clear()

    def __iter__(self) -> Iterator[ColumnIndex]:
        return iter(self._indexes)