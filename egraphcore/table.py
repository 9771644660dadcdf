"""Insertion-ordered tables mapping input tuples to outputs.

Rows are never moved on update or removal: the old row is marked stale and a
fresh row is appended. Because timestamps never decrease, rows stay sorted by
timestamp, so a timestamp range maps onto a contiguous range of offsets.
Stale rows are dropped by an explicit :meth:`Table.rehash`, which renumbers
the offsets.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterator, Optional, Sequence

Value = Hashable


@dataclass
class TupleOutput:
    """Everything known about a row apart from its inputs."""

    value: Any
    timestamp: int
    subsumed: bool = False


@dataclass
class _Row:
    data: tuple
    output: TupleOutput
    stale_at: Optional[int] = None

    @property
    def live(self) -> bool:
        return self.stale_at is None

    def valid(self, include_subsumed: bool) -> bool:
        return self.live and (include_subsumed or not self.output.subsumed)


class Table:
    """A hash table from value tuples to outputs that keeps insertion order."""

    def __init__(self) -> None:
        self._max_ts = 0
        self._n_stale = 0
        self._offsets: dict[tuple, int] = {}
        self._rows: list[_Row] = []

    def clear(self) -> None:
        """Remove every row, stale or live."""
        self._max_ts = 0
        self._n_stale = 0
        self._offsets.clear()
        self._rows.clear()

    def too_stale(self) -> bool:
        """Whether stale rows make up more than half of the table."""
        return self._n_stale > len(self._rows) // 2

    def rehash(self) -> None:
        """Drop stale rows; this invalidates all previously seen offsets."""
        self._rows = [row for row in self._rows if row.live]
        self._offsets = {row.data: off for off, row in enumerate(self._rows)}
        self._n_stale = 0

    def get(self, inputs: Sequence[Value]) -> Optional[TupleOutput]:
        """Return the output stored for ``inputs``, or None."""
        off = self._offsets.get(tuple(inputs))
        if off is None:
            return None
        return self._rows[off].output

    def insert(self, inputs: Sequence[Value], out: Any, ts: int) -> Optional[Any]:
        """Map ``inputs`` to ``out`` at ``ts``; return the previous value, if any."""
        previous: list[Any] = []

        def take(prev: Optional[Any]) -> Any:
            if prev is not None:
                previous.append(prev)
            return out

        self.insert_and_merge(inputs, ts, False, take)
        return previous[0] if previous else None

    def insert_and_merge(
        self,
        inputs: Sequence[Value],
        ts: int,
        subsumed: bool,
        on_merge: Callable[[Optional[Any]], Any],
    ) -> None:
        """Insert ``inputs``, letting ``on_merge`` combine with any previous value.

        ``on_merge(None)`` gives the value for a new row; ``on_merge(prev)``
        gives the merged value when the inputs are already present.
        """
        if ts < self._max_ts:
            raise ValueError(
                f"timestamp {ts} is older than the table's latest timestamp {self._max_ts}"
            )
        self._max_ts = ts
        key = tuple(inputs)
        off = self._offsets.get(key)
        if off is not None:
            row = self._rows[off]
            prev = row.output
            merged = on_merge(prev.value)
            if merged == prev.value and prev.subsumed == subsumed:
                return
            row.stale_at = ts
            self._n_stale += 1
            self._offsets[key] = len(self._rows)
            self._rows.append(
                _Row(key, TupleOutput(merged, ts, subsumed or prev.subsumed))
            )
            return
        self._offsets[key] = len(self._rows)
        self._rows.append(_Row(key, TupleOutput(on_merge(None), ts, subsumed)))

    def num_offsets(self) -> int:
        """One more than the largest offset, stale rows included."""
        return len(self._rows)

    def __len__(self) -> int:
        return len(self._rows) - self._n_stale

    def is_empty(self) -> bool:
        """Whether the table holds no rows at all, stale ones included."""
        return not self._rows

    def min_ts(self) -> Optional[int]:
        """The timestamp of the first row, if there is one."""
        return self._rows[0].output.timestamp if self._rows else None

    def max_ts(self) -> int:
        """An upper bound on every timestamp in the table."""
        return self._max_ts

    def get_timestamp(self, i: int) -> Optional[int]:
        """The timestamp of the row at offset ``i``, or None if out of bounds."""
        if 0 <= i < len(self._rows):
            return self._rows[i].output.timestamp
        return None

    def remove(self, inputs: Sequence[Value], ts: int) -> bool:
        """Mark the row for ``inputs`` stale at ``ts``; return whether one existed."""
        off = self._offsets.pop(tuple(inputs), None)
        if off is None:
            return False
        self._rows[off].stale_at = ts
        self._n_stale += 1
        return True

    def get_index(
        self, i: int, include_subsumed: bool
    ) -> Optional[tuple[tuple, TupleOutput]]:
        """The row at offset ``i`` if it is in bounds, live and (optionally) not subsumed."""
        if not 0 <= i < len(self._rows):
            return None
        row = self._rows[i]
        if not row.valid(include_subsumed):
            return None
        return row.data, row.output

    def iter(self, include_subsumed: bool) -> Iterator[tuple[tuple, TupleOutput]]:
        """Iterate over live rows in insertion order."""
        for _, data, out in self.iter_range(0, len(self._rows), include_subsumed):
            yield data, out

    def iter_range(
        self, start: int, stop: int, include_subsumed: bool
    ) -> Iterator[tuple[int, tuple, TupleOutput]]:
        """Iterate over live rows with offsets in ``[start, stop)``, with their offsets."""
        for i, row in enumerate(self._rows[start:stop], start):
            if row.valid(include_subsumed):
                yield i, row.data, row.output

    def iter_timestamp_range(
        self, start: int, stop: int, include_subsumed: bool
    ) -> Iterator[tuple[int, tuple, TupleOutput]]:
        """Iterate over live rows with timestamps in ``[start, stop)``."""
        offsets = self.transform_range(start, stop)
        return self.iter_range(offsets.start, offsets.stop, include_subsumed)

    def approximate_range_size(self, start: int, stop: int) -> int:
        """Number of rows, stale ones included, in the timestamp range."""
        return len(self.transform_range(start, stop))

    def transform_range(self, start: int, stop: int) -> range:
        """Map a timestamp range ``[start, stop)`` to a range of offsets."""
        first = binary_search_table_by_key(self, start)
        if first is None:
            return range(0, 0)
        last = binary_search_table_by_key(self, stop)
        if last is None:
            last = self.num_offsets()
        return range(first, last)


def binary_search_table_by_key(table: Table, target: int) -> Optional[int]:
    """The smallest offset whose timestamp is at least ``target``.

    Returns None when the table is empty or every timestamp is below ``target``.
    """
    if table.is_empty():
        return None
    if table.max_ts() < target:
        return None
    if table.min_ts() > target:
        return 0
    return bisect_left(range(table.num_offsets()), target, key=table.get_timestamp)