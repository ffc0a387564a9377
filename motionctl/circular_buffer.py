"""Fixed-capacity ring buffer for recent numeric samples."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

_EMPTY: Any = 0


class CircularBuffer:
    """Ring buffer that keeps the most recent ``capacity`` items.

    The capacity must be a positive power of two. When an item is asked for
    and none exists at that place, the buffer returns ``0``, the value its
    unused slots hold.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0 or capacity & (capacity - 1):
            raise ValueError(f"capacity must be a positive power of 2, got {capacity}")
        self._size = capacity
        self._slots: list[Any] = [_EMPTY] * capacity
        self._head = 0
        self._count = 0

    def _wrap(self, index: int) -> int:
        return index & (self._size - 1)

    def _start(self) -> int:
        return self._head if self._count == self._size else 0

    def clear(self) -> None:
        """Empty the buffer and zero its storage."""
        self._head = 0
        self._count = 0
        self._slots = [_EMPTY] * self._size

    def push(self, item: Any) -> None:
        """Append an item, overwriting the oldest one when full."""
        self._slots[self._head] = item
        self._head = self._wrap(self._head + 1)
        if self._count < self._size:
            self._count += 1

    def newest(self) -> Any:
        """Return the most recently pushed item, or 0 when empty."""
        if not self._count:
            return _EMPTY
        return self._slots[self._wrap(self._head - 1)]

    def oldest(self) -> Any:
        """Return the oldest stored item, or 0 when empty."""
        if not self._count:
            return _EMPTY
        return self._slots[self._start()]

    def get(self, offset: int) -> Any:
        """Return the item at a negative offset from the head (-1 is newest).

        Returns 0 for a non-negative offset or one beyond the stored items.
        """
        if not self._count or offset >= 0 or -offset > self._count:
            return _EMPTY
        return self._slots[self._wrap(self._head + offset)]

    def at(self, index: int) -> Any:
        """Return the item at ``index`` counted from the oldest, or 0 if out of range."""
        if index < 0 or index >= self._count:
            return _EMPTY
        return self._slots[self._wrap(self._start() + index)]

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Any]:
        start = self._start()
        for i in range(self._count):
            yield self._slots[self._wrap(start + i)]

    def is_empty(self) -> bool:
        return self._count == 0

    def is_full(self) -> bool:
        return self._count == self._size

    def capacity(self) -> int:
        return self._size

    def average(self) -> Any:
        """Mean of the stored items, or 0 when empty."""
        if not self._count:
            return _EMPTY
        return sum(self) / self._count

    def minimum(self) -> Any:
        """Smallest stored item, or 0 when empty."""
        if not self._count:
            return _EMPTY
        return min(self)

    def maximum(self) -> Any:
        """Largest stored item, or 0 when empty."""
        if not self._count:
            return _EMPTY
        return max(self)