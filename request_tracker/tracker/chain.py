from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, Optional, TypeVar

from request_tracker.tracker.entry import TrackedEntry


X = TypeVar("X")


class PendingChain(Generic[X]):
    """
    Intrusive doubly-linked list of pending entries, in start order.

    The links live on the entries themselves, so removing an entry needs only the
    entry: completions can arrive in any order without a traversal.
    """

    def __init__(self) -> None:
        self.head: Optional[TrackedEntry[X]] = None
        self.tail: Optional[TrackedEntry[X]] = None
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def append(self, entry: TrackedEntry[X]) -> None:
        if entry.chain is not None:
            raise ValueError(f"{entry!r} is already linked")

        entry.prev = self.tail
        entry.next = None
        if self.tail is not None:
            self.tail.next = entry
        else:
            self.head = entry
        self.tail = entry

        entry.chain = self
        self._length += 1

    def remove(self, entry: TrackedEntry[X]) -> None:
        if entry.chain is not self:
            raise ValueError(f"{entry!r} is not linked into this chain")

        if entry.prev is not None:
            entry.prev.next = entry.next
        else:
            self.head = entry.next

        if entry.next is not None:
            entry.next.prev = entry.prev
        else:
            self.tail = entry.prev

        entry.prev = None
        entry.next = None
        entry.chain = None
        self._length -= 1

    def __contains__(self, entry: object) -> bool:
        return isinstance(entry, TrackedEntry) and entry.chain is self

    def iterate(self) -> Iterator[TrackedEntry[X]]:
        # Head is captured now; mutating the chain mid-iteration is unsupported.
        return self._walk(self.head)

    @staticmethod
    def _walk(cur: Optional[TrackedEntry[X]]) -> Iterator[TrackedEntry[X]]:
        while cur is not None:
            yield cur
            cur = cur.next

    def __iter__(self) -> Iterator[TrackedEntry[X]]:
        return self.iterate()
