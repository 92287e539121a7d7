from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from request_tracker.config import TrackerConfig
from request_tracker.tracker.entry import TrackedEntry


X = TypeVar("X")


class HistoryBuffer(Generic[X]):
    """Completed entries, oldest completion first."""

    def __init__(self) -> None:
        self._entries: list[TrackedEntry[X]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TrackedEntry[X]]:
        return iter(self._entries)

    def append(self, entry: TrackedEntry[X]) -> None:
        self._entries.append(entry)

    def entries(self) -> list[TrackedEntry[X]]:
        return list(self._entries)

    def evict(self, policy: TrackerConfig, now: float) -> int:
        """
        Drop the leading run of entries that break the count or age rule.

        The count rule sets the minimum number to drop; the age rule then keeps
        advancing past entries whose completion time is strictly older than
        ``now - max_completed_millis``. Returns the number removed.
        """
        length = len(self._entries)
        drop = max(0, length - policy.max_completed)

        if policy.max_completed_millis > 0:
            threshold = now - policy.max_completed_millis
            while drop < length and self._age_reference(self._entries[drop]) < threshold:
                drop += 1

        if drop > 0:
            del self._entries[:drop]
        return drop

    @staticmethod
    def _age_reference(entry: TrackedEntry[X]) -> float:
        # Age is measured from completion; every buffered entry has one.
        assert entry.completed_time is not None
        return entry.completed_time
