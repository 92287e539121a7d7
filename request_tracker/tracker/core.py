"""Tracker orchestration: lifecycle, counters, scoped tracking and snapshots."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Iterable, Iterator
from contextlib import contextmanager
from threading import Lock
from typing import Any, Callable, Generic, Optional, TypeVar

import structlog

from request_tracker.config import ConfigOverride, TrackerConfig, merge_config
from request_tracker.tracker.chain import PendingChain
from request_tracker.tracker.entry import TrackedEntry, TrackedRequest
from request_tracker.tracker.history import HistoryBuffer


X = TypeVar("X")
Y = TypeVar("Y")

logger = structlog.get_logger(__name__)


class RequestTrackerError(Exception):
    """Base class for tracker errors."""


class RequestNotPendingError(RequestTrackerError):
    """complete() was given a handle this tracker does not hold as pending."""


def _now_ms() -> float:
    return time.time() * 1000.0


def default_mapper(entry: TrackedRequest[Any]) -> dict[str, Any]:
    return {
        "start_time": entry.start_time,
        "completed_time": entry.completed_time,
        "desc": entry.desc,
        "meta": entry.meta,
    }


class _CompletedView(Generic[X]):
    """Live, read-only iterable over the history buffer."""

    def __init__(self, tracker: RequestTracker[X]) -> None:
        self._tracker = tracker

    def __iter__(self) -> Iterator[TrackedRequest[X]]:
        return iter(self._tracker._history_entries())

    def __len__(self) -> int:
        return len(self._tracker._history)


class RequestTracker(Generic[X]):
    """
    Records in-flight operations and a bounded history of completed ones.

    Pending entries sit in a PendingChain in start order; completed entries move
    to a HistoryBuffer in completion order and are pruned by count and by age.
    All state changes are serialized behind a single lock so snapshots never see
    a half-relinked chain.
    """

    def __init__(self, *overrides: ConfigOverride | None, clock: Optional[Callable[[], float]] = None) -> None:
        self.config: TrackerConfig = merge_config(*overrides)
        self._clock = clock or _now_ms
        self.start_time: float = self._clock()

        self._lock = Lock()
        self._pending: PendingChain[X] = PendingChain()
        self._history: HistoryBuffer[X] = HistoryBuffer()
        self._total = 0

    @property
    def num_total_requests(self) -> int:
        return self._total

    @property
    def num_pending_requests(self) -> int:
        return len(self._pending)

    def _resolve_now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else now

    def start(self, desc: str, meta: X, now: Optional[float] = None) -> TrackedRequest[X]:
        entry: TrackedEntry[X] = TrackedEntry(desc, meta, self._resolve_now(now))
        with self._lock:
            self._pending.append(entry)
            self._total += 1
        return entry

    def complete(self, handle: TrackedRequest[X], now: Optional[float] = None) -> None:
        entry = handle
        with self._lock:
            if not isinstance(entry, TrackedEntry) or entry not in self._pending:
                logger.warning("complete_not_pending", desc=getattr(handle, "desc", None))
                raise RequestNotPendingError(f"{handle!r} is not pending in this tracker")

            stamp = self._resolve_now(now)
            entry.completed_time = stamp
            self._pending.remove(entry)
            self._history.append(entry)

            if self.config.auto_cleanup and len(self._history) > self.config.max_completed:
                self._evict(stamp)

    def cleanup_history(self, now: Optional[float] = None) -> int:
        """Apply the eviction policy now; returns how many entries were removed."""
        with self._lock:
            return self._evict(self._resolve_now(now))

    def _evict(self, now: float) -> int:
        removed = self._history.evict(self.config, now)
        if removed:
            logger.debug("history_evicted", removed=removed, remaining=len(self._history))
        return removed

    def pending_requests(self) -> Iterator[TrackedRequest[X]]:
        return self._pending.iterate()

    def completed_requests(self) -> Iterable[TrackedRequest[X]]:
        return _CompletedView(self)

    def _history_entries(self) -> list[TrackedEntry[X]]:
        with self._lock:
            return self._history.entries()

    @contextmanager
    def tracking(self, desc: str, meta: X) -> Iterator[TrackedRequest[X]]:
        handle = self.start(desc, meta)
        try:
            yield handle
        finally:
            self.complete(handle)

    def run(self, desc: str, meta: X, work: Callable[[X], Y]) -> Y:
        """Track ``work(meta)``; the entry completes whether it returns or raises."""
        with self.tracking(desc, meta):
            return work(meta)

    async def arun(self, desc: str, meta: X, work: Callable[[X], Awaitable[Y]]) -> Y:
        handle = self.start(desc, meta)
        try:
            return await work(meta)
        finally:
            self.complete(handle)

    def snapshot(self, mapper: Callable[[TrackedRequest[X]], Any] = default_mapper) -> dict[str, Any]:
        with self._lock:
            total = self._total
            pending = list(self._pending.iterate())
            completed = self._history.entries()

        return {
            "start_time": self.start_time,
            "num_total_requests": total,
            "num_pending_requests": len(pending),
            "pending": [mapper(entry) for entry in pending],
            "completed": [mapper(entry) for entry in completed],
        }
