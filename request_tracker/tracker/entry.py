from __future__ import annotations

from typing import TYPE_CHECKING, Generic, Optional, Protocol, TypeVar

if TYPE_CHECKING:
    from request_tracker.tracker.chain import PendingChain


X = TypeVar("X")
X_co = TypeVar("X_co", covariant=True)


class TrackedRequest(Protocol[X_co]):
    """Read-only view of a tracked operation handed out to callers."""

    @property
    def start_time(self) -> float: ...

    @property
    def completed_time(self) -> Optional[float]: ...

    @property
    def desc(self) -> str: ...

    @property
    def meta(self) -> X_co: ...


class TrackedEntry(Generic[X]):
    """A single operation; linked into a PendingChain until it completes."""

    __slots__ = ("_start_time", "completed_time", "_desc", "meta", "prev", "next", "chain")

    def __init__(self, desc: str, meta: X, start_time: float) -> None:
        self._start_time = start_time
        self._desc = desc
        self.meta = meta
        self.completed_time: Optional[float] = None

        self.prev: Optional[TrackedEntry[X]] = None
        self.next: Optional[TrackedEntry[X]] = None
        # The chain currently holding this entry; None once unlinked.
        self.chain: Optional[PendingChain[X]] = None

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def desc(self) -> str:
        return self._desc

    @property
    def is_pending(self) -> bool:
        return self.chain is not None

    def __repr__(self) -> str:
        state = "pending" if self.is_pending else f"completed@{self.completed_time}"
        return f"TrackedEntry(desc={self._desc!r}, start_time={self._start_time}, {state})"
