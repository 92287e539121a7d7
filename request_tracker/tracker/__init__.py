from request_tracker.tracker.chain import PendingChain
from request_tracker.tracker.core import (
    RequestNotPendingError,
    RequestTracker,
    RequestTrackerError,
    default_mapper,
)
from request_tracker.tracker.entry import TrackedEntry, TrackedRequest
from request_tracker.tracker.history import HistoryBuffer


__all__ = [
    "HistoryBuffer",
    "PendingChain",
    "RequestNotPendingError",
    "RequestTracker",
    "RequestTrackerError",
    "TrackedEntry",
    "TrackedRequest",
    "default_mapper",
]
