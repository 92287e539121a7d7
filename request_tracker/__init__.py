"""In-process tracking of pending and recently completed requests."""

from request_tracker.config import TrackerConfig, merge_config
from request_tracker.tracker import (
    RequestNotPendingError,
    RequestTracker,
    RequestTrackerError,
    TrackedRequest,
    default_mapper,
)


__all__ = [
    "RequestNotPendingError",
    "RequestTracker",
    "RequestTrackerError",
    "TrackedRequest",
    "TrackerConfig",
    "default_mapper",
    "merge_config",
]
