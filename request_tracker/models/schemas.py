from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class TrackedRequestView(BaseModel):
    start_time: float
    completed_time: float | None = None
    desc: str
    meta: Any = None


class TrackerStatus(BaseModel):
    start_time: float
    num_total_requests: int
    num_pending_requests: int
    pending: list[TrackedRequestView]
    completed: list[TrackedRequestView]


class CleanupResponse(BaseModel):
    removed: int
