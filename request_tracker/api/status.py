from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from request_tracker.config import Settings, get_settings
from request_tracker.models.schemas import CleanupResponse, TrackerStatus
from request_tracker.observability.middleware import HttpRequestMeta, http_meta_mapper
from request_tracker.tracker import RequestTracker


router = APIRouter(prefix="/api", tags=["requests"])


def get_tracker(request: Request) -> RequestTracker[HttpRequestMeta]:
    return request.app.state.tracker


def _require_enabled(request: Request) -> None:
    settings: Settings = getattr(request.app.state, "settings", None) or get_settings()
    if not settings.enable_status_endpoint:
        raise HTTPException(status_code=404, detail="Not found")


@router.get("/requests", response_model=TrackerStatus, dependencies=[Depends(_require_enabled)])
async def request_status(tracker: RequestTracker[HttpRequestMeta] = Depends(get_tracker)) -> TrackerStatus:
    return TrackerStatus.model_validate(tracker.snapshot(http_meta_mapper))


@router.post("/requests/cleanup", response_model=CleanupResponse, dependencies=[Depends(_require_enabled)])
async def cleanup_history(tracker: RequestTracker[HttpRequestMeta] = Depends(get_tracker)) -> CleanupResponse:
    return CleanupResponse(removed=tracker.cleanup_history())
