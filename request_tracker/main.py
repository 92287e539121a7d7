from __future__ import annotations

from fastapi import FastAPI

from request_tracker.api.status import router as status_router
from request_tracker.config import Settings, get_settings
from request_tracker.observability import configure_logging
from request_tracker.observability.middleware import HttpRequestMeta, RequestTrackingMiddleware
from request_tracker.tracker import RequestTracker


def create_app(
    tracker: RequestTracker[HttpRequestMeta] | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if tracker is None:
        tracker = RequestTracker(settings.tracker_overrides)

    app = FastAPI(title="Request Tracker", version="0.1.0")
    app.state.tracker = tracker
    app.state.settings = settings
    app.add_middleware(
        RequestTrackingMiddleware,
        tracker=tracker,
        excluded_paths=settings.tracker_excluded_paths,
    )
    app.include_router(status_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
