from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from time import perf_counter
from typing import Any, Callable, Optional

import structlog

from request_tracker.tracker import RequestTracker, RequestTrackerError, TrackedRequest

try:
    from starlette.datastructures import Headers, MutableHeaders
except ImportError:  # pragma: no cover - exercised via monkeypatch in tests
    Headers = MutableHeaders = None  # type: ignore[assignment,misc]


class MissingDependencyError(RequestTrackerError):
    """An optional dependency required by an adapter is not installed."""


@dataclass
class HttpRequestMeta:
    method: Optional[str] = None
    request_id: Optional[str] = None
    status_code: Optional[int] = None
    content_type: Optional[str] = None


class RequestTrackingMiddleware:
    """Tracks every HTTP request from arrival until its response headers go out."""

    def __init__(
        self,
        app: Callable[..., Any],
        tracker: RequestTracker[HttpRequestMeta],
        excluded_paths: Iterable[str] = (),
    ) -> None:
        if MutableHeaders is None:
            raise MissingDependencyError("Missing optional dependency required for RequestTrackingMiddleware: starlette")
        self.app = app
        self.tracker = tracker
        self._excluded_paths = set(excluded_paths)

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http" or scope.get("path") in self._excluded_paths:
            await self.app(scope, receive, send)
            return

        log = structlog.get_logger("request_tracker.access")
        try:
            request_id = str(uuid.uuid4())
            path = scope.get("path") or "/"
            structlog.contextvars.bind_contextvars(
                request_id=request_id,
                path=path,
                method=scope.get("method"),
            )
            meta = HttpRequestMeta(method=scope.get("method"), request_id=request_id)
            handle = self.tracker.start(path, meta)
        except Exception:
            log.exception("request_tracking_setup_failed")
            structlog.contextvars.clear_contextvars()
            raise

        start = perf_counter()
        done = False

        def finish() -> None:
            nonlocal done
            if done:
                return
            done = True
            self.tracker.complete(handle)
            log.info(
                "tracked_request_completed",
                status_code=meta.status_code,
                elapsed_ms=round((perf_counter() - start) * 1000.0, 2),
            )

        async def send_wrapper(message: dict[str, Any]) -> None:
            if message.get("type") == "http.response.start" and not done:
                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = request_id
                meta.status_code = int(message.get("status", 500))
                meta.content_type = Headers(raw=message.get("headers") or []).get("content-type")
                finish()

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            # The app failed or returned before sending headers.
            finish()
            structlog.contextvars.clear_contextvars()


def http_meta_mapper(entry: TrackedRequest[Any]) -> dict[str, Any]:
    meta = entry.meta
    if isinstance(meta, HttpRequestMeta):
        meta = asdict(meta)
    return {
        "start_time": entry.start_time,
        "completed_time": entry.completed_time,
        "desc": entry.desc,
        "meta": meta,
    }
