from __future__ import annotations

import itertools
from collections.abc import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from request_tracker.config import Settings, get_settings
from request_tracker.main import create_app
from request_tracker.observability.middleware import HttpRequestMeta
from request_tracker.tracker import RequestTracker


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TRACKER_MAX_COMPLETED",
        "TRACKER_MAX_COMPLETED_MILLIS",
        "TRACKER_AUTO_CLEANUP",
        "TRACKER_EXCLUDED_PATHS",
        "ENABLE_STATUS_ENDPOINT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def clock() -> Callable[[], float]:
    """Deterministic clock: 100, 101, 102, ... (one tick per read)."""
    counter = itertools.count(100)
    return lambda: float(next(counter))


@pytest.fixture
def http_tracker() -> RequestTracker[HttpRequestMeta]:
    return RequestTracker()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
async def api_client(http_tracker, settings) -> AsyncIterator[AsyncClient]:
    app = create_app(tracker=http_tracker, settings=settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
