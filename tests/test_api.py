from request_tracker.config import Settings


async def test_responses_include_x_request_id(api_client) -> None:
    resp = await api_client.get("/health")
    assert resp.status_code == 200
    assert resp.headers.get("x-request-id")


async def test_requests_endpoint_reports_completed_requests(api_client, http_tracker) -> None:
    await api_client.get("/health")
    await api_client.get("/does-not-exist")

    resp = await api_client.get("/api/requests")
    assert resp.status_code == 200
    payload = resp.json()

    assert payload["num_total_requests"] == 2
    assert payload["num_pending_requests"] == 0
    assert payload["pending"] == []
    assert [r["desc"] for r in payload["completed"]] == ["/health", "/does-not-exist"]

    health = payload["completed"][0]
    assert health["meta"]["status_code"] == 200
    assert health["meta"]["content_type"] == "application/json"
    assert health["completed_time"] >= health["start_time"]
    assert payload["completed"][1]["meta"]["status_code"] == 404

    # The status endpoint itself is excluded from tracking.
    assert http_tracker.num_total_requests == 2


async def test_cleanup_endpoint_returns_removed_count(api_client, http_tracker) -> None:
    http_tracker.config = http_tracker.config.model_copy(update={"max_completed": 1, "auto_cleanup": False})
    for _ in range(3):
        await api_client.get("/health")

    resp = await api_client.post("/api/requests/cleanup")
    assert resp.status_code == 200
    assert resp.json() == {"removed": 2}

    again = await api_client.post("/api/requests/cleanup")
    assert again.json() == {"removed": 0}


async def test_status_endpoint_can_be_disabled(api_client, settings: Settings) -> None:
    settings.enable_status_endpoint = False

    resp = await api_client.get("/api/requests")
    assert resp.status_code == 404
