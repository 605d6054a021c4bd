from __future__ import annotations

import json

import httpx
import pytest

from app.clients.supabase import SupabaseClient

BASE_URL = "https://project.supabase.co"


def _client(handler, *, configured: bool = True) -> SupabaseClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseClient(
        base_url=BASE_URL if configured else None,
        api_key="anon-key" if configured else None,
        http_client=http_client,
    )


@pytest.mark.asyncio
async def test_get_user_watchlist_selects_by_user():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"startup_id": 1, "created_at": "2025-06-01T00:00:00Z"}])

    rows = await _client(handler).get_user_watchlist("user-1")

    assert rows == [{"startup_id": 1, "created_at": "2025-06-01T00:00:00Z"}]
    request = seen[0]
    assert request.url.path == "/rest/v1/user_watchlists"
    assert request.url.params["user_id"] == "eq.user-1"
    assert request.url.params["select"] == "startup_id,created_at"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer anon-key"


@pytest.mark.asyncio
async def test_add_to_watchlist_inserts_row():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201)

    stored = await _client(handler).add_to_watchlist("user-1", 3)

    assert stored is True
    request = seen[0]
    assert request.method == "POST"
    assert request.headers["Prefer"] == "return=minimal"
    body = json.loads(request.content)
    assert body["user_id"] == "user-1"
    assert body["startup_id"] == 3
    assert "created_at" in body


@pytest.mark.asyncio
async def test_update_startup_metric_upserts_on_metric_key():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201)

    stored = await _client(handler).update_startup_metric(1, "github_stars_count", 1247)

    assert stored is True
    request = seen[0]
    assert request.url.path == "/rest/v1/startup_metrics"
    assert request.url.params["on_conflict"] == "startup_id,metric_name"
    assert request.headers["Prefer"].startswith("resolution=merge-duplicates")


@pytest.mark.asyncio
async def test_log_user_action_and_metadata_lookup():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            assert request.url.path == "/rest/v1/user_actions"
            return httpx.Response(201)
        assert request.url.params["signal_id"] == "eq.7"
        return httpx.Response(200, json=[{"id": 7, "entity_name": "Stored"}])

    client = _client(handler)

    assert await client.log_user_action("user-1", "route_build", 7, {"from": "feed"}) is True
    assert await client.get_signal_metadata(7) == {"id": 7, "entity_name": "Stored"}


@pytest.mark.asyncio
async def test_failures_return_safe_defaults():
    client = _client(lambda request: httpx.Response(500, text="boom"))

    assert await client.get_user_watchlist("user-1") == []
    assert await client.add_to_watchlist("user-1", 1) is False
    assert await client.get_startup_metrics(1) is None
    assert await client.log_user_action("user-1", "view", 1) is False


@pytest.mark.asyncio
async def test_unconfigured_client_never_calls_upstream():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not be called
        raise AssertionError("unexpected request")

    client = _client(handler, configured=False)

    assert client.configured is False
    assert await client.get_user_watchlist("user-1") == []
    assert await client.get_signal_metadata(1) is None
    assert await client.update_startup_metric(1, "x", 1) is False
