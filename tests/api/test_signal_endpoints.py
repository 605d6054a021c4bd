from __future__ import annotations

import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from app.clients.supabase import SupabaseClient, get_supabase_client
from app.config import Settings
from app.main import app
from app.services.signals.aggregator import get_signal_service


def test_list_signals_uses_camel_case(client, offline_signal_service):
    response = client.get("/api/signals")

    assert response.status_code == 200
    body = response.json()
    assert [signal["id"] for signal in body] == [1, 2, 3, 4, 5]
    first = body[0]
    assert first["name"] == "NeuroLink AI"
    assert first["realTimeData"] is False
    assert first["actionTag"] == "Build"
    assert set(first["tractionSignals"]) == {"githubStars", "twitterFollowers", "substackPosts"}
    assert first["indiaMarketFit"] == 6


def test_get_signal_and_not_found(client, offline_signal_service):
    assert client.get("/api/signals/2").json()["name"] == "CropSense"

    missing = client.get("/api/signals/99")

    assert missing.status_code == 404
    assert missing.json() == {"error": "Startup not found", "available_ids": [1, 2, 3, 4, 5]}


def test_cache_status_refresh_and_clear(client, offline_signal_service):
    assert client.get("/api/signals/cache/status").json() == {"cached": 0, "total": 5}

    client.get("/api/signals/1")
    assert client.get("/api/signals/cache/status").json()["cached"] == 1

    refreshed = client.post("/api/signals/1/refresh")
    assert refreshed.status_code == 200
    assert refreshed.json()["id"] == 1
    assert client.post("/api/signals/77/refresh").status_code == 404

    cleared = client.delete("/api/signals/cache")
    assert cleared.json() == {"cleared": True, "cached": 0, "total": 5}


@pytest.mark.parametrize("debug", [False, True])
def test_unhandled_errors_return_generic_500(monkeypatch, caplog, debug):
    class _BrokenService:
        async def get_startup_signals(self):
            raise RuntimeError("unexpected")

    monkeypatch.setattr(app, "debug", debug)
    monkeypatch.setattr(app, "middleware_stack", None)
    app.dependency_overrides[get_signal_service] = lambda: _BrokenService()
    try:
        with caplog.at_level(logging.ERROR, logger="app.main"):
            response = TestClient(app, raise_server_exceptions=False).get("/api/signals")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"error": "Internal server error"}
    assert any(record.getMessage() == "api.unhandled_error" for record in caplog.records)


def test_debug_is_off_by_default(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)

    assert Settings(_env_file=None).debug is False


def test_watchlist_defaults_when_database_unconfigured(client, offline_database):
    listing = client.get("/api/watchlist/user-1")
    added = client.post("/api/watchlist", json={"user_id": "user-1", "startup_id": 2})
    action = client.post("/api/actions", json={"user_id": "user-1", "action": "route_build", "entity_id": 2})

    assert listing.json() == {"user_id": "user-1", "items": [], "configured": False}
    assert added.status_code == 202
    assert added.json() == {"stored": False, "persisted_to": None}
    assert action.json()["stored"] is False


def test_watchlist_writes_through_to_database(client):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=[{"startup_id": 2, "created_at": "2025-06-01T00:00:00Z"}])
        return httpx.Response(201)

    database = SupabaseClient(
        base_url="https://project.supabase.co",
        api_key="anon",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    app.dependency_overrides[get_supabase_client] = lambda: database

    listing = client.get("/api/watchlist/user-1").json()
    added = client.post("/api/watchlist", json={"user_id": "user-1", "startup_id": 2}).json()

    assert listing["items"][0]["startup_id"] == 2
    assert listing["configured"] is True
    assert added == {"stored": True, "persisted_to": "supabase"}


def test_watchlist_rejects_invalid_payload(client, offline_database):
    response = client.post("/api/watchlist", json={"user_id": "", "startup_id": "abc"})

    assert response.status_code == 422
