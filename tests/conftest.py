import asyncio
import random

import httpx
import pytest
from fastapi.testclient import TestClient

from app.clients.supabase import SupabaseClient, get_supabase_client
from app.main import app
from app.services.signals import aggregator as aggregator_module
from app.services.signals.aggregator import AggregatorConfig, SignalAggregationService, get_signal_service
from app.services.signals.sources import StaticSignalSource
from tests.helpers.metrics_stub import StubMetrics


class _SyncASGIClient:
    """Minimal synchronous wrapper around httpx.AsyncClient for ASGI apps."""

    def __init__(self, app):
        transport = httpx.ASGITransport(app=app)
        self._client = httpx.AsyncClient(transport=transport, base_url="http://testserver")

    def request(self, method: str, url: str, **kwargs):
        return asyncio.run(self._client.request(method, url, **kwargs))

    def get(self, url: str, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs):
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs):
        return self.request("PUT", url, **kwargs)

    def delete(self, url: str, **kwargs):
        return self.request("DELETE", url, **kwargs)

    def close(self) -> None:
        asyncio.run(self._client.aclose())


@pytest.fixture
def client():
    """Create test client compatible with older/newer httpx releases."""
    try:
        test_client = TestClient(app)
        yield test_client
    except TypeError:
        fallback_client = _SyncASGIClient(app)
        try:
            yield fallback_client
        finally:
            fallback_client.close()
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def offline_database():
    """Unconfigured managed database: every call returns its safe default."""
    database = SupabaseClient(base_url=None, api_key=None)
    app.dependency_overrides[get_supabase_client] = lambda: database
    return database


@pytest.fixture
def offline_signal_service():
    """Signal service whose sources are never configured, seeded for determinism."""
    service = SignalAggregationService(
        AggregatorConfig(),
        sources=[StaticSignalSource("github"), StaticSignalSource("producthunt")],
        rng=random.Random(90),
    )
    app.dependency_overrides[get_signal_service] = lambda: service
    return service


@pytest.fixture
def stub_metrics(monkeypatch):
    stub = StubMetrics()
    monkeypatch.setattr(aggregator_module, "metrics", stub)
    return stub
