def test_health_reports_integrations(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert set(body["integrations"]) == {"github", "product_hunt", "supabase", "open_router"}


def test_readiness_includes_cache_state(client, offline_signal_service):
    body = client.get("/health/ready").json()

    assert body["status"] == "ready"
    assert body["cache"] == {"cached": 0, "total": 5}


def test_root_welcome(client):
    body = client.get("/").json()

    assert body["message"] == "Welcome to MVP90 Terminal API"
