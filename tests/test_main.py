from app.config.settings import settings


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Frame-Options"] == "DENY"


def test_ready_reports_missing_configuration(client, monkeypatch):
    monkeypatch.setattr(settings, "supabase_key", "")

    response = client.get("/ready")

    assert response.status_code == 503
    assert response.json()["missing"] == ["supabase_key"]


def test_ready(client):
    assert client.get("/ready").json() == {"status": "ready"}
