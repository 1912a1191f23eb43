from unittest.mock import MagicMock

import httpx
from postgrest.exceptions import APIError

from app.config.settings import settings
from app.core.dependencies import get_system_supabase
from app.main import app
from app.modules.setup.routes import get_setup_service
from tests.fakes import FakeSupabase

SECRET = {"X-Setup-Secret": "development-only"}


def _override_setup(report):
    service = MagicMock()
    service.setup.return_value = report
    app.dependency_overrides[get_setup_service] = lambda: service
    return service


def test_setup_blocked_in_production(client, monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")
    service = _override_setup({"ok": True, "results": [], "table_reachable": True})

    response = client.post("/api/v1/setup/database", headers=SECRET)

    assert response.status_code == 403
    service.setup.assert_not_called()


def test_status_blocked_in_production(client, monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")

    assert client.get("/api/v1/setup/database").status_code == 403


def test_setup_rejects_wrong_secret(client):
    service = _override_setup({"ok": True, "results": [], "table_reachable": True})

    response = client.post("/api/v1/setup/database", headers={"X-Setup-Secret": "guess"})

    assert response.status_code == 401
    service.setup.assert_not_called()


def test_setup_rejects_missing_secret(client):
    _override_setup({"ok": True, "results": [], "table_reachable": True})

    assert client.post("/api/v1/setup/database").status_code == 401


def test_setup_without_database_url_is_500(client):
    response = client.post("/api/v1/setup/database", headers=SECRET)

    assert response.status_code == 500
    assert "DATABASE_URL" in response.json()["detail"]


def test_setup_success_reports_each_statement(client):
    results = [{"sql": "CREATE TABLE IF NOT EXISTS public.profiles (...", "success": True}]
    _override_setup({"ok": True, "results": results, "table_reachable": True})

    response = client.post("/api/v1/setup/database", headers=SECRET)

    assert response.status_code == 200
    assert response.json()["results"] == results


def test_setup_partial_failure_is_500_with_full_report(client):
    results = [
        {"sql": "CREATE TABLE IF NOT EXISTS public.profiles (...", "success": True},
        {"sql": "CREATE TRIGGER on_auth_user_created...", "error": "permission denied for schema auth"},
        {"sql": "ALTER TABLE public.profiles ENABLE ROW LEVEL SECU...", "success": True},
    ]
    _override_setup({"ok": False, "results": results, "table_reachable": True})

    response = client.post("/api/v1/setup/database", headers=SECRET)

    assert response.status_code == 500
    assert response.json()["details"] == results


def test_status_reports_uninitialized(client):
    missing = APIError({"code": "PGRST205", "message": "Could not find the table", "details": None, "hint": None})
    app.dependency_overrides[get_system_supabase] = lambda: FakeSupabase().queue("profiles", missing)

    response = client.get("/api/v1/setup/database")

    assert response.status_code == 200
    assert response.json()["initialized"] is False


def test_status_store_error_is_500(client):
    denied = APIError({"code": "42501", "message": "permission denied", "details": None, "hint": None})
    app.dependency_overrides[get_system_supabase] = lambda: FakeSupabase().queue("profiles", denied)

    response = client.get("/api/v1/setup/database")

    assert response.status_code == 500
    assert response.json()["initialized"] is False


def test_status_transport_error_keeps_status_shape(client):
    unreachable = httpx.ConnectError("connection refused")
    app.dependency_overrides[get_system_supabase] = lambda: FakeSupabase().queue("profiles", unreachable)

    response = client.get("/api/v1/setup/database")

    assert response.status_code == 500
    body = response.json()
    assert body["initialized"] is False
    assert body["error"] == "Failed to check database status"
    assert "connection refused" in body["details"]
