import pytest
from fastapi.testclient import TestClient

from app.config.settings import settings
from app.database.supabase_client import SupabaseClient
from app.main import app


@pytest.fixture(autouse=True)
def reset_state(monkeypatch):
    """Keep tests independent of the local .env and of each other"""
    monkeypatch.setattr(settings, "environment", "development")
    monkeypatch.setattr(settings, "supabase_url", "https://example.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "anon-key")
    monkeypatch.setattr(settings, "supabase_service_role_key", None)
    monkeypatch.setattr(settings, "database_url", None)
    monkeypatch.setattr(settings, "setup_secret", "development-only")
    SupabaseClient.reset_client()
    yield
    app.dependency_overrides.clear()
    SupabaseClient.reset_client()


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def user_u1():
    return {"id": "u1", "email": "u1@x.com", "user_metadata": {}, "app_metadata": {}}


@pytest.fixture
def user_u2():
    return {"id": "u2", "email": "u2@x.com", "user_metadata": {}, "app_metadata": {}}
