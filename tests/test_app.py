import sqlite3

import pytest
from sqlalchemy import inspect

from taskapi.config import Settings, load_settings
from taskapi.database import Database
from taskapi.stores.sql import SqlTaskStore


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert data["version"]
    assert data["timestamp"]


def test_health_database_down(client, app, monkeypatch):
    monkeypatch.setattr(app.state.database, "ping", lambda: False)
    r = client.get("/health")
    assert r.status_code == 503
    assert r.json()["status"] == "unhealthy"
    assert r.json()["database"] == "disconnected"


def test_cors_preflight(client):
    r = client.options(
        "/api/tasks",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"
    for method in ("GET", "POST", "PUT", "DELETE"):
        assert method in r.headers["access-control-allow-methods"]


def test_cors_preflight_has_empty_body(client):
    r = client.options(
        "/api/tasks/1",
        headers={"Origin": "http://example.com", "Access-Control-Request-Method": "DELETE"},
    )
    assert r.status_code == 200
    assert r.content == b""


def test_cors_preflight_allows_any_requested_header(client):
    r = client.options(
        "/api/tasks",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "X-Requested-With, Authorization",
        },
    )
    assert r.status_code == 200
    assert "X-Requested-With" in r.headers["access-control-allow-headers"]


@pytest.mark.parametrize("path", ["/api/tasks", "/api/tasks/1", "/health", "/api/nope"])
def test_bare_options_succeeds(client, path):
    r = client.options(path)
    assert r.status_code == 200
    assert r.content == b""
    assert r.headers["access-control-allow-origin"] == "*"


def test_cors_headers_on_responses(client):
    r = client.get("/health", headers={"Origin": "http://example.com"})
    assert r.headers["access-control-allow-origin"] == "*"


def test_unknown_route_uses_error_body(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert "error" in r.json()


def test_wrong_method(client):
    r = client.patch("/api/tasks/1")
    assert r.status_code == 405
    assert "error" in r.json()


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./other.db")
    monkeypatch.setenv("SECRET_KEY", "s3cret")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("APP_MODE", "Release")
    monkeypatch.setenv("DB_ECHO", "yes")
    settings = load_settings()
    assert settings.database_url == "sqlite:///./other.db"
    assert settings.secret_key == "s3cret"
    assert settings.port == 9000
    assert settings.is_release
    assert settings.db_echo is True


def test_load_settings_defaults(monkeypatch):
    for name in (
        "DATABASE_URL", "SECRET_KEY", "ALGORITHM", "ACCESS_TOKEN_EXPIRE_MINUTES",
        "HOST", "PORT", "APP_MODE", "DB_POOL_SIZE", "DB_ECHO",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings == Settings()
    assert settings.access_token_expire_minutes == 24 * 60
    assert settings.port == 8080
    assert not settings.is_release


def test_ensure_schema_adds_missing_columns(tmp_path):
    path = tmp_path / "legacy.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE tasks (id INTEGER PRIMARY KEY, title VARCHAR NOT NULL)")
    conn.execute("INSERT INTO tasks (title) VALUES ('old task')")
    conn.commit()
    conn.close()

    database = Database(Settings(database_url=f"sqlite:///{path}"))
    try:
        database.create_all()
        cols = {c["name"] for c in inspect(database.engine).get_columns("tasks")}
        assert {"description", "completed", "created_at"} <= cols

        # legacy row has no created_at, so it is skipped rather than served
        store = SqlTaskStore(database)
        assert store.get_all() == []
        created = store.create("new task")
        assert [t.id for t in store.get_all()] == [created.id]
    finally:
        database.dispose()
