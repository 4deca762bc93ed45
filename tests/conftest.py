import uuid

import pytest
from fastapi.testclient import TestClient

from taskapi.config import Settings
from taskapi.database import Database
from taskapi.main import create_app

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path):
    # fresh sqlite file per test keeps tests isolated
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        secret_key=TEST_SECRET,
        mode="test",
    )


@pytest.fixture
def database(settings):
    db = Database(settings)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database=database)


@pytest.fixture
def client(app):
    return TestClient(app)


def unique_email(prefix="user"):
    return f"{prefix}_{uuid.uuid4().hex[:8]}@example.com"


def register(client, email=None, password="secret1"):
    email = email or unique_email()
    r = client.post("/api/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def token(client):
    return register(client)["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
