import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from minilinkedin.backend.config import Settings
from minilinkedin.backend.server import create_app

FRONTEND_ORIGIN = "https://app.example.com"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret="test-secret",
        frontend_url=FRONTEND_ORIGIN,
        uploads_dir=tmp_path / "uploads",
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def app(settings):
    return create_app(settings, db=AsyncMongoMockClient()["mini_linkedin_test"])


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(client):
    """Register a user and return {token, user, headers}."""
    def _make_user(name, email=None, password="secret123"):
        email = email or f"{name.lower().replace(' ', '.')}@example.com"
        resp = client.post("/auth/register", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        data = resp.json()
        data["headers"] = {"Authorization": f"Bearer {data['token']}"}
        return data
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("Alice Smith")


@pytest.fixture
def bob(make_user):
    return make_user("Bob Jones")


@pytest.fixture
def admin_headers(client):
    resp = client.post("/adminAuth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
