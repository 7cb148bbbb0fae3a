import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# settings are read at import time by sikshasetu.main
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="sikshasetu-uploads-")

from sikshasetu.core.config import get_settings  # noqa: E402
from sikshasetu.main import create_app  # noqa: E402
from sikshasetu.models.enums import VerificationStatus  # noqa: E402


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    get_settings.cache_clear()
    yield create_app()
    get_settings.cache_clear()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def disabled_client(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "")
    get_settings.cache_clear()
    with TestClient(create_app()) as c:
        yield c
    get_settings.cache_clear()


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def signup(client):
    """Register + sign in; returns the bearer token."""

    def _signup(email: str, role: str, password: str = "secret123") -> str:
        r = client.post("/v1/auth/register", json={"email": email, "password": password, "role": role})
        assert r.status_code == 201, r.text
        r = client.post("/v1/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return r.json()["access_token"]

    return _signup


@pytest.fixture
def verify(client, services):
    """Reviewer approval happens out of band; tests write the status directly."""

    def _verify(token: str) -> None:
        me = client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
        services.backend.profiles.update_profile(
            me["user_id"], verification_status=VerificationStatus.VERIFIED
        )

    return _verify
