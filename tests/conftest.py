"""Shared fixtures: an in-memory SQLite database behind the FastAPI app."""

import os

os.environ.setdefault("SPENDO_DATABASE_URL", "sqlite://")
os.environ.setdefault("SPENDO_JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spendo.api.deps import get_db
from spendo.main import app
from spendo.models.base import Base
from spendo.models.expense import Expense  # noqa: F401
from spendo.models.user import User  # noqa: F401


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client: TestClient, email: str = "asha@example.com", password: str = "secret123") -> dict:
    resp = client.post("/api/auth/register", json={"email": email, "password": password, "name": "Asha"})
    assert resp.status_code == 201, resp.text
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    # Keep requests explicit: authenticate by header, not by the login cookie.
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture()
def login(client):
    """Register + log in another user; returns their auth headers."""

    def _login(email: str) -> dict:
        return register_and_login(client, email=email)

    return _login


@pytest.fixture()
def auth_headers(client) -> dict:
    return register_and_login(client)
