import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from app.config.settings import Settings
from main import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        cors_origins=["http://localhost:5173"],
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # entering the context runs the startup hook that creates the tables
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(app, client):
    session = app.state.database.session()
    try:
        yield session
    finally:
        session.close()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, username, email, password="secret123", role=None):
    payload = {"username": username, "email": email, "password": password}
    if role:
        payload["role"] = role
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 201, resp.json()
    data = resp.json()
    return data["user"], data["token"]


@pytest.fixture
def admin(client):
    user, token = register(client, "admin", "admin@co.com", role="admin")
    return {"user": user, "token": token, "headers": auth_header(token)}


@pytest.fixture
def worker(client):
    """A regular user; registration gives them a linked employee."""
    user, token = register(client, "ana", "ana@co.com")
    return {"user": user, "token": token, "headers": auth_header(token)}


def create_employee(client, headers, name, email, role="Engineer"):
    resp = client.post("/api/employees", json={"name": name, "role": role, "email": email}, headers=headers)
    assert resp.status_code == 201, resp.json()
    return resp.json()


def create_task(client, headers, employee_id, title="Set up CI", **extra):
    payload = {"title": title, "employeeId": employee_id, **extra}
    resp = client.post("/api/tasks", json=payload, headers=headers)
    assert resp.status_code == 201, resp.json()
    return resp.json()
