"""
Tests for the catch-all not-found response, the health endpoint and the
error envelope.
"""
import asyncio

import asyncpg
import pytest
from fastapi.testclient import TestClient

from helpdesk.app import app
from helpdesk.config import Config


def test_unknown_path_returns_not_found_envelope(client):
    response = client.get("/unknown-path")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": "Route /unknown-path not found",
        "data": {"path": "/unknown-path", "method": "GET"},
    }


def test_not_found_keeps_query_string_and_method(client):
    response = client.post("/api/nope?x=1", json={})

    body = response.json()
    assert response.status_code == 404
    assert body["message"] == "Route /api/nope?x=1 not found"
    assert body["data"] == {"path": "/api/nope?x=1", "method": "POST"}


def test_method_mismatch_is_reported_as_not_found(client):
    response = client.patch("/api/departments")

    assert response.status_code == 404
    assert response.json()["data"]["method"] == "PATCH"


def test_health(client):
    response = client.get("/health")

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "OK"
    assert body["environment"] == Config.ENVIRONMENT
    assert "timestamp" in body


def test_readiness_follows_engine_state(client, engine):
    assert client.get("/health/ready").json()["ready"] is False

    asyncio.run(engine.initialize())

    assert client.get("/health/ready").json()["ready"] is True


def _failing(exc):
    async def fail(*args, **kwargs):
        raise exc
    return fail


@pytest.mark.parametrize("environment,has_stack", [
    ("development", True),
    ("production", False),
])
def test_unhandled_error_is_wrapped(engine, admin, auth_headers, monkeypatch, environment, has_stack):
    monkeypatch.setattr(Config, "ENVIRONMENT", environment)
    monkeypatch.setattr(
        engine.notification_service, "get_notification_stats",
        _failing(RuntimeError("storage exploded")),
    )
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/notifications/stats", headers=auth_headers(admin))

    body = response.json()
    assert response.status_code == 500
    assert body["success"] is False
    assert body["message"] == "Internal server error"
    assert ("stack" in body) is has_stack
    if has_stack:
        assert "storage exploded" in body["stack"]


@pytest.mark.parametrize("exc,status_code,message", [
    (asyncpg.UniqueViolationError("duplicate key"), 409, "Resource already exists"),
    (asyncpg.ForeignKeyViolationError("missing parent"), 400, "Invalid reference"),
    (asyncpg.PostgresError("something else"), 400, "Database operation failed"),
])
def test_database_errors_are_wrapped(client, engine, admin, auth_headers, monkeypatch, exc, status_code, message):
    monkeypatch.setattr(engine.department_storage, "create", _failing(exc))

    response = client.post(
        "/api/departments",
        json={"name": "Finance", "keywords": ["budget"]},
        headers=auth_headers(admin),
    )

    body = response.json()
    assert response.status_code == status_code
    assert body["success"] is False
    assert body["message"] == message


def test_unique_violation_reports_constraint(client, engine, admin, auth_headers, monkeypatch):
    monkeypatch.setattr(
        engine.department_storage, "create",
        _failing(asyncpg.UniqueViolationError("duplicate key")),
    )

    response = client.post(
        "/api/departments",
        json={"name": "Finance", "keywords": ["budget"]},
        headers=auth_headers(admin),
    )

    assert response.json()["errors"]["message"] == "Unique constraint violation"
