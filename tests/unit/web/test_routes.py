"""Tests for the HTTP layer with the application facade mocked out."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from hangar.core.modules.session.models import ApiSessionView, SessionKind
from hangar.errors import InvalidApiKeyError
from hangar.web.deps import parse_authorization
from hangar.web.server import create_fastapi_app


@pytest.fixture
def fake_app(expires):
    app = MagicMock()

    @asynccontextmanager
    async def lifespan():
        yield

    app.lifespan = lifespan
    app.is_auth_token_valid = AsyncMock(side_effect=lambda token: token == "good")
    app.authenticate = AsyncMock(
        return_value=ApiSessionView(token="public-tok", expires_at=expires, type=SessionKind.PUBLIC)
    )
    app.login = AsyncMock(
        return_value=ApiSessionView(token="user-tok", expires_at=expires, type=SessionKind.USER, user_id=42)
    )
    app.get_current_session = AsyncMock(
        return_value=ApiSessionView(token="good", expires_at=expires, type=SessionKind.USER, user_id=42)
    )
    app.logout = AsyncMock()
    return app


@pytest.fixture
def client(fake_app, config):
    with TestClient(create_fastapi_app(fake_app, config)) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_authenticate_without_key_is_public(client, fake_app):
    response = client.post("/api/v1/authenticate", json={})

    assert response.status_code == 200
    assert response.json()["type"] == "public"
    assert response.json()["user_id"] is None
    fake_app.authenticate.assert_awaited_once_with(None)


def test_authenticate_with_key(client, fake_app):
    client.post("/api/v1/authenticate", json={"api_key": "ident.secret"})
    fake_app.authenticate.assert_awaited_once_with("ident.secret")


def test_authenticate_with_bad_key(client, fake_app):
    fake_app.authenticate.side_effect = InvalidApiKeyError

    response = client.post("/api/v1/authenticate", json={"api_key": "nope"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid API key", "type": "invalid_api_key"}
    assert "HangarAuth" in response.headers["WWW-Authenticate"]


def test_login_sets_cookie(client):
    response = client.post("/api/v1/auth/login", json={"username": "alice", "password": "wonderland"})

    assert response.status_code == 200
    assert response.json()["token"] == "user-tok"
    assert response.cookies["token"] == "user-tok"


def test_session_requires_token(client):
    response = client.get("/api/v1/auth/session")

    assert response.status_code == 401
    assert response.json()["message"] == "No session token presented"


def test_session_with_unknown_token(client):
    response = client.get("/api/v1/auth/session", headers={"Authorization": "Bearer stale"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired session"


def test_session_with_bearer_token(client, fake_app):
    response = client.get("/api/v1/auth/session", headers={"Authorization": "Bearer good"})

    assert response.status_code == 200
    assert response.json()["type"] == "user"
    fake_app.get_current_session.assert_awaited_once_with("good")


def test_session_with_hangarauth_scheme(client, fake_app):
    response = client.get("/api/v1/auth/session", headers={"Authorization": "HangarAuth good"})

    assert response.status_code == 200
    fake_app.get_current_session.assert_awaited_once_with("good")


def test_header_preferred_over_stale_cookie(client, fake_app):
    client.cookies.set("token", "stale")
    response = client.get("/api/v1/auth/session", headers={"Authorization": "Bearer good"})

    assert response.status_code == 200
    fake_app.get_current_session.assert_awaited_once_with("good")


def test_session_with_cookie(client):
    client.cookies.set("token", "good")
    response = client.get("/api/v1/auth/session")
    assert response.status_code == 200


def test_logout(client, fake_app):
    response = client.post("/api/v1/auth/logout", headers={"Authorization": "Bearer good"})

    assert response.status_code == 204
    fake_app.logout.assert_awaited_once_with("good")


def test_openapi_marks_token_endpoints_public(client):
    schema = client.get("/openapi.json").json()

    assert schema["paths"]["/api/v1/authenticate"]["post"]["security"] == []
    assert schema["paths"]["/api/v1/auth/login"]["post"]["security"] == []


def test_user_admin_routes_absent(client):
    assert client.get("/api/v1/users", headers={"Authorization": "Bearer good"}).status_code == 404


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("HangarAuth abc", "abc"),
        ("  Bearer   abc  ", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
        ("abc", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_authorization(value, expected):
    assert parse_authorization(value) == expected


def test_end_other_sessions(client, fake_app):
    fake_app.end_other_sessions = AsyncMock(return_value=2)

    response = client.delete("/api/v1/profile/sessions", headers={"Authorization": "Bearer good"})

    assert response.status_code == 200
    assert response.json() == {"ended": 2}
    fake_app.end_other_sessions.assert_awaited_once_with("good")
