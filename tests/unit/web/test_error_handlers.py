"""Tests for mapping errors to HTTP responses."""

import json

import pytest

from hangar.errors import (
    AccessDeniedError,
    AuthenticationError,
    InvalidApiKeyError,
    InvalidReferenceError,
    NotFoundError,
    SessionExpiredError,
    ValidationError,
)
from hangar.web.error_handlers import general_exception_handler, user_error_handler


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exc", "status_code", "error_type"),
    [
        (AuthenticationError("No session token presented"), 401, "authentication_error"),
        (SessionExpiredError(), 401, "session_expired"),
        (InvalidApiKeyError(), 401, "invalid_api_key"),
        (AccessDeniedError("This action requires a login session"), 403, "access_denied"),
        (NotFoundError("API key 'ci' not found"), 404, "not_found"),
        (ValidationError("Session must expire in the future"), 400, "validation_error"),
    ],
)
async def test_user_errors(exc, status_code, error_type):
    response = await user_error_handler(None, exc)

    assert response.status_code == status_code
    assert json.loads(response.body) == {"message": str(exc), "type": error_type}


@pytest.mark.asyncio
async def test_invalid_reference_is_internal():
    response = await general_exception_handler(None, InvalidReferenceError("API key 7 has no owner"))

    assert response.status_code == 500
    body = json.loads(response.body)
    assert body["type"] == "internal_server_error"
    assert "owner" not in body["message"]


@pytest.mark.asyncio
async def test_authentication_errors_name_token_schemes():
    response = await user_error_handler(None, SessionExpiredError())

    challenge = response.headers["WWW-Authenticate"]
    assert challenge.startswith("Bearer ")
    assert "HangarAuth" in challenge


@pytest.mark.asyncio
async def test_access_denied_has_no_challenge():
    response = await user_error_handler(None, AccessDeniedError("This action requires a login session"))

    assert response.status_code == 403
    assert "WWW-Authenticate" not in response.headers
