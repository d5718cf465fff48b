"""Tests for session-based access rules."""

from unittest.mock import AsyncMock

import pytest
import structlog

from hangar.core.modules.access.service import AccessService
from hangar.core.modules.session.models import (
    AuthToken,
    SessionRecord,
    create_from_api_key,
    create_public_session,
    create_user_session,
)
from hangar.errors import AccessDeniedError, AuthenticationError

TOKEN = AuthToken("tok")


@pytest.fixture
def service(database, core, mock_user):
    core.services.user.has_user.side_effect = lambda user_id: user_id == mock_user.id
    core.services.user.get_user.return_value = mock_user
    svc = AccessService(database)
    svc.set_core(core)
    return svc


@pytest.fixture
def session_returns(core):
    def _set(session) -> SessionRecord:
        record = SessionRecord(id=1, session=session)
        core.services.session.get_session = AsyncMock(return_value=record)
        return record

    return _set


class TestEnsureAuthenticated:
    @pytest.mark.asyncio
    async def test_public_session_is_authenticated(self, service, session_returns, expires):
        record = session_returns(create_public_session("tok", expires))
        assert await service.ensure_authenticated(TOKEN) == record

    @pytest.mark.asyncio
    async def test_invalid_token_propagates(self, service, core):
        core.services.session.get_session = AsyncMock(side_effect=AuthenticationError)
        with pytest.raises(AuthenticationError):
            await service.ensure_authenticated(TOKEN)


class TestEnsureUser:
    @pytest.mark.asyncio
    async def test_user_session(self, service, session_returns, mock_user, expires):
        session_returns(create_user_session("tok", mock_user.id, expires))
        assert await service.ensure_user(TOKEN) == mock_user

    @pytest.mark.asyncio
    async def test_key_session_acts_for_owner(self, service, session_returns, mock_user, mock_api_key, expires):
        session_returns(create_from_api_key("tok", mock_api_key, expires))
        assert await service.ensure_user(TOKEN) == mock_user

    @pytest.mark.asyncio
    async def test_public_session_rejected(self, service, session_returns, expires):
        session_returns(create_public_session("tok", expires))
        with pytest.raises(AuthenticationError, match="not attributed"):
            await service.ensure_user(TOKEN)

    @pytest.mark.asyncio
    async def test_deleted_user_rejected(self, service, session_returns, expires):
        session_returns(create_user_session("tok", 999, expires))
        with pytest.raises(AuthenticationError):
            await service.ensure_user(TOKEN)


class TestEnsureInteractiveUser:
    @pytest.mark.asyncio
    async def test_login_session_allowed(self, service, session_returns, mock_user, expires):
        session_returns(create_user_session("tok", mock_user.id, expires))
        assert await service.ensure_interactive_user(TOKEN) == mock_user

    @pytest.mark.asyncio
    async def test_key_session_denied(self, service, session_returns, mock_api_key, expires):
        session_returns(create_from_api_key("tok", mock_api_key, expires))
        with pytest.raises(AccessDeniedError, match="login session"):
            await service.ensure_interactive_user(TOKEN)

    @pytest.mark.asyncio
    async def test_public_session_denied(self, service, session_returns, core, expires):
        session_returns(create_public_session("tok", expires))
        with pytest.raises(AccessDeniedError, match="login session"):
            await service.ensure_interactive_user(TOKEN)
        core.services.user.has_user.assert_not_called()


class TestLogContext:
    @pytest.mark.asyncio
    async def test_resolved_session_is_bound(self, service, session_returns, mock_api_key, expires):
        structlog.contextvars.clear_contextvars()
        record = session_returns(create_from_api_key("tok", mock_api_key, expires))

        await service.ensure_authenticated(TOKEN)

        context = structlog.contextvars.get_contextvars()
        assert context["session_id"] == record.id
        assert context["session_kind"] == "key"
        assert context["key_id"] == mock_api_key.id
        assert context["user_id"] == mock_api_key.owner_id
        assert "tok" not in context.values()
        structlog.contextvars.clear_contextvars()
