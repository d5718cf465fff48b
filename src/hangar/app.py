from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from hangar.config import Config
from hangar.core.core import Core
from hangar.core.modules.api_key.models import ApiKeyView, CreatedApiKeyView
from hangar.core.modules.session.models import ApiSessionView, AuthToken, SessionSummaryView
from hangar.core.modules.user.models import ProfileView, User
from hangar.errors import AuthenticationError


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        """Check if authentication token is valid."""
        return await self._core.services.session.is_token_valid(auth_token)

    # === Sessions ===
    async def authenticate(self, api_key: str | None) -> ApiSessionView:
        """Open an API session: key-attributed when a key is given, public otherwise."""
        if api_key is None:
            record = await self._core.services.session.create_public_session()
        else:
            key = await self._core.services.api_key.verify_api_key(api_key)
            record = await self._core.services.session.create_key_session(key)
        return ApiSessionView.from_domain(record)

    async def login(self, username: str, password: str) -> ApiSessionView:
        """Authenticate user and create a user-bound session."""
        if not self._core.services.user.verify_password(username, password):
            raise AuthenticationError
        user = self._resolve_user(username)
        record = await self._core.services.session.create_user_session(user.id)
        return ApiSessionView.from_domain(record)

    async def logout(self, auth_token: AuthToken) -> None:
        """Invalidate the current session."""
        await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.session.invalidate_session(auth_token)

    async def get_current_session(self, auth_token: AuthToken) -> ApiSessionView:
        """Describe the session behind a token."""
        record = await self._core.services.access.ensure_authenticated(auth_token)
        return ApiSessionView.from_domain(record)

    # === Profile ===
    async def get_current_user(self, auth_token: AuthToken) -> ProfileView:
        """Get current authenticated user profile."""
        current_user = await self._core.services.access.ensure_user(auth_token)
        return ProfileView.from_domain(current_user)

    async def change_password(self, auth_token: AuthToken, old_password: str, new_password: str) -> None:
        """Change password for current user and end their other sessions."""
        current_user = await self._core.services.access.ensure_interactive_user(auth_token)
        await self._core.services.user.change_password(current_user.id, old_password, new_password)
        await self._core.services.session.invalidate_user_sessions(current_user.id, keep=auth_token)

    async def list_sessions(self, auth_token: AuthToken) -> list[SessionSummaryView]:
        """List the active sessions of the logged-in user, newest first."""
        current_user = await self._core.services.access.ensure_interactive_user(auth_token)
        records = await self._core.services.session.get_sessions_by_user(current_user.id)
        return [SessionSummaryView.from_domain(record, auth_token) for record in records]

    async def end_other_sessions(self, auth_token: AuthToken) -> int:
        """End every session of the logged-in user except the current one."""
        current_user = await self._core.services.access.ensure_interactive_user(auth_token)
        return await self._core.services.session.invalidate_user_sessions(current_user.id, keep=auth_token)

    # === API keys ===
    async def list_api_keys(self, auth_token: AuthToken) -> list[ApiKeyView]:
        """List API keys of the current user."""
        current_user = await self._core.services.access.ensure_user(auth_token)
        api_keys = await self._core.services.api_key.get_api_keys_by_owner(current_user.id)
        return [ApiKeyView.from_domain(api_key) for api_key in api_keys]

    async def create_api_key(self, auth_token: AuthToken, name: str) -> CreatedApiKeyView:
        """Create an API key for the current user (login sessions only)."""
        current_user = await self._core.services.access.ensure_interactive_user(auth_token)
        api_key, raw_key = await self._core.services.api_key.create_api_key(current_user.id, name)
        return CreatedApiKeyView(**ApiKeyView.from_domain(api_key).model_dump(), key=raw_key)

    async def delete_api_key(self, auth_token: AuthToken, name: str) -> None:
        """Delete an API key of the current user (login sessions only)."""
        current_user = await self._core.services.access.ensure_interactive_user(auth_token)
        await self._core.services.api_key.delete_api_key(current_user.id, name)

    def _resolve_user(self, username: str) -> User:
        """Resolve username to User object. Raises NotFoundError if not found."""
        return self._core.services.user.get_user_by_username(username)
