from hangar.core.core import Service
from hangar.core.modules.session.models import AuthToken, SessionKind, SessionRecord
from hangar.core.modules.user.models import User
from hangar.errors import AccessDeniedError, AuthenticationError, SessionExpiredError
from hangar.logging import bind_session_context


class AccessService(Service):
    """Decides what a session may do based on its kind and attribution."""

    async def ensure_authenticated(self, auth_token: AuthToken) -> SessionRecord:
        """Ensure the token belongs to a live session of any kind, public included."""
        record = await self.core.services.session.get_session(auth_token)
        bind_session_context(record)
        return record

    async def ensure_user(self, auth_token: AuthToken) -> User:
        """Ensure the session acts for an existing account (login or API key)."""
        record = await self.ensure_authenticated(auth_token)
        return self._session_user(record)

    async def ensure_interactive_user(self, auth_token: AuthToken) -> User:
        """Ensure the session comes from a login; key and public sessions are refused."""
        record = await self.ensure_authenticated(auth_token)
        if record.kind != SessionKind.USER:
            raise AccessDeniedError("This action requires a login session")
        return self._session_user(record)

    def _session_user(self, record: SessionRecord) -> User:
        if record.user_id is None:
            raise AuthenticationError("Session is not attributed to a user")
        if not self.core.services.user.has_user(record.user_id):
            raise SessionExpiredError
        return self.core.services.user.get_user(record.user_id)
