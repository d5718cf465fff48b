import asyncio
import contextlib
import secrets
from collections.abc import Callable
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from hangar.core.core import Service
from hangar.core.modules.api_key.models import ApiKey
from hangar.core.modules.counter.models import SequenceName
from hangar.core.modules.session.models import (
    ApiSession,
    AuthToken,
    SessionRecord,
    create_from_api_key,
    create_public_session,
    create_user_session,
)
from hangar.errors import SessionExpiredError, ValidationError
from hangar.utils import now

logger = structlog.get_logger(__name__)


def generate_token() -> AuthToken:
    return AuthToken(secrets.token_urlsafe(32))


class SessionService(Service):
    """Stores API sessions and resolves tokens to them.

    Only sessions that have been looked up are cached, and a background sweep
    drops expired ones from both the cache and the collection.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("api_sessions")
        self._sessions: dict[AuthToken, SessionRecord] = {}
        self._sweeper: asyncio.Task[None] | None = None

    async def on_start(self) -> None:
        """Create indexes, drop sessions that expired while we were down, start the sweeper."""
        # Unique index for token (for authentication lookups)
        await self._collection.create_index([("session.token", 1)], unique=True)
        await self._collection.create_index([("session.user_id", 1)])
        await self._collection.create_index([("session.key_id", 1)])
        # TTL index: MongoDB removes a session as soon as its expiry passes
        await self._collection.create_index([("session.expires", 1)], expireAfterSeconds=0)
        removed = await self.delete_expired_sessions()
        self._sweeper = asyncio.create_task(self._sweep_periodically())
        logger.debug("session_service_started", expired_removed=removed)

    async def on_stop(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweeper
            self._sweeper = None

    async def _sweep_periodically(self) -> None:
        interval = self.core.config.session_sweep_interval.total_seconds()
        while True:
            await asyncio.sleep(interval)
            try:
                await self.delete_expired_sessions()
            except Exception:
                logger.exception("session_sweep_failed")

    async def create_session(self, session: ApiSession) -> SessionRecord:
        """Persist a session value, assigning its id and creation time."""
        created_at = now()
        if session.expires <= created_at:
            raise ValidationError("Session must expire in the future")

        record = SessionRecord(
            id=await self.core.services.counter.get_next_id(SequenceName.API_SESSIONS),
            created_at=created_at,
            session=session,
        )
        try:
            await self._collection.insert_one(record.to_mongo())
        except DuplicateKeyError as e:
            raise ValidationError("Session token already in use") from e

        logger.debug(
            "session_created", session_id=record.id, kind=record.kind, user_id=record.user_id, key_id=record.key_id
        )
        return record

    async def create_key_session(self, api_key: ApiKey) -> SessionRecord:
        expires = now() + self.core.config.key_session_expiration
        return await self.create_session(create_from_api_key(generate_token(), api_key, expires))

    async def create_public_session(self) -> SessionRecord:
        expires = now() + self.core.config.public_session_expiration
        return await self.create_session(create_public_session(generate_token(), expires))

    async def create_user_session(self, user_id: int) -> SessionRecord:
        expires = now() + self.core.config.user_session_expiration
        return await self.create_session(create_user_session(generate_token(), user_id, expires))

    async def get_session(self, auth_token: AuthToken) -> SessionRecord:
        """Resolve a token to its live session, raise SessionExpiredError otherwise."""
        record = self._sessions.get(auth_token)
        if record is None:
            doc = await self._collection.find_one({"session.token": auth_token})
            if doc is None:
                raise SessionExpiredError
            record = SessionRecord.model_validate(doc)

        # The TTL monitor runs about once a minute, so stale documents can still be found
        if record.is_expired(now()):
            await self.invalidate_session(auth_token)
            raise SessionExpiredError

        self._sessions[auth_token] = record
        return record

    async def is_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_session(auth_token)
        except SessionExpiredError:
            return False
        return True

    async def get_sessions_by_user(self, user_id: int) -> list[SessionRecord]:
        """Get active sessions attributed to a user, newest first."""
        cursor = self._collection.find({"session.user_id": user_id, "session.expires": {"$gt": now()}}).sort("_id", -1)
        return await SessionRecord.list_cursor(cursor)

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the database."""
        self._sessions.pop(auth_token, None)
        await self._collection.delete_one({"session.token": auth_token})

    async def invalidate_user_sessions(self, user_id: int, keep: AuthToken | None = None) -> int:
        """Invalidate all sessions of a user, optionally sparing one token."""
        query: dict[str, Any] = {"session.user_id": user_id}
        if keep is not None:
            query["session.token"] = {"$ne": keep}
        self._drop_cached(lambda r: r.user_id == user_id and r.token != keep)
        result = await self._collection.delete_many(query)
        return result.deleted_count

    async def invalidate_key_sessions(self, key_id: int) -> int:
        """Invalidate all sessions derived from an API key."""
        self._drop_cached(lambda r: r.key_id == key_id)
        result = await self._collection.delete_many({"session.key_id": key_id})
        return result.deleted_count

    async def delete_expired_sessions(self) -> int:
        """Remove expired sessions and return how many were deleted."""
        current = now()
        self._drop_cached(lambda r: r.is_expired(current))
        result = await self._collection.delete_many({"session.expires": {"$lte": current}})
        if result.deleted_count:
            logger.info("expired_sessions_deleted", count=result.deleted_count)
        return result.deleted_count

    def _drop_cached(self, predicate: Callable[[SessionRecord], bool]) -> None:
        for token in [token for token, record in self._sessions.items() if predicate(record)]:
            del self._sessions[token]
