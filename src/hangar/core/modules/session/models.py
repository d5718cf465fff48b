"""API session models.

A session is exactly one of three shapes, each its own frozen model:

- ``ApiKeySession``: derived from an API key, attributed to the key and its owner
- ``UserSession``: established by an interactive login
- ``PublicSession``: anonymous, attributed to nobody

Identifiers a shape does not carry are exposed as properties returning None,
so callers can read ``token``, ``key_id``, ``user_id`` and ``expires`` on any
session without checking its kind first.
"""

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal, NewType

from pydantic import BaseModel, ConfigDict, Field

from hangar.core.db import MongoModel
from hangar.core.modules.api_key.models import ApiKey
from hangar.errors import InvalidReferenceError

AuthToken = NewType("AuthToken", str)


class SessionKind(StrEnum):
    KEY = "key"
    USER = "user"
    PUBLIC = "public"


class BaseSession(BaseModel):
    token: str = Field(..., min_length=1)
    expires: datetime

    model_config = ConfigDict(frozen=True, extra="forbid")

    def is_expired(self, at: datetime) -> bool:
        return self.expires <= at


class ApiKeySession(BaseSession):
    kind: Literal["key"] = "key"
    key_id: int
    user_id: int


class UserSession(BaseSession):
    kind: Literal["user"] = "user"
    user_id: int

    @property
    def key_id(self) -> None:
        return None


class PublicSession(BaseSession):
    kind: Literal["public"] = "public"

    @property
    def key_id(self) -> None:
        return None

    @property
    def user_id(self) -> None:
        return None


ApiSession = Annotated[ApiKeySession | UserSession | PublicSession, Field(discriminator="kind")]


def create_from_api_key(token: str, api_key: ApiKey, expires: datetime) -> ApiKeySession:
    """Session attributed to an API key and the account owning it."""
    if api_key.owner_id is None:
        raise InvalidReferenceError(f"API key {api_key.id} has no owner")
    return ApiKeySession(token=token, key_id=api_key.id, user_id=api_key.owner_id, expires=expires)


def create_public_session(token: str, expires: datetime) -> PublicSession:
    return PublicSession(token=token, expires=expires)


def create_user_session(token: str, user_id: int, expires: datetime) -> UserSession:
    return UserSession(token=token, user_id=user_id, expires=expires)


class SessionRecord(MongoModel):
    """Stored session.

    Indexed on session.token - unique, session.user_id, session.key_id,
    session.expires (TTL, removed once expired).
    """

    session: ApiSession

    model_config = ConfigDict(frozen=True)

    @property
    def kind(self) -> SessionKind:
        return SessionKind(self.session.kind)

    @property
    def token(self) -> AuthToken:
        return AuthToken(self.session.token)

    @property
    def key_id(self) -> int | None:
        return self.session.key_id

    @property
    def user_id(self) -> int | None:
        return self.session.user_id

    @property
    def expires(self) -> datetime:
        return self.session.expires

    def is_expired(self, at: datetime) -> bool:
        return self.session.is_expired(at)


class ApiSessionView(BaseModel):
    """Authentication session (API representation)."""

    token: str = Field(..., description="Session token, sent as a Bearer token on subsequent requests")
    expires_at: datetime = Field(..., description="Instant after which the token is rejected")
    type: SessionKind = Field(..., description="How the session was established")
    user_id: int | None = Field(None, description="Account the session acts for, absent for public sessions")
    key_id: int | None = Field(None, description="API key the session was derived from")

    @classmethod
    def from_domain(cls, record: SessionRecord) -> "ApiSessionView":
        """Create view model from domain model."""
        return cls(
            token=record.token,
            expires_at=record.expires,
            type=record.kind,
            user_id=record.user_id,
            key_id=record.key_id,
        )


class SessionSummaryView(BaseModel):
    """Active session of the current account, listed without its token."""

    id: int
    type: SessionKind
    key_id: int | None = None
    created_at: datetime
    expires_at: datetime
    current: bool = Field(False, description="Whether this is the session making the request")

    @classmethod
    def from_domain(cls, record: SessionRecord, current_token: str) -> "SessionSummaryView":
        return cls(
            id=record.id,
            type=record.kind,
            key_id=record.key_id,
            created_at=record.created_at,
            expires_at=record.expires,
            current=record.token == current_token,
        )
