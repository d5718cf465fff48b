from datetime import datetime

from pydantic import BaseModel, Field

from hangar.core.db import MongoModel


class ApiKey(MongoModel):
    """API key owned by an account.

    Only the HMAC of the secret half is stored; the raw key is shown once.
    Indexed on token_identifier - unique, (owner_id, name) - unique.
    """

    owner_id: int | None  # None when the owning account reference is broken
    name: str
    token_identifier: str
    token_hash: str


class ApiKeyView(BaseModel):
    """API key metadata (API representation)."""

    id: int = Field(..., description="API key ID")
    name: str = Field(..., description="Key name, unique per owner")
    token_identifier: str = Field(..., description="Public part of the key, useful to tell keys apart")
    created_at: datetime = Field(..., description="When the key was created")

    @classmethod
    def from_domain(cls, api_key: ApiKey) -> "ApiKeyView":
        """Create view model from domain model."""
        return cls(
            id=api_key.id,
            name=api_key.name,
            token_identifier=api_key.token_identifier,
            created_at=api_key.created_at,
        )


class CreatedApiKeyView(ApiKeyView):
    """Newly created API key, the only response that carries the raw key."""

    key: str = Field(..., description="Full API key; it cannot be retrieved again")
