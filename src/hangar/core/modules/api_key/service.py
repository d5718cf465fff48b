from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from hangar.core.core import Service
from hangar.core.modules.api_key.models import ApiKey
from hangar.core.modules.api_key.utils import format_api_key, generate_api_key, hash_secret, parse_api_key, verify_secret
from hangar.core.modules.api_key.validators import validate_api_key_name
from hangar.core.modules.counter.models import SequenceName
from hangar.errors import InvalidApiKeyError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class ApiKeyService(Service):
    """Issues, verifies and revokes API keys."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("api_keys")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("token_identifier", 1)], unique=True)
        await self._collection.create_index([("owner_id", 1), ("name", 1)], unique=True)

    @property
    def _pepper(self) -> str:
        return self.core.config.api_key_pepper

    async def create_api_key(self, owner_id: int, name: str) -> tuple[ApiKey, str]:
        """Create a key for an account and return it with the raw key string."""
        validate_api_key_name(name)
        if not self.core.services.user.has_user(owner_id):
            raise NotFoundError(f"User '{owner_id}' not found")

        existing = await self.get_api_keys_by_owner(owner_id)
        if any(key.name == name for key in existing):
            raise ValidationError(f"API key '{name}' already exists")
        if len(existing) >= self.core.config.max_api_keys_per_user:
            raise ValidationError("Too many API keys")

        identifier, secret = generate_api_key()
        api_key = ApiKey(
            id=await self.core.services.counter.get_next_id(SequenceName.API_KEYS),
            owner_id=owner_id,
            name=name,
            token_identifier=identifier,
            token_hash=hash_secret(secret, self._pepper),
        )
        await self._collection.insert_one(api_key.to_mongo())
        logger.info("api_key_created", key_id=api_key.id, owner_id=owner_id)
        return api_key, format_api_key(identifier, secret)

    async def get_api_keys_by_owner(self, owner_id: int) -> list[ApiKey]:
        return await ApiKey.list_cursor(self._collection.find({"owner_id": owner_id}).sort("_id", 1))

    async def get_api_key_by_name(self, owner_id: int, name: str) -> ApiKey:
        doc = await self._collection.find_one({"owner_id": owner_id, "name": name})
        if doc is None:
            raise NotFoundError(f"API key '{name}' not found")
        return ApiKey.model_validate(doc)

    async def verify_api_key(self, raw_key: str) -> ApiKey:
        """Resolve a raw key to its stored record, raise InvalidApiKeyError if it does not match."""
        parts = parse_api_key(raw_key)
        if parts is None:
            raise InvalidApiKeyError
        identifier, secret = parts

        doc = await self._collection.find_one({"token_identifier": identifier})
        if doc is None:
            raise InvalidApiKeyError

        api_key = ApiKey.model_validate(doc)
        if not verify_secret(secret, api_key.token_hash, self._pepper):
            logger.warning("api_key_secret_mismatch", key_id=api_key.id)
            raise InvalidApiKeyError
        return api_key

    async def delete_api_key(self, owner_id: int, name: str) -> None:
        """Delete a key and end every session derived from it."""
        api_key = await self.get_api_key_by_name(owner_id, name)
        await self._collection.delete_one({"_id": api_key.id})
        revoked = await self.core.services.session.invalidate_key_sessions(api_key.id)
        logger.info("api_key_deleted", key_id=api_key.id, owner_id=owner_id, revoked_sessions=revoked)
