from typing import Any

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from hangar.core.core import Service
from hangar.core.modules.counter.models import SequenceName
from hangar.core.modules.user.models import User
from hangar.core.modules.user.validators import validate_credentials
from hangar.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class UserService(Service):
    """Login accounts, cached in memory since every authenticated request resolves one."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        self._users: dict[int, User] = {}

    async def on_start(self) -> None:
        await self._collection.create_index([("username", 1)], unique=True)
        users = await User.list_cursor(self._collection.find())
        self._users = {user.id: user for user in users}
        await self.ensure_default_user_exists()
        logger.debug("user_service_started", user_count=len(self._users))

    def get_user(self, user_id: int) -> User:
        if user_id not in self._users:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]

    def get_user_by_username(self, username: str) -> User:
        user = self._find_by_username(username)
        if user is None:
            raise NotFoundError(f"User '{username}' not found")
        return user

    def has_user(self, user_id: int) -> bool:
        return user_id in self._users

    async def create_user(self, username: str, password: str) -> User:
        """Create an account with a bcrypt-hashed password and a sequential id."""
        if self._find_by_username(username) is not None:
            raise ValidationError(f"User '{username}' already exists")
        validate_credentials(username, password)

        user = User(
            id=await self.core.services.counter.get_next_id(SequenceName.USERS),
            username=username,
            password_hash=hash_password(password),
        )
        await self._collection.insert_one(user.to_mongo())
        self._users[user.id] = user
        logger.info("user_created", user_id=user.id)
        return user

    def verify_password(self, username: str, password: str) -> bool:
        user = self._find_by_username(username)
        return user is not None and check_password(password, user.password_hash)

    async def change_password(self, user_id: int, old_password: str, new_password: str) -> None:
        """Replace the password after checking the current one."""
        user = self.get_user(user_id)
        if not check_password(old_password, user.password_hash):
            raise ValidationError("Invalid current password")
        validate_credentials(user.username, new_password)

        password_hash = hash_password(new_password)
        await self._collection.update_one({"_id": user_id}, {"$set": {"password_hash": password_hash}})
        self._users[user_id] = user.model_copy(update={"password_hash": password_hash})
        logger.info("user_password_changed", user_id=user_id)

    async def ensure_default_user_exists(self) -> None:
        """Create the configured first account so a fresh install has someone to log in as."""
        config = self.core.config
        if self._find_by_username(config.default_username) is None:
            await self.create_user(config.default_username, config.default_password)

    def _find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)
