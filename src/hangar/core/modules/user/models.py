from datetime import datetime

from pydantic import BaseModel, Field

from hangar.core.db import MongoModel


class User(MongoModel):
    """Account that logs in interactively and owns API keys.

    Indexed on username - unique.
    """

    username: str
    password_hash: str  # bcrypt hash


class ProfileView(BaseModel):
    """Account the current session acts for (API representation)."""

    id: int = Field(..., description="User ID, the user_id carried by the account's sessions")
    username: str = Field(..., description="Username used to log in")
    created_at: datetime = Field(..., description="When the account was created")

    @classmethod
    def from_domain(cls, user: User) -> "ProfileView":
        """Create view model from domain model."""
        return cls(id=user.id, username=user.username, created_at=user.created_at)
