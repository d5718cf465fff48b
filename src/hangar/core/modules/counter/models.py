"""Auto-incrementing counters for integer record ids."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SequenceName(StrEnum):
    """Collections whose ids come from a counter sequence."""

    USERS = "users"
    API_KEYS = "api_keys"
    API_SESSIONS = "api_sessions"


class Counter(BaseModel):
    """Atomic counter, one document per sequence.

    Uses MongoDB atomic operations to prevent duplicates.
    """

    sequence: SequenceName = Field(alias="_id")
    seq: int = 0  # Current value; next id will be seq + 1

    model_config = ConfigDict(populate_by_name=True)
