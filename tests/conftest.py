"""Shared pytest fixtures."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from hangar.config import Config
from hangar.core.modules.api_key.models import ApiKey
from hangar.core.modules.user.models import User
from hangar.utils import now


class FakeCursor:
    """Stand-in for pymongo's AsyncCursor over a fixed list of documents."""

    def __init__(self, docs):
        self._docs = docs
        self.sort_args = None

    def sort(self, *args):
        self.sort_args = args
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield doc


@pytest.fixture
def make_cursor():
    """Factory for fake cursors returned by collection.find()."""
    return FakeCursor


@pytest.fixture
def config():
    """Configuration with test values, independent of the environment."""
    return Config(
        database_url="mongodb://localhost:27017/hangar_test",
        api_key_pepper="test-pepper",
        key_session_expiration=timedelta(days=14),
        public_session_expiration=timedelta(hours=3),
        user_session_expiration=timedelta(days=30),
        max_api_keys_per_user=3,
        default_username="admin",
    )


@pytest.fixture
def collection():
    """Mock MongoDB collection with async CRUD methods."""
    coll = MagicMock()
    coll.insert_one = AsyncMock()
    coll.find_one = AsyncMock(return_value=None)
    coll.find_one_and_update = AsyncMock()
    coll.update_one = AsyncMock()
    coll.delete_one = AsyncMock()
    coll.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
    coll.create_index = AsyncMock()
    return coll


@pytest.fixture
def database(collection):
    """Mock database handing out the same mock collection for every name."""
    db = MagicMock()
    db.get_collection.return_value = collection
    return db


@pytest.fixture
def core(config):
    """Mock Core with real config and mocked sibling services."""
    mock_core = MagicMock()
    mock_core.config = config
    mock_core.services.counter.get_next_id = AsyncMock(return_value=1)
    mock_core.services.session.invalidate_key_sessions = AsyncMock(return_value=0)
    mock_core.services.session.invalidate_user_sessions = AsyncMock(return_value=0)
    return mock_core


@pytest.fixture
def expires():
    """An expiry comfortably in the future."""
    return now() + timedelta(days=1)


@pytest.fixture
def past():
    """A fixed instant in the past."""
    return datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture
def mock_user():
    """Create a mock user for testing."""
    return User(id=42, username="testuser", password_hash="$2b$12$hashed_password_here")


@pytest.fixture
def mock_api_key(mock_user):
    """Create a mock API key owned by mock_user."""
    return ApiKey(
        id=7,
        owner_id=mock_user.id,
        name="ci-upload",
        token_identifier="0b4f3b6e-6c1f-4c57-9c0a-3f1f0f6f7a11",
        token_hash="0" * 64,
    )
