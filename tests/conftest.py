"""
Shared test configuration.

- pydantic-settings never reads the project's real .env file; tests control
  config exclusively through environment variables / monkeypatch.setenv().
- MongoDB is replaced by mongomock collections behind a thin async adapter
  exposing the awaitable subset of the AsyncCollection API the code uses.
"""

import os

import mongomock
import pytest

from repositories.user_repository import UserRepository

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017/")


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


class AsyncCollection:
    """Awaitable facade over a synchronous mongomock collection."""

    def __init__(self, collection: mongomock.Collection) -> None:
        self.sync = collection

    async def find_one(self, *args, **kwargs):
        return self.sync.find_one(*args, **kwargs)

    async def insert_one(self, *args, **kwargs):
        return self.sync.insert_one(*args, **kwargs)

    async def update_one(self, *args, **kwargs):
        return self.sync.update_one(*args, **kwargs)

    async def find_one_and_update(self, *args, **kwargs):
        return self.sync.find_one_and_update(*args, **kwargs)

    async def create_index(self, *args, **kwargs):
        return self.sync.create_index(*args, **kwargs)


class AsyncDatabase:
    """Dict-style access to AsyncCollection wrappers, like an AsyncDatabase."""

    def __init__(self, db) -> None:
        self._db = db
        self._collections: dict = {}

    def __getitem__(self, name: str) -> AsyncCollection:
        if name not in self._collections:
            self._collections[name] = AsyncCollection(self._db[name])
        return self._collections[name]


@pytest.fixture
def mock_db():
    return AsyncDatabase(mongomock.MongoClient()["wassl-test"])


@pytest.fixture
def users_collection(mock_db) -> AsyncCollection:
    return mock_db["users"]


@pytest.fixture
async def user_repository(users_collection) -> UserRepository:
    repo = UserRepository(users_collection)
    await repo.ensure_indexes()
    return repo
