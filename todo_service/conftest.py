"""
Shared fixtures. MongoDB is replaced by mongomock behind a thin async
adapter so the routes run their real queries, unique indexes included.
"""

import asyncio
import os

# Ensure a SECRET_KEY exists for testing
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-unit-tests-1234567890")

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError  # noqa: E402

from todo_service import database as database_module  # noqa: E402
from todo_service.database import get_db, init_db  # noqa: E402
from todo_service.main import app  # noqa: E402


class MockCursor:
    def __init__(self, cursor):
        self._cursor = cursor

    async def to_list(self, length=None):
        docs = list(self._cursor)
        return docs if length is None else docs[:length]


class MockCollection:
    def __init__(self, collection):
        self._collection = collection

    def find(self, *args, **kwargs):
        return MockCursor(self._collection.find(*args, **kwargs))

    def __getattr__(self, name):
        method = getattr(self._collection, name)

        async def call(*args, **kwargs):
            try:
                return method(*args, **kwargs)
            except (mongomock.DuplicateKeyError, DuplicateKeyError) as e:
                raise DuplicateKeyError(str(e), 11000, getattr(e, "details", None))

        return call


class MockDatabase:
    def __init__(self, database):
        self.sync = database

    @property
    def name(self):
        return self.sync.name

    def __getitem__(self, name):
        return MockCollection(self.sync[name])


class BrokenCollection:
    """Every store call fails the way an unreachable server does."""

    def find(self, *args, **kwargs):
        return self

    def __getattr__(self, name):
        async def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")

        return fail


class BrokenDatabase:
    name = "todos_broken"

    def __getitem__(self, name):
        return BrokenCollection()


@pytest.fixture
def db(monkeypatch):
    monkeypatch.setattr(database_module, "_indexes_ready", False)
    database = MockDatabase(mongomock.MongoClient()["todos_test"])
    assert asyncio.run(init_db(database))
    app.dependency_overrides[get_db] = lambda: database
    yield database
    app.dependency_overrides.clear()


@pytest.fixture
def client(db):
    # Not used as a context manager, so the lifespan (real MongoDB) never runs.
    return TestClient(app)


@pytest.fixture
def db_without_indexes(db, monkeypatch):
    """A fresh database the startup index creation never reached."""
    database = MockDatabase(mongomock.MongoClient()["todos_late"])
    monkeypatch.setattr(database_module, "_indexes_ready", False)
    app.dependency_overrides[get_db] = lambda: database
    return database


@pytest.fixture
def broken_db(db, monkeypatch):
    monkeypatch.setattr(database_module, "_indexes_ready", False)
    app.dependency_overrides[get_db] = lambda: BrokenDatabase()
