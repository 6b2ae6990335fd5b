"""API test fixtures — fake entry stores + FastAPI test client.

Invariants:
    - The app is built with an injected store, so no database is touched
    - recording_store records every saved Entry; failing_store always raises

Design Decisions:
    - httpx AsyncClient over ASGITransport: exercises the real gate chain
    - Lifespan is not run by ASGITransport; injected stores need no startup
"""

import pytest
from httpx import ASGITransport, AsyncClient

from capture.config import Settings
from capture.core.entry import Entry
from capture.core.errors import PersistenceError
from capture.main import create_app


AUTH = ("user", "pass")


class RecordingStore:
    def __init__(self):
        self.saved: list[Entry] = []
        self.closed = 0
        self.healthy = True

    async def save(self, entry: Entry) -> None:
        self.saved.append(entry)

    async def close(self) -> None:
        self.closed += 1

    async def health_check(self) -> bool:
        return self.healthy


class FailingStore:
    def __init__(self, exc: Exception | None = None):
        self.exc = exc or PersistenceError("database offline", "insert")
        self.calls = 0

    async def save(self, entry: Entry) -> None:
        self.calls += 1
        raise self.exc

    async def close(self) -> None:
        pass


@pytest.fixture
def settings():
    return Settings(
        auth_username="user",
        auth_password="pass",
        capture_path="campaign",
        database_url="sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
def recording_store():
    return RecordingStore()


def _client(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(settings, recording_store):
    """Client for an app whose store records every save."""
    async with _client(create_app(settings, store=recording_store)) as c:
        yield c


@pytest.fixture
def make_client(settings):
    """Factory: client for an app built around any store."""
    def _make(store):
        return _client(create_app(settings, store=store))
    return _make


@pytest.fixture
def valid_body():
    return {
        "campaignName": "Foo",
        "campaignVersion": "0.0.1",
        "entrant": {
            "title": "Mr",
            "firstName": "John",
            "lastName": "Smith",
            "emailAddress": "foo@bar.com",
        },
        "form": [],
    }


@pytest.fixture
def failing_store():
    """Store whose save always raises PersistenceError."""
    return FailingStore()


@pytest.fixture
def crashing_store():
    """Store whose save raises an unexpected, untyped exception."""
    return FailingStore(RuntimeError("connection reset by peer"))
