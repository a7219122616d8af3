"""Pytest configuration and shared fixtures."""

import os

# Keep exporters quiet before the app configures OpenTelemetry
os.environ.setdefault("OTEL_TRACES_EXPORTER", "none")
os.environ.setdefault("OTEL_METRICS_EXPORTER", "none")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from api.database import Database
from api.services.note_store import MonotonicClock, NoteStore


@pytest.fixture
def test_db_name():
    """Database name for testing."""
    return "notekeeper_test"


@pytest.fixture
def mongo_client():
    """In-memory MongoDB client."""
    return AsyncMongoMockClient()


@pytest.fixture
def mock_db(mongo_client, test_db_name):
    """In-memory MongoDB database."""
    return mongo_client[test_db_name]


@pytest.fixture
def store(mock_db):
    """Note store over the in-memory database with its own clock."""
    return NoteStore(mock_db, clock=MonotonicClock())


@pytest.fixture
def api_client(monkeypatch, mongo_client, mock_db):
    """FastAPI test client whose lifespan connects to the in-memory database."""

    async def fake_connect(cls):
        cls.client = mongo_client
        cls.db = mock_db
        await cls.initialize_collections()

    async def fake_disconnect(cls):
        cls.client = None
        cls.db = None

    monkeypatch.setattr(Database, "connect", classmethod(fake_connect))
    monkeypatch.setattr(Database, "disconnect", classmethod(fake_disconnect))

    from api.app import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def sample_note_data():
    """Sample note data for testing."""
    return {
        "title": "Test Note",
        "content": "This is a test note.",
        "tags": ["test", "sample"],
        "important": False,
    }
