"""Fixtures for client tests."""

import httpx
import pytest

from client import config
from client.connector import NotesAPI


@pytest.fixture(autouse=True)
def cache_file(tmp_path, monkeypatch):
    """Point the offline cache at a temporary file."""
    path = tmp_path / "cache.json"
    monkeypatch.setattr(config, "CACHE_FILE", path)
    return path


@pytest.fixture
def notes_api(api_client):
    """Connector talking to the in-process API."""
    api_client.base_url = "http://testserver/api"
    return NotesAPI(http_client=api_client)


@pytest.fixture
def offline_api():
    """Connector whose every request fails to connect."""

    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    return NotesAPI(base_url="http://testserver/api", transport=httpx.MockTransport(handler))
