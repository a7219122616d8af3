"""Tests for trash and bulk deletion endpoints."""

import pytest


@pytest.fixture
def populated(api_client):
    """Two active notes and one trashed note."""
    ids = []
    for title in ("Alpha", "Beta", "Gamma"):
        response = api_client.post("/api/notes", json={"title": title, "content": "text"})
        ids.append(response.json()["id"])
    api_client.delete(f"/api/notes/{ids[2]}")
    return ids


class TestTrashEndpoints:
    """Listing and emptying the trash."""

    def test_list_trash(self, api_client, populated):
        response = api_client.get("/api/trash")

        assert response.status_code == 200
        assert [n["id"] for n in response.json()] == [populated[2]]
        assert response.json()[0]["deleted"] is True

    def test_list_trash_with_search(self, api_client, populated):
        assert api_client.get("/api/trash", params={"search": "gam"}).json()[0]["title"] == "Gamma"
        assert api_client.get("/api/trash", params={"search": "alpha"}).json() == []

    @pytest.mark.parametrize("path", ["/api/notes/trash/empty", "/api/trash/clear"])
    def test_empty_trash(self, api_client, populated, path):
        response = api_client.delete(path)

        assert response.status_code == 200
        assert response.json() == {"message": "Trash emptied successfully", "deletedCount": 1}
        assert api_client.get("/api/trash").json() == []
        assert len(api_client.get("/api/notes").json()) == 2

    def test_empty_trash_when_empty(self, api_client):
        response = api_client.delete("/api/notes/trash/empty")

        assert response.json()["deletedCount"] == 0


class TestClearAll:
    """Deleting every note."""

    @pytest.mark.parametrize("path", ["/api/notes", "/api/notes/clear-all"])
    def test_clear_all_requires_confirmation(self, api_client, populated, path):
        response = api_client.delete(path)

        assert response.status_code == 400
        assert "Confirmation required" in response.json()["detail"]
        assert len(api_client.get("/api/notes", params={"filter": "all"}).json()) == 3

    @pytest.mark.parametrize("value", ["false", "1", "yes", "True"])
    def test_clear_all_needs_literal_true(self, api_client, populated, value):
        response = api_client.delete("/api/notes", params={"confirm": value})

        assert response.status_code == 400
        assert len(api_client.get("/api/notes", params={"filter": "all"}).json()) == 3

    @pytest.mark.parametrize("path", ["/api/notes", "/api/notes/clear-all"])
    def test_clear_all(self, api_client, populated, path):
        response = api_client.delete(path, params={"confirm": "true"})

        assert response.status_code == 200
        assert response.json() == {"message": "All notes deleted permanently", "deletedCount": 3}
        assert api_client.get("/api/notes", params={"filter": "all"}).json() == []

    def test_ids_continue_after_clear_all(self, api_client, populated):
        api_client.delete("/api/notes", params={"confirm": "true"})

        response = api_client.post("/api/notes", json={"title": "Fresh", "content": "start"})

        assert response.json()["id"] == max(populated) + 1
