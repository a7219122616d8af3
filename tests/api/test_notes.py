"""Tests for notes endpoints."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from pymongo.errors import ServerSelectionTimeoutError

from api.routes.notes import get_note_store
from api.services.note_store import NoteStore

NOTE_KEYS = {"id", "title", "content", "tags", "important", "deleted", "createdAt", "updatedAt"}


def parse_time(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def create(api_client, **fields):
    payload = {"title": "Note", "content": "Body", **fields}
    response = api_client.post("/api/notes", json=payload)
    assert response.status_code == 201
    return response.json()


class TestNotesEndpoints:
    """Test notes CRUD endpoints."""

    def test_create_note(self, api_client, sample_note_data):
        """Test creating a note returns the canonical wire schema."""
        response = api_client.post("/api/notes", json=sample_note_data)

        assert response.status_code == 201
        data = response.json()
        assert set(data) == NOTE_KEYS
        assert data["title"] == sample_note_data["title"]
        assert data["content"] == sample_note_data["content"]
        assert data["tags"] == sample_note_data["tags"]
        assert data["important"] is False
        assert data["deleted"] is False
        assert data["createdAt"] == data["updatedAt"]

    def test_create_note_with_empty_title(self, api_client):
        """Test an empty title is rejected and nothing is stored."""
        response = api_client.post("/api/notes", json={"title": "", "content": "y"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Title and content are required"
        assert api_client.get("/api/notes", params={"filter": "all"}).json() == []

    def test_create_note_without_content(self, api_client):
        response = api_client.post("/api/notes", json={"title": "Only a title"})

        assert response.status_code == 400

    def test_create_note_with_wrong_types(self, api_client):
        """Test schema errors are reported as 400, not 422."""
        response = api_client.post(
            "/api/notes", json={"title": "A", "content": "x", "tags": "not-a-list"}
        )

        assert response.status_code == 400
        assert "tags" in response.json()["detail"]

    def test_get_note(self, api_client):
        note = create(api_client, title="Fetch me")

        response = api_client.get(f"/api/notes/{note['id']}")

        assert response.status_code == 200
        assert response.json() == note

    def test_get_missing_note(self, api_client):
        response = api_client.get("/api/notes/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Note not found"

    def test_get_note_with_invalid_id(self, api_client):
        response = api_client.get("/api/notes/not-a-number")

        assert response.status_code == 400

    def test_update_note(self, api_client):
        note = create(api_client, tags=["keep"])

        response = api_client.put(
            f"/api/notes/{note['id']}", json={"title": "Renamed", "content": "New body"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Renamed"
        assert data["content"] == "New body"
        assert data["tags"] == ["keep"]
        assert data["createdAt"] == note["createdAt"]
        assert parse_time(data["updatedAt"]) > parse_time(note["updatedAt"])

    def test_update_missing_note(self, api_client):
        """Test updating an unknown id returns 404 and changes nothing."""
        note = create(api_client)

        response = api_client.put("/api/notes/999", json={"title": "B", "content": "y"})

        assert response.status_code == 404
        assert api_client.get("/api/notes", params={"filter": "all"}).json() == [note]

    def test_update_with_empty_content(self, api_client):
        note = create(api_client)

        response = api_client.put(f"/api/notes/{note['id']}", json={"title": "A", "content": ""})

        assert response.status_code == 400
        assert api_client.get(f"/api/notes/{note['id']}").json() == note

    def test_set_important(self, api_client):
        note = create(api_client)

        response = api_client.patch(f"/api/notes/{note['id']}/important", json={"important": True})

        assert response.status_code == 200
        assert response.json()["important"] is True
        listed = api_client.get("/api/notes", params={"filter": "important"}).json()
        assert [n["id"] for n in listed] == [note["id"]]

        api_client.patch(f"/api/notes/{note['id']}/important", json={"important": False})
        assert api_client.get("/api/notes", params={"filter": "important"}).json() == []

    def test_set_important_missing_note(self, api_client):
        response = api_client.patch("/api/notes/5/important", json={"important": True})

        assert response.status_code == 404

    def test_set_important_requires_flag(self, api_client):
        note = create(api_client)

        response = api_client.patch(f"/api/notes/{note['id']}/important", json={})

        assert response.status_code == 400


class TestTrashLifecycle:
    """Soft delete, restore and permanent delete."""

    def test_soft_delete(self, api_client):
        note = create(api_client)

        response = api_client.delete(f"/api/notes/{note['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Note moved to trash"
        assert data["note"]["deleted"] is True
        assert api_client.get("/api/notes").json() == []
        assert [n["id"] for n in api_client.get("/api/notes?filter=deleted").json()] == [
            note["id"]
        ]
        assert len(api_client.get("/api/notes?filter=all").json()) == 1

    def test_soft_delete_missing_note(self, api_client):
        assert api_client.delete("/api/notes/404").status_code == 404

    def test_restore(self, api_client):
        note = create(api_client)
        api_client.delete(f"/api/notes/{note['id']}")

        response = api_client.patch(f"/api/notes/{note['id']}/restore")

        assert response.status_code == 200
        assert response.json()["message"] == "Note restored from trash"
        assert response.json()["note"]["deleted"] is False
        assert [n["id"] for n in api_client.get("/api/notes").json()] == [note["id"]]

    def test_restore_missing_note(self, api_client):
        assert api_client.patch("/api/notes/12/restore").status_code == 404

    def test_permanent_delete(self, api_client):
        note = create(api_client)

        response = api_client.delete(f"/api/notes/{note['id']}/permanent")

        assert response.status_code == 200
        assert response.json() == {"message": "Note permanently deleted from database"}
        assert api_client.get(f"/api/notes/{note['id']}").status_code == 404
        assert api_client.delete(f"/api/notes/{note['id']}/permanent").status_code == 404

        replacement = create(api_client)
        assert replacement["id"] != note["id"]


class TestListing:
    """Filtering, searching and sorting through query parameters."""

    def test_scenario(self, api_client):
        a = create(api_client, title="A", content="x")
        b = create(api_client, title="B", content="y", important=True)
        assert (a["id"], b["id"]) == (1, 2)

        def listed(**params):
            return [n["id"] for n in api_client.get("/api/notes", params=params).json()]

        assert listed(sort="important") == [2, 1]
        api_client.delete("/api/notes/1")
        assert listed() == [2]
        assert listed(filter="deleted") == [1]
        api_client.patch("/api/notes/1/restore")
        assert listed(sort="alpha-asc") == [1, 2]

    def test_search(self, api_client):
        create(api_client, title="Groceries", content="Buy MILK")
        create(api_client, title="Work", content="standup")

        response = api_client.get("/api/notes", params={"search": "milk"})

        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["Groceries"]

    def test_empty_listing(self, api_client):
        response = api_client.get("/api/notes", params={"search": "nothing"})

        assert response.status_code == 200
        assert response.json() == []

    def test_list_when_store_unavailable(self, api_client):
        """Test database failures surface as 500 with a message."""
        notes = MagicMock()
        cursor = MagicMock()
        cursor.to_list = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))
        notes.find.return_value = cursor
        db = MagicMock()
        db.notes = notes

        api_client.app.dependency_overrides[get_note_store] = lambda: NoteStore(db)
        try:
            response = api_client.get("/api/notes")
        finally:
            api_client.app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["detail"] == "Note store unavailable"


class TestHealthEndpoints:
    """Root and health endpoints."""

    def test_root(self, api_client):
        response = api_client.get("/")

        assert response.status_code == 200
        assert response.json()["notes"] == "/api/notes"
        assert response.json()["trash"] == "/api/trash"

    def test_health(self, api_client):
        response = api_client.get("/health")

        assert response.json() == {
            "status": "healthy",
            "service": "notekeeper-api",
            "database": "connected",
        }
