"""HTTP connector for the Notekeeper API.

Each operation maps to exactly one endpoint. Non-2xx responses raise
``httpx.HTTPStatusError``; transport failures raise ``httpx.HTTPError``
subclasses. Nothing is retried.
"""

from typing import Any

import httpx

from .config import API_URL


class NotesAPI:
    """Thin synchronous wrapper over the notes endpoints.

    Example:
        >>> with NotesAPI() as api:
        ...     note = api.create_note("Groceries", "milk, eggs", tags=["home"])
        ...     api.set_important(note["id"], True)
    """

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the connector.

        Args:
            base_url: API root including the prefix, e.g. http://localhost:8000/api
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
            http_client: Preconfigured client to use instead of creating one
        """
        self.client = http_client or httpx.Client(
            base_url=base_url, timeout=timeout, transport=transport
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the underlying HTTP client."""
        self.client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = self.client.request(method, url, **kwargs)
        response.raise_for_status()
        return response.json()

    def list_notes(
        self, filter: str = "active", search: str = "", sort: str = "newest"
    ) -> list[dict]:
        params = {"filter": filter, "sort": sort}
        if search:
            params["search"] = search
        return self._request("GET", "/notes", params=params)

    def get_note(self, note_id: int) -> dict:
        return self._request("GET", f"/notes/{note_id}")

    def create_note(
        self, title: str, content: str, tags: list[str] | None = None, important: bool = False
    ) -> dict:
        payload = {"title": title, "content": content, "tags": tags or [], "important": important}
        return self._request("POST", "/notes", json=payload)

    def update_note(
        self,
        note_id: int,
        title: str,
        content: str,
        tags: list[str] | None = None,
        important: bool | None = None,
    ) -> dict:
        payload: dict[str, Any] = {"title": title, "content": content}
        if tags is not None:
            payload["tags"] = tags
        if important is not None:
            payload["important"] = important
        return self._request("PUT", f"/notes/{note_id}", json=payload)

    def set_important(self, note_id: int, important: bool) -> dict:
        return self._request("PATCH", f"/notes/{note_id}/important", json={"important": important})

    def delete_note(self, note_id: int) -> dict:
        """Move a note to the trash."""
        return self._request("DELETE", f"/notes/{note_id}")

    def restore_note(self, note_id: int) -> dict:
        return self._request("PATCH", f"/notes/{note_id}/restore")

    def delete_note_permanently(self, note_id: int) -> dict:
        return self._request("DELETE", f"/notes/{note_id}/permanent")

    def clear_all(self) -> int:
        """Delete every note. Returns the number removed."""
        return self._request("DELETE", "/notes", params={"confirm": "true"})["deletedCount"]

    def empty_trash(self) -> int:
        """Delete every trashed note. Returns the number removed."""
        return self._request("DELETE", "/notes/trash/empty")["deletedCount"]
