"""MongoDB-backed note store."""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta

import structlog
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from ..exceptions import NoteNotFoundError, StoreUnavailableError, ValidationError
from ..models import Note

logger = structlog.get_logger(__name__)

DEFAULT_SORT = "newest"

# Sort keys applied after the query; alphabetical order ignores case.
SORTS = {
    "newest": (lambda note: (note.updated_at, note.id), True),
    "oldest": (lambda note: (note.updated_at, note.id), False),
    "alpha-asc": (lambda note: (note.title.casefold(), note.id), False),
    "alpha-desc": (lambda note: (note.title.casefold(), note.id), True),
    "important": (lambda note: (note.important, note.updated_at, note.id), True),
}


class MonotonicClock:
    """
    Wall clock truncated to BSON's millisecond precision.

    Successive readings are strictly increasing, so a mutation always
    produces an updated_at newer than any earlier timestamp from this process.
    """

    def __init__(self):
        self._last: datetime | None = None

    def now(self) -> datetime:
        now = datetime.now(UTC)
        now = now.replace(microsecond=now.microsecond // 1000 * 1000)
        if self._last is not None and now <= self._last:
            now = self._last + timedelta(milliseconds=1)
        self._last = now
        return now


clock = MonotonicClock()


def build_query(filter: str | None = None, search: str | None = None) -> dict:
    """Translate a listing filter and search term into a MongoDB query."""
    if filter == "all":
        query: dict = {}
    elif filter == "important":
        query = {"is_important": True, "is_deleted": False}
    elif filter == "deleted":
        query = {"is_deleted": True}
    else:
        query = {"is_deleted": False}

    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{"title": pattern}, {"content": pattern}, {"tags": pattern}]

    return query


def sort_notes(notes: list[Note], sort: str | None = None) -> list[Note]:
    """Order notes by one of the named sorts, falling back to newest first."""
    key, reverse = SORTS.get(sort or DEFAULT_SORT, SORTS[DEFAULT_SORT])
    return sorted(notes, key=key, reverse=reverse)


def _as_utc(value: datetime) -> datetime:
    # Clients created without tz_aware=True hand back naive UTC datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def to_note(doc: dict) -> Note:
    """Convert a stored document into the wire model."""
    return Note(
        id=doc["_id"],
        title=doc["title"],
        content=doc["content"],
        tags=doc.get("tags", []),
        important=doc.get("is_important", False),
        deleted=doc.get("is_deleted", False),
        created_at=_as_utc(doc["created_at"]),
        updated_at=_as_utc(doc["updated_at"]),
    )


def _require_text(title: str | None, content: str | None) -> None:
    if not title or not title.strip() or not content or not content.strip():
        raise ValidationError("Title and content are required")


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Re-raise driver failures as StoreUnavailableError."""
    try:
        yield
    except PyMongoError as e:
        logger.error("note_store_unavailable", operation=operation, error=str(e))
        raise StoreUnavailableError() from e


class NoteStore:
    """
    CRUD and query operations over the ``notes`` collection.

    Ids are integers drawn from a persistent counter in the ``counters``
    collection, so an id is never handed out twice, even after a bulk clear.
    Every operation issues a single statement against the collection.
    """

    def __init__(self, db: AsyncIOMotorDatabase, clock: MonotonicClock = clock):
        self.db = db
        self.notes = db.notes
        self.counters = db.counters
        self.clock = clock

    async def list_notes(
        self, filter: str | None = None, search: str | None = None, sort: str | None = None
    ) -> list[Note]:
        """
        List notes matching a filter and optional search term.

        Args:
            filter: "all", "important", "deleted"; anything else lists active notes
            search: Case-insensitive substring matched against title, content and tags
            sort: "newest" (default), "oldest", "alpha-asc", "alpha-desc" or "important"

        Returns:
            Matching notes, possibly empty
        """
        query = build_query(filter, search)
        with _store_errors("list"):
            docs = await self.notes.find(query).to_list(length=None)
        return sort_notes([to_note(doc) for doc in docs], sort)

    async def get(self, note_id: int) -> Note:
        with _store_errors("get"):
            doc = await self.notes.find_one({"_id": note_id})
        if doc is None:
            raise NoteNotFoundError(note_id)
        return to_note(doc)

    async def create(
        self,
        title: str | None,
        content: str | None,
        tags: list[str] | None = None,
        important: bool | None = None,
    ) -> Note:
        _require_text(title, content)

        with _store_errors("create"):
            counter = await self.counters.find_one_and_update(
                {"_id": "notes"},
                {"$inc": {"seq": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
            now = self.clock.now()
            doc = {
                "_id": counter["seq"],
                "title": title,
                "content": content,
                "tags": list(tags or []),
                "is_important": bool(important),
                "is_deleted": False,
                "created_at": now,
                "updated_at": now,
            }
            await self.notes.insert_one(doc)

        return to_note(doc)

    async def update(
        self,
        note_id: int,
        title: str | None,
        content: str | None,
        tags: list[str] | None = None,
        important: bool | None = None,
    ) -> Note:
        """Replace title and content; tags and importance change only when given."""
        _require_text(title, content)

        fields = {"title": title, "content": content}
        if tags is not None:
            fields["tags"] = list(tags)
        if important is not None:
            fields["is_important"] = important
        return await self._set_fields(note_id, fields, "update")

    async def set_important(self, note_id: int, important: bool) -> Note:
        return await self._set_fields(note_id, {"is_important": important}, "set_important")

    async def soft_delete(self, note_id: int) -> Note:
        return await self._set_fields(note_id, {"is_deleted": True}, "soft_delete")

    async def restore(self, note_id: int) -> Note:
        return await self._set_fields(note_id, {"is_deleted": False}, "restore")

    async def permanently_delete(self, note_id: int) -> None:
        with _store_errors("permanently_delete"):
            doc = await self.notes.find_one_and_delete({"_id": note_id})
        if doc is None:
            raise NoteNotFoundError(note_id)

    async def clear_all(self, confirmed: bool) -> int:
        """Remove every note, active and trashed. Requires explicit confirmation."""
        if not confirmed:
            raise ValidationError(
                "Confirmation required. Add ?confirm=true to delete all notes"
            )
        with _store_errors("clear_all"):
            result = await self.notes.delete_many({})
        return result.deleted_count

    async def empty_trash(self) -> int:
        with _store_errors("empty_trash"):
            result = await self.notes.delete_many({"is_deleted": True})
        return result.deleted_count

    async def _set_fields(self, note_id: int, fields: dict, operation: str) -> Note:
        with _store_errors(operation):
            doc = await self.notes.find_one_and_update(
                {"_id": note_id},
                {"$set": {**fields, "updated_at": self.clock.now()}},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise NoteNotFoundError(note_id)
        return to_note(doc)
