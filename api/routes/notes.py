"""Notes endpoints."""

import structlog
from fastapi import APIRouter, Depends

from ..database import get_db
from ..models import (
    DeletedCountResponse,
    ImportantUpdate,
    MessageResponse,
    Note,
    NoteMessageResponse,
    NoteWrite,
)
from ..observability import get_app_metrics, get_tracer
from ..services.note_store import NoteStore

# Initialize logger
logger = structlog.get_logger(__name__)

# Get tracer
tracer = get_tracer(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def get_note_store() -> NoteStore:
    """Note store bound to the connected database."""
    return NoteStore(get_db())


@router.get("", response_model=list[Note])
async def list_notes(
    filter: str | None = None,
    search: str | None = None,
    sort: str | None = None,
    store: NoteStore = Depends(get_note_store),
):
    """
    List notes.

    Without a filter only active notes are returned; `filter` may be
    `all`, `important` or `deleted`. `search` matches title, content and tags
    case-insensitively. `sort` defaults to `newest`.
    """
    with tracer.start_as_current_span("list_notes") as span:
        span.set_attribute("query.filter", filter or "active")
        span.set_attribute("query.sort", sort or "newest")
        if search:
            span.set_attribute("query.search", search)

        notes = await store.list_notes(filter=filter, search=search, sort=sort)

        span.set_attribute("notes.count", len(notes))
        logger.info("notes_listed", filter=filter, sort=sort, count=len(notes))

        return notes


@router.post("", response_model=Note, status_code=201)
async def create_note(body: NoteWrite, store: NoteStore = Depends(get_note_store)):
    """Create a note. Title and content are required."""
    with tracer.start_as_current_span("create_note") as span:
        note = await store.create(
            title=body.title, content=body.content, tags=body.tags, important=body.important
        )

        span.set_attribute("note.id", note.id)
        span.set_attribute("note.tags_count", len(note.tags))
        get_app_metrics().notes_created.add(1)
        logger.info("note_created", note_id=note.id, important=note.important)

        return note


@router.delete("", response_model=DeletedCountResponse)
@router.delete("/clear-all", response_model=DeletedCountResponse)
async def clear_all_notes(
    confirm: str | None = None, store: NoteStore = Depends(get_note_store)
):
    """Permanently delete every note, active and trashed. Requires exactly `?confirm=true`."""
    with tracer.start_as_current_span("clear_all_notes") as span:
        deleted_count = await store.clear_all(confirmed=confirm == "true")

        span.set_attribute("notes.deleted_count", deleted_count)
        get_app_metrics().notes_purged.add(deleted_count)
        logger.info("notes_cleared", deleted_count=deleted_count)

        return DeletedCountResponse(
            message="All notes deleted permanently", deleted_count=deleted_count
        )


@router.delete("/trash/empty", response_model=DeletedCountResponse)
async def empty_trash(store: NoteStore = Depends(get_note_store)):
    """Permanently delete every note in the trash."""
    with tracer.start_as_current_span("empty_trash") as span:
        deleted_count = await store.empty_trash()

        span.set_attribute("notes.deleted_count", deleted_count)
        get_app_metrics().notes_purged.add(deleted_count)
        logger.info("trash_emptied", deleted_count=deleted_count)

        return DeletedCountResponse(
            message="Trash emptied successfully", deleted_count=deleted_count
        )


@router.get("/{note_id}", response_model=Note)
async def get_note(note_id: int, store: NoteStore = Depends(get_note_store)):
    """Retrieve a note by id, whether active or trashed."""
    with tracer.start_as_current_span("get_note") as span:
        span.set_attribute("note.id", note_id)

        note = await store.get(note_id)

        logger.info("note_retrieved", note_id=note_id)
        return note


@router.put("/{note_id}", response_model=Note)
async def update_note(note_id: int, body: NoteWrite, store: NoteStore = Depends(get_note_store)):
    """
    Replace a note's title and content.

    Tags and importance are only changed when present in the body. The
    trash flag is never touched by an update.
    """
    with tracer.start_as_current_span("update_note") as span:
        span.set_attribute("note.id", note_id)

        note = await store.update(
            note_id,
            title=body.title,
            content=body.content,
            tags=body.tags,
            important=body.important,
        )

        get_app_metrics().notes_updated.add(1)
        logger.info("note_updated", note_id=note_id)
        return note


@router.patch("/{note_id}/important", response_model=Note)
async def set_note_important(
    note_id: int, body: ImportantUpdate, store: NoteStore = Depends(get_note_store)
):
    """Mark or unmark a note as important."""
    with tracer.start_as_current_span("set_note_important") as span:
        span.set_attribute("note.id", note_id)
        span.set_attribute("note.important", body.important)

        note = await store.set_important(note_id, body.important)

        get_app_metrics().notes_updated.add(1)
        logger.info("note_importance_changed", note_id=note_id, important=body.important)
        return note


@router.delete("/{note_id}", response_model=NoteMessageResponse)
async def delete_note(note_id: int, store: NoteStore = Depends(get_note_store)):
    """Move a note to the trash. Deleting a trashed note again is not an error."""
    with tracer.start_as_current_span("delete_note") as span:
        span.set_attribute("note.id", note_id)

        note = await store.soft_delete(note_id)

        get_app_metrics().notes_trashed.add(1)
        logger.info("note_trashed", note_id=note_id)
        return NoteMessageResponse(message="Note moved to trash", note=note)


@router.patch("/{note_id}/restore", response_model=NoteMessageResponse)
async def restore_note(note_id: int, store: NoteStore = Depends(get_note_store)):
    """Bring a note back from the trash."""
    with tracer.start_as_current_span("restore_note") as span:
        span.set_attribute("note.id", note_id)

        note = await store.restore(note_id)

        get_app_metrics().notes_restored.add(1)
        logger.info("note_restored", note_id=note_id)
        return NoteMessageResponse(message="Note restored from trash", note=note)


@router.delete("/{note_id}/permanent", response_model=MessageResponse)
async def delete_note_permanently(note_id: int, store: NoteStore = Depends(get_note_store)):
    """Remove a note from the database. This cannot be undone."""
    with tracer.start_as_current_span("delete_note_permanently") as span:
        span.set_attribute("note.id", note_id)

        await store.permanently_delete(note_id)

        get_app_metrics().notes_purged.add(1)
        logger.info("note_purged", note_id=note_id)
        return MessageResponse(message="Note permanently deleted from database")
