"""Trash endpoints."""

import structlog
from fastapi import APIRouter, Depends

from ..models import DeletedCountResponse, Note
from ..observability import get_tracer
from ..services.note_store import NoteStore
from .notes import empty_trash, get_note_store

logger = structlog.get_logger(__name__)

tracer = get_tracer(__name__)

router = APIRouter(prefix="/trash", tags=["trash"])


@router.get("", response_model=list[Note])
async def list_trash(
    search: str | None = None,
    sort: str | None = None,
    store: NoteStore = Depends(get_note_store),
):
    """List notes that have been moved to the trash."""
    with tracer.start_as_current_span("list_trash") as span:
        notes = await store.list_notes(filter="deleted", search=search, sort=sort)

        span.set_attribute("notes.count", len(notes))
        logger.info("trash_listed", count=len(notes))
        return notes


router.add_api_route(
    "/clear", empty_trash, methods=["DELETE"], response_model=DeletedCountResponse
)
