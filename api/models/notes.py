"""Notes-related Pydantic models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Note(BaseModel):
    """A stored note, serialized on the wire with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    important: bool = False
    deleted: bool = False
    created_at: datetime
    updated_at: datetime


class NoteWrite(BaseModel):
    """
    Request body for creating or replacing a note.

    Title and content are optional here so that missing or blank values are
    rejected by the store with a readable message instead of a schema error.
    """

    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    important: bool | None = None


class ImportantUpdate(BaseModel):
    """Request body for setting the importance flag."""

    important: bool


class NoteMessageResponse(BaseModel):
    """Outcome of a soft delete or restore."""

    message: str
    note: Note


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class DeletedCountResponse(BaseModel):
    """Outcome of a bulk removal."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    deleted_count: int
