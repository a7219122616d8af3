"""Pydantic models for API requests and responses."""

from .notes import (
    DeletedCountResponse,
    ImportantUpdate,
    MessageResponse,
    Note,
    NoteMessageResponse,
    NoteWrite,
)

__all__ = [
    "DeletedCountResponse",
    "ImportantUpdate",
    "MessageResponse",
    "Note",
    "NoteMessageResponse",
    "NoteWrite",
]
