"""Client command handlers."""

from .library import clear_all, empty_trash, export_notes, import_notes
from .notes import (
    cancel_edit,
    delete_note,
    edit_note,
    load_notes,
    new_note,
    purge_note,
    refresh,
    restore_note,
    save_note,
    toggle_important,
    view_note,
)

__all__ = [
    "cancel_edit",
    "clear_all",
    "delete_note",
    "edit_note",
    "empty_trash",
    "export_notes",
    "import_notes",
    "load_notes",
    "new_note",
    "purge_note",
    "refresh",
    "restore_note",
    "save_note",
    "toggle_important",
    "view_note",
]
