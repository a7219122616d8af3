"""Client UI state and its transitions.

State is immutable: every transition returns a new ``ClientState``. The edit
form is either idle (empty, saves with "Create") or editing a fetched note
(populated, saves with "Update").
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FILTERS = ("active", "all", "important", "deleted")
SORTS = ("newest", "oldest", "alpha-asc", "alpha-desc", "important")

FormMode = Literal["idle", "editing"]


class NoteForm(BaseModel):
    """Fields of the create/update form."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    content: str = ""
    tags: tuple[str, ...] = ()
    important: bool = False


class ClientState(BaseModel):
    """Everything the client renders from."""

    model_config = ConfigDict(frozen=True)

    notes: tuple[dict, ...] = ()
    current_filter: str = "active"
    current_search: str = ""
    current_sort: str = "newest"
    editing_note_id: int | None = None
    selected_note_id: int | None = None
    form: NoteForm = Field(default_factory=NoteForm)
    from_cache: bool = False

    @property
    def mode(self) -> FormMode:
        return "idle" if self.editing_note_id is None else "editing"

    @property
    def save_label(self) -> str:
        return "Create" if self.editing_note_id is None else "Update"

    def find_note(self, note_id: int) -> dict | None:
        """Look up a note in the currently rendered list."""
        for note in self.notes:
            if note.get("id") == note_id:
                return note
        return None


def notes_loaded(state: ClientState, notes: list[dict], from_cache: bool = False) -> ClientState:
    return state.model_copy(update={"notes": tuple(notes), "from_cache": from_cache})


def set_filter(state: ClientState, filter: str) -> ClientState:
    if filter not in FILTERS:
        raise ValueError(f"Unknown filter '{filter}'. Use one of: {', '.join(FILTERS)}")
    return state.model_copy(update={"current_filter": filter})


def set_sort(state: ClientState, sort: str) -> ClientState:
    if sort not in SORTS:
        raise ValueError(f"Unknown sort '{sort}'. Use one of: {', '.join(SORTS)}")
    return state.model_copy(update={"current_sort": sort})


def set_search(state: ClientState, search: str) -> ClientState:
    return state.model_copy(update={"current_search": search.strip()})


def select_note(state: ClientState, note_id: int | None) -> ClientState:
    return state.model_copy(update={"selected_note_id": note_id})


def start_editing(state: ClientState, note: dict) -> ClientState:
    """Idle -> Editing, with the form populated from a fetched note."""
    form = NoteForm(
        title=note.get("title", ""),
        content=note.get("content", ""),
        tags=tuple(note.get("tags") or ()),
        important=bool(note.get("important", False)),
    )
    return state.model_copy(update={"editing_note_id": note["id"], "form": form})


def finish_editing(state: ClientState) -> ClientState:
    """Back to Idle after a cancel or a successful save."""
    return state.model_copy(update={"editing_note_id": None, "form": NoteForm()})
