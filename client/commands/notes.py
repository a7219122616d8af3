"""Notes command handlers.

Every handler takes the connector and the current state and returns the next
state. A failed request prints a notification and leaves the state as it was.
"""

import os
import subprocess
import sys
import tempfile
from pathlib import Path

import httpx

from ..config import load_cache, save_cache
from ..connector import NotesAPI
from ..render import render_form, render_list, render_note
from ..state import (
    FILTERS,
    SORTS,
    ClientState,
    NoteForm,
    finish_editing,
    notes_loaded,
    select_note,
    start_editing,
)
from .common import confirm, parse_note_id, report_http_error


def _cache_view(state: ClientState) -> dict:
    return {
        "filter": state.current_filter,
        "search": state.current_search,
        "sort": state.current_sort,
    }


def _restore_view(state: ClientState, view: dict) -> ClientState:
    """Switch to the filter, search and sort the cached list was loaded with."""
    update = {}
    if view.get("filter") in FILTERS:
        update["current_filter"] = view["filter"]
    if view.get("sort") in SORTS:
        update["current_sort"] = view["sort"]
    if isinstance(view.get("search"), str):
        update["current_search"] = view["search"]
    return state.model_copy(update=update)


def load_notes(api: NotesAPI, state: ClientState) -> ClientState:
    """Fetch the list for the current filter, search and sort.

    On failure the last cached list is shown instead, if there is one, under
    the view it was cached for.
    """
    try:
        notes = api.list_notes(
            filter=state.current_filter, search=state.current_search, sort=state.current_sort
        )
    except httpx.HTTPError as e:
        report_http_error(e, "load notes")
        cached = load_cache()
        if cached is None:
            return state
        print("Showing the last notes loaded successfully.\n")
        state = _restore_view(state, cached["view"])
        return notes_loaded(state, cached["notes"], from_cache=True)

    try:
        save_cache(notes, view=_cache_view(state))
    except OSError as e:
        print(f"Warning: Could not update the offline cache: {e}\n")
    return notes_loaded(state, notes)


def refresh(api: NotesAPI, state: ClientState) -> ClientState:
    """Reload the list and print it."""
    state = load_notes(api, state)
    print(render_list(state))
    return state


def view_note(api: NotesAPI, state: ClientState, args: str) -> ClientState:
    """Open the read view for a note."""
    note_id = parse_note_id(args, "/view <note_id>")
    if note_id is None:
        return state

    try:
        note = api.get_note(note_id)
    except httpx.HTTPError as e:
        report_http_error(e, "retrieve note", note_id)
        return state

    print(render_note(note))
    return select_note(state, note_id)


def _get_editor():
    """Get the user's preferred text editor."""
    editor = os.environ.get("EDITOR") or os.environ.get("VISUAL")
    if editor:
        return editor

    if sys.platform == "win32":
        return "notepad"
    for editor_cmd in ["nano", "vim", "vi"]:
        try:
            subprocess.run(
                ["which", editor_cmd],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
            )
            return editor_cmd
        except (subprocess.CalledProcessError, FileNotFoundError):
            continue

    return "vi"


def edit_text(initial: str) -> str | None:
    """Open the user's editor on ``initial`` and return the saved text.

    Returns None when the editor could not be run.
    """
    with tempfile.NamedTemporaryFile(mode="w", suffix=".md", delete=False) as tmp_file:
        tmp_file.write(initial)
        tmp_path = Path(tmp_file.name)

    try:
        editor = _get_editor()
        print(f"\nOpening editor ({editor}). Save and close it to continue.\n")
        try:
            subprocess.run([editor, str(tmp_path)], check=True)
        except subprocess.CalledProcessError:
            print(f"\nError: Editor '{editor}' exited with an error.\n")
            return None
        except FileNotFoundError:
            print(f"\nError: Editor '{editor}' not found.\n")
            print("You can set your preferred editor with: export EDITOR=nano\n")
            return None
        return tmp_path.read_text(encoding="utf-8")
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def _prompt(label: str, default: str = "") -> str:
    suffix = f" [{default}]" if default else ""
    return input(f"{label}{suffix}: ").strip() or default


def fill_form(form: NoteForm) -> NoteForm | None:
    """Prompt for each field, keeping current values on empty input."""
    title = _prompt("Title", form.title)
    tags_input = _prompt("Tags (comma-separated, optional)", ", ".join(form.tags))
    tags = tuple(tag.strip() for tag in tags_input.split(",") if tag.strip())
    important_default = "y" if form.important else "n"
    important = _prompt("Important? (y/n)", important_default).lower() in ["y", "yes"]

    content = edit_text(form.content)
    if content is None:
        return None

    return NoteForm(title=title, content=content, tags=tags, important=important)


def submit_form(api: NotesAPI, state: ClientState, form: NoteForm) -> ClientState:
    """Create or update depending on whether a note is being edited."""
    try:
        if state.editing_note_id is None:
            note = api.create_note(
                form.title, form.content, tags=list(form.tags), important=form.important
            )
            print(f"\n✓ Note created (ID {note['id']}).\n")
        else:
            note = api.update_note(
                state.editing_note_id,
                form.title,
                form.content,
                tags=list(form.tags),
                important=form.important,
            )
            print(f"\n✓ Note {note['id']} updated.\n")
    except httpx.HTTPError as e:
        report_http_error(e, f"{state.save_label.lower()} note", state.editing_note_id)
        # Keep what the user typed so /save can resubmit it
        return state.model_copy(update={"form": form})

    return refresh(api, finish_editing(state))


def save_note(api: NotesAPI, state: ClientState) -> ClientState:
    """Fill in the form and submit it."""
    print(f"\n{render_form(state)}")
    form = fill_form(state.form)
    if form is None:
        return state
    return submit_form(api, state, form)


def new_note(api: NotesAPI, state: ClientState) -> ClientState:
    """Start a new note from an empty form."""
    return save_note(api, finish_editing(state))


def edit_note(api: NotesAPI, state: ClientState, args: str) -> ClientState:
    """Load a note into the form and save it as an update."""
    note_id = parse_note_id(args, "/edit <note_id>")
    if note_id is None:
        return state

    try:
        note = api.get_note(note_id)
    except httpx.HTTPError as e:
        report_http_error(e, "retrieve note", note_id)
        return state

    return save_note(api, start_editing(state, note))


def cancel_edit(state: ClientState) -> ClientState:
    if state.mode == "editing":
        print(f"\nStopped editing note {state.editing_note_id}.\n")
    return finish_editing(state)


def toggle_important(api: NotesAPI, state: ClientState, args: str) -> ClientState:
    """Flip the importance flag of a note."""
    note_id = parse_note_id(args, "/important <note_id>")
    if note_id is None:
        return state

    try:
        note = state.find_note(note_id) or api.get_note(note_id)
        updated = api.set_important(note_id, not note.get("important", False))
    except httpx.HTTPError as e:
        report_http_error(e, "change importance", note_id)
        return state

    if updated["important"]:
        print(f"\n✓ Note {note_id} marked as important.\n")
    else:
        print(f"\n✓ Note {note_id} is no longer important.\n")
    return refresh(api, state)


def delete_note(api: NotesAPI, state: ClientState, args: str) -> ClientState:
    """Move a note to the trash."""
    note_id = parse_note_id(args, "/delete <note_id>")
    if note_id is None:
        return state

    try:
        api.delete_note(note_id)
    except httpx.HTTPError as e:
        report_http_error(e, "delete note", note_id)
        return state

    print(f"\n✓ Note {note_id} moved to trash.")
    print("  Tip: You can view trashed notes with: /filter deleted\n")
    if state.editing_note_id == note_id:
        state = finish_editing(state)
    return refresh(api, state)


def restore_note(api: NotesAPI, state: ClientState, args: str) -> ClientState:
    """Bring a note back from the trash."""
    note_id = parse_note_id(args, "/restore <note_id>")
    if note_id is None:
        return state

    try:
        api.restore_note(note_id)
    except httpx.HTTPError as e:
        report_http_error(e, "restore note", note_id)
        return state

    print(f"\n✓ Note {note_id} restored.\n")
    return refresh(api, state)


def purge_note(api: NotesAPI, state: ClientState, args: str) -> ClientState:
    """Permanently delete a note after confirmation."""
    note_id = parse_note_id(args, "/purge <note_id>")
    if note_id is None:
        return state

    if not confirm(f"Permanently delete note '{note_id}'? This cannot be undone."):
        print("\nDeletion cancelled.\n")
        return state

    try:
        api.delete_note_permanently(note_id)
    except httpx.HTTPError as e:
        report_http_error(e, "delete note", note_id)
        return state

    print(f"\n✓ Note {note_id} permanently deleted.\n")
    state = select_note(state, None) if state.selected_note_id == note_id else state
    return refresh(api, state)
