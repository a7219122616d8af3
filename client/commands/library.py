"""Bulk command handlers: clearing, trash, export and import."""

import json
from pathlib import Path

import httpx

from ..config import EXPORT_FILE
from ..connector import NotesAPI
from ..state import ClientState, finish_editing
from .common import confirm, error_detail, report_http_error
from .notes import refresh


def clear_all(api: NotesAPI, state: ClientState) -> ClientState:
    """Delete every note, active and trashed, after confirmation."""
    if not confirm("Delete ALL notes, including the trash? This cannot be undone."):
        print("\nCancelled.\n")
        return state

    try:
        deleted_count = api.clear_all()
    except httpx.HTTPError as e:
        report_http_error(e, "delete all notes")
        return state

    print(f"\n✓ Deleted {deleted_count} notes.\n")
    return refresh(api, finish_editing(state))


def empty_trash(api: NotesAPI, state: ClientState) -> ClientState:
    """Permanently delete everything in the trash."""
    if not confirm("Permanently delete all notes in the trash?"):
        print("\nCancelled.\n")
        return state

    try:
        deleted_count = api.empty_trash()
    except httpx.HTTPError as e:
        report_http_error(e, "empty trash")
        return state

    print(f"\n✓ Trash emptied ({deleted_count} notes removed).\n")
    return refresh(api, state)


def export_notes(api: NotesAPI, state: ClientState, args: str = "") -> ClientState:
    """Write every note, including the trash, to a JSON file."""
    path = Path(args.strip()).expanduser() if args.strip() else EXPORT_FILE

    try:
        notes = api.list_notes(filter="all")
    except httpx.HTTPError as e:
        report_http_error(e, "export notes")
        return state

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(notes, ensure_ascii=False, indent=2), encoding="utf-8")
    except OSError as e:
        print(f"Error: Could not write '{path}': {e.strerror or e}\n")
        return state

    print(f"\n✓ Exported {len(notes)} notes to {path}\n")
    return state


def import_notes(api: NotesAPI, state: ClientState, args: str) -> ClientState:
    """Create a note for each entry of a JSON export file.

    Imported notes get new ids and timestamps; the trash flag is not carried over.
    """
    if not args.strip():
        print("Error: File path is required. Usage: /import <file>\n")
        return state

    path = Path(args.strip()).expanduser()
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        print(f"Error: File '{path}' not found.\n")
        return state
    except json.JSONDecodeError as e:
        print(f"Error: '{path}' is not valid JSON: {e}\n")
        return state
    except UnicodeDecodeError:
        print(f"Error: '{path}' is not a UTF-8 text file.\n")
        return state
    except OSError as e:
        print(f"Error: Could not read '{path}': {e.strerror or e}\n")
        return state

    if not isinstance(entries, list):
        print("Error: Import file must contain a JSON array of notes.\n")
        return state

    imported = 0
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            api.create_note(
                entry.get("title", ""),
                entry.get("content", ""),
                tags=entry.get("tags") or [],
                important=entry.get("important") is True,
            )
            imported += 1
        except httpx.HTTPStatusError as e:
            print(f"  Skipped '{entry.get('title', '')}': {error_detail(e.response)}")
        except httpx.HTTPError as e:
            report_http_error(e, "import notes")
            break

    print(f"\n✓ Imported {imported} of {len(entries)} notes.\n")
    return refresh(api, state)
