"""Plain-text rendering of note cards."""

from datetime import datetime

from .state import ClientState

RULE = "=" * 60


def format_timestamp(value: str | None) -> str:
    """Render an ISO 8601 timestamp as local-looking ``YYYY-MM-DD HH:MM``."""
    if not value:
        return "unknown"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return value


def render_card(note: dict) -> str:
    """One note as a card: title line, content preview, tags, timestamp, actions."""
    marker = "★ " if note.get("important") else ""
    trashed = " [trash]" if note.get("deleted") else ""
    tags = ", ".join(note.get("tags") or []) or "no tags"

    content = note.get("content", "")
    preview = content if len(content) <= 200 else content[:197] + "..."

    note_id = note.get("id")
    if note.get("deleted"):
        actions = f"/restore {note_id} | /purge {note_id}"
    else:
        actions = f"/edit {note_id} | /important {note_id} | /delete {note_id}"

    return "\n".join(
        [
            f"{marker}{note.get('title', '')}{trashed}",
            f"  ID: {note_id} | Tags: {tags}",
            f"  {preview}",
            f"  Updated: {format_timestamp(note.get('updatedAt'))}",
            f"  Actions: {actions}",
        ]
    )


def render_list(state: ClientState) -> str:
    """Render the current note list with a header describing the view."""
    header = f"=== Notes ({state.current_filter}, {state.current_sort}"
    if state.current_search:
        header += f", search '{state.current_search}'"
    header += f") - {len(state.notes)} shown ==="
    if state.from_cache:
        header += "\n(offline: showing cached notes)"

    if not state.notes:
        return f"\n{header}\n\nNo notes found.\n"

    cards = "\n\n".join(render_card(note) for note in state.notes)
    return f"\n{header}\n\n{cards}\n"


def render_note(note: dict) -> str:
    """Full read view of a single note."""
    tags = ", ".join(note.get("tags") or []) or "no tags"
    return "\n".join(
        [
            "",
            RULE,
            f"Title: {note.get('title', '')}",
            f"ID: {note.get('id')}",
            f"Tags: {tags}",
            f"Important: {note.get('important', False)} | In trash: {note.get('deleted', False)}",
            f"Created: {format_timestamp(note.get('createdAt'))}",
            f"Updated: {format_timestamp(note.get('updatedAt'))}",
            RULE,
            "",
            note.get("content", ""),
            "",
            RULE,
            "",
        ]
    )


def render_form(state: ClientState) -> str:
    """Describe the edit form and which action saving will perform."""
    if state.mode == "idle":
        return "Form: new note (save will Create)"
    return f"Form: editing note {state.editing_note_id} (save will Update)"
