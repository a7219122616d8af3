"""Configuration and local storage for the Notekeeper client."""

import json
import os
from pathlib import Path

# Configuration
API_URL = os.getenv("NOTEKEEPER_API_URL", "http://localhost:8000/api")
DATA_DIR = Path(os.getenv("NOTEKEEPER_HOME", Path.home() / ".notekeeper"))
CACHE_FILE = DATA_DIR / "cache.json"
EXPORT_FILE = DATA_DIR / "notes-export.json"
SEARCH_DEBOUNCE_SECONDS = float(os.getenv("NOTEKEEPER_SEARCH_DEBOUNCE", "0.4"))


def save_cache(notes: list[dict], view: dict | None = None, path: Path | None = None):
    """Save the last successfully loaded note list with the view it was loaded for."""
    path = path or CACHE_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"view": view or {}, "notes": notes}
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def load_cache(path: Path | None = None) -> dict | None:
    """Load the cached ``{"view", "notes"}`` payload, if one was saved and is readable."""
    path = path or CACHE_FILE
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None

    if not isinstance(payload, dict):
        return None
    notes, view = payload.get("notes"), payload.get("view")
    if not isinstance(notes, list) or not all(isinstance(note, dict) for note in notes):
        return None
    return {"view": view if isinstance(view, dict) else {}, "notes": notes}
