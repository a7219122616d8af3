"""Helpers shared by command handlers."""

import httpx


def parse_note_id(args: str, usage: str) -> int | None:
    """Parse a note id argument, printing usage when it is missing or malformed."""
    value = args.strip()
    if not value:
        print(f"Error: Note ID is required. Usage: {usage}\n")
        return None
    try:
        return int(value)
    except ValueError:
        print(f"Error: '{value}' is not a valid note ID.\n")
        return None


def error_detail(response: httpx.Response) -> str:
    """Extract the server's error message from an error response."""
    try:
        return response.json().get("detail", "Unknown error")
    except ValueError:
        return response.text or "Unknown error"


def report_http_error(error: httpx.HTTPError, action: str, note_id: int | None = None):
    """Print a user-facing notification for a failed request."""
    if isinstance(error, httpx.ConnectError):
        print("Error: Could not connect to API server.")
        print("Please start the server with: python -m api.server\n")
    elif isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        if status_code == 404 and note_id is not None:
            print(f"Error: Note with ID '{note_id}' not found.\n")
        else:
            print(f"Error: Failed to {action}: {error_detail(error.response)}\n")
    else:
        print(f"Error: API request failed: {error}\n")


def confirm(question: str) -> bool:
    """Ask a yes/no question, defaulting to no."""
    return input(f"{question} (y/N): ").strip().lower() in ["y", "yes"]
