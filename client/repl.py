"""Interactive notes client with REPL loop."""

import os
import threading

from .commands import (
    cancel_edit,
    clear_all,
    delete_note,
    edit_note,
    empty_trash,
    export_notes,
    import_notes,
    new_note,
    purge_note,
    refresh,
    restore_note,
    save_note,
    toggle_important,
    view_note,
)
from .config import API_URL, SEARCH_DEBOUNCE_SECONDS
from .connector import NotesAPI
from .debounce import Debouncer
from .render import render_form
from .state import ClientState, set_filter, set_search, set_sort

HELP = """
View Commands:
  /notes - Reload and show the note list
  /filter <active|all|important|deleted> - Change which notes are listed
  /sort <newest|oldest|alpha-asc|alpha-desc|important> - Change the order
  /search [text] - Search title, content and tags (empty clears the search)
  /view <id> - Read a note

Edit Commands:
  /new - Create a note
  /edit <id> - Edit a note
  /save - Re-submit the form after a failed save
  /cancel - Stop editing and clear the form
  /important <id> - Toggle the important flag
  /delete <id> - Move a note to the trash
  /restore <id> - Restore a note from the trash
  /purge <id> - Permanently delete a note

Bulk Commands:
  /empty-trash - Permanently delete everything in the trash
  /clear-all - Delete every note
  /export [file] - Save all notes to a JSON file
  /import <file> - Create notes from a JSON file

Utility Commands:
  /help - Show this help
  /clear - Clear the terminal screen

Type 'exit' or 'quit' to leave."""


class Session:
    """Holds the client state and applies commands to it.

    Search reloads are debounced and run on a timer thread, so every state
    change goes through ``self.lock``.
    """

    def __init__(self, api: NotesAPI, debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS):
        self.api = api
        self.state = ClientState()
        self.lock = threading.RLock()
        self.search_debouncer = Debouncer(self.reload, delay=debounce_seconds)

    def reload(self):
        with self.lock:
            self.state = refresh(self.api, self.state)

    def search(self, text: str):
        with self.lock:
            self.state = set_search(self.state, text)
        self.search_debouncer.trigger()

    def handle(self, user_input: str) -> bool:
        """Run one command. Returns False when the user asked to leave."""
        command, _, args = user_input.partition(" ")
        command = command.lower()

        if command in ["exit", "quit"]:
            return False

        if command == "/search":
            self.search(args)
            return True

        if command == "/help":
            print(HELP)
            return True

        if command == "/clear":
            os.system("cls" if os.name == "nt" else "clear")
            return True

        with self.lock:
            self.search_debouncer.cancel()
            self.state = self._dispatch(command, args)
        return True

    def _dispatch(self, command: str, args: str) -> ClientState:
        api, state = self.api, self.state

        if command == "/notes":
            return refresh(api, state)
        if command in ["/filter", "/sort"]:
            try:
                state = (set_filter if command == "/filter" else set_sort)(state, args.strip())
            except ValueError as e:
                print(f"Error: {e}\n")
                return state
            return refresh(api, state)
        if command == "/view":
            return view_note(api, state, args)
        if command == "/new":
            return new_note(api, state)
        if command == "/edit":
            return edit_note(api, state, args)
        if command == "/save":
            return save_note(api, state)
        if command == "/cancel":
            state = cancel_edit(state)
            print(render_form(state))
            return state
        if command == "/important":
            return toggle_important(api, state, args)
        if command == "/delete":
            return delete_note(api, state, args)
        if command == "/restore":
            return restore_note(api, state, args)
        if command == "/purge":
            return purge_note(api, state, args)
        if command == "/empty-trash":
            return empty_trash(api, state)
        if command == "/clear-all":
            return clear_all(api, state)
        if command == "/export":
            return export_notes(api, state, args)
        if command == "/import":
            return import_notes(api, state, args)

        print(f"Unknown command '{command}'. Type /help for a list of commands.\n")
        return state


def main():
    """Notekeeper terminal client."""
    print("Welcome to Notekeeper!")
    print(HELP)
    print(f"\nUsing API at {API_URL}")
    print("Note: Make sure the API server is running (python -m api.server)\n")

    with NotesAPI() as api:
        session = Session(api)
        session.reload()

        while True:
            try:
                user_input = input("notes> ").strip()
                if not user_input:
                    continue
                if not session.handle(user_input):
                    print("\nGoodbye!")
                    break
            except (KeyboardInterrupt, EOFError):
                print("\n\nGoodbye!")
                break

        session.search_debouncer.cancel()


if __name__ == "__main__":
    main()
