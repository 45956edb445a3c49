import asyncio
from typing import Callable, List, Optional

from notepad.config import configure_logging_from_settings
from notepad.controller import InteractionController
from notepad.di import build_container
from notepad.error_handling import (
    NotepadError,
    NotFoundError,
    StorageError,
    ValidationError,
    format_error_for_user,
    register_error_handler,
    unregister_error_handler,
)
from notepad.logging_config import get_log_config, get_logger, set_log_level
from notepad.models import Note

logger = get_logger(__name__)

HELP_TEXT = """Commands:
  list              show notes, newest first
  new <text>        save a new note
  draft <text>      put text in the composer
  save              save the composer (updates the note being edited)
  edit <n>          load note n into the composer
  cancel            stop editing and clear the composer
  delete <n>        delete note n (asks for confirmation)
  copy <n>          copy note n to the clipboard
  debug on|off      show or hide debug logging in the console
  help              show this help
  exit              quit"""


def render_notes(notes: List[Note], controller: InteractionController) -> str:
    if not notes:
        return "📭 No notes yet."
    state = controller.snapshot()
    out = ["🗒️ Your notes:"]
    for i, note in enumerate(notes, start=1):
        marker = ""
        if note.id == state.editing_id:
            marker = " ✏️"
        elif note.id == state.last_copied_id:
            marker = " ✅"
        stamp = note.created_at.astimezone().strftime("%Y-%m-%d %H:%M")
        out.append(f"{i}. [{stamp}] {note.content}{marker}")
    return "\n".join(out)


def _pick(notes: List[Note], arg: str) -> Note:
    if not arg.isdigit() or not 1 <= int(arg) <= len(notes):
        raise NotFoundError(f"No note number {arg or '?'}")
    return notes[int(arg) - 1]


def _warn_unsaved(error: Exception) -> None:
    print("⚠️ Your notes could not be saved to disk. Changes are kept for this session.")


def handle_command(
    controller: InteractionController,
    user_input: str,
    ask: Callable[[str], str] = input,
) -> Optional[str]:
    """
    Run one command line against the controller.

    Returns:
        Text to show the user, or None when the loop should stop
    """
    command, _, arg = user_input.strip().partition(" ")
    command = command.lower()
    arg = arg.strip()
    notes = controller.repository.list()

    try:
        if command in ("exit", "quit"):
            return None
        elif command == "help":
            return HELP_TEXT
        elif command in ("list", "ls"):
            return render_notes(notes, controller)
        elif command == "new":
            if controller.editing_id is not None:
                return "⚠️ Finish editing first: use 'save' or 'cancel'."
            controller.set_draft(arg)
            controller.submit()
            return "💾 Saved!"
        elif command == "draft":
            controller.set_draft(arg)
            return f"📝 Draft: {arg}"
        elif command == "save":
            updating = controller.editing_id is not None
            controller.submit()
            return "🔄 Updated!" if updating else "💾 Saved!"
        elif command == "edit":
            note = _pick(notes, arg)
            controller.edit(note)
            return f"✏️ Editing note {arg}: {note.content}\nUse 'draft <text>' then 'save', or 'cancel'."
        elif command == "cancel":
            controller.cancel_edit()
            return "↩️ Edit cancelled."
        elif command == "delete":
            note = _pick(notes, arg)
            controller.request_delete(note.id)
            answer = ask("Are you sure you want to delete this note? This action cannot be undone. [y/N] ")
            if answer.strip().lower() in ("y", "yes"):
                controller.confirm_delete()
                return "🗑️ Deleted."
            controller.cancel_delete()
            return "Deletion cancelled."
        elif command == "copy":
            note = _pick(notes, arg)
            if asyncio.run(controller.copy(note.id)):
                return "📋 Copied!"
            return "⚠️ Could not copy to the clipboard."
        elif command == "debug":
            if arg not in ("on", "off"):
                return "Usage: debug on|off"
            set_log_level("DEBUG" if arg == "on" else "INFO", "console")
            return f"🔧 Console log level: {get_log_config()['console_level']}"
        else:
            return f"Unknown command '{command}'. Type 'help' for a list of commands."
    except ValidationError as e:
        return f"⚠️ {e.message}"
    except NotepadError as e:
        return format_error_for_user(e)


def run(container=None) -> None:
    container = container or build_container()
    configure_logging_from_settings(container.get_or_default("settings", {}))
    controller: InteractionController = container.get("controller")
    controller.on_focus = lambda: print("✏️ Composer ready.")
    register_error_handler(StorageError, _warn_unsaved)

    print("Elegant Notes. Type 'help' for commands.\n")
    print(render_notes(controller.repository.list(), controller))

    try:
        while True:
            try:
                user_input = input("> ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\nGoodbye.")
                break
            if not user_input:
                continue
            logger.debug(f"Command: {user_input}")
            reply = handle_command(controller, user_input)
            if reply is None:
                print("Goodbye.")
                break
            print(reply)
    finally:
        unregister_error_handler(StorageError, _warn_unsaved)


def main():
    run()

if __name__ == "__main__":
    main()
