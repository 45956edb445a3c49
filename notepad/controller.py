import asyncio
import logging
from typing import Callable, Optional, Union

from notepad.clipboard import Clipboard
from notepad.error_handling import ClipboardError, error_boundary, handle_error
from notepad.models import ControllerState, Note
from notepad.repository import NoteRepository
from notepad.transient import Scheduler, ThreadingScheduler, TransientFlag

logger = logging.getLogger(__name__)

DEFAULT_FEEDBACK_WINDOW = 0.5


class InteractionController:
    """
    Composer and feedback state for the notes view.

    The controller turns view intents (save, edit, delete, copy) into
    repository calls and tracks the state the view needs to render them:
    - the shared composer draft and which note, if any, it is editing
    - which note is waiting for delete confirmation
    - short-lived confirmations for save, update and copy
    """

    def __init__(
        self,
        repository: NoteRepository,
        clipboard: Clipboard,
        scheduler: Optional[Scheduler] = None,
        feedback_window: float = DEFAULT_FEEDBACK_WINDOW,
        on_focus: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize the controller.

        Args:
            repository: Note collection the intents act on
            clipboard: Destination for copied note text
            scheduler: Runs the delayed clears of feedback flags
            feedback_window: Seconds a confirmation stays visible
            on_focus: Called when the composer should take input focus
        """
        self.repository = repository
        self.clipboard = clipboard
        self.on_focus = on_focus
        scheduler = scheduler or ThreadingScheduler()

        self.draft_content = ""
        self.editing_id: Optional[str] = None
        self.pending_delete_id: Optional[str] = None

        self._just_saved: TransientFlag[bool] = TransientFlag("just_saved", scheduler, feedback_window, resting=False)
        self._just_updated: TransientFlag[bool] = TransientFlag("just_updated", scheduler, feedback_window, resting=False)
        self._last_copied: TransientFlag[Optional[str]] = TransientFlag("last_copied_id", scheduler, feedback_window)

    @property
    def just_saved(self) -> bool:
        return self._just_saved.value

    @property
    def just_updated(self) -> bool:
        return self._just_updated.value

    @property
    def last_copied_id(self) -> Optional[str]:
        return self._last_copied.value

    def snapshot(self) -> ControllerState:
        return ControllerState(
            draft_content=self.draft_content,
            editing_id=self.editing_id,
            pending_delete_id=self.pending_delete_id,
            last_copied_id=self.last_copied_id,
            just_saved=self.just_saved,
            just_updated=self.just_updated,
        )

    # -- composer --------------------------------------------------------

    def set_draft(self, text: str) -> None:
        self.draft_content = text

    def edit(self, note: Union[Note, str]) -> None:
        """Load a note into the composer for editing."""
        if not isinstance(note, Note):
            note = self.repository.get(note)
        previous = self.editing_id
        self.editing_id = note.id
        self.draft_content = note.content
        if previous != note.id:
            self._request_focus()

    def cancel_edit(self) -> None:
        """Leave edit mode and empty the composer."""
        was_editing = self.editing_id is not None
        self._reset_edit()
        if was_editing:
            self._request_focus()

    def submit(self) -> Note:
        """
        Save the composer draft.

        Updates the note being edited, or creates a new note when not editing.
        On a ValidationError nothing changes and the draft is kept.

        Returns:
            The created or updated note
        """
        if self.editing_id is not None:
            note = self.repository.update(self.editing_id, self.draft_content)
            self._reset_edit()
            self._just_updated.set(True)
            return note

        note = self.repository.create(self.draft_content)
        self.draft_content = ""
        self._just_saved.set(True)
        return note

    # -- deletion --------------------------------------------------------

    def request_delete(self, note_id: str) -> None:
        if note_id == self.editing_id:
            self._reset_edit()
        self.pending_delete_id = note_id

    def confirm_delete(self) -> None:
        note_id = self.pending_delete_id
        if note_id is None:
            return
        if note_id == self.editing_id:
            self._reset_edit()
        self.repository.delete(note_id)
        self.pending_delete_id = None
        logger.debug(f"Deletion of note {note_id} confirmed")

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    # -- copy ------------------------------------------------------------

    async def copy(self, note_id: str) -> bool:
        """
        Copy a note's content to the clipboard.

        Clipboard failures are logged and leave the state untouched.

        Returns:
            True if the text reached the clipboard, False otherwise
        """
        note = self.repository.get(note_id)
        try:
            await asyncio.to_thread(self.clipboard.write_text, note.content)
        except ClipboardError as e:
            handle_error(e)
            return False
        except Exception as e:
            handle_error(ClipboardError(f"Failed to copy note {note_id}", cause=e))
            return False
        self._last_copied.set(note_id)
        logger.debug(f"Copied note {note_id} to the clipboard")
        return True

    def _reset_edit(self) -> None:
        self.editing_id = None
        self.draft_content = ""

    @error_boundary(error_message="Composer focus callback failed")
    def _request_focus(self) -> None:
        if self.on_focus is not None:
            self.on_focus()
