import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from notepad.error_handling import NotFoundError, StorageError, ValidationError, handle_error
from notepad.models import Note
from notepad.storage.base import NoteStorage

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_encodable(content: str) -> None:
    """Reject text with lone surrogates, which no storage backend can write."""
    try:
        content.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError("Note text contains characters that cannot be saved")


class NoteRepository:
    """
    Ordered in-memory note collection kept in sync with a storage backend.

    Notes are held most-recent-first. The collection is loaded once on
    construction and written back in full after every successful mutation.
    """

    def __init__(
        self,
        storage: NoteStorage,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the repository and load the stored collection.

        Args:
            storage: Backend that holds the persisted collection
            id_factory: Callable producing unique note ids (defaults to UUID4 strings)
            clock: Callable returning the creation timestamp (defaults to UTC now)
        """
        self.storage = storage
        self._id_factory = id_factory or _new_id
        self._clock = clock or _utcnow
        self._notes: List[Note] = []
        self.reload()

    def __len__(self) -> int:
        return len(self._notes)

    def reload(self) -> None:
        """Replace the in-memory collection with what the storage holds."""
        self._notes = self.storage.load()
        logger.info(f"Note repository loaded with {len(self._notes)} notes")

    def list(self) -> List[Note]:
        return list(self._notes)

    def get(self, note_id: str) -> Note:
        index = self._index_of(note_id)
        if index is None:
            raise NotFoundError(f"Note {note_id} does not exist", details={"id": note_id})
        return self._notes[index]

    def create(self, content: str) -> Note:
        """
        Create a note and put it first in the collection.

        Raises:
            ValidationError: If the content is empty, whitespace only or not UTF-8 encodable
        """
        self._validate(content, action="saving")
        note_id = self._id_factory()
        # Guard against a misbehaving id factory
        if self._index_of(note_id) is not None:
            raise ValueError(f"Generated note id {note_id} is already in use")

        note = Note(id=note_id, content=content, created_at=self._clock())
        self._notes.insert(0, note)
        logger.info(f"Created note {note.id}")
        self._persist()
        return note

    def update(self, note_id: str, content: str) -> Note:
        """
        Replace the content of an existing note, keeping its position and creation time.

        Raises:
            ValidationError: If the content is empty, whitespace only or not UTF-8 encodable
            NotFoundError: If no note has the given id
        """
        self._validate(content, action="updating")
        index = self._index_of(note_id)
        if index is None:
            raise NotFoundError(f"Cannot update note {note_id}: it does not exist", details={"id": note_id})

        note = self._notes[index].model_copy(update={"content": content})
        self._notes[index] = note
        logger.info(f"Updated note {note.id}")
        self._persist()
        return note

    def delete(self, note_id: str) -> None:
        """Remove a note if present. Deleting an unknown id is a no-op."""
        index = self._index_of(note_id)
        if index is None:
            logger.debug(f"Delete skipped, note {note_id} not found")
            return
        del self._notes[index]
        logger.info(f"Deleted note {note_id}")
        self._persist()

    def _index_of(self, note_id: Optional[str]) -> Optional[int]:
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                return i
        return None

    @staticmethod
    def _validate(content: str, action: str) -> None:
        if content is None or not content.strip():
            raise ValidationError(f"Please enter some text before {action}")
        ensure_encodable(content)

    def _persist(self) -> None:
        # Fire-and-forget: the in-memory state stays authoritative if the write fails
        try:
            self.storage.save(self._notes)
        except StorageError as e:
            handle_error(e)
