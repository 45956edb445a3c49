"""
Base storage interface for the note collection.

This module defines the contract every storage backend implements, together
with the serialization helpers that turn a collection into the persisted
document and back.
"""

import abc
import json
import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError as SchemaError

from notepad.models import COLLECTION_VERSION, Note, NoteCollection

logger = logging.getLogger(__name__)


def encode_notes(notes: Sequence[Note]) -> str:
    """Serialize a collection into the versioned slot document."""
    document = {
        "version": COLLECTION_VERSION,
        "notes": [note.to_record() for note in notes],
    }
    return json.dumps(document, ensure_ascii=False)


def decode_notes(raw: Optional[str]) -> List[Note]:
    """
    Parse a slot document into notes.

    A bare JSON array of note records is accepted as a version 1 document.
    Missing, unreadable or malformed data yields an empty list.

    Args:
        raw: Serialized slot content, or None if the slot is empty

    Returns:
        List of notes in stored order
    """
    if raw is None or not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Stored notes are not valid JSON, starting empty: {e}")
        return []

    if isinstance(data, list):
        data = {"version": COLLECTION_VERSION, "notes": data}

    try:
        collection = NoteCollection.model_validate(data)
    except SchemaError as e:
        logger.warning(f"Stored notes do not match the expected format, starting empty: {e}")
        return []
    return list(collection.notes)


class NoteStorage(abc.ABC):
    """
    Abstract base class for note storage backends.

    Backends only need to move the serialized document in and out of their
    slot; validation and fallbacks are shared.
    """

    @abc.abstractmethod
    def read_slot(self) -> Optional[str]:
        """
        Read the raw slot content.

        Returns:
            The stored document, or None if the slot has never been written

        Raises:
            StorageError: If the slot exists but cannot be read
        """
        pass

    @abc.abstractmethod
    def write_slot(self, document: str) -> None:
        """
        Replace the slot content with a new document.

        Raises:
            StorageError: If the document could not be written
        """
        pass

    def load(self) -> List[Note]:
        """
        Load the full collection.

        Never raises; read failures and malformed data degrade to an empty list.
        """
        try:
            raw = self.read_slot()
        except Exception as e:
            logger.warning(f"Could not read stored notes, starting empty: {e}")
            return []
        notes = decode_notes(raw)
        logger.debug(f"Loaded {len(notes)} notes from {self!r}")
        return notes

    def save(self, notes: Sequence[Note]) -> None:
        """Overwrite the slot with the full collection."""
        self.write_slot(encode_notes(notes))
        logger.debug(f"Saved {len(notes)} notes to {self!r}")
