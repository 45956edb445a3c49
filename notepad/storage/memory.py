"""In-process storage backend, used for headless runs and tests."""

from typing import Optional

from notepad.storage.base import NoteStorage


class MemoryStorage(NoteStorage):
    """Holds the serialized collection in memory for the life of the process."""

    def __init__(self, document: Optional[str] = None):
        self.document = document

    def __repr__(self) -> str:
        return "MemoryStorage()"

    def read_slot(self) -> Optional[str]:
        return self.document

    def write_slot(self, document: str) -> None:
        self.document = document
