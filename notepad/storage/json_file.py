"""
JSON file storage backend.

The collection lives in a single JSON file. Writes go to a temporary file
next to the target and are moved into place, so readers never observe a
half-written document.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from notepad.error_handling import StorageError
from notepad.storage.base import NoteStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(NoteStorage):
    """Keeps the note collection in one JSON file."""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize the JSON file backend.

        Args:
            path: Location of the slot file. Parent directories are created on first write.
        """
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonFileStorage({str(self.path)!r})"

    def read_slot(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Could not read notes file {self.path}", cause=e)

    def write_slot(self, document: str) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(document)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except (OSError, UnicodeError) as e:
            raise StorageError(f"Could not write notes file {self.path}", cause=e)
        finally:
            # Only set while the temp file has not been moved into place
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
