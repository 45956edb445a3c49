"""
SQLite storage backend.

The collection is stored as one row of a small key-value table, keyed by the
slot name. Each save replaces the row inside a transaction.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, Union

from notepad.error_handling import StorageError
from notepad.storage.base import NoteStorage


class SQLiteStorage(NoteStorage):
    """
    SQLite implementation of the NoteStorage interface.
    """

    def __init__(self, db_path: Union[str, Path], slot: str = "notes"):
        """
        Initialize the SQLite backend.

        Args:
            db_path: Path to the SQLite database file (":memory:" is accepted)
            slot: Key of the row that holds the collection
        """
        self.db_path = str(db_path)
        self.slot = slot
        self.connection = None
        self.logger = logging.getLogger(__name__)

    def __repr__(self) -> str:
        return f"SQLiteStorage({self.db_path!r}, slot={self.slot!r})"

    def connect(self) -> sqlite3.Connection:
        """
        Open the connection and make sure the key-value table exists.

        Returns:
            The open connection

        Raises:
            StorageError: If the database cannot be opened
        """
        if self.connection is not None:
            return self.connection
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self.connection.execute('''
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            ''')
            self.connection.commit()
            return self.connection
        except (OSError, sqlite3.Error) as e:
            self.connection = None
            raise StorageError(f"Error connecting to SQLite database {self.db_path}", cause=e)

    def disconnect(self) -> None:
        if self.connection is not None:
            try:
                self.connection.close()
            except sqlite3.Error as e:
                self.logger.error(f"Error disconnecting from SQLite database: {e}")
            self.connection = None

    def read_slot(self) -> Optional[str]:
        conn = self.connect()
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (self.slot,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Error reading slot {self.slot!r}", cause=e)
        return row[0] if row else None

    def write_slot(self, document: str) -> None:
        conn = self.connect()
        try:
            with conn:
                conn.execute(
                    "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (self.slot, document),
                )
        except (sqlite3.Error, UnicodeError) as e:
            raise StorageError(f"Error writing slot {self.slot!r}", cause=e)
