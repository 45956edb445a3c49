import logging
import os
import subprocess
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from notepad.error_handling import ClipboardError

logger = logging.getLogger(__name__)

POSIX_COMMANDS: Tuple[Tuple[str, ...], ...] = (
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("pbcopy",),
)
WINDOWS_COMMANDS: Tuple[Tuple[str, ...], ...] = (
    ("clip",),
)


class Clipboard(ABC):
    """Destination for copied note text."""

    @abstractmethod
    def write_text(self, text: str) -> None:
        """
        Put text on the clipboard.

        Raises:
            ClipboardError: If the text could not be written
        """
        pass


class SystemClipboard(Clipboard):
    """Writes to the desktop clipboard through the platform's clipboard commands."""

    def __init__(self, commands: Optional[Sequence[Sequence[str]]] = None, timeout: float = 1.0):
        if commands is None:
            commands = WINDOWS_COMMANDS if os.name == "nt" else POSIX_COMMANDS
        self.commands = [tuple(cmd) for cmd in commands]
        self.timeout = timeout

    def write_text(self, text: str) -> None:
        errors = []
        for cmd in self.commands:
            try:
                subprocess.run(cmd, input=text.encode("utf-8"), check=True, timeout=self.timeout)
                logger.debug(f"Copied {len(text)} characters with {cmd[0]}")
                return
            except (OSError, subprocess.SubprocessError) as e:
                errors.append(f"{cmd[0]}: {e}")
        raise ClipboardError(
            "No clipboard command succeeded",
            details={"attempts": errors},
        )


class MemoryClipboard(Clipboard):
    """Keeps the last copied text in memory (headless runs)."""

    def __init__(self):
        self.text: Optional[str] = None

    def write_text(self, text: str) -> None:
        self.text = text
