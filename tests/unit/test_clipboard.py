import subprocess
from unittest.mock import patch

import pytest

from notepad.clipboard import MemoryClipboard, SystemClipboard
from notepad.error_handling import ClipboardError


def test_system_clipboard_uses_first_working_command():
    clipboard = SystemClipboard(commands=[("wl-copy",), ("xclip", "-selection", "clipboard")])

    with patch("notepad.clipboard.subprocess.run") as mock_run:
        clipboard.write_text("héllo")

    mock_run.assert_called_once_with(("wl-copy",), input="héllo".encode("utf-8"), check=True, timeout=1.0)


def test_system_clipboard_falls_back_to_next_command():
    clipboard = SystemClipboard(commands=[("wl-copy",), ("pbcopy",)])

    with patch("notepad.clipboard.subprocess.run", side_effect=[FileNotFoundError("wl-copy"), None]) as mock_run:
        clipboard.write_text("text")

    assert [c.args[0] for c in mock_run.call_args_list] == [("wl-copy",), ("pbcopy",)]


def test_system_clipboard_raises_when_every_command_fails():
    clipboard = SystemClipboard(commands=[("xclip",), ("xsel",)])
    failures = [
        subprocess.CalledProcessError(1, "xclip"),
        subprocess.TimeoutExpired("xsel", 1.0),
    ]

    with patch("notepad.clipboard.subprocess.run", side_effect=failures):
        with pytest.raises(ClipboardError) as excinfo:
            clipboard.write_text("text")

    assert len(excinfo.value.details["attempts"]) == 2


def test_system_clipboard_picks_platform_commands():
    with patch("notepad.clipboard.os.name", "nt"):
        assert SystemClipboard().commands == [("clip",)]
    with patch("notepad.clipboard.os.name", "posix"):
        assert ("pbcopy",) in SystemClipboard().commands


def test_memory_clipboard_keeps_last_text():
    clipboard = MemoryClipboard()
    clipboard.write_text("one")
    clipboard.write_text("two")

    assert clipboard.text == "two"
