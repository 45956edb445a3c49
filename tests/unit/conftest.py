import itertools
from datetime import datetime, timedelta, timezone

import pytest

from notepad.clipboard import Clipboard, MemoryClipboard
from notepad.controller import InteractionController
from notepad.error_handling import ClipboardError
from notepad.repository import NoteRepository
from notepad.storage.memory import MemoryStorage
from notepad.transient import Scheduler, TimerHandle


class ManualHandle(TimerHandle):
    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler whose clock only moves when a test calls advance()."""

    def __init__(self):
        self.now = 0.0
        self.pending = []

    def call_later(self, delay, callback):
        handle = ManualHandle()
        self.pending.append((self.now + delay, handle, callback))
        return handle

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [item for item in self.pending if item[0] <= self.now]
        self.pending = [item for item in self.pending if item[0] > self.now]
        for _, handle, callback in sorted(due, key=lambda item: item[0]):
            if not handle.cancelled:
                callback()


class FailingClipboard(Clipboard):
    def __init__(self, error=None):
        self.error = error or ClipboardError("clipboard unavailable")
        self.calls = 0

    def write_text(self, text: str) -> None:
        self.calls += 1
        raise self.error


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def clock():
    """Clock that ticks one second per call, starting at a fixed instant."""
    start = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    counter = itertools.count()
    return lambda: start + timedelta(seconds=next(counter))


@pytest.fixture
def repository(storage, clock):
    ids = (f"note-{i}" for i in itertools.count(1))
    return NoteRepository(storage, id_factory=lambda: next(ids), clock=clock)


@pytest.fixture
def clipboard():
    return MemoryClipboard()


@pytest.fixture
def controller(repository, clipboard, scheduler):
    return InteractionController(repository, clipboard, scheduler=scheduler, feedback_window=0.5)
