import time
from unittest.mock import MagicMock

from notepad.transient import Scheduler, ThreadingScheduler, TransientFlag


def test_flag_clears_after_window(scheduler):
    flag = TransientFlag("just_saved", scheduler, 0.5, resting=False)

    flag.set(True)
    assert flag.value is True

    scheduler.advance(0.4)
    assert flag.value is True

    scheduler.advance(0.1)
    assert flag.value is False


def test_older_timer_does_not_clear_newer_value(scheduler):
    flag = TransientFlag("last_copied_id", scheduler, 0.5)

    flag.set("a")
    scheduler.advance(0.3)
    flag.set("b")

    # The first window ends here; the value set later must survive it
    scheduler.advance(0.2)
    assert flag.value == "b"

    scheduler.advance(0.3)
    assert flag.value is None


def test_late_callback_from_superseded_generation_is_ignored(scheduler):
    flag = TransientFlag("just_updated", scheduler, 0.5, resting=False)
    flag.set(True)
    stale_callback = scheduler.pending[0][2]
    flag.set(True)

    stale_callback()

    assert flag.value is True


def test_clear_reverts_immediately_and_cancels_timer(scheduler):
    flag = TransientFlag("last_copied_id", scheduler, 0.5)
    flag.set("a")

    flag.clear()

    assert flag.value is None
    assert scheduler.pending[0][1].cancelled


def test_flags_are_independent(scheduler):
    saved = TransientFlag("just_saved", scheduler, 0.5, resting=False)
    copied = TransientFlag("last_copied_id", scheduler, 0.5)

    saved.set(True)
    scheduler.advance(0.3)
    copied.set("n1")
    scheduler.advance(0.2)

    assert saved.value is False
    assert copied.value == "n1"


def test_threading_scheduler_runs_and_cancels():
    scheduler = ThreadingScheduler()
    flag = TransientFlag("just_saved", scheduler, 0.05, resting=False)

    flag.set(True)
    deadline = time.monotonic() + 2
    while flag.value and time.monotonic() < deadline:
        time.sleep(0.01)
    assert flag.value is False

    fired = []
    handle = scheduler.call_later(0.05, lambda: fired.append(True))
    handle.cancel()
    time.sleep(0.1)
    assert fired == []


class ImmediateScheduler(Scheduler):
    """Runs every callback on the spot, as an event loop with a zero delay might."""

    def __init__(self):
        self.handles = []

    def call_later(self, delay, callback):
        callback()
        handle = MagicMock()
        self.handles.append(handle)
        return handle


def test_scheduler_running_callback_immediately_does_not_block():
    scheduler = ImmediateScheduler()
    flag = TransientFlag("just_saved", scheduler, 0.0, resting=False)

    flag.set(True)

    assert flag.value is False
    flag.set(True)
    assert flag.value is False
    assert len(scheduler.handles) == 2


def test_handle_from_superseded_set_is_cancelled():
    flag = None

    class ReentrantScheduler(Scheduler):
        def __init__(self):
            self.handles = []

        def call_later(self, delay, callback):
            handle = MagicMock()
            self.handles.append(handle)
            if len(self.handles) == 1:
                # Another set() lands while the first clear is being scheduled
                flag.set("b")
            return handle

    scheduler = ReentrantScheduler()
    flag = TransientFlag("last_copied_id", scheduler, 0.5)

    flag.set("a")

    assert flag.value == "b"
    scheduler.handles[0].cancel.assert_called_once()
    scheduler.handles[1].cancel.assert_not_called()
