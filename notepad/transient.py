"""
Transient feedback flags.

A transient flag holds a value for a fixed display window and then reverts
to its resting value. Each flag owns at most one pending clear; setting the
flag again cancels it, and a clear that fires late is ignored once a newer
value has been set.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimerHandle(ABC):
    """A scheduled callback that can still be cancelled."""

    @abstractmethod
    def cancel(self) -> None:
        pass


class Scheduler(ABC):
    """Runs callbacks after a delay."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """
        Schedule a callback.

        Args:
            delay: Seconds to wait before running the callback
            callback: Zero-argument callable

        Returns:
            Handle that cancels the callback if it has not run yet
        """
        pass


class _ThreadingHandle(TimerHandle):
    def __init__(self, timer: threading.Timer):
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler(Scheduler):
    """Scheduler backed by daemon threading.Timer objects."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return _ThreadingHandle(timer)


class TransientFlag(Generic[T]):
    """A value that reverts to its resting value after a fixed window."""

    def __init__(self, name: str, scheduler: Scheduler, window: float, resting: Any = None):
        self.name = name
        self.window = window
        self.resting = resting
        self._scheduler = scheduler
        self._value = resting
        self._generation = 0
        self._handle: Optional[TimerHandle] = None
        self._lock = threading.Lock()

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        """Show a value and schedule its clear, replacing any pending clear."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
            self._generation += 1
            generation = self._generation
            self._value = value

        # Scheduled outside the lock: a scheduler may run the clear immediately
        handle = self._scheduler.call_later(self.window, lambda: self._expire(generation))
        with self._lock:
            if generation == self._generation:
                self._handle = handle
                return
        # Superseded while scheduling
        handle.cancel()

    def clear(self) -> None:
        """Revert immediately and drop any pending clear."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
            self._generation += 1
            self._value = self.resting

    def _expire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                # Superseded by a newer set()
                return
            self._value = self.resting
            self._handle = None
        logger.debug(f"Transient flag {self.name} cleared")
