"""
Shared fixtures for recorder tests.
"""

import threading
import time
from typing import List, Optional, Tuple

import pytest

from recorder.capture.controller import CaptureController
from recorder.playback.scheduler import PlaybackScheduler
from recorder.playback.sink import InputSink
from recorder.session import SessionState


class RecordingSink(InputSink):
    """Sink that stores every call with the time it was made."""

    def __init__(self, fail_on_call: Optional[int] = None):
        self.calls: List[Tuple[float, tuple]] = []
        self.fail_on_call = fail_on_call
        self._lock = threading.Lock()

    def _log(self, *call) -> None:
        with self._lock:
            if self.fail_on_call is not None and len(self.calls) + 1 == self.fail_on_call:
                raise OSError("injection rejected")
            self.calls.append((time.monotonic(), call))

    def move_pointer(self, x, y):
        self._log("move", x, y)

    def button(self, button, pressed):
        self._log("button", button, pressed)

    def scroll(self, dx, dy):
        self._log("scroll", dx, dy)

    def key(self, name, pressed):
        self._log("key", name, pressed)

    @property
    def actions(self) -> List[tuple]:
        with self._lock:
            return [call for _, call in self.calls]

    @property
    def times(self) -> List[float]:
        with self._lock:
            return [t for t, _ in self.calls]


class SteppedClock:
    """
    Monotonic clock that can be pinned to fixed values.

    While frozen it returns the pinned value; once released it follows
    ``time.monotonic``.
    """

    def __init__(self):
        self.frozen: Optional[float] = None

    def __call__(self) -> float:
        return self.frozen if self.frozen is not None else time.monotonic()

    def freeze(self, value: float) -> None:
        self.frozen = value

    def advance(self, seconds: float) -> None:
        self.frozen += seconds

    def release(self) -> None:
        self.frozen = None


@pytest.fixture
def clock():
    return SteppedClock()


@pytest.fixture
def session(clock):
    return SessionState(pause_poll_interval=0.01, clock=clock)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def scheduler(session, sink):
    scheduler = PlaybackScheduler(session, sink)
    yield scheduler
    scheduler.stop()


@pytest.fixture
def controller(session, scheduler):
    return CaptureController(session, scheduler)


@pytest.fixture
def record(session, clock):
    """
    Build a recording with exact offsets.

    Takes a list of (offset_seconds, action) pairs and leaves the clock
    following real time afterwards.
    """

    def _record(timeline):
        base = time.monotonic()
        clock.freeze(base)
        session.start_recording()
        for offset, action in timeline:
            clock.freeze(base + offset)
            session.record(action)
        session.stop_recording()
        clock.release()
        return session.events

    return _record


@pytest.fixture
def failing_sink():
    """Sink that rejects its second injection."""
    return RecordingSink(fail_on_call=2)
