"""
Tests for the playback scheduler against a recording sink.

These tests run in real time; timing assertions allow for scheduling jitter.
"""

import time

import pytest

from recorder.models.events import ButtonRelease, KeyPress, KeyRelease, PointerMove, Wheel
from recorder.playback.scheduler import PlaybackScheduler
from recorder.session import Mode


TOLERANCE = 0.04


def wait_until(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


class TestTiming:
    """Tests for replay timing."""

    def test_replays_in_order_with_recorded_gaps(self, session, sink, scheduler, record):
        """Test the 0/50/120 ms scenario."""
        record([
            (0.0, KeyPress(key="a")),
            (0.05, PointerMove(x=10, y=10)),
            (0.12, ButtonRelease(button="left")),
        ])
        assert session.snapshot().recording_length == pytest.approx(0.12)

        started = time.monotonic()
        assert scheduler.start() is True
        assert scheduler.wait(timeout=3.0)

        assert sink.actions == [
            ("key", "a", True),
            ("move", 10, 10),
            ("button", "left", False),
        ]
        times = sink.times
        assert times[0] - started == pytest.approx(0.0, abs=TOLERANCE)
        assert times[1] - times[0] == pytest.approx(0.05, abs=TOLERANCE)
        assert times[2] - times[1] == pytest.approx(0.07, abs=TOLERANCE)

    def test_natural_finish_returns_to_idle(self, session, sink, scheduler, record):
        record([(0.0, KeyPress(key="a")), (0.02, KeyRelease(key="a"))])

        scheduler.start()
        assert scheduler.wait(timeout=3.0)

        snap = session.snapshot()
        assert snap.mode is Mode.IDLE
        assert snap.playback_began_at is None

    def test_pause_extends_playback_by_paused_time(self, session, sink, scheduler, record):
        """Test that a 500 ms pause at 50 ms delays completion by 500 ms."""
        record([
            (0.0, KeyPress(key="a")),
            (0.1, KeyPress(key="b")),
            (0.2, KeyPress(key="c")),
        ])

        started = time.monotonic()
        scheduler.start()
        time.sleep(0.05)
        session.toggle_play_pause()
        assert session.mode is Mode.PAUSED
        time.sleep(0.5)
        assert len(sink.actions) == 1
        session.toggle_play_pause()
        assert scheduler.wait(timeout=3.0)

        assert [call[1] for call in sink.actions] == ["a", "b", "c"]
        assert sink.times[-1] - started == pytest.approx(0.7, abs=0.08)

    def test_second_playback_after_finish(self, session, sink, scheduler, record):
        record([(0.0, KeyPress(key="a"))])

        scheduler.start()
        assert scheduler.wait(timeout=3.0)
        scheduler.start()
        assert scheduler.wait(timeout=3.0)

        assert sink.actions == [("key", "a", True), ("key", "a", True)]

    def test_already_playing(self, session, sink, scheduler, record):
        record([(0.0, KeyPress(key="a")), (2.0, KeyPress(key="b"))])

        assert scheduler.start() is True
        assert scheduler.start() is False
        assert session.snapshot().generation == 1


class TestStop:
    """Tests for stopping and superseding playback."""

    def test_no_sink_calls_after_stop(self, session, sink, scheduler, record):
        record([(i * 0.1, KeyPress(key="a")) for i in range(11)])

        scheduler.start()
        time.sleep(0.25)
        scheduler.stop()
        stopped = time.monotonic()
        count = len(sink.actions)
        time.sleep(0.3)

        assert session.mode is Mode.IDLE
        assert 1 <= count < 11
        assert len(sink.actions) == count
        assert all(t <= stopped for t in sink.times)

    def test_stop_while_paused(self, session, sink, scheduler, record):
        record([(0.0, KeyPress(key="a")), (0.5, KeyPress(key="b"))])

        scheduler.start()
        assert wait_until(lambda: len(sink.actions) == 1)
        session.toggle_play_pause()
        handle = session.playback_handle
        scheduler.stop()

        assert not handle.is_alive()
        assert sink.actions == [("key", "a", True)]

    def test_new_recording_supersedes_playback(self, session, sink, scheduler, record):
        record([(0.0, KeyPress(key="a")), (0.3, KeyPress(key="b"))])

        scheduler.start()
        assert wait_until(lambda: len(sink.actions) == 1)
        handle = session.playback_handle
        session.start_recording()
        handle.join(timeout=1.0)

        assert not handle.is_alive()
        assert session.mode is Mode.RECORDING
        time.sleep(0.35)
        assert sink.actions == [("key", "a", True)]

    def test_detached_playback_never_resumes(self, session, sink, scheduler, record):
        """Test that an abandoned playback thread does not join a later playback."""
        record([(0.0, KeyPress(key="a")), (0.3, KeyPress(key="b"))])
        scheduler.start()
        assert wait_until(lambda: len(sink.actions) == 1)
        old = session.playback_handle

        record([(0.0, KeyPress(key="x")), (0.3, KeyPress(key="y"))])
        scheduler.start()
        assert scheduler.wait(timeout=3.0)
        old.join(timeout=1.0)

        assert [call[1] for call in sink.actions] == ["a", "x", "y"]


class TestLooping:
    """Tests for looped playback."""

    def test_loop_repeats_passes(self, session, sink, scheduler, record):
        record([(0.0, KeyPress(key="a")), (0.03, KeyRelease(key="a"))])
        session.toggle_loop()

        scheduler.start()
        assert wait_until(lambda: len(sink.actions) >= 6)
        scheduler.stop()

        actions = sink.actions
        assert actions[:6] == [("key", "a", True), ("key", "a", False)] * 3
        assert session.mode is Mode.IDLE

    def test_new_pass_resets_clock(self, session, sink, scheduler, record):
        """Test that each pass starts with a fresh clock and no paused time."""
        record([(0.0, KeyPress(key="a")), (0.2, KeyPress(key="b"))])
        session.toggle_loop()

        scheduler.start()
        first_began = session.snapshot().playback_began_at
        time.sleep(0.05)
        session.toggle_play_pause()
        time.sleep(0.1)
        session.toggle_play_pause()
        assert session.snapshot().paused_accum == pytest.approx(0.1, abs=TOLERANCE)

        assert wait_until(lambda: len(sink.actions) >= 3)
        snap = session.snapshot()
        assert snap.paused_accum == 0.0
        assert snap.playback_began_at > first_began
        scheduler.stop()

    def test_disable_loop_finishes_current_pass(self, session, sink, scheduler, record):
        record([(0.0, KeyPress(key="a")), (0.1, KeyPress(key="b"))])
        session.toggle_loop()

        scheduler.start()
        time.sleep(0.02)
        session.toggle_loop()
        assert scheduler.wait(timeout=3.0)

        assert [call[1] for call in sink.actions] == ["a", "b"]
        assert session.mode is Mode.IDLE


class TestFailures:
    """Tests for injection failures."""

    def test_sink_failure_ends_playback(self, session, failing_sink, record):
        failing = failing_sink
        scheduler = PlaybackScheduler(session, failing)
        record([
            (0.0, KeyPress(key="a")),
            (0.02, KeyPress(key="b")),
            (0.04, KeyPress(key="c")),
        ])

        scheduler.start()
        assert scheduler.wait(timeout=3.0)

        assert failing.actions == [("key", "a", True)]
        assert session.mode is Mode.IDLE

    def test_unsupported_keys_skipped(self, session, sink, scheduler, record):
        record([
            (0.0, KeyPress(key="f7")),
            (0.0, Wheel(dx=0, dy=3)),
            (0.01, KeyRelease(key="f7")),
        ])

        scheduler.start()
        assert scheduler.wait(timeout=3.0)

        assert sink.actions == [("scroll", 0, 3)]
