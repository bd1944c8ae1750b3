"""
Shared session state for recording and playback.

A single ``SessionState`` is shared by the listener threads and the playback
thread. Every field is read and written under one lock. The lock backs a
condition variable that is notified on every mode transition, so a waiting
playback thread observes pause, resume and stop as soon as they happen.
"""

from __future__ import annotations
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from recorder.models.events import Action, TimelineEvent, recording_length, summarize


logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """Top-level state of the recorder."""
    IDLE = "idle"
    RECORDING = "recording"
    PLAYING = "playing"
    PAUSED = "paused"


_ACTIVE = (Mode.PLAYING, Mode.PAUSED)


class PlayPauseOutcome(str, Enum):
    """What a press of the play/pause key resolved to."""
    START_PLAYBACK = "start_playback"
    PAUSED = "paused"
    RESUMED = "resumed"
    STOP_RECORDING = "stop_recording"
    NOTHING_TO_PLAY = "nothing_to_play"


@dataclass(frozen=True)
class SessionSnapshot:
    """Consistent copy of the session fields, taken under the lock."""
    mode: Mode
    events: Tuple[TimelineEvent, ...]
    record_start: Optional[float]
    looping: bool
    paused_accum: float
    pause_began_at: Optional[float]
    playback_began_at: Optional[float]
    recording_length: float
    generation: int


SpawnFn = Callable[[Tuple[TimelineEvent, ...], int], threading.Thread]


class SessionState:
    """
    Owned state shared between the listener and the playback thread.

    Listener-side commands:
        start_recording, stop_recording, record, toggle_play_pause,
        request_stop, toggle_loop, begin_playback, end_playback

    Playback-side operations (keyed by the playback generation):
        start_pass, wait_for, finish_pass, abort_playback

    Usage:
        session = SessionState(looping=False)
        session.start_recording()
        session.record(KeyPress(key="a"))
        session.stop_recording()
    """

    def __init__(
        self,
        looping: bool = False,
        pause_poll_interval: float = 0.05,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            looping: Initial loop flag
            pause_poll_interval: Upper bound on a single wait while paused (seconds)
            clock: Monotonic clock returning seconds
        """
        self._cond = threading.Condition(threading.Lock())
        self._clock = clock
        self._pause_poll_interval = pause_poll_interval

        self._mode = Mode.IDLE
        self._events: List[TimelineEvent] = []
        self._record_start: Optional[float] = None
        self._looping = looping
        self._paused_accum = 0.0
        self._pause_began_at: Optional[float] = None
        self._playback_began_at: Optional[float] = None
        self._recording_length = 0.0
        self._playback_handle: Optional[threading.Thread] = None
        self._generation = 0

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def mode(self) -> Mode:
        with self._cond:
            return self._mode

    @property
    def events(self) -> Tuple[TimelineEvent, ...]:
        with self._cond:
            return tuple(self._events)

    @property
    def looping(self) -> bool:
        with self._cond:
            return self._looping

    @property
    def playback_handle(self) -> Optional[threading.Thread]:
        with self._cond:
            return self._playback_handle

    def snapshot(self) -> SessionSnapshot:
        """Copy every field at once."""
        with self._cond:
            return SessionSnapshot(
                mode=self._mode,
                events=tuple(self._events),
                record_start=self._record_start,
                looping=self._looping,
                paused_accum=self._paused_accum,
                pause_began_at=self._pause_began_at,
                playback_began_at=self._playback_began_at,
                recording_length=self._recording_length,
                generation=self._generation,
            )

    def simulated_ms(self) -> int:
        """Effective playback time in milliseconds, or 0 when not playing."""
        with self._cond:
            return self._simulated_ms()

    # =========================================================================
    # Recording
    # =========================================================================

    def start_recording(self) -> None:
        """
        Discard the previous recording and start a new one.

        A running playback is abandoned: the mode drops to idle and the
        playback thread is detached without being joined. It exits on its own
        once it observes the change.
        """
        with self._cond:
            if self._mode in _ACTIVE:
                self._set_mode(Mode.IDLE)
                self._playback_handle = None
                logger.debug("Playback detached by new recording")

            self._events = []
            self._set_mode(Mode.RECORDING)
            self._record_start = self._clock()
        logger.info("Recording started.")

    def stop_recording(self) -> bool:
        """
        Finish the current recording.

        Returns:
            True if a recording was stopped
        """
        with self._cond:
            if self._mode is not Mode.RECORDING:
                return False
            self._set_mode(Mode.IDLE)
            self._recording_length = recording_length(self._events)
            events = tuple(self._events)
        logger.info(f"Recording stopped. {len(events)} events recorded.")
        if logger.isEnabledFor(logging.DEBUG):
            for line in summarize(events):
                logger.debug(line)
        return True

    def record(self, action: Action) -> Optional[TimelineEvent]:
        """Append an action to the recording if one is in progress."""
        with self._cond:
            if self._mode is not Mode.RECORDING:
                return None
            offset = max(self._clock() - self._record_start, 0.0)
            event = TimelineEvent(action=action, offset=offset)
            self._events.append(event)
        logger.debug(f"Recorded {action.kind} at {event.offset_ms} ms")
        return event

    # =========================================================================
    # Transport commands
    # =========================================================================

    def toggle_play_pause(self) -> PlayPauseOutcome:
        """
        Apply the play/pause key to the current mode.

        Pause and resume are applied here. Starting playback and stopping a
        recording are returned to the caller to perform once the lock is
        released.
        """
        with self._cond:
            if self._mode is Mode.PLAYING:
                self._set_mode(Mode.PAUSED)
                self._pause_began_at = self._clock()
                logger.info(self._describe("Paused"))
                return PlayPauseOutcome.PAUSED

            if self._mode is Mode.PAUSED:
                if self._pause_began_at is not None:
                    self._paused_accum += self._clock() - self._pause_began_at
                    self._pause_began_at = None
                self._set_mode(Mode.PLAYING)
                logger.info(self._describe("Resumed"))
                return PlayPauseOutcome.RESUMED

            if self._mode is Mode.RECORDING:
                return PlayPauseOutcome.STOP_RECORDING

            if not self._events:
                logger.info("No recorded events to play.")
                return PlayPauseOutcome.NOTHING_TO_PLAY
            return PlayPauseOutcome.START_PLAYBACK

    def request_stop(self) -> Mode:
        """Report the mode the stop key applies to; the caller performs the stop."""
        with self._cond:
            mode = self._mode
        logger.info("Stop requested.")
        return mode

    def toggle_loop(self) -> bool:
        """Flip the loop flag and return its new value."""
        with self._cond:
            self._looping = not self._looping
            looping = self._looping
        logger.info(f"Looping {'enabled' if looping else 'disabled'}")
        return looping

    def begin_playback(self, spawn: SpawnFn) -> Optional[Tuple[TimelineEvent, ...]]:
        """
        Enter playing mode and hand a snapshot of the recording to ``spawn``.

        ``spawn`` is called with the snapshot and the new playback generation
        once the lock is released, and must return the started playback
        thread. The thread is stored as the playback handle unless the
        playback was stopped or superseded in the meantime, in which case it
        exits on its own.

        Returns:
            The snapshot, or None if playback could not start
        """
        with self._cond:
            if not self._events:
                logger.info("No recorded events to play.")
                return None
            if self._mode in _ACTIVE:
                logger.info("Already playing.")
                return None
            if self._mode is Mode.RECORDING:
                logger.info("Recording in progress; stop it before playing.")
                return None

            events = tuple(self._events)
            self._generation += 1
            self._set_mode(Mode.PLAYING)
            self._paused_accum = 0.0
            self._playback_began_at = self._clock()
            logger.info(f"Starting playback of {len(events)} events.")
            logger.info(self._describe("Started"))
            generation = self._generation

        handle = spawn(events, generation)
        with self._cond:
            if self._is_current(generation):
                self._playback_handle = handle
        return events

    def end_playback(self) -> bool:
        """
        Drop from playing or paused to idle.

        Returns:
            True if a playback was active
        """
        with self._cond:
            if self._mode not in _ACTIVE:
                return False
            self._set_mode(Mode.IDLE)
        logger.info("Stopping playback...")
        return True

    def take_playback_handle(self) -> Optional[threading.Thread]:
        with self._cond:
            handle, self._playback_handle = self._playback_handle, None
            return handle

    # =========================================================================
    # Playback thread
    # =========================================================================

    def start_pass(self, generation: int) -> bool:
        """
        Reset the pass clock for a new traversal of the recording.

        Returns:
            False if this playback has been stopped or superseded
        """
        with self._cond:
            if not self._is_current(generation):
                return False
            now = self._clock()
            self._playback_began_at = now
            self._paused_accum = 0.0
            if self._mode is Mode.PAUSED:
                self._pause_began_at = now
            return True

    def wait_for(self, offset_ms: int, generation: int) -> bool:
        """
        Block until effective playback time reaches ``offset_ms``.

        Time does not advance while paused.

        Returns:
            True when the event is due, False if playback was stopped or
            superseded while waiting
        """
        with self._cond:
            while True:
                if not self._is_current(generation):
                    return False
                if self._mode is Mode.PAUSED:
                    self._cond.wait(self._pause_poll_interval)
                    continue

                elapsed_ms = self._simulated_ms()
                if elapsed_ms >= offset_ms:
                    return True
                self._cond.wait((offset_ms - elapsed_ms) / 1000)

    def finish_pass(self, generation: int) -> bool:
        """
        Decide what follows a completed pass.

        A pass that ends while paused is held until resumed or stopped.

        Returns:
            True if another pass should run
        """
        with self._cond:
            while self._is_current(generation) and self._mode is Mode.PAUSED:
                self._cond.wait(self._pause_poll_interval)

            if not self._is_current(generation):
                return False
            if self._looping:
                logger.info("Looping playback...")
                return True
            self._set_mode(Mode.IDLE)
        logger.info("Playback finished.")
        return False

    def abort_playback(self, generation: int) -> None:
        """End a playback that failed, if it is still the current one."""
        with self._cond:
            if self._is_current(generation):
                self._set_mode(Mode.IDLE)

    # =========================================================================
    # Helpers (lock held)
    # =========================================================================

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self._mode in _ACTIVE

    def _set_mode(self, mode: Mode) -> None:
        self._mode = mode
        if mode is not Mode.RECORDING:
            self._record_start = None
        if mode not in _ACTIVE:
            self._playback_began_at = None
            self._pause_began_at = None
        self._cond.notify_all()

    def _simulated_ms(self) -> int:
        if self._mode not in _ACTIVE or self._playback_began_at is None:
            return 0
        now = self._clock()
        elapsed = now - self._playback_began_at - self._paused_accum
        if self._pause_began_at is not None:
            elapsed -= now - self._pause_began_at
        return max(int(elapsed * 1000), 0)

    def _describe(self, action: str) -> str:
        return (
            f"{action}. Recording length: {int(self._recording_length * 1000)} ms. "
            f"Current simulated time: {self._simulated_ms()} ms."
        )
