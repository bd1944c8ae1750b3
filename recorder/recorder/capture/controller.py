"""
Capture controller: records input and interprets the control keys.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Dict, Optional

from recorder.config import HotkeyConfig
from recorder.models.events import Action, KeyPress, KeyRelease
from recorder.playback.scheduler import PlaybackScheduler
from recorder.session import Mode, PlayPauseOutcome, SessionState


logger = logging.getLogger(__name__)


class ControlKey(str, Enum):
    """Actions bound to the control keys."""
    START_RECORD = "start_record"
    STOP = "stop"
    TOGGLE_LOOP = "toggle_loop"
    PLAY_PAUSE = "play_pause"


class CaptureController:
    """
    Entry point for every raw input event.

    Control-key presses trigger exactly one transition and are never
    recorded; their releases are ignored. Everything else is appended to
    the recording while one is in progress.

    Session commands hold the session lock only for their own duration.
    Starting and stopping the playback thread is done afterwards, from here,
    so the listener never joins the playback thread while holding the lock.
    """

    def __init__(
        self,
        session: SessionState,
        scheduler: PlaybackScheduler,
        hotkeys: Optional[HotkeyConfig] = None,
    ):
        self.session = session
        self.scheduler = scheduler
        hotkeys = hotkeys or HotkeyConfig()
        self.bindings: Dict[str, ControlKey] = {
            hotkeys.start_record: ControlKey.START_RECORD,
            hotkeys.stop: ControlKey.STOP,
            hotkeys.toggle_loop: ControlKey.TOGGLE_LOOP,
            hotkeys.play_pause: ControlKey.PLAY_PAUSE,
        }

    def handle(self, action: Action) -> None:
        """Process one event from the input source."""
        if isinstance(action, (KeyPress, KeyRelease)) and action.key in self.bindings:
            if isinstance(action, KeyPress):
                self.dispatch(self.bindings[action.key])
            return

        self.session.record(action)

    def dispatch(self, control: ControlKey) -> None:
        """Perform the transition bound to a control key."""
        logger.debug(f"Control key: {control.value}")

        if control is ControlKey.START_RECORD:
            self.session.start_recording()

        elif control is ControlKey.STOP:
            mode = self.session.request_stop()
            if mode in (Mode.PLAYING, Mode.PAUSED):
                self.scheduler.stop()
            elif mode is Mode.RECORDING:
                self.session.stop_recording()

        elif control is ControlKey.TOGGLE_LOOP:
            self.session.toggle_loop()

        elif control is ControlKey.PLAY_PAUSE:
            outcome = self.session.toggle_play_pause()
            if outcome is PlayPauseOutcome.STOP_RECORDING:
                self.session.stop_recording()
            elif outcome is PlayPauseOutcome.START_PLAYBACK:
                self.scheduler.start()
