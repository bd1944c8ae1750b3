"""
Playback scheduler that replays a recording on its own thread.
"""

from __future__ import annotations
import logging
import threading
from typing import Optional, Tuple

from recorder.models.events import TimelineEvent
from recorder.playback.sink import InputSink, replay
from recorder.session import SessionState

logger = logging.getLogger(__name__)


class PlaybackScheduler:
    """
    Replays the session's recording against its clock and mode.

    Each event is replayed when the effective elapsed time of the current
    pass (wall clock since the pass began, minus time spent paused) reaches
    its recorded offset. Timing is anchored to the recording's timeline, so
    lateness of one event does not push back the following ones.

    Usage:
        scheduler = PlaybackScheduler(session, OSController())
        scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(self, session: SessionState, sink: InputSink):
        self.session = session
        self.sink = sink
        # serializes start and stop so stop never misses a thread being spawned
        self._transport = threading.Lock()

    def start(self) -> bool:
        """
        Start playing the current recording.

        Returns:
            True if a playback thread was started
        """
        with self._transport:
            return self.session.begin_playback(self._spawn) is not None

    def stop(self) -> None:
        """
        Stop playback and wait for the playback thread to exit.

        No sink call happens after this returns.
        """
        with self._transport:
            self.session.end_playback()
            handle = self.session.take_playback_handle()
        if handle is not None and handle is not threading.current_thread():
            handle.join()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the current playback thread to finish on its own.

        Returns:
            True if no playback thread is running afterwards
        """
        handle = self.session.playback_handle
        if handle is None:
            return True
        handle.join(timeout)
        return not handle.is_alive()

    def _spawn(self, events: Tuple[TimelineEvent, ...], generation: int) -> threading.Thread:
        thread = threading.Thread(
            target=self._run,
            args=(events, generation),
            name=f"playback-{generation}",
            daemon=True,
        )
        thread.start()
        return thread

    def _run(self, events: Tuple[TimelineEvent, ...], generation: int) -> None:
        session = self.session

        while session.start_pass(generation):
            for event in events:
                if not session.wait_for(event.offset_ms, generation):
                    logger.info("Playback was stopped.")
                    return

                logger.debug(f"Replaying {event.action.kind} at {event.offset_ms} ms")
                try:
                    replay(self.sink, event.action)
                except Exception:
                    logger.exception("Input injection failed, aborting playback")
                    session.abort_playback(generation)
                    return

            if not session.finish_pass(generation):
                return

        logger.info("Playback was stopped.")
