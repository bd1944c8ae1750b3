"""
Playback of recorded input.

Replays a recording with its original timing by injecting real mouse and
keyboard events into the OS.
"""

from recorder.playback.os_controller import OSController
from recorder.playback.scheduler import PlaybackScheduler
from recorder.playback.sink import InputSink, replay

__all__ = ["InputSink", "OSController", "PlaybackScheduler", "replay"]
