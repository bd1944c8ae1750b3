"""
Data models for recorded input.
"""

from recorder.models.events import (
    Action,
    ActionKind,
    ButtonPress,
    ButtonRelease,
    KeyPress,
    KeyRelease,
    PointerMove,
    TimelineEvent,
    Wheel,
    recording_length,
)

__all__ = [
    "Action",
    "ActionKind",
    "ButtonPress",
    "ButtonRelease",
    "KeyPress",
    "KeyRelease",
    "PointerMove",
    "TimelineEvent",
    "Wheel",
    "recording_length",
]
