"""
Input sink interface and replay of recorded actions.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod

from recorder import keys
from recorder.models.events import ActionKind


logger = logging.getLogger(__name__)

REPLAYED_BUTTONS = frozenset({"left", "right", "middle"})


class InputSink(ABC):
    """Injects synthetic input into the OS. Every call blocks and may raise."""

    @abstractmethod
    def move_pointer(self, x: int, y: int) -> None:
        """Move the pointer to an absolute screen position."""
        pass

    @abstractmethod
    def button(self, button: str, pressed: bool) -> None:
        """Press or release a mouse button."""
        pass

    @abstractmethod
    def scroll(self, dx: int, dy: int) -> None:
        """Scroll the wheel along one or both axes."""
        pass

    @abstractmethod
    def key(self, name: str, pressed: bool) -> None:
        """Press or release a key by portable name."""
        pass


def replay(sink: InputSink, action) -> None:
    """
    Perform one recorded action on a sink.

    Wheel deltas are sent one axis at a time, vertical first, and only when
    non-zero. Keys outside the supported key table and buttons other than
    left, right and middle are skipped.
    """
    kind = ActionKind(action.kind)

    if kind is ActionKind.POINTER_MOVE:
        sink.move_pointer(action.x, action.y)

    elif kind in (ActionKind.BUTTON_PRESS, ActionKind.BUTTON_RELEASE):
        if action.button not in REPLAYED_BUTTONS:
            logger.debug(f"Skipping unsupported button: {action.button}")
            return
        sink.button(action.button, kind is ActionKind.BUTTON_PRESS)

    elif kind is ActionKind.WHEEL:
        if action.dy:
            sink.scroll(0, action.dy)
        if action.dx:
            sink.scroll(action.dx, 0)

    elif kind in (ActionKind.KEY_PRESS, ActionKind.KEY_RELEASE):
        if not keys.is_supported(action.key):
            logger.debug(f"Skipping unsupported key: {action.key}")
            return
        sink.key(action.key, kind is ActionKind.KEY_PRESS)
