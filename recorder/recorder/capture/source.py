"""
Global input source built on pynput listeners.
"""

from __future__ import annotations
import logging
from typing import Callable, List, Optional

from recorder import keys
from recorder.errors import InputSourceError
from recorder.models.events import (
    Action,
    ButtonPress,
    ButtonRelease,
    KeyPress,
    KeyRelease,
    PointerMove,
    Wheel,
)


logger = logging.getLogger(__name__)


def key_name(key) -> str:
    """
    Portable name for a pynput key.

    Special keys use their ``Key`` member name. Digit and letter keys are
    named by the physical key, so a press and its release share one name
    whatever modifiers changed in between. Anything else falls back to its
    character, then to its virtual key code.
    """
    name = getattr(key, "name", None)
    if name:
        return keys.normalize(name)
    vk = getattr(key, "vk", None)
    physical = keys.vk_name(vk)
    if physical:
        return physical
    char = getattr(key, "char", None)
    if char:
        return keys.char_name(char)
    return f"<{vk}>"


class InputSource:
    """
    Delivers system-wide keyboard and mouse events to a handler.

    Events are pushed from pynput's listener threads in the order the OS
    reports them, regardless of which window has focus.
    """

    def __init__(self, handler: Callable[[Action], None]):
        self.handler = handler
        self._listeners: List = []

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """
        Attach the keyboard and mouse listeners.

        Raises:
            InputSourceError: if the listeners cannot be attached
        """
        try:
            from pynput import keyboard, mouse
        except Exception as e:
            raise InputSourceError(f"Global input listener unavailable: {e}") from e

        self._listeners = [
            keyboard.Listener(on_press=self.on_press, on_release=self.on_release),
            mouse.Listener(on_move=self.on_move, on_click=self.on_click, on_scroll=self.on_scroll),
        ]
        for listener in self._listeners:
            listener.start()
        for listener in self._listeners:
            listener.wait()
            if not listener.running:
                self.stop()
                raise InputSourceError("Global input listener failed to start")
        logger.debug("Input listeners attached")

    def join(self, timeout: Optional[float] = None) -> None:
        for listener in self._listeners:
            listener.join(timeout)

    def stop(self) -> None:
        for listener in self._listeners:
            listener.stop()
        self._listeners = []

    # =========================================================================
    # pynput callbacks
    # =========================================================================

    def on_press(self, key) -> None:
        self.handler(KeyPress(key=key_name(key)))

    def on_release(self, key) -> None:
        self.handler(KeyRelease(key=key_name(key)))

    def on_move(self, x, y) -> None:
        self.handler(PointerMove(x=int(x), y=int(y)))

    def on_click(self, x, y, button, pressed) -> None:
        if pressed:
            self.handler(ButtonPress(button=button.name))
        else:
            self.handler(ButtonRelease(button=button.name))

    def on_scroll(self, x, y, dx, dy) -> None:
        self.handler(Wheel(dx=int(dx), dy=int(dy)))
