"""
OS-level input sink for mouse and keyboard.

Uses pyautogui for cross-platform control, with pynput as a fallback:
- Absolute pointer positioning
- Mouse button press/release
- Vertical and horizontal scrolling, through pynput whenever it is available
- Key press/release for the supported key table
"""

from __future__ import annotations
import logging
import platform

from recorder import keys
from recorder.errors import InputSinkError
from recorder.playback.sink import InputSink

logger = logging.getLogger(__name__)

# Windows wheel units per notch
WHEEL_DELTA = 120


class OSController(InputSink):
    """
    Injects recorded input into the running desktop session.

    Usage:
        controller = OSController()
        controller.move_pointer(500, 300)
        controller.button("left", pressed=True)
        controller.button("left", pressed=False)
        controller.key("a", pressed=True)
    """

    def __init__(self, backend: str = "auto", fail_safe: bool = False):
        """
        Initialize the OS controller.

        Args:
            backend: "auto", "pyautogui" or "pynput"
            fail_safe: If True, moving mouse to corner aborts (pyautogui safety feature)
        """
        self._pyautogui = None
        self._pynput_mouse = None
        self._pynput_keyboard = None
        self.fail_safe = fail_safe
        self.platform = platform.system()

        self._init_backends(backend)

    @property
    def backend(self) -> str:
        return "pyautogui" if self._pyautogui else "pynput"

    def _init_backends(self, backend: str) -> None:
        """Initialize input control backends."""
        if backend in ("auto", "pyautogui"):
            try:
                import pyautogui
                pyautogui.FAILSAFE = self.fail_safe
                pyautogui.PAUSE = 0.0  # replay timing is driven by the scheduler
                self._pyautogui = pyautogui
                logger.info("Using pyautogui for OS control")
                self._init_wheel()
                return
            except Exception as e:
                if backend == "pyautogui":
                    raise InputSinkError(f"pyautogui is not usable: {e}") from e
                logger.warning(f"pyautogui not available ({e}), trying pynput")

        try:
            from pynput.mouse import Controller as MouseController
            from pynput.keyboard import Controller as KeyboardController
            self._pynput_mouse = MouseController()
            self._pynput_keyboard = KeyboardController()
            logger.info("Using pynput for OS control")
        except Exception as e:
            raise InputSinkError(
                f"No input control library available ({e}). "
                "Install with: pip install pyautogui pynput"
            ) from e

    def _init_wheel(self) -> None:
        """
        Use a pynput mouse for the wheel alongside pyautogui.

        pynput scrolls in wheel notches on every platform. pyautogui on Windows
        sends raw wheel units and replays horizontal scrolling vertically.
        """
        try:
            from pynput.mouse import Controller as MouseController
            self._pynput_mouse = MouseController()
        except Exception as e:
            logger.warning(f"pynput mouse not available ({e}), scrolling with pyautogui")

    # =========================================================================
    # Mouse Control
    # =========================================================================

    def move_pointer(self, x: int, y: int) -> None:
        if self._pyautogui:
            self._pyautogui.moveTo(x, y)
        else:
            self._pynput_mouse.position = (x, y)

    def button(self, button: str, pressed: bool) -> None:
        if self._pyautogui:
            if pressed:
                self._pyautogui.mouseDown(button=button)
            else:
                self._pyautogui.mouseUp(button=button)
        else:
            from pynput.mouse import Button
            btn = Button[button]
            if pressed:
                self._pynput_mouse.press(btn)
            else:
                self._pynput_mouse.release(btn)

    def scroll(self, dx: int, dy: int) -> None:
        """
        Scroll the mouse wheel.

        Args:
            dx: Positive = right, negative = left
            dy: Positive = up, negative = down
        """
        if self._pynput_mouse:
            self._pynput_mouse.scroll(dx, dy)
            return

        if self.platform == "Windows":
            if dy:
                self._pyautogui.scroll(dy * WHEEL_DELTA)
            if dx:
                logger.warning("Horizontal scrolling needs pynput on Windows, skipped")
        else:
            if dy:
                self._pyautogui.scroll(dy)
            if dx:
                self._pyautogui.hscroll(dx)

    # =========================================================================
    # Keyboard Control
    # =========================================================================

    def key(self, name: str, pressed: bool) -> None:
        if self._pyautogui:
            target = keys.to_pyautogui(name)
            if target is None:
                return
            if pressed:
                self._pyautogui.keyDown(target)
            else:
                self._pyautogui.keyUp(target)
        else:
            target = keys.to_pynput(name)
            if target is None:
                return
            if pressed:
                self._pynput_keyboard.press(target)
            else:
                self._pynput_keyboard.release(target)
