"""
Key translation table for replay.

Recorded keys are stored by portable name: the unshifted character of the
physical key for digit and letter keys, and pynput ``Key`` member names for
special keys. Only the keys listed here are replayed; anything else is
skipped.
"""

from __future__ import annotations
import platform
import string
from typing import Dict, List, Optional


# portable name -> pyautogui key name
_SPECIAL_KEYS: Dict[str, str] = {
    "shift_l": "shiftleft",
    "shift_r": "shiftright",
    "ctrl_l": "ctrlleft",
    "ctrl_r": "ctrlright",
    "space": "space",
    "enter": "enter",
    "backspace": "backspace",
    "tab": "tab",
    "esc": "esc",
}

SUPPORTED_KEYS: Dict[str, str] = {
    **{c: c for c in string.digits},
    **{c: c for c in string.ascii_lowercase},
    **_SPECIAL_KEYS,
}

# pynput reports the left-hand modifiers without a side suffix on most platforms
_ALIASES: Dict[str, str] = {
    "shift": "shift_l",
    "ctrl": "ctrl_l",
    "alt": "alt_l",
    "cmd": "cmd_l",
    "return": "enter",
    "escape": "esc",
}


# virtual key code -> portable name for the digit and letter keys. Windows VK
# codes are the upper-case ASCII values; X11 keysyms are the character itself.
# macOS key codes follow the physical layout and are not listed.
_DIGIT_AND_LETTER_VKS: Dict[int, str] = {
    **{ord(c): c for c in string.digits},
    **{ord(c.upper()): c for c in string.ascii_lowercase},
}

_VK_NAMES: Dict[str, Dict[int, str]] = {
    "Windows": _DIGIT_AND_LETTER_VKS,
    "Linux": {
        **_DIGIT_AND_LETTER_VKS,
        **{ord(c): c for c in string.ascii_lowercase},
    },
}

# US layout: shifted digit row character -> digit key
_SHIFTED_DIGITS: Dict[str, str] = dict(zip(")!@#$%^&*(", string.digits))


def normalize(name: str) -> str:
    """Canonical portable name for a key reported by the input source."""
    name = name.lower()
    return _ALIASES.get(name, name)


def is_supported(name: str) -> bool:
    return name in SUPPORTED_KEYS


def to_pyautogui(name: str) -> Optional[str]:
    """pyautogui key name for a portable key, or None if unsupported."""
    return SUPPORTED_KEYS.get(name)


def to_pynput(name: str):
    """
    pynput key object for a portable key, or None if unsupported.

    Character keys map to ``KeyCode`` and special keys to ``Key`` members.
    """
    if name not in SUPPORTED_KEYS:
        return None

    from pynput.keyboard import Key, KeyCode

    if len(name) == 1:
        return KeyCode.from_char(name)
    return getattr(Key, name)


def supported_names() -> List[str]:
    """All replayable key names, characters first."""
    return sorted(SUPPORTED_KEYS, key=lambda k: (len(k) > 1, k))


def vk_name(vk: Optional[int], system: Optional[str] = None) -> Optional[str]:
    """Portable name of the digit or letter key with virtual key code ``vk``."""
    if vk is None:
        return None
    return _VK_NAMES.get(system or platform.system(), {}).get(vk)


def char_name(char: str) -> str:
    """
    Portable name for a key known only by the character it produced.

    Undoes the modifiers that change the character but not the key: shift
    on letters and the digit row, and ctrl on letters (``"\\x03"`` is c).
    """
    if len(char) == 1:
        code = ord(char)
        if 1 <= code <= 26:
            return chr(code + ord("a") - 1)
        if char in _SHIFTED_DIGITS:
            return _SHIFTED_DIGITS[char]
    return char.lower()
