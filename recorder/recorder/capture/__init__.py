"""
Capture of global keyboard and mouse input.
"""

from recorder.capture.controller import CaptureController, ControlKey
from recorder.capture.source import InputSource, key_name

__all__ = ["CaptureController", "ControlKey", "InputSource", "key_name"]
