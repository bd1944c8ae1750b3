"""
Exceptions raised by the recorder.
"""


class RecorderError(Exception):
    """Base class for recorder errors."""


class InputSourceError(RecorderError):
    """The global input listener could not be attached."""


class InputSinkError(RecorderError):
    """No backend is available to inject synthetic input."""
