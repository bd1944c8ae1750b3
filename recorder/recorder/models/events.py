"""
Timeline events captured during a recording.
"""

from __future__ import annotations
from enum import Enum
from typing import Annotated, List, Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field


class ActionKind(str, Enum):
    """Kinds of input actions that can be recorded and replayed."""
    POINTER_MOVE = "pointer_move"
    BUTTON_PRESS = "button_press"
    BUTTON_RELEASE = "button_release"
    WHEEL = "wheel"
    KEY_PRESS = "key_press"
    KEY_RELEASE = "key_release"


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class PointerMove(_Action):
    """Pointer moved to an absolute screen coordinate."""
    kind: Literal["pointer_move"] = "pointer_move"
    x: int
    y: int


class ButtonPress(_Action):
    kind: Literal["button_press"] = "button_press"
    button: str = Field(description="Button name, e.g. left, right, middle")


class ButtonRelease(_Action):
    kind: Literal["button_release"] = "button_release"
    button: str = Field(description="Button name, e.g. left, right, middle")


class Wheel(_Action):
    """Wheel scrolled; positive dy is up, positive dx is right."""
    kind: Literal["wheel"] = "wheel"
    dx: int = 0
    dy: int = 0


class KeyPress(_Action):
    kind: Literal["key_press"] = "key_press"
    key: str = Field(description="Portable key name, e.g. a, 5, shift_l, f1")


class KeyRelease(_Action):
    kind: Literal["key_release"] = "key_release"
    key: str = Field(description="Portable key name, e.g. a, 5, shift_l, f1")


Action = Annotated[
    Union[PointerMove, ButtonPress, ButtonRelease, Wheel, KeyPress, KeyRelease],
    Field(discriminator="kind"),
]


class TimelineEvent(BaseModel):
    """
    One captured input occurrence.

    The offset is measured in seconds from the moment the recording began.
    Events are immutable once created.
    """

    model_config = ConfigDict(frozen=True)

    action: Action
    offset: float = Field(ge=0.0, description="Seconds since recording start")

    @property
    def offset_ms(self) -> int:
        """Offset truncated to whole milliseconds."""
        return int(self.offset * 1000)


def recording_length(events: Sequence[TimelineEvent]) -> float:
    """Return the largest offset in a recording, or 0.0 when it is empty."""
    if not events:
        return 0.0
    return max(event.offset for event in events)


def summarize(events: Sequence[TimelineEvent]) -> List[str]:
    """Human-readable one-line descriptions of a recording, for debug output."""
    lines = []
    for event in events:
        fields = event.action.model_dump(exclude={"kind"})
        detail = ", ".join(f"{k}={v}" for k, v in fields.items())
        lines.append(f"{event.offset_ms:>8} ms  {event.action.kind}({detail})")
    return lines
