"""
Configuration management for the input recorder.
"""

from __future__ import annotations
from pathlib import Path
from typing import Literal
from pydantic import BaseModel, Field, field_validator, model_validator
import yaml

from recorder.keys import normalize


class HotkeyConfig(BaseModel):
    """Control keys. Presses of these keys are never recorded."""

    start_record: str = Field(default="f4", description="Begin a new recording")
    stop: str = Field(default="f2", description="Stop recording or playback")
    toggle_loop: str = Field(default="f3", description="Toggle looped playback")
    play_pause: str = Field(default="f1", description="Start, pause or resume playback")

    @field_validator("start_record", "stop", "toggle_loop", "play_pause")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize(value)

    @model_validator(mode="after")
    def _distinct(self) -> HotkeyConfig:
        keys = [self.start_record, self.stop, self.toggle_loop, self.play_pause]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Hotkeys must be distinct, got {keys}")
        return self


class PlaybackConfig(BaseModel):
    """Configuration for playback."""

    pause_poll_interval: float = Field(
        default=0.05, gt=0, description="Upper bound in seconds on a wait while paused"
    )
    loop: bool = Field(default=False, description="Initial state of the loop flag")
    fail_safe: bool = Field(default=False, description="Abort when the mouse hits a screen corner (pyautogui)")
    backend: Literal["auto", "pyautogui", "pynput"] = Field(
        default="auto", description="Input injection backend"
    )


class RecorderConfig(BaseModel):
    """Main configuration for the recorder."""

    hotkeys: HotkeyConfig = Field(default_factory=HotkeyConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)

    verbose: bool = Field(default=False, description="Enable verbose logging")

    @classmethod
    def from_file(cls, path: Path) -> RecorderConfig:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_file(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)
