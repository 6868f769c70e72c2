"""Pydantic models — single source of truth for all data types."""

from __future__ import annotations

import enum
from datetime import timedelta
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TimerStatus(str, enum.Enum):
    """Countdown lifecycle states."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"


class Directive(str, enum.Enum):
    """Follow-up action the engine asks the host to perform."""

    START_TICKING = "start_ticking"
    STOP_TICKING = "stop_ticking"
    TIMEOUT = "timeout"


class Intent(str, enum.Enum):
    """Normalised command produced by classifying a key press."""

    START = "start"
    STOP = "stop"
    RESET = "reset"
    QUIT = "quit"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class KeyEvent(BaseModel):
    """A key press, identified by its symbolic name (``"s"``, ``"ctrl+c"``)."""

    model_config = ConfigDict(frozen=True)

    key: str


class TickEvent(BaseModel):
    """One interval has elapsed on the tick schedule ``generation``."""

    model_config = ConfigDict(frozen=True)

    generation: int = 0


class TimeoutEvent(BaseModel):
    """The countdown started by tick schedule ``generation`` has reached zero."""

    model_config = ConfigDict(frozen=True)

    generation: int = 0


Event = Union[KeyEvent, TickEvent, TimeoutEvent]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TimerConfig(BaseModel):
    """Durations driving a countdown. Fixed once the timer starts."""

    model_config = ConfigDict(frozen=True)

    work_duration: timedelta = timedelta(minutes=25)
    break_duration: timedelta = timedelta(minutes=5)
    interval: timedelta = timedelta(milliseconds=100)

    @field_validator("work_duration", "break_duration", "interval")
    @classmethod
    def _positive(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("duration must be positive")
        return value

    @model_validator(mode="after")
    def _interval_fits(self) -> TimerConfig:
        if self.interval > self.work_duration:
            raise ValueError("interval must not exceed the work duration")
        return self


class AppConfig(BaseModel):
    """Application configuration (read from ~/.config/pomodoro/config.json)."""

    work_minutes: int = Field(default=25, gt=0, le=720)
    break_minutes: int = Field(default=5, gt=0, le=720)
    interval_ms: int = Field(default=100, ge=1, le=1000)

    def timer_config(self) -> TimerConfig:
        return TimerConfig(
            work_duration=timedelta(minutes=self.work_minutes),
            break_duration=timedelta(minutes=self.break_minutes),
            interval=timedelta(milliseconds=self.interval_ms),
        )


# ---------------------------------------------------------------------------
# Dispatch & rendering
# ---------------------------------------------------------------------------


class TimerSnapshot(BaseModel):
    """Everything the view needs to draw one frame."""

    model_config = ConfigDict(frozen=True)

    status: TimerStatus
    remaining: timedelta = Field(ge=timedelta(0))
    quitting: bool = False


class Dispatch(BaseModel):
    """Outcome of routing a single event."""

    model_config = ConfigDict(frozen=True)

    intent: Optional[Intent] = None
    directive: Optional[Directive] = None

    @property
    def quit(self) -> bool:
        return self.intent is Intent.QUIT


class KeyBinding(BaseModel):
    """One or more keys mapped to an intent, with a help label."""

    model_config = ConfigDict(frozen=True)

    intent: Intent
    keys: tuple[str, ...] = Field(min_length=1)
    help_key: str
    help_desc: str

    def matches(self, key: str) -> bool:
        return key in self.keys
