"""Countdown state machine.

States
------
IDLE      Never started.
RUNNING   Counting down, one ``interval`` per tick.
PAUSED    Counting stopped, ``remaining`` frozen.
EXPIRED   ``remaining`` reached zero; no more ticks until the next start.

Transitions
-----------
IDLE    → RUNNING   (start)
RUNNING → PAUSED    (stop / reset)
PAUSED  → RUNNING   (start, from the full work duration)
RUNNING → EXPIRED   (tick brings remaining to zero)
EXPIRED → RUNNING   (start)

Every operation returns at most one :class:`Directive` telling the host
what to do with the tick schedule. The engine itself never schedules
anything and never raises.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from pomodoro.models import Directive, TimerConfig, TimerSnapshot, TimerStatus

log = logging.getLogger(__name__)

_ZERO = timedelta(0)


class TimerEngine:
    """Single countdown with a fixed tick cadence."""

    def __init__(
        self,
        work_duration: timedelta,
        break_duration: timedelta,
        interval: timedelta,
    ) -> None:
        self._work_duration = work_duration
        # Reserved: no transition reads it.
        self._break_duration = break_duration
        self._interval = interval

        self._status = TimerStatus.IDLE
        self._remaining = work_duration

    @classmethod
    def from_config(cls, config: TimerConfig) -> TimerEngine:
        return cls(config.work_duration, config.break_duration, config.interval)

    # -- read-only state ----------------------------------------------------

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def remaining(self) -> timedelta:
        """Time left on the clock (the full work duration while idle)."""
        return self._remaining

    @property
    def interval(self) -> timedelta:
        return self._interval

    @property
    def work_duration(self) -> timedelta:
        return self._work_duration

    @property
    def break_duration(self) -> timedelta:
        return self._break_duration

    @property
    def running(self) -> bool:
        return self._status is TimerStatus.RUNNING

    @property
    def timed_out(self) -> bool:
        return self._status is TimerStatus.EXPIRED

    def snapshot(self, quitting: bool = False) -> TimerSnapshot:
        return TimerSnapshot(status=self._status, remaining=self._remaining, quitting=quitting)

    # -- operations ---------------------------------------------------------

    def start(self) -> Directive:
        """(Re)start the countdown from the full work duration."""
        log.debug("start from %s (remaining %s)", self._status.value, self._remaining)
        self._remaining = self._work_duration
        self._status = TimerStatus.RUNNING
        return Directive.START_TICKING

    def stop(self) -> Optional[Directive]:
        """Pause a running countdown. No-op in any other state."""
        if not self.running:
            return None
        self._status = TimerStatus.PAUSED
        log.debug("paused with %s remaining", self._remaining)
        return Directive.STOP_TICKING

    def reset(self) -> Optional[Directive]:
        """Halt a running countdown.

        Behaves exactly like :meth:`stop`: ``remaining`` is left where it
        was and a later :meth:`start` counts down from the full duration.
        """
        if not self.running:
            return None
        return self.stop()

    def tick(self) -> Optional[Directive]:
        """Consume one interval. Ignored unless running."""
        if not self.running:
            return None
        self._remaining = max(self._remaining - self._interval, _ZERO)
        if self._remaining > _ZERO:
            return None
        self._status = TimerStatus.EXPIRED
        log.info("countdown of %s expired", self._work_duration)
        return Directive.TIMEOUT
