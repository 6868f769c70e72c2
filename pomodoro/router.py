"""Key bindings and event dispatch."""

from __future__ import annotations

import logging
from typing import Optional

from pomodoro.engine import TimerEngine
from pomodoro.models import (
    Dispatch,
    Event,
    Intent,
    KeyBinding,
    KeyEvent,
    TickEvent,
    TimeoutEvent,
    TimerConfig,
    TimerSnapshot,
)

log = logging.getLogger(__name__)


class Keymap:
    """Static key → intent table."""

    # Checked in this order when classifying a key.
    _PRIORITY: tuple[Intent, ...] = (Intent.QUIT, Intent.RESET, Intent.STOP, Intent.START)

    def __init__(self, bindings: list[KeyBinding]) -> None:
        self._bindings: dict[Intent, KeyBinding] = {b.intent: b for b in bindings}

    @classmethod
    def default(cls) -> Keymap:
        return cls(
            [
                KeyBinding(intent=Intent.START, keys=("s",), help_key="s", help_desc="Start"),
                KeyBinding(intent=Intent.STOP, keys=("p",), help_key="p", help_desc="Stop the timer"),
                KeyBinding(
                    intent=Intent.RESET, keys=("r",), help_key="r", help_desc="Restart the timer"
                ),
                KeyBinding(
                    intent=Intent.QUIT,
                    keys=("q", "ctrl+c", "ctrl+d"),
                    help_key="q",
                    help_desc="Quit the application",
                ),
            ]
        )

    def intent_for(self, key: str) -> Optional[Intent]:
        for intent in self._PRIORITY:
            binding = self._bindings.get(intent)
            if binding is not None and binding.matches(key):
                return intent
        return None

    def short_help(self) -> list[KeyBinding]:
        """Bindings shown in the on-screen legend."""
        shown = (Intent.START, Intent.STOP, Intent.QUIT)
        return [self._bindings[i] for i in shown if i in self._bindings]

    def full_help(self) -> list[KeyBinding]:
        return [self._bindings[i] for i in Intent if i in self._bindings]


class AppState:
    """Process-level state: the one timer plus the done/quitting flag."""

    def __init__(self, engine: TimerEngine) -> None:
        self.engine = engine
        self.quitting = False

    @classmethod
    def from_config(cls, config: TimerConfig) -> AppState:
        return cls(TimerEngine.from_config(config))

    def snapshot(self) -> TimerSnapshot:
        return self.engine.snapshot(quitting=self.quitting)


class CommandRouter:
    """Classify each event and apply it to the engine."""

    def __init__(self, keymap: Optional[Keymap] = None) -> None:
        self.keymap = keymap or Keymap.default()

    def dispatch(self, state: AppState, event: Event) -> Dispatch:
        if isinstance(event, KeyEvent):
            return self._dispatch_key(state, event.key)
        if isinstance(event, TickEvent):
            return Dispatch(directive=state.engine.tick())
        if isinstance(event, TimeoutEvent):
            state.quitting = True
            return Dispatch()
        log.debug("ignoring unknown event %r", event)
        return Dispatch()

    def _dispatch_key(self, state: AppState, key: str) -> Dispatch:
        intent = self.keymap.intent_for(key)
        engine = state.engine

        if intent is Intent.QUIT:
            state.quitting = True
            return Dispatch(intent=intent)
        if intent is Intent.RESET:
            return Dispatch(intent=intent, directive=engine.reset())
        if intent is Intent.STOP:
            return Dispatch(intent=intent, directive=engine.stop())
        if intent is Intent.START:
            state.quitting = False
            return Dispatch(intent=intent, directive=engine.start())
        return Dispatch()
