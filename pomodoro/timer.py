"""Host event loop: pulls one event at a time, dispatches it, redraws."""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from pomodoro.display import console as default_console
from pomodoro.display import render_panel
from pomodoro.events import EventQueue, KeySource, TerminalKeys, Ticker
from pomodoro.models import (
    Directive,
    Dispatch,
    Event,
    TickEvent,
    TimeoutEvent,
    TimerConfig,
    TimerSnapshot,
)
from pomodoro.router import AppState, CommandRouter

log = logging.getLogger(__name__)


class Program:
    """Owns the application state and drives it from a single event queue."""

    refresh_per_second = 20

    def __init__(
        self,
        config: TimerConfig,
        *,
        keys: Optional[KeySource] = None,
        router: Optional[CommandRouter] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.config = config
        self.state = AppState.from_config(config)
        self.router = router or CommandRouter()
        self.events = EventQueue()
        self.ticker = Ticker(self.events, config.interval)
        self.keys: KeySource = keys if keys is not None else TerminalKeys()
        self.console = console or default_console

    def handle(self, event: Event) -> Dispatch:
        """Process exactly one event and carry out the engine's directive."""
        # Signals left behind by a cancelled or restarted schedule
        scheduled = isinstance(event, (TickEvent, TimeoutEvent))
        if scheduled and event.generation != self.ticker.generation:
            return Dispatch()

        outcome = self.router.dispatch(self.state, event)

        if outcome.directive is Directive.START_TICKING:
            self.ticker.start()
        elif outcome.directive is Directive.STOP_TICKING:
            self.ticker.stop()
        elif outcome.directive is Directive.TIMEOUT:
            self.ticker.stop()
            self.events.put(TimeoutEvent(generation=self.ticker.generation))
        return outcome

    def view(self) -> Panel:
        return render_panel(self.state.snapshot(), self.router.keymap.short_help())

    def run(self) -> TimerSnapshot:
        """Run until a quit intent. Raises HostStartError if input can't be read."""
        self.keys.start(self.events)
        log.info(
            "timer ready: work %s, break %s, tick %s",
            self.config.work_duration,
            self.config.break_duration,
            self.config.interval,
        )
        try:
            with Live(
                self.view(),
                console=self.console,
                refresh_per_second=self.refresh_per_second,
            ) as live:
                while True:
                    event = self.events.get()
                    outcome = self.handle(event)
                    live.update(self.view())
                    if outcome.quit:
                        break
        finally:
            self.ticker.stop()
            self.keys.stop()
        log.info("quit with status %s", self.state.engine.status.value)
        return self.state.snapshot()


def run_timer(
    config: TimerConfig,
    keys: Optional[KeySource] = None,
    console: Optional[Console] = None,
) -> TimerSnapshot:
    """Run the interactive countdown. Returns the final snapshot."""
    return Program(config, keys=keys, console=console).run()
