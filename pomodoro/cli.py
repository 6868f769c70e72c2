"""Pomodoro CLI -- a keyboard-driven countdown for focused work."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from pomodoro import config as cfg
from pomodoro import display
from pomodoro.events import HostStartError
from pomodoro.router import Keymap

app = typer.Typer(
    name="pomodoro",
    help="A work/break countdown timer for the terminal.",
    no_args_is_help=True,
)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _setup_logging(log_file: Optional[Path], verbose: bool) -> None:
    """Send logs to a file while the live display owns the terminal."""
    if log_file is None:
        logging.basicConfig(level=logging.WARNING, format=_LOG_FORMAT)
        return
    logging.basicConfig(
        filename=str(log_file),
        level=logging.DEBUG if verbose else logging.INFO,
        format=_LOG_FORMAT,
    )


# ---------------------------------------------------------------------------
# Timer
# ---------------------------------------------------------------------------


@app.command()
def run(
    work: Optional[int] = typer.Option(None, "--work", "-w", help="Work duration in minutes"),
    break_: Optional[int] = typer.Option(None, "--break", "-b", help="Break duration in minutes"),
    interval_ms: Optional[int] = typer.Option(
        None, "--interval-ms", help="Tick interval in milliseconds (1-1000)"
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Write logs to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug-level logging"),
) -> None:
    """Start the interactive timer. Press s to start, p to pause, q to quit."""
    from pomodoro.timer import run_timer

    _setup_logging(log_file, verbose)
    try:
        settings = cfg.resolve_config(work, break_, interval_ms)
        timer_config = settings.timer_config()
    except ValidationError as exc:
        display.print_error(f"invalid settings: {exc.errors()[0]['msg']}")
        raise typer.Exit(2)

    try:
        run_timer(timer_config)
    except HostStartError as exc:
        display.print_error(str(exc))
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Help & configuration
# ---------------------------------------------------------------------------


@app.command()
def keys() -> None:
    """List the key bindings."""
    display.print_keys(Keymap.default().full_help())


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """Show the durations the timer will use."""
    if not show:
        display.print_info("Use --show to see the effective configuration.")
        return
    path = cfg.config_path()
    current = cfg.load_config(path)
    source = str(path) if path.exists() else f"defaults ({path} not found)"
    display.print_config(current, source)
