"""Rich terminal formatting helpers."""

from __future__ import annotations

from datetime import timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pomodoro.models import AppConfig, KeyBinding, TimerSnapshot, TimerStatus

console = Console()

DONE_MESSAGE = "All is done!"
HELP_SEPARATOR = " • "

_STATUS_STYLE: dict[TimerStatus, str] = {
    TimerStatus.IDLE: "dim",
    TimerStatus.RUNNING: "green",
    TimerStatus.PAUSED: "yellow",
    TimerStatus.EXPIRED: "magenta",
}


def format_remaining(remaining: timedelta) -> str:
    """Compact duration such as ``25m0s``, ``4.5s`` or ``900ms``."""
    total_ms = remaining // timedelta(milliseconds=1)
    if total_ms <= 0:
        return "0s"
    if total_ms < 1000:
        return f"{total_ms}ms"

    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)

    secs = str(seconds)
    if millis:
        secs += f".{millis:03d}".rstrip("0")

    out = ""
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return out + f"{secs}s"


def help_view(bindings: list[KeyBinding]) -> str:
    """One-line legend: ``s Start • p Stop the timer • q Quit the application``."""
    return HELP_SEPARATOR.join(f"{b.help_key} {b.help_desc}" for b in bindings)


def render_view(snapshot: TimerSnapshot, bindings: list[KeyBinding]) -> str:
    """Plain-text frame for the given state."""
    expired = snapshot.status is TimerStatus.EXPIRED
    if expired:
        view = "\n" + DONE_MESSAGE
    else:
        view = format_remaining(snapshot.remaining)
    view += "\n"

    if not snapshot.quitting and not expired:
        view = "\nExiting in " + view
        view += "\n" + help_view(bindings)
    return view


def render_panel(snapshot: TimerSnapshot, bindings: list[KeyBinding]) -> Panel:
    """The frame wrapped in a panel coloured by status, for the live display."""
    text = Text(render_view(snapshot, bindings).strip("\n"))
    return Panel(
        text,
        title="Pomodoro",
        subtitle=snapshot.status.value,
        border_style=_STATUS_STYLE[snapshot.status],
        padding=(1, 4),
        expand=False,
    )


def print_keys(bindings: list[KeyBinding]) -> None:
    """Print every key binding in a table."""
    table = Table(show_header=True, box=None, pad_edge=False)
    table.add_column("keys", style="bold cyan")
    table.add_column("action")
    for binding in bindings:
        table.add_row(", ".join(binding.keys), binding.help_desc)
    console.print(Panel(table, title="Keys", border_style="blue"))


def print_config(config: AppConfig, source: str) -> None:
    """Print the effective configuration and where it came from."""
    lines = [
        f"Work: {config.work_minutes} min",
        f"Break: {config.break_minutes} min",
        f"Tick interval: {config.interval_ms} ms",
        "",
        f"Source: {source}",
    ]
    console.print(Panel("\n".join(lines), title="Config", border_style="green"))


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]{message}[/blue]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"Error: {message}", style="red", markup=False, highlight=False)
