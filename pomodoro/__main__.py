"""Allow running as ``python -m pomodoro``."""

from pomodoro.cli import app

app()
