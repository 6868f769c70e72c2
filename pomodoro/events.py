"""Event sources feeding the host loop: the queue, the ticker and the keyboard."""

from __future__ import annotations

import contextlib
import logging
import os
import queue
import select
import sys
import threading
import time
from datetime import timedelta
from typing import Optional, Protocol, TextIO

from pomodoro.models import Event, KeyEvent, TickEvent

log = logging.getLogger(__name__)

# Sent when stdin reaches end of file; bound to quit
EOF_KEY = "ctrl+d"

# Single control bytes and their symbolic names
_KEY_NAMES: dict[str, str] = {
    "\x03": "ctrl+c",
    "\x04": "ctrl+d",
    "\x1b": "esc",
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    " ": "space",
    "\x7f": "backspace",
}


class HostStartError(RuntimeError):
    """The host event loop could not be started."""


def key_name(char: str) -> str:
    """Map a single character read from the terminal to a key name."""
    if char in _KEY_NAMES:
        return _KEY_NAMES[char]
    code = ord(char)
    if 1 <= code <= 26:
        return f"ctrl+{chr(code + 96)}"
    return char


class EventQueue:
    """Single-consumer FIFO of events. Producers may live on any thread."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Event] = queue.Queue()

    def put(self, event: Event) -> None:
        self._queue.put(event)

    def get(self, timeout: Optional[float] = None) -> Optional[Event]:
        """Next event, or None if ``timeout`` elapses first."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def empty(self) -> bool:
        return self._queue.empty()

    def __len__(self) -> int:
        return self._queue.qsize()


class KeySource(Protocol):
    def start(self, events: EventQueue) -> None: ...

    def stop(self) -> None: ...


class Ticker:
    """Puts a :class:`TickEvent` on the queue every ``interval``.

    Each :meth:`start` opens a new generation; ticks carry it so the
    consumer can discard the ones a cancelled schedule left behind.
    """

    def __init__(self, events: EventQueue, interval: timedelta) -> None:
        self._events = events
        self._period = interval.total_seconds()
        self._generation = 0
        self._cancel: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> int:
        self.stop()
        self._generation += 1
        self._cancel = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._generation, self._cancel),
            name=f"ticker-{self._generation}",
            daemon=True,
        )
        self._thread.start()
        log.debug("ticker generation %d started (every %.3fs)", self._generation, self._period)
        return self._generation

    def stop(self) -> None:
        if self._cancel is None:
            return
        self._cancel.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        log.debug("ticker generation %d stopped", self._generation)
        self._cancel = None
        self._thread = None

    def _run(self, generation: int, cancel: threading.Event) -> None:
        # Deadlines advance by whole periods so sleep jitter does not accumulate.
        deadline = time.monotonic() + self._period
        while not cancel.wait(max(0.0, deadline - time.monotonic())):
            self._events.put(TickEvent(generation=generation))
            deadline += self._period


class TerminalKeys:
    """Reads single key presses from a TTY and queues them as :class:`KeyEvent`.

    The terminal is put in cbreak mode with signal generation disabled so
    ctrl+c arrives as a key instead of raising KeyboardInterrupt. The
    previous terminal attributes are restored by :meth:`stop`.
    """

    poll_seconds = 0.05

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._saved: Optional[list] = None
        self._fd: Optional[int] = None
        self._cancel = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self, events: EventQueue) -> None:
        try:
            import termios
            import tty
        except ImportError as exc:
            raise HostStartError("keyboard input needs a POSIX terminal") from exc

        try:
            fd = self._stream.fileno()
        except (AttributeError, OSError, ValueError) as exc:
            raise HostStartError("stdin has no file descriptor") from exc
        if not os.isatty(fd):
            raise HostStartError("stdin is not a terminal")

        try:
            self._saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
            attrs = termios.tcgetattr(fd)
            attrs[3] &= ~termios.ISIG
            termios.tcsetattr(fd, termios.TCSANOW, attrs)
        except termios.error as exc:
            with contextlib.suppress(termios.error):
                self._restore(fd)
            raise HostStartError(f"could not configure terminal: {exc}") from exc

        self._fd = fd
        self._cancel.clear()
        self._thread = threading.Thread(
            target=self._run, args=(fd, events), name="keys", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._cancel.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._fd is not None:
            self._restore(self._fd)
            self._fd = None

    def _restore(self, fd: int) -> None:
        import termios

        if self._saved is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def _run(self, fd: int, events: EventQueue) -> None:
        while not self._cancel.is_set():
            readable, _, _ = select.select([fd], [], [], self.poll_seconds)
            if not readable:
                continue
            data = os.read(fd, 1)
            if not data:
                log.warning("stdin closed; treating it as %s", EOF_KEY)
                events.put(KeyEvent(key=EOF_KEY))
                return
            events.put(KeyEvent(key=key_name(data.decode("utf-8", errors="replace"))))
