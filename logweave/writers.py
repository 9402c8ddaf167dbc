"""Writers that encoders write to: plain, ANSI-styled and console."""

from __future__ import annotations

import sys
import threading
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional, TextIO, Union

from .style import Color, Style, Writer

Stream = Union[BinaryIO, TextIO]

_COLOR_DIGITS = {
    Color.BLACK: "0",
    Color.RED: "1",
    Color.GREEN: "2",
    Color.YELLOW: "3",
    Color.BLUE: "4",
    Color.MAGENTA: "5",
    Color.CYAN: "6",
    Color.WHITE: "7",
}


def ansi_escape(style: Style) -> bytes:
    """Return the ANSI escape sequence that selects ``style``."""
    parts = ["\x1b[0"]
    if style.text is not None:
        parts.append(";3" + _COLOR_DIGITS[style.text])
    if style.background is not None:
        parts.append(";4" + _COLOR_DIGITS[style.background])
    if style.intense is not None:
        parts.append(";1" if style.intense else ";22")
    parts.append("m")
    return "".join(parts).encode("ascii")


class SimpleWriter(Writer):
    """Delegates to a binary stream and ignores styles."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream

    def write(self, data: bytes) -> None:
        self.stream.write(data)

    def flush(self) -> None:
        self.stream.flush()


class AnsiWriter(Writer):
    """Delegates to a binary stream, emitting ANSI escape codes for styles."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream

    def write(self, data: bytes) -> None:
        self.stream.write(data)

    def flush(self) -> None:
        self.stream.flush()

    def set_style(self, style: Style) -> None:
        self.stream.write(ansi_escape(style))


_locks: dict[int, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(stream: object) -> threading.RLock:
    with _locks_guard:
        lock = _locks.get(id(stream))
        if lock is None:
            lock = threading.RLock()
            _locks[id(stream)] = lock
        return lock


class ConsoleWriter(Writer):
    """Writes to a console stream, styling text with ANSI escape codes."""

    def __init__(self, stream: Stream) -> None:
        self.stream = stream
        self._lock = _lock_for(stream)

    def _emit(self, data: bytes) -> None:
        binary = getattr(self.stream, "buffer", None)
        if binary is not None:
            # Keep ordering with anything already written through the text layer.
            self.stream.flush()
            binary.write(data)
        elif hasattr(self.stream, "encoding"):
            encoding = getattr(self.stream, "encoding", None) or "utf-8"
            self.stream.write(data.decode(encoding, errors="replace"))
        else:
            self.stream.write(data)

    def write(self, data: bytes) -> None:
        with self._lock:
            self._emit(data)

    def flush(self) -> None:
        with self._lock:
            binary = getattr(self.stream, "buffer", None)
            self.stream.flush()
            if binary is not None:
                binary.flush()

    def set_style(self, style: Style) -> None:
        with self._lock:
            self._emit(ansi_escape(style))

    @contextmanager
    def lock(self) -> Iterator["ConsoleWriter"]:
        """Hold the console, keeping other threads from writing meanwhile."""
        with self._lock:
            yield self


def _console(stream: Optional[Stream]) -> Optional[ConsoleWriter]:
    if stream is None:
        return None
    try:
        tty = stream.isatty()
    except (AttributeError, ValueError, OSError):
        return None
    return ConsoleWriter(stream) if tty else None


def console_stdout() -> Optional[ConsoleWriter]:
    """Return a writer for standard output, or ``None`` if it is not a terminal."""
    return _console(sys.stdout)


def console_stderr() -> Optional[ConsoleWriter]:
    """Return a writer for standard error, or ``None`` if it is not a terminal."""
    return _console(sys.stderr)