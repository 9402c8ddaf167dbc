"""Compiled pattern chunks that render a log record into a writer."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence, Union

from .alignment import LeftAlignWriter, MaxWidthWriter, RightAlignWriter
from .pattern_parser import (
    Alignment,
    ArgumentPiece,
    ErrorPiece,
    Parameters,
    Piece,
    TextPiece,
)
from .record import Level, Record, mdc_get
from .style import NEWLINE, Color, Style, Writer


class Timezone(Enum):
    """The time zone a date formatter renders in."""

    UTC = "utc"
    LOCAL = "local"


class Kind(Enum):
    """What a formatted chunk renders."""

    TIME = "time"
    LEVEL = "level"
    MESSAGE = "message"
    MODULE = "module"
    FILE = "file"
    LINE = "line"
    THREAD = "thread"
    THREAD_ID = "thread_id"
    PROCESS_ID = "process_id"
    SYSTEM_THREAD_ID = "system_thread_id"
    TARGET = "target"
    NEWLINE = "newline"
    ALIGN = "align"
    HIGHLIGHT = "highlight"
    DEBUG = "debug"
    RELEASE = "release"
    MDC = "mdc"


_MONTHS = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)
_WEEKDAYS = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

_COMPOSITES = {
    "T": "%H:%M:%S",
    "X": "%H:%M:%S",
    "R": "%H:%M",
    "D": "%m/%d/%y",
    "x": "%m/%d/%y",
    "F": "%Y-%m-%d",
    "r": "%I:%M:%S %p",
    "c": "%a %b %e %H:%M:%S %Y",
    "+": "%Y-%m-%dT%H:%M:%S%.f%:z",
}


def _hour12(moment: datetime) -> int:
    return (moment.hour % 12) or 12


def _numeric(spec: str, moment: datetime) -> Optional[tuple[int, int, str]]:
    """Return (value, width, default padding) for numeric specifiers."""
    iso = moment.isocalendar()
    table: dict[str, Callable[[], tuple[int, int, str]]] = {
        "Y": lambda: (moment.year, 4, "0"),
        "C": lambda: (moment.year // 100, 2, "0"),
        "y": lambda: (moment.year % 100, 2, "0"),
        "m": lambda: (moment.month, 2, "0"),
        "d": lambda: (moment.day, 2, "0"),
        "e": lambda: (moment.day, 2, " "),
        "H": lambda: (moment.hour, 2, "0"),
        "k": lambda: (moment.hour, 2, " "),
        "I": lambda: (_hour12(moment), 2, "0"),
        "l": lambda: (_hour12(moment), 2, " "),
        "M": lambda: (moment.minute, 2, "0"),
        "S": lambda: (moment.second, 2, "0"),
        "j": lambda: (moment.timetuple().tm_yday, 3, "0"),
        "u": lambda: (moment.isoweekday(), 1, "0"),
        "w": lambda: (moment.isoweekday() % 7, 1, "0"),
        "G": lambda: (iso[0], 4, "0"),
        "g": lambda: (iso[0] % 100, 2, "0"),
        "V": lambda: (iso[1], 2, "0"),
        "U": lambda: (int(moment.strftime("%U")), 2, "0"),
        "W": lambda: (int(moment.strftime("%W")), 2, "0"),
    }
    getter = table.get(spec)
    return getter() if getter is not None else None


def _pad(value: int, width: int, default: str, modifier: Optional[str]) -> str:
    fill = {"-": "", "_": " ", "0": "0"}.get(modifier or "", default)
    text = str(value)
    if not fill:
        return text
    return text.rjust(width, fill)


def _offset(moment: datetime, colon: bool) -> str:
    delta = moment.utcoffset() or timedelta(0)
    minutes = int(delta.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{mins:02d}" if colon else f"{sign}{hours:02d}{mins:02d}"


def _fraction(moment: datetime, digits: Optional[int], dot: bool) -> str:
    nanos = moment.microsecond * 1000
    if digits is None:
        if dot:
            if nanos == 0:
                return ""
            if nanos % 1_000_000 == 0:
                return f".{nanos // 1_000_000:03d}"
            if nanos % 1000 == 0:
                return f".{nanos // 1000:06d}"
            return f".{nanos:09d}"
        return f"{nanos:09d}"
    text = f"{nanos:09d}"[:digits]
    return "." + text if dot else text


def _read_spec(fmt: str, start: int) -> tuple[str, int]:
    if start >= len(fmt):
        raise ValueError(f"invalid date format `{fmt}`")
    ch = fmt[start]
    if ch == ".":
        if fmt[start + 1:start + 2] == "f":
            return ".f", start + 2
        if fmt[start + 1:start + 2] in ("3", "6", "9") and fmt[start + 2:start + 3] == "f":
            return fmt[start:start + 3], start + 3
        raise ValueError(f"invalid date format `{fmt}`")
    if ch in "369" and fmt[start + 1:start + 2] == "f":
        return fmt[start:start + 2], start + 2
    if ch == ":":
        if fmt[start + 1:start + 2] == "z":
            return ":z", start + 2
        raise ValueError(f"invalid date format `{fmt}`")
    return ch, start + 1


def _render_spec(spec: str, modifier: Optional[str], moment: datetime, fmt: str) -> str:
    numeric = _numeric(spec, moment)
    if numeric is not None:
        return _pad(*numeric, modifier)
    if spec in _COMPOSITES:
        return _format_time(_COMPOSITES[spec], moment)
    simple: dict[str, Callable[[], str]] = {
        "%": lambda: "%",
        "n": lambda: "\n",
        "t": lambda: "\t",
        "b": lambda: _MONTHS[moment.month - 1][:3],
        "h": lambda: _MONTHS[moment.month - 1][:3],
        "B": lambda: _MONTHS[moment.month - 1],
        "a": lambda: _WEEKDAYS[moment.weekday()][:3],
        "A": lambda: _WEEKDAYS[moment.weekday()],
        "p": lambda: "AM" if moment.hour < 12 else "PM",
        "P": lambda: "am" if moment.hour < 12 else "pm",
        "Z": lambda: moment.tzname() or "",
        "z": lambda: _offset(moment, colon=False),
        ":z": lambda: _offset(moment, colon=True),
        "s": lambda: str(int(moment.timestamp())),
        "f": lambda: _fraction(moment, None, dot=False),
        ".f": lambda: _fraction(moment, None, dot=True),
    }
    renderer = simple.get(spec)
    if renderer is not None:
        return renderer()
    if spec.endswith("f") and spec[:-1].lstrip(".") in ("3", "6", "9"):
        return _fraction(moment, int(spec[-2]), dot=spec.startswith("."))
    raise ValueError(f"invalid date format `{fmt}`")


def _format_time(fmt: str, moment: datetime) -> str:
    """Render ``moment`` with a strftime-like format string."""
    out: list[str] = []
    index = 0
    while index < len(fmt):
        percent = fmt.find("%", index)
        if percent < 0:
            out.append(fmt[index:])
            break
        out.append(fmt[index:percent])
        cursor = percent + 1
        modifier = None
        if cursor < len(fmt) and fmt[cursor] in "-_0":
            modifier = fmt[cursor]
            cursor += 1
        spec, index = _read_spec(fmt, cursor)
        out.append(_render_spec(spec, modifier, moment, fmt))
    return "".join(out)


def _now(zone: Timezone) -> datetime:
    if zone is Timezone.UTC:
        return datetime.now(timezone.utc)
    return datetime.now().astimezone()


_thread_cache = threading.local()


def _system_thread_id() -> int:
    tid = getattr(_thread_cache, "tid", None)
    if tid is None:
        tid = threading.get_native_id()
        _thread_cache.tid = tid
    return tid


_HIGHLIGHTS = {
    Level.ERROR: Style(text=Color.RED, intense=True),
    Level.WARN: Style(text=Color.YELLOW),
    Level.INFO: Style(text=Color.GREEN),
    Level.TRACE: Style(text=Color.CYAN),
}


@dataclass(frozen=True)
class TextChunk:
    """Literal text."""

    text: str

    def encode(self, w: Writer, record: Record) -> None:
        w.write(self.text.encode("utf-8"))


@dataclass(frozen=True)
class ErrorChunk:
    """A pattern error, rendered inline."""

    message: str

    def encode(self, w: Writer, record: Record) -> None:
        w.write(f"{{ERROR: {self.message}}}".encode("utf-8"))


@dataclass(frozen=True)
class FormattedChunk:
    """Dynamic output, adjusted by its format specification."""

    kind: Kind
    params: Parameters = field(default_factory=Parameters)
    children: tuple["Chunk", ...] = ()
    time_format: str = "%+"
    timezone: Timezone = Timezone.LOCAL
    mdc_key: str = ""
    mdc_default: str = ""

    def encode(self, w: Writer, record: Record) -> None:
        params = self.params
        if params.min_width is None and params.max_width is None:
            self._render(w, record)
            return
        target: Writer = w if params.max_width is None else MaxWidthWriter(w, params.max_width)
        if params.min_width is None:
            self._render(target, record)
            return
        if params.align is Alignment.LEFT:
            aligned: Union[LeftAlignWriter, RightAlignWriter] = LeftAlignWriter(
                target, params.min_width, params.fill
            )
        else:
            aligned = RightAlignWriter(target, params.min_width, params.fill)
        self._render(aligned, record)
        aligned.finish()

    def _children(self, w: Writer, record: Record) -> None:
        for chunk in self.children:
            chunk.encode(w, record)

    def _render(self, w: Writer, record: Record) -> None:
        kind = self.kind
        if kind is Kind.ALIGN:
            self._children(w, record)
        elif kind is Kind.HIGHLIGHT:
            style = _HIGHLIGHTS.get(record.level)
            if style is not None:
                w.set_style(style)
            self._children(w, record)
            if style is not None:
                w.set_style(Style())
        elif kind is Kind.DEBUG:
            if __debug__:
                self._children(w, record)
        elif kind is Kind.RELEASE:
            if not __debug__:
                self._children(w, record)
        else:
            w.write(self._text(record).encode("utf-8"))

    def _text(self, record: Record) -> str:
        kind = self.kind
        if kind is Kind.TIME:
            return _format_time(self.time_format, _now(self.timezone))
        if kind is Kind.LEVEL:
            return str(record.level)
        if kind is Kind.MESSAGE:
            return record.message
        if kind is Kind.MODULE:
            return record.module_path if record.module_path is not None else "???"
        if kind is Kind.FILE:
            return record.file if record.file is not None else "???"
        if kind is Kind.LINE:
            return str(record.line) if record.line is not None else "???"
        if kind is Kind.THREAD:
            return threading.current_thread().name or "unnamed"
        if kind is Kind.THREAD_ID:
            return str(threading.get_native_id())
        if kind is Kind.PROCESS_ID:
            return str(os.getpid())
        if kind is Kind.SYSTEM_THREAD_ID:
            return str(_system_thread_id())
        if kind is Kind.TARGET:
            return record.target
        if kind is Kind.NEWLINE:
            return NEWLINE
        if kind is Kind.MDC:
            value = mdc_get(self.mdc_key)
            return self.mdc_default if value is None else value
        raise ValueError(f"chunk kind {kind} has no text")


Chunk = Union[TextChunk, ErrorChunk, FormattedChunk]

_SIMPLE = {
    "l": Kind.LEVEL, "level": Kind.LEVEL,
    "m": Kind.MESSAGE, "message": Kind.MESSAGE,
    "M": Kind.MODULE, "module": Kind.MODULE,
    "n": Kind.NEWLINE,
    "f": Kind.FILE, "file": Kind.FILE,
    "L": Kind.LINE, "line": Kind.LINE,
    "T": Kind.THREAD, "thread": Kind.THREAD,
    "I": Kind.THREAD_ID, "thread_id": Kind.THREAD_ID,
    "P": Kind.PROCESS_ID, "pid": Kind.PROCESS_ID,
    "i": Kind.SYSTEM_THREAD_ID, "tid": Kind.SYSTEM_THREAD_ID,
    "t": Kind.TARGET, "target": Kind.TARGET,
}

_NESTED = {
    "h": Kind.HIGHLIGHT, "highlight": Kind.HIGHLIGHT,
    "D": Kind.DEBUG, "debug": Kind.DEBUG,
    "R": Kind.RELEASE, "release": Kind.RELEASE,
    "": Kind.ALIGN,
}


def _compile_date(args: Sequence[Sequence[Piece]], params: Parameters) -> Chunk:
    if len(args) > 2:
        return ErrorChunk("expected at most two arguments")

    time_format = "%+"
    if args:
        parts = []
        for piece in args[0]:
            if isinstance(piece, TextPiece):
                parts.append(piece.text)
            elif isinstance(piece, ArgumentPiece):
                parts.append("{ERROR: unexpected formatter}")
            else:
                parts.append(f"{{ERROR: {piece.message}}}")
        time_format = "".join(parts)

    zone = Timezone.LOCAL
    if len(args) > 1:
        if not args[1]:
            return ErrorChunk("invalid timezone")
        first = args[1][0]
        if not isinstance(first, TextPiece):
            return ErrorChunk("invalid timezone")
        if first.text == "utc":
            zone = Timezone.UTC
        elif first.text == "local":
            zone = Timezone.LOCAL
        else:
            return ErrorChunk(f"invalid timezone `{first.text}`")

    return FormattedChunk(Kind.TIME, params, time_format=time_format, timezone=zone)


def _mdc_text(arg: Sequence[Piece], what: str) -> Union[str, ErrorChunk]:
    if not arg:
        return ErrorChunk(f"invalid MDC {what}")
    first = arg[0]
    if isinstance(first, TextPiece):
        return first.text
    if isinstance(first, ErrorPiece):
        return ErrorChunk(first.message)
    return ErrorChunk(f"invalid MDC {what}")


def _compile_mdc(args: Sequence[Sequence[Piece]], params: Parameters) -> Chunk:
    if len(args) > 2:
        return ErrorChunk("expected at most two arguments")
    if not args:
        return ErrorChunk("missing MDC key")
    key = _mdc_text(args[0], "key")
    if isinstance(key, ErrorChunk):
        return key
    default = ""
    if len(args) > 1:
        value = _mdc_text(args[1], "default")
        if isinstance(value, ErrorChunk):
            return value
        default = value
    return FormattedChunk(Kind.MDC, params, mdc_key=key, mdc_default=default)


def compile_piece(piece: Piece) -> Chunk:
    """Turn a parsed piece into a chunk, reporting misuse as an error chunk."""
    if isinstance(piece, TextPiece):
        return TextChunk(piece.text)
    if isinstance(piece, ErrorPiece):
        return ErrorChunk(piece.message)

    name = piece.formatter.name
    args = piece.formatter.args
    params = piece.parameters

    if name in ("d", "date"):
        return _compile_date(args, params)
    if name in ("X", "mdc"):
        return _compile_mdc(args, params)

    nested = _NESTED.get(name)
    if nested is not None:
        if len(args) != 1:
            return ErrorChunk("expected exactly one argument")
        return FormattedChunk(nested, params, children=compile_pieces(args[0]))

    simple = _SIMPLE.get(name)
    if simple is not None:
        if args:
            return ErrorChunk("unexpected arguments")
        return FormattedChunk(simple, params)

    return ErrorChunk(f"unknown formatter `{name}`")


def compile_pieces(pieces: Iterable[Piece]) -> tuple[Chunk, ...]:
    """Compile a sequence of parsed pieces."""
    return tuple(compile_piece(piece) for piece in pieces)