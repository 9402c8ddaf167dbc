"""Log levels, log records and the per-thread mapped diagnostic context."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Optional


class Level(IntEnum):
    """The severity of a log record; a larger value is more verbose."""

    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    def __str__(self) -> str:
        return self.name


class LevelFilter(IntEnum):
    """The most verbose level a logger lets through; ``OFF`` lets nothing through."""

    OFF = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    def __str__(self) -> str:
        return self.name


def parse_level_filter(text: str) -> LevelFilter:
    """Parse a level filter name such as ``"warn"``, ignoring case."""
    try:
        return LevelFilter[text.strip().upper()]
    except KeyError:
        raise ValueError(f"invalid log level filter `{text}`") from None


@dataclass(frozen=True)
class Record:
    """A single log event."""

    level: Level = Level.INFO
    target: str = ""
    message: str = ""
    module_path: Optional[str] = None
    file: Optional[str] = None
    line: Optional[int] = None


_local = threading.local()


def _context() -> dict[str, str]:
    values = getattr(_local, "values", None)
    if values is None:
        values = {}
        _local.values = values
    return values


def mdc_insert(key: str, value: str) -> Optional[str]:
    """Set a value in the current thread's context, returning the previous one."""
    values = _context()
    previous = values.get(key)
    values[key] = value
    return previous


def mdc_get(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return the current thread's value for ``key``, or ``default``."""
    return _context().get(key, default)


def mdc_remove(key: str) -> Optional[str]:
    """Remove ``key`` from the current thread's context, returning its value."""
    return _context().pop(key, None)


def mdc_clear() -> None:
    """Remove every entry from the current thread's context."""
    _context().clear()


def mdc_items() -> Iterator[tuple[str, str]]:
    """Iterate over a snapshot of the current thread's context entries."""
    return iter(list(_context().items()))