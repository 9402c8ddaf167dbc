"""The logger hierarchy that routes records to appenders."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Protocol, Sequence

from .filters import Filter, Response
from .record import Level, LevelFilter, Record

ErrorHandler = Callable[[BaseException], None]


class _Append(Protocol):
    """Anything that can take a record and write it somewhere."""

    def append(self, record: Record) -> None:
        ...

    def flush(self) -> None:
        ...


def _default_err_handler(error: BaseException) -> None:
    try:
        print(f"logweave: {error}", file=sys.stderr)
    except Exception:
        pass


@dataclass(frozen=True)
class LoggerConfig:
    """Configuration of one named logger.

    ``name`` is a path whose components are separated by ``::``.  When
    ``additive`` is true the logger also sends to its parent's appenders.
    """

    name: str
    level: LevelFilter
    appenders: tuple[str, ...] = ()
    additive: bool = True


@dataclass(frozen=True)
class NamedAppender:
    """An appender registered under a name, with the filters guarding it."""

    name: str
    appender: _Append
    filters: tuple[Filter, ...] = ()


@dataclass
class LoggerNode:
    """A node of the logger tree: its level, appender indices and children."""

    level: LevelFilter
    appenders: list[int] = field(default_factory=list)
    children: dict[str, "LoggerNode"] = field(default_factory=dict)

    def add(
        self,
        path: str,
        appenders: Sequence[int],
        additive: bool,
        level: LevelFilter,
    ) -> None:
        """Insert the logger at ``path`` below this node."""
        part, sep, rest = path.partition("::")
        if not sep:
            rest = ""

        existing = self.children.get(part)
        if existing is not None:
            existing.add(rest, appenders, additive, level)
            return

        if not rest:
            own = list(appenders)
            if additive:
                own.extend(self.appenders)
            child = LoggerNode(level, own)
        else:
            child = LoggerNode(self.level, list(self.appenders))
            child.add(rest, appenders, additive, level)
        self.children[part] = child

    def find(self, path: str) -> "LoggerNode":
        """Return the deepest configured node along ``path``."""
        node = self
        for part in path.split("::"):
            child = node.children.get(part)
            if child is None:
                break
            node = child
        return node

    def max_log_level(self) -> LevelFilter:
        """Return the most verbose level of this node and all below it."""
        return max(
            (child.max_log_level() for child in self.children.values()),
            default=self.level,
        ) if self.children and max(
            child.max_log_level() for child in self.children.values()
        ) > self.level else self.level

    def enabled(self, level: Level) -> bool:
        """Return whether records at ``level`` pass this node."""
        return self.level >= level

    def log(self, record: Record, appenders: Sequence["AppenderSlot"]) -> list[Exception]:
        """Send ``record`` to this node's appenders, returning their failures."""
        errors: list[Exception] = []
        if self.enabled(record.level):
            for index in self.appenders:
                try:
                    appenders[index].append(record)
                except Exception as error:
                    errors.append(error)
        return errors


@dataclass(frozen=True)
class AppenderSlot:
    """An appender together with the filters that run before it."""

    appender: _Append
    filters: tuple[Filter, ...] = ()

    def append(self, record: Record) -> None:
        """Run the filters and, unless one rejects, append ``record``."""
        for flt in self.filters:
            response = flt.filter(record)
            if response is Response.ACCEPT:
                break
            if response is Response.REJECT:
                return
        self.appender.append(record)

    def flush(self) -> None:
        """Flush the underlying appender."""
        self.appender.flush()


@dataclass(frozen=True)
class _Shared:
    root: LoggerNode
    appenders: tuple[AppenderSlot, ...]


def _build_shared(
    root_level: LevelFilter,
    root_appenders: Iterable[str],
    loggers: Iterable[LoggerConfig],
    appenders: Iterable[NamedAppender],
) -> _Shared:
    named = list(appenders)
    index_of = {appender.name: i for i, appender in enumerate(named)}

    def resolve(names: Iterable[str]) -> list[int]:
        indices = []
        for name in names:
            if name not in index_of:
                raise ValueError(f"reference to nonexistent appender `{name}`")
            indices.append(index_of[name])
        return indices

    root = LoggerNode(LevelFilter(root_level), resolve(root_appenders))
    # Shorter names first so parents exist before their children.
    for logger in sorted(loggers, key=lambda cfg: len(cfg.name)):
        root.add(logger.name, resolve(logger.appenders), logger.additive, logger.level)

    slots = tuple(AppenderSlot(a.appender, tuple(a.filters)) for a in named)
    return _Shared(root, slots)


class Logger:
    """A fully configured logger whose configuration can be replaced at runtime."""

    def __init__(
        self,
        root_level: LevelFilter,
        root_appenders: Iterable[str] = (),
        loggers: Iterable[LoggerConfig] = (),
        appenders: Iterable[NamedAppender] = (),
        err_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self._err_handler: ErrorHandler = err_handler or _default_err_handler
        self._shared = _build_shared(root_level, root_appenders, loggers, appenders)

    def enabled(self, level: Level, target: str) -> bool:
        """Return whether a record at ``level`` for ``target`` would be logged."""
        return self._shared.root.find(target).enabled(level)

    def log(self, record: Record) -> None:
        """Route ``record``; appender failures go to the error handler."""
        shared = self._shared
        for error in shared.root.find(record.target).log(record, shared.appenders):
            self._err_handler(error)

    def flush(self) -> None:
        """Flush every appender."""
        for slot in self._shared.appenders:
            slot.flush()

    def max_log_level(self) -> LevelFilter:
        """Return the most verbose level any logger lets through."""
        return self._shared.root.max_log_level()

    def set_config(
        self,
        root_level: LevelFilter,
        root_appenders: Iterable[str] = (),
        loggers: Iterable[LoggerConfig] = (),
        appenders: Iterable[NamedAppender] = (),
    ) -> None:
        """Replace the configuration, keeping the error handler."""
        self._shared = _build_shared(root_level, root_appenders, loggers, appenders)


def build_logger(
    root_level: LevelFilter,
    root_appenders: Iterable[str] = (),
    loggers: Iterable[LoggerConfig] = (),
    appenders: Iterable[NamedAppender] = (),
    err_handler: Optional[ErrorHandler] = None,
) -> Logger:
    """Create a ``Logger`` from a root level, loggers and named appenders."""
    return Logger(root_level, root_appenders, loggers, appenders, err_handler)