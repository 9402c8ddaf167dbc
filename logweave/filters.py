"""Filters that decide whether an appender receives a log event."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from .record import LevelFilter, Record


class Response(Enum):
    """A filter's verdict on a log event."""

    ACCEPT = "accept"
    """Pass the event to the appender, skipping remaining filters."""
    NEUTRAL = "neutral"
    """Defer to the remaining filters, or the appender if none remain."""
    REJECT = "reject"
    """Drop the event."""


class Filter(ABC):
    """Decides whether a log event reaches an appender."""

    @abstractmethod
    def filter(self, record: Record) -> Response:
        """Return the verdict for ``record``."""


@dataclass(frozen=True)
class ThresholdFilter(Filter):
    """Rejects every event more verbose than ``level``."""

    level: LevelFilter

    def filter(self, record: Record) -> Response:
        if record.level > self.level:
            return Response.REJECT
        return Response.NEUTRAL