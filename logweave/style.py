"""Text styles and the writer interface that encoders write to."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

NEWLINE = "\r\n" if os.name == "nt" else "\n"


class Color(Enum):
    """A text or background color."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


@dataclass(frozen=True)
class Style:
    """The style applied to text output; ``None`` fields use the writer's default."""

    text: Optional[Color] = None
    background: Optional[Color] = None
    intense: Optional[bool] = None


class Writer(ABC):
    """A byte sink that encoders write to, optionally supporting styles."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write all of ``data``."""

    def flush(self) -> None:
        """Flush buffered output; the default does nothing."""

    def set_style(self, style: Style) -> None:
        """Set the output style; writers ignore what they do not support."""