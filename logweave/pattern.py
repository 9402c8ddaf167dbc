"""An encoder configured by a pattern string."""

from __future__ import annotations

from dataclasses import dataclass, field

from .chunks import Chunk, ErrorChunk, compile_pieces
from .pattern_parser import parse
from .record import Record
from .style import Writer

DEFAULT_PATTERN = "{d} {l} {t} - {m}{n}"


@dataclass(frozen=True)
class PatternEncoder:
    """Renders records according to a pattern such as ``{d} {l} {t} - {m}{n}``.

    Mistakes in the pattern do not raise; they are rendered inline as
    ``{ERROR: ...}`` text.
    """

    pattern: str = DEFAULT_PATTERN
    chunks: tuple[Chunk, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "chunks", compile_pieces(parse(self.pattern)))

    def encode(self, w: Writer, record: Record) -> None:
        """Write ``record`` to ``w`` following the pattern."""
        for chunk in self.chunks:
            chunk.encode(w, record)

    def is_error_free(self) -> bool:
        """Return whether the pattern compiled without any error."""
        return not any(isinstance(chunk, ErrorChunk) for chunk in self.chunks)