"""Parser for the pattern encoder's format-string syntax."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union

_SPECIAL = frozenset("{}()\\")


class Alignment(Enum):
    """How a formatter's output is padded to its minimum width."""

    LEFT = "<"
    RIGHT = ">"


@dataclass(frozen=True)
class Parameters:
    """The format specification that follows ``:`` in an argument."""

    fill: str = " "
    align: Alignment = Alignment.LEFT
    min_width: Optional[int] = None
    max_width: Optional[int] = None


@dataclass(frozen=True)
class TextPiece:
    """Literal text copied to the output."""

    text: str


@dataclass(frozen=True)
class ErrorPiece:
    """A syntax error found while parsing."""

    message: str


@dataclass(frozen=True)
class Formatter:
    """A formatter name and its parenthesised arguments."""

    name: str
    args: tuple[tuple["Piece", ...], ...] = ()


@dataclass(frozen=True)
class ArgumentPiece:
    """A ``{...}`` format argument."""

    formatter: Formatter
    parameters: Parameters = field(default_factory=Parameters)


Piece = Union[TextPiece, ArgumentPiece, ErrorPiece]


class _UnclosedParen(Exception):
    pass


class _Parser:
    """Iterates over the pieces of a pattern string."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.pos = 0

    def _peek(self, offset: int = 0) -> Optional[str]:
        index = self.pos + offset
        if index < len(self.pattern):
            return self.pattern[index]
        return None

    def _consume(self, ch: str) -> bool:
        if self._peek() == ch:
            self.pos += 1
            return True
        return False

    def __iter__(self) -> Iterator[Piece]:
        return self

    def __next__(self) -> Piece:
        ch = self._peek()
        if ch is None:
            raise StopIteration
        if ch == "{":
            self.pos += 1
            if self._consume("{"):
                return TextPiece("{")
            piece = self._argument()
            if self._consume("}"):
                return piece
            self.pos = len(self.pattern)
            return ErrorPiece("expected '}'")
        if ch == "}":
            self.pos += 1
            if self._consume("}"):
                return TextPiece("}")
            return ErrorPiece("unmatched '}'")
        if ch == "(":
            self.pos += 1
            if self._consume("("):
                return TextPiece("(")
            return ErrorPiece("unexpected '('")
        if ch == ")":
            self.pos += 1
            if self._consume(")"):
                return TextPiece(")")
            return ErrorPiece("unexpected ')'")
        if ch == "\\":
            self.pos += 1
            escaped = self._peek()
            if escaped is not None and escaped in _SPECIAL:
                self.pos += 1
                return TextPiece(escaped)
            return ErrorPiece("unexpected '\\'")
        return self._text()

    def _argument(self) -> Piece:
        try:
            formatter = Formatter(self._name(), self._args())
        except _UnclosedParen:
            return ErrorPiece("unclosed '('")
        return ArgumentPiece(formatter, self._parameters())

    def _name(self) -> str:
        first = self._peek()
        if first is None or not first.isalpha():
            return ""
        start = self.pos
        self.pos += 1
        while (ch := self._peek()) is not None and ch.isalnum():
            self.pos += 1
        return self.pattern[start:self.pos]

    def _args(self) -> tuple[tuple[Piece, ...], ...]:
        args = []
        while self._peek() == "(":
            args.append(self._arg())
        return tuple(args)

    def _arg(self) -> tuple[Piece, ...]:
        if not self._consume("("):
            return ()
        pieces = []
        while not self._consume(")"):
            try:
                pieces.append(next(self))
            except StopIteration:
                raise _UnclosedParen from None
        return tuple(pieces)

    def _parameters(self) -> Parameters:
        if not self._consume(":"):
            return Parameters()

        fill = " "
        align = Alignment.LEFT
        ch = self._peek()
        if ch is not None and self._peek(1) in ("<", ">"):
            self.pos += 1
            fill = ch

        if self._consume("<"):
            align = Alignment.LEFT
        elif self._consume(">"):
            align = Alignment.RIGHT

        min_width = self._integer()
        max_width = self._integer() if self._consume(".") else None
        return Parameters(fill, align, min_width, max_width)

    def _integer(self) -> Optional[int]:
        start = self.pos
        while (ch := self._peek()) is not None and "0" <= ch <= "9":
            self.pos += 1
        if self.pos == start:
            return None
        return int(self.pattern[start:self.pos])

    def _text(self) -> TextPiece:
        start = self.pos
        while (ch := self._peek()) is not None and ch not in _SPECIAL:
            self.pos += 1
        return TextPiece(self.pattern[start:self.pos])


def parse(pattern: str) -> list[Piece]:
    """Split ``pattern`` into text, argument and error pieces."""
    return list(_Parser(pattern))