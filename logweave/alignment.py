"""Writers that truncate and pad a formatter's output to a width."""

from __future__ import annotations

from typing import Union

from .style import Style, Writer


def _is_char_start(byte: int) -> bool:
    return byte < 0x80 or byte >= 0xC0


def _char_starts(data: bytes) -> int:
    return sum(1 for byte in data if _is_char_start(byte))


class MaxWidthWriter(Writer):
    """Passes through at most ``max_width`` characters, dropping the rest."""

    def __init__(self, inner: Writer, max_width: int) -> None:
        self.inner = inner
        self.remaining = max_width

    def write(self, data: bytes) -> None:
        remaining = self.remaining
        end = len(data)
        for index, byte in enumerate(data):
            if not _is_char_start(byte):
                continue
            if remaining == 0:
                end = index
                break
            remaining -= 1
        if end == 0:
            return
        self.inner.write(data[:end])
        self.remaining = remaining

    def flush(self) -> None:
        self.inner.flush()

    def set_style(self, style: Style) -> None:
        self.inner.set_style(style)


class LeftAlignWriter(Writer):
    """Writes through, then pads with ``fill`` up to ``min_width`` characters."""

    def __init__(self, inner: Writer, min_width: int, fill: str = " ") -> None:
        self.inner = inner
        self.to_fill = min_width
        self.fill = fill

    def write(self, data: bytes) -> None:
        self.inner.write(data)
        self.to_fill = max(0, self.to_fill - _char_starts(data))

    def flush(self) -> None:
        self.inner.flush()

    def set_style(self, style: Style) -> None:
        self.inner.set_style(style)

    def finish(self) -> None:
        """Write the padding still owed."""
        if self.to_fill:
            self.inner.write((self.fill * self.to_fill).encode("utf-8"))
        self.to_fill = 0


class RightAlignWriter(Writer):
    """Buffers output, then writes padding followed by the buffered output."""

    def __init__(self, inner: Writer, min_width: int, fill: str = " ") -> None:
        self.inner = inner
        self.to_fill = min_width
        self.fill = fill
        self._buffer: list[Union[bytearray, Style]] = []

    def write(self, data: bytes) -> None:
        self.to_fill = max(0, self.to_fill - _char_starts(data))
        if self._buffer and isinstance(self._buffer[-1], bytearray):
            self._buffer[-1].extend(data)
        else:
            self._buffer.append(bytearray(data))

    def flush(self) -> None:
        """Output is held until ``finish``; nothing to flush yet."""

    def set_style(self, style: Style) -> None:
        self._buffer.append(style)

    def finish(self) -> None:
        """Write the padding and then everything buffered, in order."""
        if self.to_fill:
            self.inner.write((self.fill * self.to_fill).encode("utf-8"))
        self.to_fill = 0
        for item in self._buffer:
            if isinstance(item, Style):
                self.inner.set_style(item)
            else:
                self.inner.write(bytes(item))
        self._buffer.clear()