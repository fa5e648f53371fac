"""A small terminal abstraction that writes ANSI control sequences to a stream."""

from __future__ import annotations

import os
import re
import sys
from typing import TextIO

from wcwidth import wcswidth, wcwidth

DEFAULT_WIDTH = 80

_ANSI_RE = re.compile(
    r"\x1b(?:\[[0-?]*[ -/]*[@-~]|\][^\x07\x1b]*(?:\x07|\x1b\\)|[@-_])"
)


def measure_text_width(text: str) -> int:
    """Return the number of terminal cells ``text`` occupies, ignoring ANSI codes."""
    plain = _ANSI_RE.sub("", text)
    width = wcswidth(plain)
    if width >= 0:
        return width
    return sum(max(wcwidth(char), 0) for char in plain)


class Term:
    """A buffered terminal: output is collected until :meth:`flush` is called."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._buffer: list[str] = []

    @classmethod
    def stdout(cls) -> Term:
        """A terminal writing to standard output."""
        return cls(sys.stdout)

    @classmethod
    def stderr(cls) -> Term:
        """A terminal writing to standard error."""
        return cls(sys.stderr)

    def is_term(self) -> bool:
        """Whether the underlying stream is attached to a terminal."""
        try:
            return bool(self._stream.isatty())
        except (AttributeError, ValueError):
            return False

    def width(self) -> int:
        """The width of the terminal in columns, or a default when unknown."""
        if not self.is_term():
            return DEFAULT_WIDTH
        try:
            return os.get_terminal_size(self._stream.fileno()).columns
        except (AttributeError, OSError, ValueError):
            return DEFAULT_WIDTH

    def move_cursor_up(self, n: int) -> None:
        if n > 0:
            self._buffer.append(f"\x1b[{n}A")

    def move_cursor_down(self, n: int) -> None:
        if n > 0:
            self._buffer.append(f"\x1b[{n}B")

    def clear_line(self) -> None:
        self._buffer.append("\r\x1b[2K")

    def write_line(self, text: str) -> None:
        self._buffer.append(text)
        self._buffer.append("\n")

    def write_str(self, text: str) -> None:
        self._buffer.append(text)

    def flush(self) -> None:
        """Write out everything buffered so far and flush the stream."""
        if self._buffer:
            self._stream.write("".join(self._buffer))
            self._buffer.clear()
        self._stream.flush()