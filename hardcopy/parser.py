"""
Reader for the whitespace-delimited directive stream emitted by the editor.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Pattern

from .errors import MalformedDirectiveStream
from .models import Color


_WHITESPACE = re.compile(r"[ \t\r\n]*")
_KEYWORD = re.compile(r"\S+")
_INTEGER = re.compile(r"[+-]?\d+")
_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")


def read_stream(path: Path) -> str:
    """Return the decoded directive stream stored at ``path``.

    Raises:
        MalformedDirectiveStream: The file is not valid UTF-8.
    """

    data = path.read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedDirectiveStream("invalid utf8", offset=exc.start) from exc


class DirectiveReader:
    """Recursive-descent reader over the whole directive stream.

    Every ``read_*`` method skips leading whitespace first, so a directive
    handler simply reads its arguments in order.

    Example:
        >>> reader = DirectiveReader('FONT "Mono" 10')
        >>> reader.read_keyword(), reader.read_string(), reader.read_float()
        ('FONT', 'Mono', 10.0)
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @classmethod
    def from_path(cls, path: Path) -> DirectiveReader:
        return cls(read_stream(path))

    def skip_space(self) -> None:
        match = _WHITESPACE.match(self.text, self.pos)
        if match:
            self.pos = match.end()

    def at_end(self) -> bool:
        """Return True once only whitespace remains."""

        self.skip_space()
        return self.pos >= len(self.text)

    def read_keyword(self) -> str:
        return self._match(_KEYWORD, what="command").group(0)

    def read_string(self) -> str:
        """Read a double-quoted string; ``\\`` escapes the next character."""

        self.skip_space()
        start = self.pos
        if self._read_char() != '"':
            raise MalformedDirectiveStream(
                f"unexpected character: {self.text[start]!r}", offset=start
            )
        chars: list[str] = []
        while True:
            char = self._read_char()
            if char == '"':
                return "".join(chars)
            if char == "\\":
                char = self._read_char()
            chars.append(char)

    def read_optional_string(self) -> str | None:
        """Read a string argument only when one follows."""

        self.skip_space()
        if self.text.startswith('"', self.pos):
            return self.read_string()
        return None

    def read_integer(self) -> int:
        return int(self._match(_INTEGER, what="integer").group(0))

    def read_float(self) -> float:
        return float(self._match(_FLOAT, what="float").group(0))

    def read_flag(self) -> bool:
        return self.read_integer() != 0

    def read_color(self) -> Color:
        return Color.from_hex(self._match(_COLOR, what="color").group(0))

    def _read_char(self) -> str:
        if self.pos >= len(self.text):
            raise MalformedDirectiveStream("unexpected EOF", offset=self.pos)
        char = self.text[self.pos]
        self.pos += 1
        return char

    def _match(self, pattern: Pattern[str], *, what: str) -> re.Match[str]:
        self.skip_space()
        match = pattern.match(self.text, self.pos)
        if match is None:
            if self.pos >= len(self.text):
                raise MalformedDirectiveStream(
                    f"unexpected EOF while reading {what}", offset=self.pos
                )
            raise MalformedDirectiveStream(f"read_{what} error", offset=self.pos)
        self.pos = match.end()
        return match
