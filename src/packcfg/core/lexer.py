"""
Event source for package manifests.

Converts INI-like manifest text into a stream of section-start, key-value
and error events with source location tracking. Input is consumed one
line at a time so that large streams are never held in memory.
"""

import io
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TextIO


class EventKind(Enum):
    """Kinds of events produced by the lexer."""

    SECTION_START = "section_start"
    KEY_VALUE = "key_value"
    ERROR = "error"
    EOF = "eof"


@dataclass
class Event:
    """
    A single event in the manifest stream.

    Attributes:
        kind: Kind of event
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        section: Section name as written (SECTION_START only)
        key: Key (KEY_VALUE only)
        value: Unquoted value (KEY_VALUE only)
        message: Error description (ERROR only)
    """

    kind: EventKind
    line: int
    column: int
    section: str = ""
    key: str = ""
    value: str = ""
    message: str = ""

    def __repr__(self) -> str:
        if self.kind == EventKind.SECTION_START:
            detail = f"[{self.section}]"
        elif self.kind == EventKind.KEY_VALUE:
            detail = f"{self.key!r}={self.value!r}"
        elif self.kind == EventKind.ERROR:
            detail = self.message
        else:
            detail = ""
        return f"Event({self.kind.value}, {detail}, {self.line}:{self.column})"


COMMENT_CHARS = ("#", ";")

# CR, LF and CRLF all end a line
_LINE_BREAK = re.compile(r"\r\n|\r|\n")

# Characters that end a bare key
_KEY_STOP = frozenset(" \t=:[]\"#;")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


def _split_lines(source: Iterable[str]) -> Iterator[str]:
    """Yield lines without terminators, honouring bare CR line breaks."""
    for chunk in source:
        parts = _LINE_BREAK.split(chunk)
        if parts[-1] == "":
            parts.pop()
        yield from parts


class _ScanError(Exception):
    """Internal signal carrying a located lexical error."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


class Lexer:
    """
    Lexer for package manifests.

    Converts source text into a stream of events. Indentation is ignored;
    section membership is decided by the parser from header order alone.
    """

    def __init__(self, source: str | TextIO, file: Path | str):
        """
        Initialize lexer.

        Args:
            source: Source text, or a text stream to read line by line
            file: Source name (for error reporting)
        """
        if isinstance(source, str):
            source = io.StringIO(source)
        self.file = file
        self._lines = _split_lines(source)
        self.buf = ""
        self.line = 0
        self.pos = 0

    @property
    def column(self) -> int:
        """Current column (1-indexed)."""
        return self.pos + 1

    def next_line(self) -> bool:
        """Load the next source line. Returns False at end of input."""
        raw = next(self._lines, None)
        if raw is None:
            return False
        self.line += 1
        self.buf = raw
        self.pos = 0
        return True

    def current_char(self) -> str | None:
        """Get current character or None at end of line."""
        if self.pos >= len(self.buf):
            return None
        return self.buf[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.buf):
            return None
        return self.buf[pos]

    def skip_whitespace(self) -> None:
        """Skip spaces and tabs."""
        while self.current_char() in (" ", "\t"):
            self.pos += 1

    def at_line_end(self) -> bool:
        """True when only whitespace or a comment remains on the line."""
        self.skip_whitespace()
        ch = self.current_char()
        return ch is None or ch in COMMENT_CHARS

    def error(self, message: str, line: int | None = None, column: int | None = None) -> _ScanError:
        return _ScanError(
            message,
            self.line if line is None else line,
            self.column if column is None else column,
        )

    def events(self) -> Iterator[Event]:
        """
        Yield events for the whole input.

        The stream ends with a single EOF event, or stops right after the
        first ERROR event.
        """
        try:
            while self.next_line():
                event = self.scan_line()
                if event is not None:
                    yield event
        except _ScanError as e:
            yield Event(EventKind.ERROR, e.line, e.column, message=e.message)
            return

        yield Event(EventKind.EOF, max(self.line, 1), len(self.buf) + 1)

    def scan_line(self) -> Event | None:
        """Scan the current line. Returns None for blank and comment lines."""
        if self.at_line_end():
            return None

        token_line = self.line
        token_col = self.column

        if self.current_char() == "[":
            return self.read_section(token_line, token_col)
        if self.current_char() == "]":
            raise self.error("invalid token: ']'")

        key = self.read_key()
        self.skip_whitespace()
        ch = self.current_char()
        if ch in ("=", ":"):
            self.pos += 1
            self.skip_whitespace()
            value = self.read_value()
        elif ch is None or ch in COMMENT_CHARS:
            value = ""
        else:
            raise self.error("'=' expected")

        return Event(EventKind.KEY_VALUE, token_line, token_col, key=key, value=value)

    def read_section(self, token_line: int, token_col: int) -> Event:
        """Read a [section] header."""
        self.pos += 1  # skip '['
        end = self.buf.find("]", self.pos)
        if end < 0:
            raise self.error("']' expected", column=len(self.buf) + 1)

        name = self.buf[self.pos : end].strip()
        if not name:
            raise self.error("section name expected")

        self.pos = end + 1
        self.expect_line_end()
        return Event(EventKind.SECTION_START, token_line, token_col, section=name)

    def read_key(self) -> str:
        """Read a bare or double-quoted key."""
        if self.current_char() == '"':
            return self.read_quoted()

        start = self.pos
        while (ch := self.current_char()) is not None and ch not in _KEY_STOP:
            self.pos += 1
        if self.pos == start:
            raise self.error("key expected")
        return self.buf[start : self.pos]

    def read_value(self) -> str:
        """Read the value part of a key-value pair."""
        ch = self.current_char()
        if ch is None:
            return ""

        if self.buf.startswith('"""', self.pos):
            value = self.read_triple_quoted()
        elif ch in ("r", "R") and self.peek_char() == '"':
            self.pos += 1
            value = self.read_quoted(raw=True)
        elif ch == '"':
            value = self.read_quoted()
        else:
            start = self.pos
            while (ch := self.current_char()) is not None and ch not in COMMENT_CHARS:
                self.pos += 1
            return self.buf[start : self.pos].rstrip()

        self.expect_line_end()
        return value

    def read_quoted(self, raw: bool = False) -> str:
        """Read a single-line double-quoted string."""
        start_col = self.column
        self.pos += 1  # skip opening quote

        chars = []
        while True:
            ch = self.current_char()
            if ch is None:
                raise self.error("'\"' expected", column=start_col)
            if ch == '"':
                self.pos += 1
                break
            if ch == "\\" and not raw:
                self.pos += 1
                escape_char = self.current_char()
                if escape_char is None:
                    raise self.error("'\"' expected", column=start_col)
                chars.append(_ESCAPES.get(escape_char, "\\" + escape_char))
                self.pos += 1
                continue
            chars.append(ch)
            self.pos += 1

        return "".join(chars)

    def read_triple_quoted(self) -> str:
        """Read a \"\"\"...\"\"\" string, which may span lines."""
        start_line = self.line
        start_col = self.column
        self.pos += 3

        parts = []
        while True:
            end = self.buf.find('"""', self.pos)
            if end >= 0:
                parts.append(self.buf[self.pos : end])
                self.pos = end + 3
                break
            parts.append(self.buf[self.pos :])
            if not self.next_line():
                raise self.error('\'"""\' expected', line=start_line, column=start_col)

        # A newline directly after the opening quotes is not part of the value
        if len(parts) > 1 and parts[0] == "":
            parts = parts[1:]
        return "\n".join(parts)

    def expect_line_end(self) -> None:
        """Require that nothing but whitespace or a comment follows."""
        if not self.at_line_end():
            raise self.error(f"invalid token: {self.buf[self.pos :]!r}")


def tokenize(source: str | TextIO, file: Path | str = "[stream]") -> list[Event]:
    """
    Convenience function to collect all events.

    Args:
        source: Source text or text stream
        file: Source name

    Returns:
        List of events, ending with EOF or ERROR
    """
    lexer = Lexer(source, file)
    return list(lexer.events())
