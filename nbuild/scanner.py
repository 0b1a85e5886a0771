"""Byte-by-byte scanning of nul-terminated input buffers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union


class ParseError(Exception):
    """A parse failure at a byte offset of the scanned buffer."""

    def __init__(self, msg: str, ofs: int) -> None:
        super().__init__(msg)
        self.msg = msg
        self.ofs = ofs


class Scanner:
    """Cursor over a nul-terminated byte buffer that tracks line numbers."""

    def __init__(self, buf: Union[bytes, bytearray]) -> None:
        buf = bytes(buf)
        if not buf.endswith(b"\0"):
            raise ValueError("Scanner requires nul-terminated buf")
        self._buf = buf
        self.ofs = 0
        self.line = 1

    def slice(self, start: int, end: int) -> str:
        """Return the text between two offsets."""
        return self._buf[start:end].decode("utf-8", errors="replace")

    def peek(self) -> str:
        return chr(self._buf[self.ofs])

    def peek_newline(self) -> bool:
        """True if the cursor is at "\\n" or "\\r\\n"."""
        if self.peek() == "\n":
            return True
        if self.ofs >= len(self._buf) - 1:
            return False
        return self.peek() == "\r" and self._buf[self.ofs + 1] == ord("\n")

    def next(self) -> None:
        if self.ofs == len(self._buf):
            raise IndexError("scanned past end")
        if self.peek() == "\n":
            self.line += 1
        self.ofs += 1

    def back(self) -> None:
        if self.ofs == 0:
            raise IndexError("back at start")
        self.ofs -= 1
        if self.peek() == "\n":
            self.line -= 1

    def read(self) -> str:
        ch = self.peek()
        self.next()
        return ch

    def skip(self, ch: str) -> bool:
        if self.peek() == ch:
            self.next()
            return True
        return False

    def skip_spaces(self) -> None:
        while self.skip(" "):
            pass

    def expect(self, ch: str) -> None:
        """Consume ch, or raise ParseError leaving the cursor unmoved."""
        got = self.read()
        if got != ch:
            self.back()
            raise self.parse_error(f"expected {ch!r}, got {got!r}")

    def parse_error(self, msg: str) -> ParseError:
        """Build a ParseError at the current offset."""
        return ParseError(msg, self.ofs)

    def format_parse_error(self, filename: Union[str, os.PathLike], err: ParseError) -> str:
        """Render err with the offending line and a caret under the column."""
        ofs = 0
        for line_number, line in enumerate(self._buf.split(b"\n"), start=1):
            if ofs + len(line) >= err.ofs:
                prefix = f"{os.fspath(filename)}:{line_number}: "
                parts = ["parse error: ", err.msg, "\n", prefix]
                context = line
                col = err.ofs - ofs
                if col > 40:
                    # Trim the start of the line so the column fits on screen.
                    parts.append("...")
                    context = context[col - 20:]
                    col = 3 + 20
                if len(context) > 40:
                    parts.append(_show(context[:40]))
                    parts.append("...")
                else:
                    parts.append(_show(context))
                parts.append("\n")
                parts.append(" " * (len(prefix) + col))
                parts.append("^\n")
                return "".join(parts)
            ofs += len(line) + 1
        raise ValueError("invalid offset when formatting error")


def _show(text: bytes) -> str:
    return text.rstrip(b"\0").decode("utf-8", errors="replace")


def read_file_with_nul(path: Union[str, os.PathLike]) -> bytes:
    """Read a file's contents with a trailing nul appended."""
    return Path(path).read_bytes() + b"\0"