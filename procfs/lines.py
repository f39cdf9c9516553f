"""
procfs.lines
AUTHOR: carter-vin

Peekable line cursor over a byte stream

Design goals:
- one buffered line acts as a lookahead token (peek, then consume)
- a line is only consumed once a decoder accepts it
- I/O failures, end of stream and decode failures stay distinct error kinds
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import IO, Callable, Optional, TypeVar, Union

from procfs.errors import DecodeError, EndOfStream, ProcIOError

T = TypeVar("T")

Source = Union[IO[bytes], IO[str]]


def _buffered(source: Source) -> Source:
    """
    Wrap unbuffered raw streams so readline() does not read byte by byte
    """
    if isinstance(source, io.RawIOBase):
        return io.BufferedReader(source)
    return source


def open_proc_file(path: Path) -> IO[bytes]:
    """
    Open a /proc file for binary reading

    Raises ProcIOError with the originating OSError chained.
    """
    try:
        return Path(path).open("rb")
    except OSError as e:
        raise ProcIOError(f"cannot open {path}: {e.strerror or e}", path=Path(path)) from e


class LineReader:
    """
    Line-at-a-time reader with a single-line lookahead buffer
    """

    def __init__(self, source: Source) -> None:
        self._source = _buffered(source)
        self._line: Optional[str] = None
        self._line_no = 0
        self._eof = False

    @property
    def line_no(self) -> int:
        """1-based number of the buffered (or last fetched) line."""
        return self._line_no

    @property
    def eof(self) -> bool:
        return self._eof and self._line is None

    def _fetch(self) -> None:
        # Only fetch when the previous line was consumed
        if self._line is not None or self._eof:
            return
        try:
            raw = self._source.readline()
        except OSError as e:
            raise ProcIOError(f"read failed after line {self._line_no}: {e}") from e
        if not raw:
            self._eof = True
            return
        if isinstance(raw, bytes):
            # /proc content is ASCII; keep decoding deterministic on stray bytes
            raw = raw.decode("ascii", errors="replace")
        self._line = raw
        self._line_no += 1

    def peek_line(self) -> Optional[str]:
        """
        Return the next line without consuming it

        Returns None at end of stream.
        """
        self._fetch()
        return self._line

    def consume_line(self) -> None:
        """
        Drop the buffered line so the next peek fetches a fresh one
        """
        self._line = None

    def read_line(self, expected: str = "line") -> str:
        """
        Return and consume the next line

        Raises EndOfStream if the source is exhausted.
        """
        line = self.peek_line()
        if line is None:
            raise EndOfStream(expected)
        self.consume_line()
        return line

    def parse_line(self, decoder: Callable[[str], T], *, expected: str = "line") -> T:
        """
        Decode the next line, consuming it only on success

        - EndOfStream if no line is left
        - DecodeError from the decoder is re-raised with the line number attached
        """
        line = self.peek_line()
        if line is None:
            raise EndOfStream(expected)
        try:
            value = decoder(line)
        except DecodeError as e:
            if e.line_no is not None:
                raise
            raise DecodeError(
                e.field,
                line_no=self._line_no,
                line=line.rstrip("\n"),
                reason=e.reason,
            ) from e
        self.consume_line()
        return value
