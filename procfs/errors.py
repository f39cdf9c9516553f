"""
procfs.errors
AUTHOR: carter-vin

Error family for /proc decoding

Contract:
- every failure raised by procfs is a ProcError
- `kind` is a stable tag callers and tests can branch on
- no partial records: any ProcError aborts the whole read
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ProcError(Exception):
    """
    Base class for all procfs failures
    """

    kind: str = "proc"


class ProcIOError(ProcError):
    """
    Source could not be opened or read
    """

    kind = "io"

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class EndOfStream(ProcError):
    """
    Stream ended before a required line was read
    """

    kind = "end_of_stream"

    def __init__(self, expected: str) -> None:
        super().__init__(f"unexpected end of stream while reading {expected}")
        self.expected = expected


class DecodeError(ProcError):
    """
    A required field is missing or malformed
    """

    kind = "decode"

    def __init__(
        self,
        field: str,
        *,
        line_no: Optional[int] = None,
        line: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        message = f"cannot parse {field}"
        if reason:
            message += f": {reason}"
        if line_no is not None:
            message += f" (line {line_no})"
        super().__init__(message)
        self.field = field
        self.line_no = line_no
        self.line = line
        self.reason = reason


class InvariantViolation(ProcError):
    """
    Input the format is assumed never to produce
    """

    kind = "invariant"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail
