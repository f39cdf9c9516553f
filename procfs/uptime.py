"""
procfs.uptime
AUTHOR: carter-vin

Decoder for /proc/uptime: "<up-seconds>.<frac> <idle-seconds>.<frac>"
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

from procfs.config import UPTIME_FILE, proc_path
from procfs.errors import DecodeError
from procfs.lines import LineReader, Source, open_proc_file
from procfs.parse import consume_space, expect_bytes, parse_nanos, parse_u64

NANOS_PER_SECOND = 1_000_000_000


def _parse_fixed_point(text: str, field: str) -> tuple[str, int]:
    """
    Parse "<seconds>.<fraction>" into (remainder, nanoseconds)
    """
    parsed = parse_u64(text)
    if parsed is None:
        raise DecodeError(f"{field} seconds")
    text, seconds = parsed
    after_point = expect_bytes(".", text)
    if after_point is None:
        raise DecodeError(f"{field} decimal point")
    parsed = parse_nanos(after_point)
    if parsed is None:
        raise DecodeError(f"{field} fraction")
    text, nanos = parsed
    return text, seconds * NANOS_PER_SECOND + nanos


@dataclass(frozen=True)
class Uptime:
    """
    Time since boot and idle time summed over all cores

    idle may exceed up on multi-core systems.
    """

    up_ns: int
    idle_ns: int

    @property
    def up(self) -> timedelta:
        return timedelta(microseconds=self.up_ns // 1000)

    @property
    def idle(self) -> timedelta:
        return timedelta(microseconds=self.idle_ns // 1000)

    @property
    def up_seconds(self) -> float:
        return self.up_ns / NANOS_PER_SECOND

    @property
    def idle_seconds(self) -> float:
        return self.idle_ns / NANOS_PER_SECOND

    def to_dict(self) -> dict[str, Any]:
        return {"up_s": self.up_seconds, "idle_s": self.idle_seconds}

    @staticmethod
    def from_line(line: str) -> "Uptime":
        rest, up_ns = _parse_fixed_point(line, "uptime")
        rest, idle_ns = _parse_fixed_point(rest, "idle time")
        if consume_space(rest):
            raise DecodeError("idle time", reason="trailing content")
        return Uptime(up_ns=up_ns, idle_ns=idle_ns)

    @classmethod
    def from_reader(cls, source: Source) -> "Uptime":
        reader = LineReader(source)
        return reader.parse_line(cls.from_line, expected="uptime line")

    @classmethod
    def from_system(cls, path: Optional[Path] = None) -> "Uptime":
        """
        Read and decode /proc/uptime (or the given path)
        """
        if path is None:
            path = proc_path(UPTIME_FILE)
        with open_proc_file(path) as handle:
            return cls.from_reader(handle)
