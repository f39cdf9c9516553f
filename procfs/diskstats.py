"""
procfs.diskstats
AUTHOR: carter-vin

Decoder for per-device I/O counters (/proc/diskstats)

- one line per device, 14 positional fields
- trailing columns added by newer kernels (discard, flush, ...) are ignored
- device names are unique within a snapshot
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

from procfs.config import DISKSTATS_FILE, proc_path
from procfs.errors import DecodeError, InvariantViolation
from procfs.lines import LineReader, Source, open_proc_file
from procfs.parse import consume_space, parse_token, parse_u64


@dataclass(frozen=True)
class DiskCounters:
    """
    Cumulative I/O statistics for one block device
    """

    major: int
    minor: int
    name: str
    reads_completed: int
    reads_merged: int
    sectors_read: int
    time_reading: timedelta
    writes_completed: int
    writes_merged: int
    sectors_written: int
    time_writing: timedelta
    io_in_progress: int
    time_io: timedelta
    time_io_weighted: timedelta

    def to_dict(self) -> dict[str, Any]:
        return {
            "major": self.major,
            "minor": self.minor,
            "name": self.name,
            "reads_completed": self.reads_completed,
            "reads_merged": self.reads_merged,
            "sectors_read": self.sectors_read,
            "time_reading_s": self.time_reading.total_seconds(),
            "writes_completed": self.writes_completed,
            "writes_merged": self.writes_merged,
            "sectors_written": self.sectors_written,
            "time_writing_s": self.time_writing.total_seconds(),
            "io_in_progress": self.io_in_progress,
            "time_io_s": self.time_io.total_seconds(),
            "time_io_weighted_s": self.time_io_weighted.total_seconds(),
        }

    @staticmethod
    def from_line(line: str) -> "DiskCounters":
        """
        Decode one device line

        Raises DecodeError naming the missing field.
        """
        rest = line

        def number(field: str) -> int:
            nonlocal rest
            parsed = parse_u64(rest)
            if parsed is None:
                raise DecodeError(field)
            rest, value = parsed
            return value

        def millis(field: str) -> timedelta:
            return timedelta(milliseconds=number(field))

        major = number("major number")
        minor = number("minor number")

        parsed_name = parse_token(rest)
        if parsed_name is None:
            raise DecodeError("device name")
        rest, name = parsed_name

        # Arguments evaluate left to right, which is column order
        counters = DiskCounters(
            major=major,
            minor=minor,
            name=name,
            reads_completed=number("reads completed"),
            reads_merged=number("reads merged"),
            sectors_read=number("sectors read"),
            time_reading=millis("time spent reading (ms)"),
            writes_completed=number("writes completed"),
            writes_merged=number("writes merged"),
            sectors_written=number("sectors written"),
            time_writing=millis("time spent writing (ms)"),
            io_in_progress=number("I/Os currently in progress"),
            time_io=millis("time spent doing I/Os (ms)"),
            time_io_weighted=millis("weighted time spent doing I/Os (ms)"),
        )
        # Remaining columns are not inspected
        return counters


class DiskSnapshot(Mapping):
    """
    Device name -> DiskCounters for one read of the per-device file

    Read-only; iteration order is not part of the contract.
    """

    def __init__(self, disks: Mapping[str, DiskCounters]) -> None:
        self._disks = dict(disks)

    def __getitem__(self, name: str) -> DiskCounters:
        return self._disks[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._disks)

    def __len__(self) -> int:
        return len(self._disks)

    def __repr__(self) -> str:
        return f"DiskSnapshot({sorted(self._disks)!r})"

    def iter_disks(self) -> Iterator[DiskCounters]:
        return iter(self._disks.values())

    def to_dict(self) -> dict[str, Any]:
        # Sorted for stable output
        return {name: self._disks[name].to_dict() for name in sorted(self._disks)}

    @classmethod
    def from_reader(cls, source: Source) -> "DiskSnapshot":
        """
        Decode every device line until end of stream
        """
        reader = LineReader(source)
        disks: dict[str, DiskCounters] = {}

        while True:
            line = reader.peek_line()
            if line is None:
                break
            if not consume_space(line):
                # Blank line: nothing to decode
                reader.consume_line()
                continue
            disk = reader.parse_line(DiskCounters.from_line)
            if disk.name in disks:
                raise InvariantViolation(
                    f"duplicate device name {disk.name!r} (line {reader.line_no})"
                )
            disks[disk.name] = disk

        return cls(disks)

    @classmethod
    def from_system(cls, path: Optional[Path] = None) -> "DiskSnapshot":
        """
        Read and decode /proc/diskstats (or the given path)
        """
        if path is None:
            path = proc_path(DISKSTATS_FILE)
        with open_proc_file(path) as handle:
            return cls.from_reader(handle)
