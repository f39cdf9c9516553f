"""procfs package exports."""

from procfs.diskstats import DiskCounters, DiskSnapshot
from procfs.errors import (
    DecodeError,
    EndOfStream,
    InvariantViolation,
    ProcError,
    ProcIOError,
)
from procfs.lines import LineReader
from procfs.stat import CpuCounters, SystemStat
from procfs.uptime import Uptime

__all__ = [
    "CpuCounters",
    "DecodeError",
    "DiskCounters",
    "DiskSnapshot",
    "EndOfStream",
    "InvariantViolation",
    "LineReader",
    "ProcError",
    "ProcIOError",
    "SystemStat",
    "Uptime",
]
