"""
procfs.stat
AUTHOR: carter-vin

Decoder for the aggregate CPU / process status file (/proc/stat)

Layout consumed:
- aggregate `cpu` line (9 counters, extra columns ignored)
- zero or more `cpuN` lines, in file order
- `ctxt`, `btime`, `processes`, `procs_running`, `procs_blocked` in that order
- unmodeled lines (intr, softirq, page, swap, ...) are skipped
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from procfs.config import STAT_FILE, proc_path
from procfs.errors import DecodeError, EndOfStream, InvariantViolation
from procfs.lines import LineReader, Source, open_proc_file
from procfs.parse import U64_MAX, consume_space, parse_token, parse_u64

CPU_LABEL_PREFIX = "cpu"

CPU_FIELDS = (
    "user",
    "nice",
    "system",
    "idle",
    "iowait",
    "irq",
    "softirq",
    "steal",
    "guest",
)

# (label in file, SystemStat attribute), in required file order
SCALAR_LINES = (
    ("ctxt", "context_switches"),
    ("btime", "boot_time"),
    ("processes", "processes"),
    ("procs_running", "procs_running"),
    ("procs_blocked", "procs_blocked"),
)
SCALAR_LABELS = frozenset(label for label, _ in SCALAR_LINES)


@dataclass(frozen=True)
class CpuCounters:
    """
    Cumulative time units spent in each CPU state since boot

    Units are kernel ticks (USER_HZ); they only make sense as a
    proportion of total().
    """

    user: int
    nice: int
    system: int
    idle: int
    iowait: int
    irq: int
    softirq: int
    steal: int
    guest: int

    def total(self) -> int:
        """
        Sum of all nine counters

        Raises InvariantViolation if the sum does not fit in 64 bits.
        """
        value = sum(getattr(self, name) for name in CPU_FIELDS)
        if value > U64_MAX:
            raise InvariantViolation(f"cpu counter total overflows u64: {value}")
        return value

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in CPU_FIELDS}

    @staticmethod
    def from_line(line: str) -> "CpuCounters":
        """
        Decode one `cpu`/`cpuN` line

        Raises DecodeError naming the first field that failed.
        """
        parsed = parse_token(line)
        if parsed is None:
            raise DecodeError("cpu label", reason="empty line")
        rest, label = parsed
        if not label.startswith(CPU_LABEL_PREFIX):
            raise DecodeError("cpu label", reason=f"expected 'cpu' prefix, found {label!r}")

        values: dict[str, int] = {}
        for name in CPU_FIELDS:
            parsed_value = parse_u64(rest)
            if parsed_value is None:
                raise DecodeError(f"{label} {name}")
            rest, values[name] = parsed_value

        # Newer kernels append columns (guest_nice, ...); they are not modeled
        return CpuCounters(**values)


def is_cpu_line(line: str) -> bool:
    """
    Match predicate for the per-core section: first token starts with `cpu`
    """
    parsed = parse_token(line)
    return parsed is not None and parsed[1].startswith(CPU_LABEL_PREFIX)


def _labeled_scalar(label: str) -> Callable[[str], int]:
    """
    Build a decoder for a `<label> <value>` line with nothing after the value
    """

    def decode(line: str) -> int:
        parsed = parse_token(line)
        if parsed is None:
            raise DecodeError(f"{label} label", reason="empty line")
        rest, name = parsed
        if name != label:
            raise DecodeError(f"{label} label", reason=f"found {name!r} out of order")
        parsed_value = parse_u64(rest)
        if parsed_value is None:
            raise DecodeError(f"{label} value")
        rest, value = parsed_value
        if consume_space(rest):
            raise DecodeError(f"{label} value", reason="trailing content")
        return value

    return decode


def _skip_unmodeled(reader: LineReader, label: str) -> None:
    """
    Advance past lines whose label is not a modeled scalar
    """
    while True:
        line = reader.peek_line()
        if line is None:
            raise EndOfStream(f"'{label}' line")
        parsed = parse_token(line)
        if parsed is not None and parsed[1] in SCALAR_LABELS:
            return
        reader.consume_line()


@dataclass(frozen=True)
class SystemStat:
    """
    One snapshot of the aggregate status file
    """

    # Sum over all cpus
    cpu_totals: CpuCounters
    # Per-core counters, file order
    cpus: tuple[CpuCounters, ...]
    # Context switches since boot
    context_switches: int
    # Boot time, seconds since epoch
    boot_time: int
    # Processes and threads created since boot
    processes: int
    procs_running: int
    procs_blocked: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "cpu_totals": self.cpu_totals.to_dict(),
            "cpus": [cpu.to_dict() for cpu in self.cpus],
            "context_switches": self.context_switches,
            "boot_time": self.boot_time,
            "processes": self.processes,
            "procs_running": self.procs_running,
            "procs_blocked": self.procs_blocked,
        }

    @classmethod
    def from_reader(cls, source: Source) -> "SystemStat":
        """
        Decode a full snapshot from any readable stream
        """
        reader = LineReader(source)

        cpu_totals = reader.parse_line(CpuCounters.from_line, expected="cpu totals line")

        cpus: list[CpuCounters] = []
        while True:
            line = reader.peek_line()
            if line is None or not is_cpu_line(line):
                break
            # Matched the prefix: from here a malformed field is fatal
            cpus.append(reader.parse_line(CpuCounters.from_line))

        scalars: dict[str, int] = {}
        for label, attr in SCALAR_LINES:
            _skip_unmodeled(reader, label)
            scalars[attr] = reader.parse_line(_labeled_scalar(label), expected=f"'{label}' line")

        return cls(cpu_totals=cpu_totals, cpus=tuple(cpus), **scalars)

    @classmethod
    def from_system(cls, path: Optional[Path] = None) -> "SystemStat":
        """
        Read and decode /proc/stat (or the given path)
        """
        if path is None:
            path = proc_path(STAT_FILE)
        with open_proc_file(path) as handle:
            return cls.from_reader(handle)
