"""
lsproc.rates
AUTHOR: carter-vin

Rates from two consecutive snapshots

The procfs readers are stateless; differencing lives here, in the consumer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from procfs.diskstats import DiskSnapshot
from procfs.stat import CpuCounters, SystemStat

# /proc/diskstats always counts 512-byte sectors, whatever the device block size
SECTOR_BYTES = 512


def _delta(prev: int, cur: int) -> int:
    # Counters reset on device re-attach; never report negative progress
    return max(0, cur - prev)


def _pct(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return (part / whole) * 100.0


def cpu_busy_percent(prev: CpuCounters, cur: CpuCounters) -> float:
    """
    Share of non-idle time between two readings of the same cpu line
    """
    total = _delta(prev.total(), cur.total())
    idle = _delta(prev.idle, cur.idle)
    return _pct(total - idle, total)


def per_cpu_busy_percent(prev: SystemStat, cur: SystemStat) -> list[float]:
    """
    Busy percent per core, file order

    Cores present in only one snapshot (hotplug) are dropped.
    """
    return [cpu_busy_percent(p, c) for p, c in zip(prev.cpus, cur.cpus)]


@dataclass(frozen=True)
class DiskRate:
    name: str
    read_bytes_per_s: float
    write_bytes_per_s: float
    busy_percent: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "read_bytes_per_s": self.read_bytes_per_s,
            "write_bytes_per_s": self.write_bytes_per_s,
            "busy_percent": self.busy_percent,
        }


def disk_rates(prev: DiskSnapshot, cur: DiskSnapshot, elapsed_s: float) -> list[DiskRate]:
    """
    Per-device throughput and utilization over elapsed_s seconds

    Only devices present in both snapshots are reported, sorted by name.
    """
    if elapsed_s <= 0:
        return []

    rates: list[DiskRate] = []
    for name in sorted(set(prev) & set(cur)):
        before = prev[name]
        after = cur[name]
        read_sectors = _delta(before.sectors_read, after.sectors_read)
        write_sectors = _delta(before.sectors_written, after.sectors_written)
        io_s = max(0.0, (after.time_io - before.time_io).total_seconds())
        rates.append(
            DiskRate(
                name=name,
                read_bytes_per_s=read_sectors * SECTOR_BYTES / elapsed_s,
                write_bytes_per_s=write_sectors * SECTOR_BYTES / elapsed_s,
                busy_percent=min(100.0, _pct(io_s, elapsed_s)),
            )
        )
    return rates
