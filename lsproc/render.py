"""
lsproc.render
AUTHOR: carter-vin

Formatting for the terminal readout and JSON sample lines
"""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Any, Iterable

from lsproc.rates import DiskRate
from procfs.uptime import Uptime

# Carriage return (column 1)
CR_CODE = "\x1b[G"
# Clear to end of line
CLEAR_CODE = "\x1b[K"


def to_json_line(payload: dict[str, Any]) -> str:
    # Stabilize key order for diffable output
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def format_percent(value: float) -> str:
    return f"{value:3.0f}%"


def format_rate(bytes_per_s: float) -> str:
    for unit in ["B", "K", "M", "G"]:
        if bytes_per_s < 1024:
            return f"{bytes_per_s:6.1f}{unit}/s"
        bytes_per_s = bytes_per_s / 1024
    return f"{bytes_per_s:6.1f}T/s"


def format_duration(value: timedelta) -> str:
    """
    "3d 04:05:06" style; sub-second part dropped
    """
    total = int(value.total_seconds())
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    clock = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if days:
        return f"{days}d {clock}"
    return clock


def render_cpu_line(total_busy: float, per_cpu: Iterable[float] | None = None) -> str:
    """
    Single overwriting status line: `cpu:  42% [ 40%  44%]`
    """
    text = f"cpu: {format_percent(total_busy)} "
    if per_cpu is not None:
        cores = " ".join(format_percent(value) for value in per_cpu)
        text += f"[{cores}] "
    return f"{CR_CODE}{text}{CLEAR_CODE}"


def render_disk_table(rates: Iterable[DiskRate]) -> str:
    lines = [f"{'device':<12} {'read':>12} {'write':>12} {'busy':>5}"]
    for rate in rates:
        lines.append(
            f"{rate.name:<12} {format_rate(rate.read_bytes_per_s):>12} "
            f"{format_rate(rate.write_bytes_per_s):>12} {format_percent(rate.busy_percent):>5}"
        )
    return "\n".join(lines)


def render_uptime(uptime: Uptime) -> str:
    return "\n".join(
        [
            f"up: {format_duration(uptime.up)} ({uptime.up_seconds:.2f}s)",
            f"idle: {format_duration(uptime.idle)} ({uptime.idle_seconds:.2f}s)",
        ]
    )
