"""
lsproc.main
------------
AUTHOR: carter-vin

lsproc - a simple program to inspect system status

Key contract:
- `lsproc --help` shows a Commands section.
- `lsproc stat|diskstats` poll on an interval and difference snapshots.
- `lsproc uptime` reads once.
- read failures are emitted as `sample_failed` events on stderr; loops keep going
  until --max-failures consecutive failures.
"""

from __future__ import annotations

import platform
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

import typer

from lsproc.logging import emit_event
from lsproc.rates import cpu_busy_percent, disk_rates, per_cpu_busy_percent
from lsproc.render import render_cpu_line, render_disk_table, render_uptime, to_json_line
from lsproc.sample import SampleOutcome, take_sample
from procfs.config import DISKSTATS_FILE, STAT_FILE, UPTIME_FILE, proc_path
from procfs.diskstats import DiskSnapshot
from procfs.stat import SystemStat
from procfs.uptime import Uptime

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="lsproc: inspect system status from /proc",
)

TOOL_VERSION = "0.1.0"

OUTPUT_FORMATS = {"text", "json"}


def _check_format(output_format: str) -> None:
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter("--format must be 'text' or 'json'")


def _source_path(proc_root: Optional[str], name: str) -> Path:
    """
    --proc-root wins over LSPROC_PROC_ROOT, which wins over /proc
    """
    return proc_path(name, Path(proc_root) if proc_root else None)


def _report_failure(command: str, outcome: SampleOutcome, *, consecutive: int) -> None:
    emit_event(
        "sample_failed",
        tool_version=TOOL_VERSION,
        command=command,
        source=outcome.name,
        error_type=outcome.error_type,
        error_kind=outcome.error_kind,
        message=outcome.error_message,
        consecutive_failures=consecutive,
    )


def _poll(
    command: str,
    reader: Callable[[], Any],
    *,
    source: str,
    interval: float,
    count: int,
    max_failures: int,
    on_pair: Callable[[Any, Any, float], None],
) -> None:
    """
    Sample `reader` every `interval` seconds and hand consecutive pairs to on_pair

    Stops after `count` pairs (0 = never). A failed read or a failed
    pair counts as a failure; raises typer.Exit(1) after max_failures
    consecutive failures.
    """
    prev: Any = None
    prev_at = 0.0
    rendered = 0
    failures = 0

    while True:
        outcome = take_sample(source, reader)
        taken_at = time.monotonic()
        value = outcome.value

        if outcome.ok and prev is not None:
            # Differencing can still fail (e.g. CpuCounters.total() overflow)
            outcome = take_sample(source, on_pair, prev, value, taken_at - prev_at)
            if outcome.ok:
                rendered += 1
                if count and rendered >= count:
                    return

        if not outcome.ok:
            failures += 1
            _report_failure(command, outcome, consecutive=failures)
            if failures >= max_failures:
                raise typer.Exit(code=1)
        else:
            failures = 0
            prev, prev_at = value, taken_at

        time.sleep(interval)


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Root command behavior.

    If no subcommand is provided, print a short hint and exit 0.
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: lsproc --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print tool version & runtime env
    """
    typer.echo(f"lsproc v{TOOL_VERSION}")
    typer.echo(f"python={sys.version.split()[0]}")
    typer.echo(f"os={platform.system()} {platform.release()}")
    typer.echo(f"machine={platform.machine()}")
    typer.echo(f"utc_now={datetime.now(timezone.utc).isoformat()}")


@app.command("stat")
def stat(
    interval: float = typer.Option(
        0.4,
        help="Seconds between samples.",
        min=0.01,
    ),
    count: int = typer.Option(
        0,
        help="Stop after this many readings (0 = run until Ctrl+C).",
        min=0,
    ),
    per_cpu: bool = typer.Option(
        False,
        "--per-cpu",
        help="Also show busy percent for each core.",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        help="Output format: text or json.",
    ),
    proc_root: Optional[str] = typer.Option(
        None,
        "--proc-root",
        help="Read from this directory instead of /proc.",
    ),
    max_failures: int = typer.Option(
        3,
        "--max-failures",
        help="Exit non-zero after this many consecutive failed samples.",
        min=1,
    ),
) -> None:
    """
    Present CPU usage from the aggregate status file
    """
    _check_format(output_format)
    path = _source_path(proc_root, STAT_FILE)

    def _show(prev: SystemStat, cur: SystemStat, elapsed_s: float) -> None:
        total_busy = cpu_busy_percent(prev.cpu_totals, cur.cpu_totals)
        cores = per_cpu_busy_percent(prev, cur) if per_cpu else None
        if output_format == "json":
            payload: dict[str, Any] = {
                "elapsed_s": round(elapsed_s, 3),
                "cpu_busy_percent": total_busy,
                "context_switches": cur.context_switches - prev.context_switches,
                "procs_running": cur.procs_running,
                "procs_blocked": cur.procs_blocked,
            }
            if cores is not None:
                payload["per_cpu_busy_percent"] = cores
            typer.echo(to_json_line(payload))
        else:
            typer.echo(render_cpu_line(total_busy, cores), nl=False)

    _run_loop(
        "stat",
        lambda: SystemStat.from_system(path),
        source=str(path),
        interval=interval,
        count=count,
        max_failures=max_failures,
        on_pair=_show,
        end_with_newline=output_format == "text",
    )


@app.command("diskstats")
def diskstats(
    interval: float = typer.Option(
        1.0,
        help="Seconds between samples.",
        min=0.01,
    ),
    count: int = typer.Option(
        0,
        help="Stop after this many readings (0 = run until Ctrl+C).",
        min=0,
    ),
    device: Optional[list[str]] = typer.Option(
        None,
        "--device",
        help="Only show this device (repeatable).",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        help="Output format: text or json.",
    ),
    proc_root: Optional[str] = typer.Option(
        None,
        "--proc-root",
        help="Read from this directory instead of /proc.",
    ),
    max_failures: int = typer.Option(
        3,
        "--max-failures",
        help="Exit non-zero after this many consecutive failed samples.",
        min=1,
    ),
) -> None:
    """
    Present per-device throughput and utilization
    """
    _check_format(output_format)
    path = _source_path(proc_root, DISKSTATS_FILE)
    wanted = set(device or [])

    def _show(prev: DiskSnapshot, cur: DiskSnapshot, elapsed_s: float) -> None:
        rates = [
            rate for rate in disk_rates(prev, cur, elapsed_s) if not wanted or rate.name in wanted
        ]
        if output_format == "json":
            typer.echo(
                to_json_line(
                    {
                        "elapsed_s": round(elapsed_s, 3),
                        "disks": [rate.to_dict() for rate in rates],
                    }
                )
            )
        else:
            typer.echo(render_disk_table(rates))
            typer.echo("")

    _run_loop(
        "diskstats",
        lambda: DiskSnapshot.from_system(path),
        source=str(path),
        interval=interval,
        count=count,
        max_failures=max_failures,
        on_pair=_show,
        end_with_newline=False,
    )


@app.command("uptime")
def uptime(
    output_format: str = typer.Option(
        "text",
        "--format",
        help="Output format: text or json.",
    ),
    proc_root: Optional[str] = typer.Option(
        None,
        "--proc-root",
        help="Read from this directory instead of /proc.",
    ),
) -> None:
    """
    Print time since boot and cumulative idle time
    """
    _check_format(output_format)
    path = _source_path(proc_root, UPTIME_FILE)

    outcome = take_sample(str(path), Uptime.from_system, path)
    if not outcome.ok:
        _report_failure("uptime", outcome, consecutive=1)
        raise typer.Exit(code=1)

    if output_format == "json":
        typer.echo(to_json_line(outcome.value.to_dict()))
    else:
        typer.echo(render_uptime(outcome.value))


def _run_loop(
    command: str,
    reader: Callable[[], Any],
    *,
    source: str,
    interval: float,
    count: int,
    max_failures: int,
    on_pair: Callable[[Any, Any, float], None],
    end_with_newline: bool,
) -> None:
    """
    Wrap _poll with start/shutdown events and Ctrl+C handling
    """
    emit_event(
        "lsproc_start",
        tool_version=TOOL_VERSION,
        command=command,
        source=source,
        interval_s=interval,
        count=count,
    )

    rendered = 0

    def _counting(prev: Any, cur: Any, elapsed_s: float) -> None:
        nonlocal rendered
        on_pair(prev, cur, elapsed_s)
        rendered += 1

    try:
        _poll(
            command,
            reader,
            source=source,
            interval=interval,
            count=count,
            max_failures=max_failures,
            on_pair=_counting,
        )
    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        pass
    finally:
        if end_with_newline and rendered:
            # Leave the overwritten status line intact
            typer.echo("")
        emit_event(
            "lsproc_shutdown",
            tool_version=TOOL_VERSION,
            command=command,
            samples_rendered=rendered,
        )


if __name__ == "__main__":
    app()
