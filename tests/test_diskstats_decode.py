"""
Contract tests for per-device I/O counter decoding
"""

import io
from datetime import timedelta

import pytest

from procfs.diskstats import DiskCounters, DiskSnapshot
from procfs.errors import DecodeError, InvariantViolation

RAW_DISKSTATS = """\
   8       0 sda 446866 32893 8168064 20164 339296 376515 86758441 4343530 0 250860 4704740
  11       0 sr0 0 0 0 0 0 0 0 0 0 0 0
"""


def _decode(text: str) -> DiskSnapshot:
    return DiskSnapshot.from_reader(io.BytesIO(text.encode("ascii")))


def test_two_distinct_devices() -> None:
    """
    Every field lands in the right slot; ms fields become timedeltas
    """
    disks = _decode(RAW_DISKSTATS)

    assert len(disks) == 2
    assert set(disks) == {"sda", "sr0"}

    sda = disks["sda"]
    assert (sda.major, sda.minor, sda.name) == (8, 0, "sda")
    assert sda.reads_completed == 446866
    assert sda.reads_merged == 32893
    assert sda.sectors_read == 8168064
    assert sda.time_reading == timedelta(milliseconds=20164)
    assert sda.writes_completed == 339296
    assert sda.writes_merged == 376515
    assert sda.sectors_written == 86758441
    assert sda.time_writing == timedelta(milliseconds=4343530)
    assert sda.io_in_progress == 0
    assert sda.time_io == timedelta(milliseconds=250860)
    assert sda.time_io_weighted == timedelta(milliseconds=4704740)


def test_duplicate_device_is_invariant_violation() -> None:
    """
    The same fixture with a repeated device name fails
    """
    duplicated = RAW_DISKSTATS + RAW_DISKSTATS.splitlines()[0] + "\n"

    with pytest.raises(InvariantViolation, match="duplicate device name 'sda'") as excinfo:
        _decode(duplicated)

    assert excinfo.value.kind == "invariant"


def test_trailing_columns_are_ignored() -> None:
    """
    Discard / flush columns from newer kernels are not inspected
    """
    line = "259 0 nvme0n1 1 2 3 4 5 6 7 8 9 10 11 12 13 14 15 16 17 junk\n"
    disk = DiskCounters.from_line(line)

    assert disk.name == "nvme0n1"
    assert disk.time_io_weighted == timedelta(milliseconds=11)


def test_missing_field_names_the_field() -> None:
    """
    A short line fails on the first missing field
    """
    with pytest.raises(DecodeError) as excinfo:
        _decode("8 0 sda 1 2 3 4 5 6 7 8 9 10\n")

    assert excinfo.value.field == "weighted time spent doing I/Os (ms)"
    assert excinfo.value.line_no == 1


def test_missing_device_name() -> None:
    """
    Major and minor alone are not a device
    """
    with pytest.raises(DecodeError) as excinfo:
        DiskCounters.from_line("8 0\n")

    assert excinfo.value.field == "device name"


def test_empty_file_and_blank_lines() -> None:
    """
    No devices is an empty snapshot; blank lines are skipped
    """
    assert len(_decode("")) == 0
    assert set(_decode(RAW_DISKSTATS + "\n\n")) == {"sda", "sr0"}


def test_snapshot_is_read_only_mapping() -> None:
    """
    Mapping access works; item assignment does not
    """
    disks = _decode(RAW_DISKSTATS)

    assert "sda" in disks
    assert disks.get("nope") is None
    assert sorted(disk.name for disk in disks.iter_disks()) == ["sda", "sr0"]

    with pytest.raises(TypeError):
        disks["sdb"] = disks["sda"]


def test_snapshot_to_dict_sorted() -> None:
    """
    to_dict is keyed by device name in sorted order, durations in seconds
    """
    payload = _decode(RAW_DISKSTATS).to_dict()

    assert list(payload) == ["sda", "sr0"]
    assert payload["sda"]["time_io_s"] == 250.86
