"""
Contract tests for uptime decoding
"""

import io
from datetime import timedelta

import pytest

from procfs.errors import DecodeError, EndOfStream, InvariantViolation
from procfs.uptime import Uptime


def _decode(text: str) -> Uptime:
    return Uptime.from_reader(io.BytesIO(text.encode("ascii")))


def test_uptime_fixture() -> None:
    """
    idle larger than up is valid on multi-core hosts
    """
    uptime = _decode("1640919.14 2328903.47\n")

    assert uptime.up_ns == 1_640_919_140_000_000
    assert uptime.idle_ns == 2_328_903_470_000_000
    assert uptime.up == timedelta(seconds=1640919, milliseconds=140)
    assert uptime.idle == timedelta(seconds=2328903, milliseconds=470)
    assert uptime.idle > uptime.up
    assert uptime.up_seconds == pytest.approx(1640919.14)


def test_uptime_leading_space_and_no_newline() -> None:
    """
    Surrounding whitespace is tolerated
    """
    uptime = _decode("   12.5 3.05")

    assert uptime.up_ns == 12_500_000_000
    assert uptime.idle_ns == 3_050_000_000


@pytest.mark.parametrize(
    "text, field",
    [
        ("12 3.05\n", "uptime decimal point"),
        ("x.1 3.05\n", "uptime seconds"),
        ("12.x 3.05\n", "uptime fraction"),
        ("12.5\n", "idle time seconds"),
        ("12.5 3\n", "idle time decimal point"),
        ("12.5 3.05 7\n", "idle time"),
    ],
)
def test_uptime_malformed(text: str, field: str) -> None:
    """
    Each malformed shape names the field that failed
    """
    with pytest.raises(DecodeError) as excinfo:
        _decode(text)

    assert excinfo.value.field == field


def test_uptime_fraction_too_long() -> None:
    """
    Ten fractional digits is an invariant violation, not a decode error
    """
    with pytest.raises(InvariantViolation):
        _decode("12.1234567890 3.05\n")


def test_uptime_empty() -> None:
    """
    Empty file ends the stream before the record
    """
    with pytest.raises(EndOfStream, match="uptime line"):
        _decode("")


def test_uptime_to_dict() -> None:
    """
    JSON-ready float seconds
    """
    payload = _decode("1640919.14 2328903.47\n").to_dict()

    assert payload == {"up_s": pytest.approx(1640919.14), "idle_s": pytest.approx(2328903.47)}
