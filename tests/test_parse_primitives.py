"""
Contract tests for the primitive token / number parsers
"""

import pytest

from procfs.errors import InvariantViolation
from procfs.parse import (
    U64_MAX,
    consume_space,
    expect_bytes,
    parse_nanos,
    parse_token,
    parse_u64,
)


def test_consume_space() -> None:
    """
    Leading space, tab, CR and LF are skipped; trailing space is kept
    """
    assert consume_space("") == ""
    assert consume_space(" ") == ""
    assert consume_space(" a") == "a"
    assert consume_space(" a ") == "a "
    assert consume_space("a ") == "a "
    assert consume_space("\t\r\n x") == "x"


def test_parse_token() -> None:
    """
    Token is the maximal non-whitespace run; remainder keeps trailing space
    """
    assert parse_token("") is None
    assert parse_token(" ") is None
    assert parse_token("token ") == (" ", "token")
    assert parse_token("token") == ("", "token")
    assert parse_token(" token") == ("", "token")
    assert parse_token(" token ") == (" ", "token")
    assert parse_token("cpu0\t12\n") == ("\t12\n", "cpu0")


def test_parse_token_chains_over_remainder() -> None:
    """
    Parsing the remainder again skips the space left behind by the first token
    """
    rest, first = parse_token("  ctxt 2238717\n")
    rest, second = parse_token(rest)

    assert (first, second) == ("ctxt", "2238717")
    assert parse_token(rest) is None


def test_parse_u64() -> None:
    """
    Greedy decimal digits after optional space
    """
    assert parse_u64("") is None
    assert parse_u64(" ") is None
    assert parse_u64("12 ") == (" ", 12)
    assert parse_u64("12") == ("", 12)
    assert parse_u64("a12") is None
    assert parse_u64(" 12") == ("", 12)
    assert parse_u64("a 12") is None
    assert parse_u64(" 12a") == ("a", 12)
    assert parse_u64("-1") is None


@pytest.mark.parametrize("value", [0, 1, 9, 10, 2238717, 1535128607, 2**32, U64_MAX])
def test_parse_u64_round_trips(value: int) -> None:
    """
    Formatting a u64 as decimal and parsing it back is lossless
    """
    assert parse_u64(str(value)) == ("", value)


def test_parse_u64_wraps_past_64_bits() -> None:
    """
    No overflow check: accumulation wraps modulo 2**64
    """
    assert parse_u64(str(U64_MAX + 1)) == ("", 0)
    assert parse_u64(str(U64_MAX + 6)) == ("", 5)


def test_parse_u64_rejects_non_ascii_digits() -> None:
    """
    Only ASCII 0-9 count as digits
    """
    assert parse_u64("٣") is None
    assert parse_u64("7٣") == ("٣", 7)


def test_expect_bytes() -> None:
    """
    Literal prefix match after optional space
    """
    assert expect_bytes("", "") == ""
    assert expect_bytes("a", "") is None
    assert expect_bytes("abc", "abcde") == "de"
    assert expect_bytes("a", "b") is None
    assert expect_bytes(".", " .14") == "14"


def test_parse_nanos() -> None:
    """
    First fractional digit is worth 100_000_000ns
    """
    assert parse_nanos("") is None
    assert parse_nanos("1") == ("", 100_000_000)
    assert parse_nanos(" 12") == ("", 120_000_000)
    assert parse_nanos("012") == ("", 12_000_000)
    assert parse_nanos(".12") is None
    assert parse_nanos("14 2328903.47") == (" 2328903.47", 140_000_000)


def test_parse_nanos_accepts_nine_digits() -> None:
    """
    Nine digits is full nanosecond precision
    """
    assert parse_nanos("123456789") == ("", 123_456_789)
    assert parse_nanos("000000001x") == ("x", 1)


def test_parse_nanos_rejects_tenth_digit() -> None:
    """
    A tenth digit cannot be represented and is an invariant violation
    """
    with pytest.raises(InvariantViolation, match="more than 9 digits"):
        parse_nanos("1234567890")
