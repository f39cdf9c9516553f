"""
procfs.parse
AUTHOR: carter-vin

Primitive parsers for whitespace-delimited /proc lines

Contract:
- each parser takes a text slice and returns (remainder, value)
- None means "no match"; it is a local signal, never an exception
- leading whitespace (space, tab, CR, LF) is skipped before matching
- parsers are stateless and never consume trailing whitespace
"""

from __future__ import annotations

from typing import Optional

from procfs.errors import InvariantViolation

WHITESPACE = " \t\r\n"

U64_MAX = (1 << 64) - 1

# Nanosecond weight of the first fractional digit
NANOS_FIRST_DIGIT = 100_000_000
NANOS_MAX_DIGITS = 9


def _is_digit(ch: str) -> bool:
    # str.isdigit() also accepts non-ASCII digits
    return "0" <= ch <= "9"


def consume_space(text: str) -> str:
    """
    Return the suffix of text starting at the first non-whitespace character
    """
    return text.lstrip(WHITESPACE)


def parse_token(text: str) -> Optional[tuple[str, str]]:
    """
    Parse the next run of non-whitespace characters

    Consumes space before the token, but not after.
    """
    text = consume_space(text)
    if not text:
        return None
    end = 0
    for ch in text:
        if ch in WHITESPACE:
            break
        end += 1
    return text[end:], text[:end]


def parse_u64(text: str) -> Optional[tuple[str, int]]:
    """
    Parse a decimal unsigned 64-bit integer

    Accumulation wraps modulo 2**64, matching the kernel's counter width.
    """
    text = consume_space(text)
    if not text or not _is_digit(text[0]):
        return None
    acc = 0
    end = 0
    for ch in text:
        if not _is_digit(ch):
            break
        acc = (acc * 10 + (ord(ch) - 48)) & U64_MAX
        end += 1
    return text[end:], acc


def expect_bytes(literal: str, text: str) -> Optional[str]:
    """
    Match a literal prefix and return what follows it
    """
    text = consume_space(text)
    if text.startswith(literal):
        return text[len(literal):]
    return None


def parse_nanos(text: str) -> Optional[tuple[str, int]]:
    """
    Parse the digits after a decimal point as nanoseconds

    The first digit is worth 100_000_000ns, each following digit a tenth of
    the previous one. More than 9 digits cannot be represented and raises
    InvariantViolation.
    """
    text = consume_space(text)
    if not text or not _is_digit(text[0]):
        return None
    acc = 0
    weight = NANOS_FIRST_DIGIT
    end = 0
    for ch in text:
        if not _is_digit(ch):
            break
        if end == NANOS_MAX_DIGITS:
            raise InvariantViolation(
                f"fixed-point fraction has more than {NANOS_MAX_DIGITS} digits: {text!r}"
            )
        acc += (ord(ch) - 48) * weight
        weight //= 10
        end += 1
    return text[end:], acc
