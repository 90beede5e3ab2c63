"""Positional-notation decoding of share values written in bases 2-36."""

from __future__ import annotations

import string
from typing import Optional

from threshold_recovery.errors import DigitOutOfRangeError, InvalidDigitError

MIN_BASE = 2
MAX_BASE = 36

_DIGITS = {char: value for value, char in enumerate(string.digits + string.ascii_lowercase)}


def digit_value(char: str) -> int:
    """Map a single ASCII alphanumeric character to its digit value (a/A -> 10)."""
    if not (len(char) == 1 and char.isascii()):
        raise InvalidDigitError(f"Invalid digit {char!r}")
    try:
        return _DIGITS[char.lower()]
    except KeyError:
        raise InvalidDigitError(f"Invalid digit {char!r}") from None


def decode(digits: str, base: int, modulus: Optional[int] = None) -> int:
    """
    Decode ``digits`` in ``base``, most significant digit first.

    When ``modulus`` is given the accumulator is reduced at every step, so the
    result lies in ``[0, modulus)``.
    """
    if not (MIN_BASE <= base <= MAX_BASE):
        raise ValueError(f"Base must be within {MIN_BASE}-{MAX_BASE}, got {base}")
    if not digits:
        raise InvalidDigitError("Value string is empty")
    value = 0
    for position, char in enumerate(digits):
        digit = digit_value(char)
        if digit >= base:
            raise DigitOutOfRangeError(
                f"Digit {char!r} at position {position} is out of range for base {base}"
            )
        value = value * base + digit
        if modulus is not None:
            value %= modulus
    return value
