"""
Arithmetic backends for Lagrange interpolation.

Two interchangeable backends expose the same operations:

``PrimeFieldArithmetic``
    Integers modulo a prime P. Division multiplies by ``b^(P-2) mod P``.

``ExactArithmetic``
    Unbounded integers. Division must leave no remainder.

A run picks one backend and keeps it; values from one are meaningless to the
other.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from threshold_recovery.errors import DegenerateInputError, InexactDivisionError

# Mersenne prime; wide enough for any secret the exact mode would handle.
DEFAULT_PRIME = 2**521 - 1

_WITNESSES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)


class ArithmeticMode(str, Enum):
    EXACT = "exact"
    PRIME_FIELD = "prime_field"


def is_probable_prime(n: int) -> bool:
    """Miller-Rabin over fixed witnesses (deterministic below 3.3e24)."""
    if n < 2:
        return False
    for p in _WITNESSES:
        if n % p == 0:
            return n == p
    d = n - 1
    r = 0
    while d % 2 == 0:
        d //= 2
        r += 1
    for a in _WITNESSES:
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(r - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


class ExactArithmetic:
    """Unbounded integer arithmetic with remainder-checked division."""

    mode = ArithmeticMode.EXACT
    modulus: Optional[int] = None

    def reduce(self, value: int) -> int:
        return value

    def add(self, a: int, b: int) -> int:
        return a + b

    def sub(self, a: int, b: int) -> int:
        return a - b

    def mul(self, a: int, b: int) -> int:
        return a * b

    def negate(self, a: int) -> int:
        return -a

    def div_exact(self, a: int, b: int) -> int:
        if b == 0:
            raise DegenerateInputError("Division by zero: duplicate x-coordinates")
        quotient, remainder = divmod(a, b)
        if remainder:
            raise InexactDivisionError(f"{a} is not divisible by {b}")
        return quotient

    def __repr__(self) -> str:
        return "ExactArithmetic()"


class PrimeFieldArithmetic:
    """Arithmetic in GF(P) for a prime P; every result lies in ``[0, P)``."""

    mode = ArithmeticMode.PRIME_FIELD

    def __init__(self, modulus: int = DEFAULT_PRIME) -> None:
        if not is_probable_prime(modulus):
            raise ValueError(f"Field modulus {modulus} is not prime")
        self.modulus = modulus

    def reduce(self, value: int) -> int:
        return value % self.modulus

    def add(self, a: int, b: int) -> int:
        return (a + b) % self.modulus

    def sub(self, a: int, b: int) -> int:
        return (a - b) % self.modulus

    def mul(self, a: int, b: int) -> int:
        return (a * b) % self.modulus

    def negate(self, a: int) -> int:
        return -a % self.modulus

    def inverse(self, a: int) -> int:
        a %= self.modulus
        if a == 0:
            raise DegenerateInputError("Zero has no inverse: duplicate x-coordinates modulo P")
        return pow(a, self.modulus - 2, self.modulus)

    def div_exact(self, a: int, b: int) -> int:
        return self.mul(a, self.inverse(b))

    def __repr__(self) -> str:
        return f"PrimeFieldArithmetic(modulus={self.modulus})"


Arithmetic = ExactArithmetic | PrimeFieldArithmetic


def arithmetic_for(mode: ArithmeticMode | str, modulus: int = DEFAULT_PRIME) -> Arithmetic:
    """Build the backend for ``mode``; ``modulus`` only matters in prime-field mode."""
    mode = ArithmeticMode(mode)
    if mode is ArithmeticMode.PRIME_FIELD:
        return PrimeFieldArithmetic(modulus)
    return ExactArithmetic()
