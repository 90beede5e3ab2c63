from .digits import MAX_BASE, MIN_BASE, decode, digit_value
from .field import (
    DEFAULT_PRIME,
    Arithmetic,
    ArithmeticMode,
    ExactArithmetic,
    PrimeFieldArithmetic,
    arithmetic_for,
    is_probable_prime,
)
from .interpolation import secret_at_zero, value_at

__all__ = [
    "MAX_BASE",
    "MIN_BASE",
    "decode",
    "digit_value",
    "DEFAULT_PRIME",
    "Arithmetic",
    "ArithmeticMode",
    "ExactArithmetic",
    "PrimeFieldArithmetic",
    "arithmetic_for",
    "is_probable_prime",
    "secret_at_zero",
    "value_at",
]
