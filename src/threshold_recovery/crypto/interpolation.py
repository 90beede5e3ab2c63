"""Lagrange interpolation over (x, y) pairs with a pluggable arithmetic backend."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from threshold_recovery.crypto.field import Arithmetic
from threshold_recovery.errors import DegenerateInputError

Point = Tuple[int, int]


def _as_points(points: Iterable[Point], arithmetic: Arithmetic) -> List[Point]:
    point_list = [(arithmetic.reduce(x), arithmetic.reduce(y)) for x, y in points]
    if not point_list:
        raise ValueError("At least one point is required to interpolate")
    x_s = [x for x, _ in point_list]
    if len(set(x_s)) != len(x_s):
        raise DegenerateInputError("Duplicate x-coordinates among interpolation points")
    return point_list


def value_at(points: Sequence[Point], x: int, arithmetic: Arithmetic) -> int:
    """
    Evaluate the Lagrange polynomial through ``points`` at ``x``.

    Terms are summed over a common denominator and divided once, so exact
    arithmetic only raises ``InexactDivisionError`` when the polynomial value
    itself is not an integer.
    """
    point_list = _as_points(points, arithmetic)
    x = arithmetic.reduce(x)
    numerator = 0
    denominator = 1
    for i, (xi, yi) in enumerate(point_list):
        term_num = yi
        term_den = 1
        for j, (xj, _) in enumerate(point_list):
            if i == j:
                continue
            term_num = arithmetic.mul(term_num, arithmetic.sub(x, xj))
            term_den = arithmetic.mul(term_den, arithmetic.sub(xi, xj))
        # numerator/denominator + term_num/term_den
        numerator = arithmetic.add(
            arithmetic.mul(numerator, term_den),
            arithmetic.mul(term_num, denominator),
        )
        denominator = arithmetic.mul(denominator, term_den)
    return arithmetic.div_exact(numerator, denominator)


def secret_at_zero(points: Sequence[Point], arithmetic: Arithmetic) -> int:
    """Recover the constant term of the polynomial through ``points``."""
    return value_at(points, 0, arithmetic)
