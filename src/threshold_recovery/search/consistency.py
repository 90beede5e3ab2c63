"""
Search for a k-subset of shares whose polynomial agrees with the share set.

Candidates are the k-combinations of share indices in lexicographic order,
generated lazily. Each candidate is interpolated at 0 and then checked against
every share; it is rejected as soon as more shares disagree than the
tolerance allows. The first surviving candidate wins.

The default tolerance is the unique-decoding bound floor((n - k) / 2): two
polynomials that each disagree with at most that many shares still agree on
at least k points and are therefore equal, so the secret cannot be ambiguous.
A larger explicit tolerance can admit competing polynomials; with
``detect_ambiguity`` the search runs to completion and reports them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Iterator, List, Optional, Sequence, Tuple

from threshold_recovery.crypto.field import Arithmetic
from threshold_recovery.crypto.interpolation import Point, secret_at_zero, value_at
from threshold_recovery.errors import (
    DegenerateInputError,
    InexactDivisionError,
    InsufficientSharesError,
    NoConsistentSubsetError,
)
from threshold_recovery.models.share import Share
from threshold_recovery.utils import MetricsSink, Timer, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReconstructionResult:
    secret: int
    subset: Tuple[int, ...]
    shares: Tuple[Share, ...]
    mismatches: Tuple[int, ...] = ()
    suspect_xs: Tuple[int, ...] = ()
    candidates_evaluated: int = 0
    ambiguous: bool = False
    alternative_secrets: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def subset_xs(self) -> List[int]:
        return [share.x for share in self.shares]


def candidate_subsets(n: int, k: int) -> Iterator[Tuple[int, ...]]:
    """Strictly increasing k-index tuples over range(n), lexicographic, one at a time."""
    return combinations(range(n), k)


def default_tolerance(n: int, k: int) -> int:
    return max(0, (n - k) // 2)


class ConsistencySearch:
    def __init__(
        self,
        arithmetic: Arithmetic,
        max_corrupted: Optional[int] = None,
        detect_ambiguity: bool = False,
        metrics: Optional[MetricsSink] = None,
    ) -> None:
        if max_corrupted is not None and max_corrupted < 0:
            raise ValueError("max_corrupted must be non-negative")
        self.arithmetic = arithmetic
        self.max_corrupted = max_corrupted
        self.detect_ambiguity = detect_ambiguity
        self.metrics = metrics

    def _tolerance(self, n: int, k: int) -> int:
        if self.max_corrupted is None:
            return default_tolerance(n, k)
        return self.max_corrupted

    def _check_inputs(self, shares: Sequence[Share], threshold: int) -> None:
        if threshold < 1:
            raise ValueError("Threshold must be at least 1")
        if len(shares) < threshold:
            raise InsufficientSharesError(len(shares), threshold)
        xs = [self.arithmetic.reduce(share.x) for share in shares]
        if len(set(xs)) != len(xs):
            raise DegenerateInputError("Duplicate x-coordinates in the share set")

    def _mismatches(self, points: Sequence[Point], shares: Sequence[Share], tolerance: int) -> Optional[List[int]]:
        """Indices of shares off the polynomial through ``points``; None once past ``tolerance``."""
        mismatches: List[int] = []
        for index, share in enumerate(shares):
            try:
                expected = value_at(points, share.x, self.arithmetic)
            except InexactDivisionError:
                expected = None
            if expected != self.arithmetic.reduce(share.y):
                mismatches.append(index)
                if len(mismatches) > tolerance:
                    return None
        return mismatches

    def _count(self, name: str) -> None:
        if self.metrics is not None:
            self.metrics.emit_counter(name)

    def run(self, shares: Sequence[Share], threshold: int) -> ReconstructionResult:
        self._check_inputs(shares, threshold)
        n = len(shares)
        tolerance = self._tolerance(n, threshold)
        if self.metrics is not None:
            with Timer(self.metrics, "search_seconds"):
                return self._search(shares, threshold, tolerance)
        return self._search(shares, threshold, tolerance)

    def _search(self, shares: Sequence[Share], threshold: int, tolerance: int) -> ReconstructionResult:
        evaluated = 0
        accepted: Optional[ReconstructionResult] = None
        alternatives: List[int] = []
        for subset in candidate_subsets(len(shares), threshold):
            evaluated += 1
            self._count("candidates_evaluated")
            chosen = tuple(shares[i] for i in subset)
            points = [(share.x, share.y) for share in chosen]
            try:
                secret = secret_at_zero(points, self.arithmetic)
            except InexactDivisionError:
                logger.debug("Rejecting subset %s: non-integer constant term", subset)
                self._count("candidates_rejected")
                continue
            mismatches = self._mismatches(points, shares, tolerance)
            if mismatches is None:
                logger.debug("Rejecting subset %s: more than %d mismatching shares", subset, tolerance)
                self._count("candidates_rejected")
                continue
            if accepted is None:
                accepted = ReconstructionResult(
                    secret=secret,
                    subset=tuple(subset),
                    shares=chosen,
                    mismatches=tuple(mismatches),
                )
                if not self.detect_ambiguity:
                    break
            elif secret != accepted.secret and secret not in alternatives:
                alternatives.append(secret)

        if accepted is None:
            raise NoConsistentSubsetError(evaluated, threshold, tolerance)

        suspect_xs = tuple(shares[i].x for i in accepted.mismatches)
        if suspect_xs:
            logger.warning(
                "Shares at x=%s disagree with the accepted polynomial",
                list(suspect_xs),
            )
        if alternatives:
            logger.warning(
                "Ambiguous reconstruction: %d other secret(s) also validate; returning the first",
                len(alternatives),
            )
        logger.info("Accepted subset x=%s after %d candidates", accepted.subset_xs, evaluated)
        return ReconstructionResult(
            secret=accepted.secret,
            subset=accepted.subset,
            shares=accepted.shares,
            mismatches=accepted.mismatches,
            suspect_xs=suspect_xs,
            candidates_evaluated=evaluated,
            ambiguous=bool(alternatives),
            alternative_secrets=tuple(alternatives),
        )
