from typing import Dict, List, Optional, Sequence

import pytest

from threshold_recovery.crypto import ExactArithmetic, PrimeFieldArithmetic
from threshold_recovery.errors import DegenerateInputError, InsufficientSharesError, NoConsistentSubsetError
from threshold_recovery.models import Share
from threshold_recovery.search import ConsistencySearch, candidate_subsets, default_tolerance
from threshold_recovery.utils import InMemoryMetrics

EXACT = ExactArithmetic()


def _shares(coeffs: Sequence[int], xs: Sequence[int], corrupt: Optional[Dict[int, int]] = None) -> List[Share]:
    corrupt = corrupt or {}
    shares = []
    for x in xs:
        y = sum(c * x**power for power, c in enumerate(coeffs))
        shares.append(Share(x=x, y=corrupt.get(x, y)))
    return shares


def _worked_example(y6: int = 39) -> List[Share]:
    return [Share(1, 4), Share(2, 7), Share(3, 12), Share(6, y6)]


def test_candidate_subsets_are_lexicographic_and_lazy() -> None:
    subsets = candidate_subsets(4, 2)
    assert next(subsets) == (0, 1)
    assert list(subsets) == [(0, 2), (0, 3), (1, 2), (1, 3), (2, 3)]


def test_default_tolerance_is_unique_decoding_bound() -> None:
    assert default_tolerance(4, 3) == 0
    assert default_tolerance(6, 3) == 1
    assert default_tolerance(7, 3) == 2
    assert default_tolerance(3, 3) == 0


def test_clean_share_set_accepts_first_subset() -> None:
    result = ConsistencySearch(EXACT).run(_worked_example(), 3)
    assert result.secret == 3
    assert result.subset == (0, 1, 2)
    assert result.subset_xs == [1, 2, 3]
    assert result.mismatches == ()
    assert result.candidates_evaluated == 1
    assert not result.ambiguous


def test_single_corrupted_share_is_skipped() -> None:
    shares = _shares([42, 7, 3], range(1, 7), corrupt={2: 68 + 5})
    result = ConsistencySearch(EXACT).run(shares, 3)
    assert result.secret == 42
    assert result.subset_xs == [1, 3, 4]
    assert result.suspect_xs == (2,)
    # (0,1,2) (0,1,3) (0,1,4) (0,1,5) all contain the corrupted share
    assert result.candidates_evaluated == 5


def test_two_corrupted_shares_within_bound() -> None:
    shares = _shares([42, 7, 3], range(1, 8), corrupt={1: 0, 5: 999})
    result = ConsistencySearch(EXACT).run(shares, 3)
    assert result.secret == 42
    assert result.subset_xs == [2, 3, 4]
    assert result.suspect_xs == (1, 5)


def test_prime_field_search_recovers_reduced_secret() -> None:
    prime = 2**127 - 1
    field = PrimeFieldArithmetic(prime)
    coeffs = [2**200 + 3, 11, 2**64]
    shares = [Share(s.x, s.y % prime) for s in _shares(coeffs, range(1, 7))]
    shares[0] = Share(1, 12345)
    result = ConsistencySearch(field).run(shares, 3)
    assert result.secret == coeffs[0] % prime
    assert result.suspect_xs == (1,)


def test_no_solution_after_exhausting_search_space() -> None:
    metrics = InMemoryMetrics()
    with pytest.raises(NoConsistentSubsetError) as excinfo:
        ConsistencySearch(EXACT, metrics=metrics).run(_worked_example(y6=40), 3)
    assert excinfo.value.candidates_evaluated == 4
    assert metrics.total("candidates_evaluated") == 4
    assert metrics.total("candidates_rejected") == 4


def test_too_many_corrupted_shares_fails() -> None:
    shares = [Share(1, 52), Share(2, 68), Share(3, 1000), Share(4, 7), Share(5, -300)]
    with pytest.raises(NoConsistentSubsetError) as excinfo:
        ConsistencySearch(EXACT).run(shares, 3)
    assert excinfo.value.candidates_evaluated == 10
    assert excinfo.value.tolerance == 1


def test_insufficient_shares_fail_before_enumeration() -> None:
    metrics = InMemoryMetrics()
    with pytest.raises(InsufficientSharesError) as excinfo:
        ConsistencySearch(EXACT, metrics=metrics).run(_worked_example()[:2], 3)
    assert excinfo.value.available == 2
    assert excinfo.value.threshold == 3
    assert metrics.total("candidates_evaluated") == 0


def test_duplicate_x_in_share_set_is_degenerate() -> None:
    with pytest.raises(DegenerateInputError):
        ConsistencySearch(EXACT).run([Share(1, 4), Share(1, 5), Share(2, 7)], 2)
    with pytest.raises(DegenerateInputError):
        ConsistencySearch(PrimeFieldArithmetic(97)).run([Share(1, 4), Share(98, 5)], 1)


def test_invalid_parameters() -> None:
    with pytest.raises(ValueError):
        ConsistencySearch(EXACT).run(_worked_example(), 0)
    with pytest.raises(ValueError):
        ConsistencySearch(EXACT, max_corrupted=-1)


def test_threshold_one_is_a_constant_polynomial() -> None:
    result = ConsistencySearch(EXACT).run([Share(1, 9), Share(2, 9), Share(3, 10)], 1)
    assert result.secret == 9
    assert result.suspect_xs == (3,)


def test_explicit_tolerance_returns_first_match() -> None:
    field = PrimeFieldArithmetic(97)
    result = ConsistencySearch(field, max_corrupted=1).run(_worked_example(y6=40), 3)
    assert result.secret == 3
    assert result.suspect_xs == (6,)
    assert result.candidates_evaluated == 1
    assert not result.ambiguous


def test_ambiguity_is_flagged_when_requested() -> None:
    field = PrimeFieldArithmetic(97)
    search = ConsistencySearch(field, max_corrupted=1, detect_ambiguity=True)
    result = search.run(_worked_example(y6=40), 3)
    assert result.secret == 3
    assert result.subset == (0, 1, 2)
    assert result.ambiguous
    assert result.candidates_evaluated == 4
    assert 3 not in result.alternative_secrets
    assert len(result.alternative_secrets) >= 1


def test_ambiguity_detection_on_clean_set_is_not_ambiguous() -> None:
    result = ConsistencySearch(EXACT, detect_ambiguity=True).run(_worked_example(), 3)
    assert result.secret == 3
    assert result.candidates_evaluated == 4
    assert not result.ambiguous


def test_metrics_record_timer_and_counters() -> None:
    metrics = InMemoryMetrics()
    shares = _shares([42, 7, 3], range(1, 7), corrupt={2: 0})
    ConsistencySearch(EXACT, metrics=metrics).run(shares, 3)
    assert metrics.total("candidates_evaluated") == 5
    assert metrics.total("candidates_rejected") == 4
    assert len(metrics.timers["search_seconds"]) == 1
