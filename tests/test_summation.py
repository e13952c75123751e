from __future__ import annotations

import math
import random
from fractions import Fraction

import pytest

from openpcc.correlation import kernels
from openpcc.correlation.summation import (
    CompensatedAccumulator,
    NaiveAccumulator,
    compensated_sum,
    two_sum,
)

ILL_CONDITIONED = [1.0, 1e100, 1.0, -1e100]
PAIRS = [(0.1, 0.2), (1.0, 1e-16), (1e100, -1.0), (3.0, 4.0), (1e308, 1e308), (float("inf"), 1.0)]


def _random_values(n: int, seed: int = 7) -> list[float]:
    rng = random.Random(seed)
    return [rng.uniform(-1.0, 1.0) * 10 ** rng.randint(-8, 8) for _ in range(n)]


def test_two_sum_is_error_free() -> None:
    for a, b in [(0.1, 0.2), (1.0, 1e-16), (1e100, -1.0), (3.0, 4.0)]:
        s, err = two_sum(a, b)
        assert s == a + b
        assert Fraction(s) + Fraction(err) == Fraction(a) + Fraction(b)


@pytest.mark.parametrize("a, b", PAIRS)
def test_compiled_two_sum_matches_python(a, b) -> None:
    assert kernels.two_sum(a, b) == two_sum(a, b)


def test_compiled_two_sum_is_error_free() -> None:
    s, err = kernels.two_sum(0.1, 0.2)
    assert Fraction(s) + Fraction(err) == Fraction(0.1) + Fraction(0.2)


def test_two_sum_overflow_has_no_residue() -> None:
    assert two_sum(1e308, 1e308) == (float("inf"), 0.0)
    assert two_sum(float("-inf"), 1.0) == (float("-inf"), 0.0)


def test_two_sum_recovers_lost_low_bits() -> None:
    s, err = two_sum(1.0, 1e-16)
    assert s == 1.0
    assert err == 1e-16


def test_compensated_recovers_ill_conditioned_sum() -> None:
    assert compensated_sum(ILL_CONDITIONED) == 2.0
    assert NaiveAccumulator().extend(ILL_CONDITIONED).extract() == 0.0


def test_compensated_matches_exact_sum() -> None:
    values = _random_values(20_000)
    exact = math.fsum(values)
    got = compensated_sum(values)
    assert got == pytest.approx(exact, rel=1e-15, abs=0)


def test_compensated_beats_naive_on_repeated_tenths() -> None:
    values = [0.1] * 10_000
    exact = math.fsum(values)
    naive_err = abs(NaiveAccumulator().extend(values).extract() - exact)
    comp_err = abs(compensated_sum(values) - exact)
    assert comp_err <= naive_err
    assert naive_err > 0.0
    assert comp_err == 0.0


def test_ingest_tracks_state() -> None:
    acc = CompensatedAccumulator()
    acc.ingest(1e100)
    acc.ingest(1.0)
    assert acc.total == 1e100
    assert acc.correction == 1.0
    acc.ingest(-1e100)
    assert acc.extract() == 1.0


def test_merge_of_disjoint_ranges_matches_single_pass() -> None:
    values = _random_values(10_001, seed=11)
    cut = 4_321
    left = CompensatedAccumulator().extend(values[:cut])
    right = CompensatedAccumulator().extend(values[cut:])
    left_state = (left.total, left.correction)

    merged = left.merge(right)

    assert merged.extract() == pytest.approx(math.fsum(values), rel=1e-15, abs=0)
    # operands untouched
    assert (left.total, left.correction) == left_state


def test_merge_keeps_ill_conditioned_residue() -> None:
    left = CompensatedAccumulator().extend([1.0, 1e100])
    right = CompensatedAccumulator().extend([1.0, -1e100])
    assert left.merge(right).extract() == 2.0


def test_naive_accumulator_interface() -> None:
    acc = NaiveAccumulator().extend([1.0, 2.0, 3.5])
    assert acc.extract() == 6.5
    assert acc.merge(NaiveAccumulator(0.5)).extract() == 7.0


def test_empty_sum_is_zero() -> None:
    assert compensated_sum([]) == 0.0
    assert CompensatedAccumulator().extract() == 0.0
