from __future__ import annotations

import math

import numpy as np
import pytest

import openpcc
from openpcc.core.exceptions import ConfigurationError, InvalidInputError
from openpcc.correlation import (
    STRATEGIES,
    CompensatedReducer,
    Correlator,
    CorrelationResult,
    NaiveReducer,
    ReductionConfig,
    SequenceView,
    correlate,
    make_reducer,
)
from openpcc.correlation.parallel import ParallelReducer

AGE = [43, 21, 25, 42, 57, 59]
GLUCOSE = [99, 65, 79, 75, 87, 81]

MW_X = [7.0, 33.0 / 7.0, 3.0, 5.0, 2.0]
MW_Y = [3.0, 5.0, 1.0, 7.0, 2.0]

SMALL_POOL = ReductionConfig(workers=2, partitions=3)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_reference_dataset(strategy) -> None:
    r, mean_x, mean_y = correlate(AGE, GLUCOSE, strategy, config=SMALL_POOL)
    assert r == pytest.approx(0.529809, abs=1e-6)
    assert mean_x == pytest.approx(247.0 / 6.0)
    assert mean_y == pytest.approx(81.0)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_fractional_dataset(strategy) -> None:
    res = correlate(MW_X, MW_Y, strategy, config=SMALL_POOL)
    assert res.coefficient == pytest.approx(0.4514558056, abs=1e-9)
    assert res.mean_y == pytest.approx(3.6)


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize("value", [0.0, 1.0, -1.0])
def test_single_sample_is_nan(strategy, value) -> None:
    res = correlate([value], [value], strategy, config=SMALL_POOL)
    assert math.isnan(res.coefficient)
    assert not res.is_defined
    assert res.mean_x == value
    assert res.mean_y == value


def test_constant_sequence_is_nan() -> None:
    res = correlate([5.0] * 10, list(range(10)))
    assert math.isnan(res.coefficient)
    assert res.mean_x == 5.0
    assert res.mean_y == 4.5


@pytest.mark.parametrize("strategy", ["naive", "compensated", "parallel"])
def test_self_correlation_is_one(strategy) -> None:
    x = np.linspace(-2.0, 7.0, 1_000) ** 3
    r, mean_x, mean_y = correlate(x, x, strategy, config=SMALL_POOL)
    assert r == pytest.approx(1.0, abs=1e-12)
    assert mean_x == mean_y


def test_anticorrelation() -> None:
    x = np.arange(100, dtype=np.float64)
    assert correlate(x, -2.0 * x + 3.0).coefficient == pytest.approx(-1.0, abs=1e-12)


def test_mismatched_lengths_rejected() -> None:
    with pytest.raises(InvalidInputError):
        correlate([1.0, 2.0, 3.0], [1.0, 2.0])
    with pytest.raises(ValueError):
        correlate([1.0], [1.0, 2.0], "parallel")


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_empty_inputs_rejected(strategy) -> None:
    with pytest.raises(InvalidInputError):
        correlate([], [], strategy)


def test_unknown_strategy_rejected() -> None:
    with pytest.raises(ConfigurationError):
        correlate([1.0, 2.0], [2.0, 1.0], "kahan")


def test_result_shape() -> None:
    res = correlate(AGE, GLUCOSE)
    assert isinstance(res, CorrelationResult)
    assert res.n == 6
    assert res.strategy == "compensated"
    assert res.as_tuple() == tuple(res)
    assert res.to_dict()["strategy"] == "compensated"
    assert "strategy='compensated'" in repr(res)


def test_top_level_exports() -> None:
    r, _, _ = openpcc.correlate(AGE, GLUCOSE)
    assert r == pytest.approx(0.529809, abs=1e-6)
    assert openpcc.mean([1.0, 2.0]) == 1.5


def test_reducer_instance_as_strategy() -> None:
    res = correlate(MW_X, MW_Y, NaiveReducer())
    assert res.strategy == "naive"
    assert res.coefficient == pytest.approx(0.4514558056, abs=1e-9)


def test_make_reducer() -> None:
    assert isinstance(make_reducer("compensated"), CompensatedReducer)
    reducer = make_reducer("parallel", ReductionConfig(workers=3, parallel_inner="naive"))
    assert isinstance(reducer, ParallelReducer)
    assert reducer.workers == 3
    assert reducer.partitions == 3
    assert reducer.inner.name == "naive"


def test_correlator_overrides() -> None:
    corr = Correlator(strategy="parallel", workers=2, partitions=2)
    assert corr.config.strategy == "parallel"
    res = corr.correlate(AGE, GLUCOSE)
    assert res.strategy == "parallel"
    assert res.coefficient == pytest.approx(0.529809, abs=1e-6)
    # per-call strategy wins over the configured one
    assert corr.correlate(AGE, GLUCOSE, "naive").strategy == "naive"
    assert corr.mean(GLUCOSE) == 81.0


def test_nothing_cached_between_calls() -> None:
    x = np.array([1.0, 2.0, 3.0, 4.0])
    y = np.array([1.0, 3.0, 2.0, 4.0])
    corr = Correlator()
    first = corr.correlate(x, y).coefficient
    y[:] = y[::-1].copy()
    second = corr.correlate(x, y).coefficient
    assert first == pytest.approx(0.8)
    assert second == pytest.approx(-0.8)


def test_strategies_agree_on_random_data() -> None:
    rng = np.random.default_rng(2024)
    x = rng.normal(size=50_000)
    y = 0.5 * x + rng.normal(size=x.size)
    reference = correlate(x, y, "compensated").coefficient
    for strategy in STRATEGIES:
        r = correlate(x, y, strategy, config=ReductionConfig(workers=4, partitions=4)).coefficient
        assert r == pytest.approx(reference, rel=1e-10), strategy


def test_matches_scipy() -> None:
    stats = pytest.importorskip("scipy.stats")
    rng = np.random.default_rng(11)
    x = rng.uniform(-5.0, 5.0, size=2_000)
    y = np.tanh(x) + rng.normal(scale=0.2, size=x.size)
    expected = stats.pearsonr(x, y)[0]
    assert correlate(x, y).coefficient == pytest.approx(expected, rel=1e-12)
    assert correlate(x, y, "parallel", config=SMALL_POOL).coefficient == pytest.approx(expected, rel=1e-12)


def test_two_pass_is_robust_to_large_offset() -> None:
    rng = np.random.default_rng(1)
    u = rng.normal(size=1_000)
    v = u + rng.normal(scale=0.5, size=u.size)
    reference = correlate(u, v).coefficient

    offset = 1e8
    two_pass = correlate(u + offset, v + offset).coefficient
    one_pass = correlate(u + offset, v + offset, "one_pass").coefficient

    assert abs(two_pass - reference) < 1e-6
    assert not abs(one_pass - reference) < 1e-6


def test_mean_strategy_is_configurable() -> None:
    res = correlate(AGE, GLUCOSE, config=ReductionConfig(compensated_mean=False))
    assert res.coefficient == pytest.approx(0.529809, abs=1e-6)


@pytest.mark.parametrize("strategy", ["naive", "compensated", "parallel"])
def test_huge_magnitudes_do_not_overflow(strategy) -> None:
    x = np.array([1e100, 2e100, 3e100, 5e100])
    assert correlate(x, x, strategy, config=SMALL_POOL).coefficient == pytest.approx(1.0, abs=1e-12)
    assert correlate(x, -x, strategy, config=SMALL_POOL).coefficient == pytest.approx(-1.0, abs=1e-12)


def test_shifted_view_input_matches_materialized() -> None:
    x = np.array(MW_X)
    view = SequenceView.shifted(x, 3.0)
    res = correlate(view, MW_Y)
    assert res.coefficient == pytest.approx(0.4514558056, abs=1e-9)
    assert res.mean_x == pytest.approx(float(np.mean(x - 3.0)))
    # an already-shifted view is centred through a general transform
    assert not view.subtract(res.mean_x).is_shift
