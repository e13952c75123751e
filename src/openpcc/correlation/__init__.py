"""
``openpcc.correlation`` — Pearson correlation with selectable reduction strategies.

Quick-start
-----------
>>> from openpcc import correlation as corr
>>>
>>> res = corr.correlate(x, y)                    # compensated, single-threaded
>>> res.coefficient, res.mean_x, res.mean_y
>>> corr.correlate(x, y, "parallel")              # fork-join over all cores
>>> corr.Correlator(strategy="parallel", workers=4, partitions=4).correlate(x, y)
>>>
>>> # Building blocks
>>> vx = corr.SequenceView.shifted(x, corr.mean(x))   # lazy x - mean(x)
>>> corr.CompensatedReducer().reduce(vx, vx)          # (sum_xx, sum_xy, sum_yy)

Classes
-------
SequenceView
    Lazy elementwise transform of a sequence (no buffer is materialized).
CompensatedAccumulator, NaiveAccumulator
    Running-sum primitives; the compensated one merges across ranges.
NaiveReducer, CompensatedReducer, ParallelReducer
    Interchangeable three-way reducers behind ``ThreeWayReducer``.
Correlator
    Orchestrator bound to a ``ReductionConfig``.
ThreeWayResult, CorrelationResult
    Result containers; both unpack like tuples.
"""

from .config import STRATEGIES, ReductionConfig
from .mean import mean
from .one_pass import correlate_one_pass
from .parallel import ParallelReducer, partition
from .pearson import Correlator, correlate, make_reducer
from .reducers import (
    CompensatedReducer,
    NaiveReducer,
    ThreeWayAccumulator,
    ThreeWayReducer,
    euclidean_norm,
    get_reducer,
    inner_product,
)
from .result import CorrelationResult, ThreeWayResult
from .summation import CompensatedAccumulator, NaiveAccumulator, compensated_sum, two_sum
from .view import SequenceView, as_view, identity

__all__ = [
    "correlate",
    "correlate_one_pass",
    "mean",
    "Correlator",
    "ReductionConfig",
    "STRATEGIES",
    "make_reducer",
    "SequenceView",
    "as_view",
    "identity",
    "CompensatedAccumulator",
    "NaiveAccumulator",
    "compensated_sum",
    "two_sum",
    "ThreeWayReducer",
    "NaiveReducer",
    "CompensatedReducer",
    "ParallelReducer",
    "ThreeWayAccumulator",
    "get_reducer",
    "partition",
    "inner_product",
    "euclidean_norm",
    "ThreeWayResult",
    "CorrelationResult",
]
