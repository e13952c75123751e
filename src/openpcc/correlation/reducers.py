"""
Three-way reducers.

A three-way reducer walks two views in lockstep, once, and folds the
products ``(x*x, x*y, y*y)`` of every pair into three independent running
sums. The result is the ``ThreeWayResult`` ``(sum_xx, sum_xy, sum_yy)``
from which the Pearson coefficient is assembled.

The work is split into three steps so that the parallel reducer can reuse
any strategy on sub-ranges:

    accumulate(vx, vy, start, stop) -> partial state for [start, stop)
    combine(partials)               -> one state, folded in index order
    finalize(state)                 -> ThreeWayResult

Classes
-------
ThreeWayReducer
    Abstract interface.
NaiveReducer
    Plain floating-point addition. Error grows with n and magnitude.
CompensatedReducer
    Two-sum compensated addition. Error bound independent of n at roughly
    four times the arithmetic per step.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import reduce as _fold
from typing import Iterator, Sequence, Tuple

from ..core.exceptions import ConfigurationError, InvalidInputError
from . import kernels
from .result import ThreeWayResult
from .summation import CompensatedAccumulator, NaiveAccumulator
from .view import SequenceView, as_view


# ═══════════════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _check_lockstep(view_x: SequenceView, view_y: SequenceView) -> None:
    if len(view_x) != len(view_y):
        raise InvalidInputError(
            f"Length mismatch: x has {len(view_x)} elements, y has {len(view_y)}."
        )


def _pairs(view_x: SequenceView, view_y: SequenceView, start: int, stop: int) -> Iterator[Tuple[float, float]]:
    """Forward traversal of ``(x[i], y[i])`` for i in [start, stop)."""
    if start == 0 and stop == len(view_x):
        return zip(view_x, view_y)
    return ((view_x[i], view_y[i]) for i in range(start, stop))


def _kernel_args(view_x: SequenceView, view_y: SequenceView, start: int, stop: int):
    # Basic slices of the sources are numpy views, not copies.
    return (
        view_x.source[start:stop], view_x.shift,
        view_y.source[start:stop], view_y.shift,
    )


@dataclass
class ThreeWayAccumulator:
    """Three compensated accumulators, one per pairwise sum."""

    xx: CompensatedAccumulator = field(default_factory=CompensatedAccumulator)
    xy: CompensatedAccumulator = field(default_factory=CompensatedAccumulator)
    yy: CompensatedAccumulator = field(default_factory=CompensatedAccumulator)

    def ingest(self, x: float, y: float) -> None:
        self.xx.ingest(x * x)
        self.xy.ingest(x * y)
        self.yy.ingest(y * y)

    def merge(self, other: "ThreeWayAccumulator") -> "ThreeWayAccumulator":
        return ThreeWayAccumulator(
            self.xx.merge(other.xx),
            self.xy.merge(other.xy),
            self.yy.merge(other.yy),
        )

    def extract(self) -> ThreeWayResult:
        return ThreeWayResult(self.xx.extract(), self.xy.extract(), self.yy.extract())


# ═══════════════════════════════════════════════════════════════════════════
#  Reducers
# ═══════════════════════════════════════════════════════════════════════════

class ThreeWayReducer(ABC):
    """Abstract interface for all three-way reduction strategies.

    Reducers hold no state between calls; every ``reduce`` starts from
    fresh accumulators.
    """

    name = "abstract"

    def reduce(self, view_x, view_y) -> ThreeWayResult:
        """Single lockstep pass over both views.

        Args:
            view_x, view_y: SequenceViews (or plain sequences) of equal length.
        Returns:
            ThreeWayResult: (sum_xx, sum_xy, sum_yy)
        """
        vx, vy = as_view(view_x), as_view(view_y)
        _check_lockstep(vx, vy)
        return self.finalize(self.accumulate(vx, vy, 0, len(vx)))

    @abstractmethod
    def accumulate(self, view_x: SequenceView, view_y: SequenceView, start: int, stop: int):
        """Partial state for the index range [start, stop)."""
        pass

    @abstractmethod
    def combine(self, partials: Sequence):
        """Fold partial states of consecutive ranges, in the given order."""
        pass

    @abstractmethod
    def finalize(self, state) -> ThreeWayResult:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NaiveReducer(ThreeWayReducer):
    """Plain floating-point addition. O(1) space, error grows with n."""

    name = "naive"

    def accumulate(self, view_x, view_y, start, stop) -> ThreeWayResult:
        if view_x.is_shift and view_y.is_shift:
            return ThreeWayResult(*kernels.three_way_naive(*_kernel_args(view_x, view_y, start, stop)))

        xx = xy = yy = 0.0
        for x, y in _pairs(view_x, view_y, start, stop):
            xx += x * x
            xy += x * y
            yy += y * y
        return ThreeWayResult(xx, xy, yy)

    def combine(self, partials) -> ThreeWayResult:
        return _fold(lambda a, b: a + b, partials, ThreeWayResult(0.0, 0.0, 0.0))

    def finalize(self, state: ThreeWayResult) -> ThreeWayResult:
        return state


class CompensatedReducer(ThreeWayReducer):
    """Two-sum compensated addition of each of the three products."""

    name = "compensated"

    def accumulate(self, view_x, view_y, start, stop) -> ThreeWayAccumulator:
        if view_x.is_shift and view_y.is_shift:
            xx, c_xx, xy, c_xy, yy, c_yy = kernels.three_way_compensated(
                *_kernel_args(view_x, view_y, start, stop)
            )
            return ThreeWayAccumulator(
                CompensatedAccumulator(xx, c_xx),
                CompensatedAccumulator(xy, c_xy),
                CompensatedAccumulator(yy, c_yy),
            )

        acc = ThreeWayAccumulator()
        for x, y in _pairs(view_x, view_y, start, stop):
            acc.ingest(x, y)
        return acc

    def combine(self, partials) -> ThreeWayAccumulator:
        return _fold(lambda a, b: a.merge(b), partials, ThreeWayAccumulator())

    def finalize(self, state: ThreeWayAccumulator) -> ThreeWayResult:
        return state.extract()


REDUCERS = {
    NaiveReducer.name: NaiveReducer,
    CompensatedReducer.name: CompensatedReducer,
}


def get_reducer(name: str) -> ThreeWayReducer:
    """Fresh sequential reducer for a strategy name."""
    try:
        return REDUCERS[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown reducer '{name}'. Choose from {list(REDUCERS.keys())}."
        ) from None


# ═══════════════════════════════════════════════════════════════════════════
#  Transform-then-reduce helpers
# ═══════════════════════════════════════════════════════════════════════════

def inner_product(view_a, view_b, compensated: bool = True) -> float:
    """Sum of ``a[i] * b[i]``; 0.0 for empty views."""
    va, vb = as_view(view_a), as_view(view_b)
    _check_lockstep(va, vb)

    if va.is_shift and vb.is_shift:
        if compensated:
            total, correction = kernels.dot_compensated(va.source, va.shift, vb.source, vb.shift)
            return total + correction
        return kernels.dot_naive(va.source, va.shift, vb.source, vb.shift)

    acc = CompensatedAccumulator() if compensated else NaiveAccumulator()
    for a, b in zip(va, vb):
        acc.ingest(a * b)
    return acc.extract()


def euclidean_norm(view, compensated: bool = True) -> float:
    """``sqrt(sum(v[i]**2))``; 0.0 for an empty view."""
    v = as_view(view)
    return math.sqrt(inner_product(v, v, compensated=compensated))
