"""
Result containers for correlation reductions in openpcc.

Both containers unpack like the plain tuples they stand for, so
``xx, xy, yy = reducer.reduce(vx, vy)`` and
``r, mean_x, mean_y = correlate(x, y)`` work as expected.

Classes
-------
ThreeWayResult
    The three pairwise sums ``(sum_xx, sum_xy, sum_yy)`` of a reduction.
CorrelationResult
    Pearson coefficient with the two component means.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class ThreeWayResult:
    """Pairwise sums of a lockstep reduction over two views.

    ``sum_xx`` and ``sum_yy`` are sums of squares and therefore never
    negative.
    """

    sum_xx: float
    sum_xy: float
    sum_yy: float

    def __iter__(self):
        yield self.sum_xx
        yield self.sum_xy
        yield self.sum_yy

    def __add__(self, other: "ThreeWayResult") -> "ThreeWayResult":
        """Elementwise (vector) addition."""
        return ThreeWayResult(
            self.sum_xx + other.sum_xx,
            self.sum_xy + other.sum_xy,
            self.sum_yy + other.sum_yy,
        )

    def coefficient(self) -> float:
        """``sum_xy / sqrt(sum_xx * sum_yy)`` under IEEE-754 semantics.

        A zero denominator produces NaN (or ±inf), never an exception. The
        norms are taken separately so that sums beyond ~1e154 do not overflow
        the product.
        """
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            norm_x = np.sqrt(np.float64(self.sum_xx))
            norm_y = np.sqrt(np.float64(self.sum_yy))
            r = np.float64(self.sum_xy) / (norm_x * norm_y)
        return float(r)


@dataclass(frozen=True)
class CorrelationResult:
    """Pearson correlation of two sequences.

    Parameters
    ----------
    coefficient : float
        Pearson *r*, in [-1, 1] up to rounding. NaN when either sequence
        has zero variance; callers check with ``math.isnan`` or
        ``is_defined``.
    mean_x, mean_y : float
        Arithmetic means of the inputs.
    n : int, optional
        Number of samples.
    strategy : str, optional
        Name of the reduction strategy that produced the result.
    """

    coefficient: float
    mean_x: float
    mean_y: float
    n: Optional[int] = None
    strategy: Optional[str] = None

    def __iter__(self):
        yield self.coefficient
        yield self.mean_x
        yield self.mean_y

    @property
    def is_defined(self) -> bool:
        """False when the coefficient is NaN (zero variance)."""
        return not math.isnan(self.coefficient)

    def as_tuple(self):
        return (self.coefficient, self.mean_x, self.mean_y)

    def to_dict(self) -> dict:
        return {
            "coefficient": self.coefficient,
            "mean_x": self.mean_x,
            "mean_y": self.mean_y,
            "n": self.n,
            "strategy": self.strategy,
        }

    def __repr__(self) -> str:
        return (
            f"CorrelationResult(r={self.coefficient:.10g}, "
            f"mean_x={self.mean_x:.6g}, mean_y={self.mean_y:.6g}, "
            f"n={self.n}, strategy='{self.strategy}')"
        )
