"""
Summation accumulators.

``CompensatedAccumulator`` implements two-sum (Knuth) compensated
summation: every addition's rounding residue is captured exactly and kept
in a separate ``correction`` term, so ``total + correction`` stays within
about one ULP of the exact sum regardless of the number of terms. Plain
summation, by contrast, has an absolute error bound of
O(n * eps * max|partial sum|).

``NaiveAccumulator`` has the same interface and no correction. Both are
pure-Python; the compiled kernels in ``kernels`` implement the same
arithmetic for the fast paths and hand their state back through these
classes so that partial results from disjoint ranges can be merged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple


def two_sum(a: float, b: float) -> Tuple[float, float]:
    """Error-free transformation of a floating-point addition.

    Returns ``(s, err)`` with ``s = fl(a + b)`` and ``a + b == s + err``
    exactly, for finite inputs. Once ``s`` overflows or is infinite the
    residue is meaningless and ``err`` is 0.0, so an infinite sum stays
    infinite instead of turning into NaN.
    """
    s = a + b
    if math.isinf(s):
        return s, 0.0
    bp = s - a
    err = (a - (s - bp)) + (b - bp)
    return s, err


@dataclass
class CompensatedAccumulator:
    """Running sum with a captured rounding correction.

    Parameters
    ----------
    total : float
        Floating-point running sum.
    correction : float
        Accumulated rounding residue of every fold into ``total``.
    """

    total: float = 0.0
    correction: float = 0.0

    def ingest(self, value: float) -> None:
        self.total, err = two_sum(self.total, float(value))
        self.correction += err

    def extend(self, values: Iterable[float]) -> "CompensatedAccumulator":
        for v in values:
            self.ingest(v)
        return self

    def extract(self) -> float:
        return self.total + self.correction

    def merge(self, other: "CompensatedAccumulator") -> "CompensatedAccumulator":
        """Combine with an accumulator over a disjoint range.

        The totals are joined with an exact two-sum, so the merged state
        keeps the single-pass error bound. Neither operand is modified.
        """
        total, err = two_sum(self.total, other.total)
        return CompensatedAccumulator(total, self.correction + other.correction + err)


@dataclass
class NaiveAccumulator:
    """Plain floating-point running sum."""

    total: float = 0.0

    def ingest(self, value: float) -> None:
        self.total += float(value)

    def extend(self, values: Iterable[float]) -> "NaiveAccumulator":
        for v in values:
            self.ingest(v)
        return self

    def extract(self) -> float:
        return self.total

    def merge(self, other: "NaiveAccumulator") -> "NaiveAccumulator":
        return NaiveAccumulator(self.total + other.total)


def compensated_sum(values: Iterable[float]) -> float:
    return CompensatedAccumulator().extend(values).extract()
