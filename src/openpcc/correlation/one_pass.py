"""
One-pass Pearson correlation.

A single traversal accumulates the raw sums Σx, Σy, Σx², Σxy, Σy², and the
coefficient is derived algebraically:

    r = (Σxy − n·mx·my) / sqrt((Σx² − n·mx²) · (Σy² − n·my²))

This halves the memory traffic of the two-pass algorithm, but the
subtractions cancel catastrophically when |mean| is large compared with
the spread of the data. Compensated accumulation removes the summation
error, not the cancellation.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from . import kernels
from .result import CorrelationResult
from .summation import CompensatedAccumulator, NaiveAccumulator
from .view import SequenceView, validate_pair


def one_pass_moments(view_x: SequenceView, view_y: SequenceView, compensated: bool = False) -> Tuple[float, ...]:
    """``(Σx, Σy, Σx², Σxy, Σy²)`` over two equal-length views."""
    if view_x.is_shift and view_y.is_shift and view_x.shift == 0.0 and view_y.shift == 0.0:
        if compensated:
            return kernels.raw_moments_compensated(view_x.source, view_y.source)
        return kernels.raw_moments_naive(view_x.source, view_y.source)

    make = CompensatedAccumulator if compensated else NaiveAccumulator
    sx, sy, sxx, sxy, syy = (make() for _ in range(5))
    for a, b in zip(view_x, view_y):
        sx.ingest(a)
        sy.ingest(b)
        sxx.ingest(a * a)
        sxy.ingest(a * b)
        syy.ingest(b * b)
    return sx.extract(), sy.extract(), sxx.extract(), sxy.extract(), syy.extract()


def correlate_one_pass(x, y, compensated: bool = False) -> CorrelationResult:
    """Pearson correlation from raw sums gathered in one traversal.

    Same validation and NaN contract as ``openpcc.correlate``.

    Raises
    ------
    InvalidInputError
        If the inputs differ in length or are empty.
    """
    vx, vy = validate_pair(x, y)
    n = len(vx)

    sx, sy, sxx, sxy, syy = one_pass_moments(vx, vy, compensated=compensated)
    mean_x = sx / n
    mean_y = sy / n

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        numer = np.float64(sxy) - n * mean_x * mean_y
        denom = np.sqrt(np.float64(sxx) - n * mean_x * mean_x) * np.sqrt(np.float64(syy) - n * mean_y * mean_y)
        r = numer / denom

    return CorrelationResult(
        coefficient=float(r),
        mean_x=mean_x,
        mean_y=mean_y,
        n=n,
        strategy="one_pass_compensated" if compensated else "one_pass",
    )
