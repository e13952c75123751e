"""
Arithmetic mean estimator.

The summation strategy (plain or compensated) only changes the error
bound of the result; the contract is the same for both.
"""

from __future__ import annotations

from ..core.exceptions import EmptyInputError
from . import kernels
from .summation import CompensatedAccumulator, NaiveAccumulator
from .view import as_view


def mean(sequence, compensated: bool = True) -> float:
    """Arithmetic mean of a non-empty numeric sequence or view.

    For a single element the element itself is returned exactly.

    Raises
    ------
    EmptyInputError
        If the sequence has no elements.
    """
    view = as_view(sequence)
    n = len(view)
    if n == 0:
        raise EmptyInputError("Cannot compute the mean of an empty sequence.")

    if view.is_shift:
        if compensated:
            total, correction = kernels.sum_compensated(view.source, view.shift)
            total += correction
        else:
            total = kernels.sum_naive(view.source, view.shift)
    else:
        acc = CompensatedAccumulator() if compensated else NaiveAccumulator()
        total = acc.extend(view).extract()

    return total / n
