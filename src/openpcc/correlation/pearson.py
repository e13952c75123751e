"""
Pearson correlation orchestrator.

``correlate`` runs the two-pass algorithm: the means are computed first,
then both inputs are wrapped in lazy views that subtract their mean, and a
three-way reducer folds ``(dx*dx, dx*dy, dy*dy)`` in one lockstep pass.
The coefficient is ``sum_xy / sqrt(sum_xx * sum_yy)`` under IEEE-754
rules, so a zero variance yields NaN rather than an exception.

Strategies
----------
naive
    Plain summation. Fastest sequential path, error grows with n.
compensated (default)
    Two-sum compensated summation, error bound independent of n.
parallel
    Fork-join over worker threads, compensated per chunk and merged.
one_pass, one_pass_compensated
    Raw-sum single traversal. Fast, but cancels badly when the means are
    large relative to the spread.

Example
-------
>>> import openpcc
>>> r, mean_x, mean_y = openpcc.correlate([43, 21, 25, 42, 57, 59],
...                                       [99, 65, 79, 75, 87, 81])
>>> round(r, 6)
0.529809
"""

from __future__ import annotations

from typing import Optional, Union

from ..utils.logging import get_logger
from .config import ONE_PASS_STRATEGIES, ReductionConfig
from .mean import mean as _mean
from .one_pass import correlate_one_pass
from .parallel import ParallelReducer
from .reducers import ThreeWayReducer, get_reducer
from .result import CorrelationResult
from .view import validate_pair

logger = get_logger("openpcc.pearson")


def make_reducer(strategy: str, config: Optional[ReductionConfig] = None) -> ThreeWayReducer:
    """Build the three-way reducer for a two-pass strategy name."""
    config = config or ReductionConfig()
    if strategy == ParallelReducer.name:
        return ParallelReducer(
            config.parallel_inner,
            workers=config.resolved_workers(),
            partitions=config.resolved_partitions(),
        )
    return get_reducer(strategy)


class Correlator:
    """Pearson correlation with a fixed reduction configuration.

    Holds configuration only; nothing is cached between calls.

    Parameters
    ----------
    config : ReductionConfig, optional
        Defaults to ``ReductionConfig()`` (compensated, single-threaded).
    **overrides
        Field overrides applied on top of ``config``
        (e.g. ``Correlator(strategy="parallel", workers=4)``).
    """

    def __init__(self, config: Optional[ReductionConfig] = None, **overrides):
        config = config or ReductionConfig()
        self.config = config.replace(**overrides) if overrides else config

    def mean(self, sequence) -> float:
        return _mean(sequence, compensated=self.config.compensated_mean)

    def correlate(self, x, y, strategy: Union[str, ThreeWayReducer, None] = None) -> CorrelationResult:
        """Pearson coefficient and component means of two sequences.

        Args:
            x, y: Equal-length, non-empty numeric sequences (or SequenceViews).
                Views that already carry a shift or transform are reduced on
                the pure-Python path, see ``correlate``.
            strategy: Strategy name or reducer instance; overrides the
                configured strategy for this call.

        Returns:
            CorrelationResult: (coefficient, mean_x, mean_y)

        Raises:
            InvalidInputError: lengths differ or inputs are empty.
            ConfigurationError: unknown strategy name.
            ParallelReductionError: a parallel worker failed.
        """
        if strategy is None:
            strategy = self.config.strategy
        if isinstance(strategy, str):
            # Validates the name before touching the data.
            config = self.config.replace(strategy=strategy)
        else:
            config = self.config

        vx, vy = validate_pair(x, y)
        n = len(vx)

        if isinstance(strategy, str) and strategy in ONE_PASS_STRATEGIES:
            logger.debug(f"correlate n={n} strategy={strategy}")
            return correlate_one_pass(vx, vy, compensated=(strategy == "one_pass_compensated"))

        reducer = make_reducer(strategy, config) if isinstance(strategy, str) else strategy
        logger.debug(f"correlate n={n} strategy={reducer.name} reducer={reducer!r}")

        mean_x = _mean(vx, compensated=config.compensated_mean)
        mean_y = _mean(vy, compensated=config.compensated_mean)

        sums = reducer.reduce(vx.subtract(mean_x), vy.subtract(mean_y))

        return CorrelationResult(
            coefficient=sums.coefficient(),
            mean_x=mean_x,
            mean_y=mean_y,
            n=n,
            strategy=reducer.name,
        )

    def __repr__(self) -> str:
        return f"Correlator({self.config!r})"


def correlate(
        x,
        y,
        strategy: Union[str, ThreeWayReducer, None] = None,
        *,
        config: Optional[ReductionConfig] = None,
) -> CorrelationResult:
    """Pearson correlation coefficient of ``x`` and ``y`` with both means.

    Args:
        x, y: Equal-length, non-empty numeric sequences.
        strategy: ``"naive"``, ``"compensated"`` (default), ``"parallel"``,
            ``"one_pass"``, ``"one_pass_compensated"``, or a reducer instance.
        config: Optional ReductionConfig (workers, partitions, mean strategy).

    Returns:
        CorrelationResult: unpacks as ``(coefficient, mean_x, mean_y)``. The
        coefficient is NaN when either input has zero variance.

    Note:
        Plain arrays and identity views take the compiled kernels. A view
        that already carries a shift or a transform is centred as
        ``(v - shift) - mean`` exactly, which runs on the pure-Python
        traversal path and is much slower for large inputs.
    """
    return Correlator(config).correlate(x, y, strategy=strategy)
