"""
Reduction configuration.

The choice of strategy is pure configuration: it changes throughput and
the numerical error bound, never the contract of ``correlate``.
"""

from __future__ import annotations

import dataclasses
import os
from numbers import Integral
from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import ConfigurationError

# Strategies usable on their own and as the per-chunk strategy of "parallel"
SEQUENTIAL_STRATEGIES = ("naive", "compensated")
ONE_PASS_STRATEGIES = ("one_pass", "one_pass_compensated")
STRATEGIES = SEQUENTIAL_STRATEGIES + ("parallel",) + ONE_PASS_STRATEGIES

DEFAULT_STRATEGY = "compensated"


def default_workers() -> int:
    """Hardware-derived parallelism."""
    return os.cpu_count() or 1


@dataclass
class ReductionConfig:
    """Configuration for ``correlate`` and ``mean``.

    Parameters
    ----------
    strategy : str
        One of ``STRATEGIES``. Default ``"compensated"``.
    compensated_mean : bool
        Use compensated summation for the means. Default True.
    parallel_inner : str
        Per-chunk strategy of the parallel reducer, ``"naive"`` or
        ``"compensated"``. Compensated partials are merged, naive partials
        are added. Default ``"compensated"``.
    workers : int or None
        Worker threads for the parallel reducer. None uses the CPU count.
    partitions : int or None
        Number of contiguous chunks. None uses one chunk per worker. The
        result is reproducible for a fixed partition count; different
        counts may differ within the strategy's error bound.
    """

    strategy: str = DEFAULT_STRATEGY
    compensated_mean: bool = True
    parallel_inner: str = "compensated"
    workers: Optional[int] = None
    partitions: Optional[int] = None

    def __post_init__(self):
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown strategy '{self.strategy}'. Choose from {list(STRATEGIES)}."
            )
        if self.parallel_inner not in SEQUENTIAL_STRATEGIES:
            raise ConfigurationError(
                f"Unknown parallel inner strategy '{self.parallel_inner}'. "
                f"Choose from {list(SEQUENTIAL_STRATEGIES)}."
            )
        for name in ("workers", "partitions"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, Integral) or value < 1):
                raise ConfigurationError(f"{name} must be a positive integer or None, got {value!r}.")

    def resolved_workers(self) -> int:
        return self.workers if self.workers is not None else default_workers()

    def resolved_partitions(self) -> int:
        return self.partitions if self.partitions is not None else self.resolved_workers()

    def replace(self, **changes) -> "ReductionConfig":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ReductionConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}.")
        return cls(**data)
