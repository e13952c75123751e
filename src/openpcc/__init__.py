"""
OpenPCC - Open Pearson Correlation Coefficient
==============================================

Pearson correlation over large numeric sequences with interchangeable
summation strategies that trade numerical accuracy for throughput.

Subpackages:
------------
- correlation: Views, accumulators, reducers and the correlation orchestrator
- core: Exception hierarchy
- utils: Scoped logging
"""

from .core.exceptions import (
    ConfigurationError,
    EmptyInputError,
    InvalidInputError,
    ParallelReductionError,
    PccError,
)
from .correlation import Correlator, CorrelationResult, ReductionConfig, correlate, mean

__version__ = "0.1.0"

__all__ = [
    "correlate",
    "mean",
    "Correlator",
    "CorrelationResult",
    "ReductionConfig",
    "PccError",
    "InvalidInputError",
    "EmptyInputError",
    "ConfigurationError",
    "ParallelReductionError",
]
