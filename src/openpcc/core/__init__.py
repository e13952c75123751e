from .exceptions import (
    ConfigurationError,
    EmptyInputError,
    InvalidInputError,
    ParallelReductionError,
    PccError,
)

__all__ = [
    "PccError",
    "InvalidInputError",
    "EmptyInputError",
    "ConfigurationError",
    "ParallelReductionError",
]
