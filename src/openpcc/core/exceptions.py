"""
openpcc Exceptions
==================
Centralized exception hierarchy for the openpcc package.

Floating-point edge cases are deliberately absent: a zero variance is
reported as a NaN coefficient, never as an exception.
"""


class PccError(Exception):
    """Base class for all openpcc exceptions."""
    pass


class InvalidInputError(PccError, ValueError):
    """Raised when correlation inputs differ in length, are empty, or are not 1-D."""
    pass


class EmptyInputError(PccError, ValueError):
    """Raised when a mean is requested over an empty sequence."""
    pass


class ConfigurationError(PccError):
    """Raised when a reduction strategy or its parameters are invalid (e.g., an unknown strategy name)."""
    pass


class ParallelReductionError(PccError):
    """Raised when one or more workers of a parallel reduction fail.

    No partial result survives this error. ``failures`` holds every
    ``(chunk_index, exception)`` pair observed before the reduction was
    aborted, ordered by chunk index.
    """

    def __init__(self, message, failures=None):
        super().__init__(message)
        self.failures = list(failures or [])
