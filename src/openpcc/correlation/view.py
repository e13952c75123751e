"""
Lazy elementwise views over numeric sequences.

A ``SequenceView`` pairs a source sequence with a pure unary transform and
exposes the transformed sequence without ever writing it to a new buffer.
Element ``i`` of the view is computed on demand as ``f(source[i])``.

Two transforms get a fast path: the identity and "subtract a constant".
Views of that form report ``is_shift`` and are consumed by the compiled
kernels directly as ``(source, shift)``. Any other pure callable is
supported through plain forward traversal.

Example
-------
>>> from openpcc.correlation.view import SequenceView
>>> v = SequenceView.shifted([1.0, 2.0, 3.0], 2.0)
>>> len(v), v[0], list(v)
(3, -1.0, [-1.0, 0.0, 1.0])
"""

from __future__ import annotations

import operator
from typing import Callable, Iterator, Optional, Tuple

import numpy as np

from ..core.exceptions import InvalidInputError


def identity(x):
    """The identity transform."""
    return x


def _as_source(seq) -> np.ndarray:
    """Coerce a caller sequence into a 1-D float64 array (no copy for float64 arrays)."""
    arr = np.asarray(seq, dtype=np.float64)
    if arr.ndim != 1:
        raise InvalidInputError(f"Sequence must be 1-D, got ndim={arr.ndim}.")
    return arr


class SequenceView:
    """Read-only logical sequence ``f(source[i])``.

    Parameters
    ----------
    source : array-like, shape (n,)
        Underlying data. Owned by the caller and must not be mutated while
        the view is in use.
    func : callable, optional
        Pure unary transform applied after the shift. ``None`` means the
        transform is exactly ``source[i] - shift``.
    shift : float
        Constant subtracted from every element before ``func``.
    """

    __slots__ = ("_source", "_func", "_shift")

    def __init__(self, source, func: Optional[Callable[[float], float]] = None, shift: float = 0.0):
        if isinstance(source, SequenceView):
            raise TypeError("Compose views with .map() or .subtract(), not by nesting.")
        self._source = _as_source(source)
        self._func = None if func is identity else func
        self._shift = float(shift)

    # ── factories ──────────────────────────────────────────────────────

    @classmethod
    def identity(cls, source) -> "SequenceView":
        return cls(source)

    @classmethod
    def shifted(cls, source, constant: float) -> "SequenceView":
        """View of ``source[i] - constant``."""
        return cls(source, shift=constant)

    # ── composition ────────────────────────────────────────────────────

    def subtract(self, constant: float) -> "SequenceView":
        """A new view whose elements are ``self[i] - constant``."""
        if self._func is None and self._shift == 0.0:
            return SequenceView(self._source, shift=constant)
        inner = self._element_fn()
        c = float(constant)
        return SequenceView(self._source, func=lambda v: inner(v) - c)

    def map(self, func: Callable[[float], float]) -> "SequenceView":
        """A new view whose elements are ``func(self[i])``."""
        if func is identity:
            return self
        if self._func is None:
            return SequenceView(self._source, func=func, shift=self._shift)
        inner = self._func
        return SequenceView(self._source, func=lambda v: func(inner(v)), shift=self._shift)

    def _element_fn(self) -> Callable[[float], float]:
        # Transform of a raw source value, shift included.
        shift, func = self._shift, self._func
        if func is None:
            return lambda v: v - shift
        return lambda v: func(v - shift)

    # ── sequence protocol ──────────────────────────────────────────────

    @property
    def source(self) -> np.ndarray:
        return self._source

    @property
    def shift(self) -> float:
        return self._shift

    @property
    def func(self) -> Optional[Callable[[float], float]]:
        return self._func

    @property
    def is_shift(self) -> bool:
        """True when the transform is the identity or subtract-constant."""
        return self._func is None

    def __len__(self) -> int:
        return self._source.shape[0]

    def __getitem__(self, i):
        i = operator.index(i)
        n = self._source.shape[0]
        if i < 0:
            i += n
        if not 0 <= i < n:
            raise IndexError(f"view index {i} out of range for length {n}")
        v = float(self._source[i]) - self._shift
        return v if self._func is None else self._func(v)

    def __iter__(self) -> Iterator[float]:
        shift, func = self._shift, self._func
        if func is None:
            for v in self._source:
                yield float(v) - shift
        else:
            for v in self._source:
                yield func(float(v) - shift)

    def __repr__(self) -> str:
        kind = "shift" if self.is_shift else "func"
        return f"SequenceView(n={len(self)}, {kind}, shift={self._shift!r})"


def as_view(seq) -> SequenceView:
    """Wrap any numeric sequence as an identity view; views pass through."""
    if isinstance(seq, SequenceView):
        return seq
    return SequenceView(seq)


def validate_pair(x, y) -> Tuple[SequenceView, SequenceView]:
    """Coerce correlation inputs to views of equal, non-zero length.

    Raises
    ------
    InvalidInputError
        On a length mismatch, an empty input, or a non-1-D input.
    """
    vx, vy = as_view(x), as_view(y)
    if len(vx) != len(vy):
        raise InvalidInputError(
            f"Length mismatch: x has {len(vx)} elements, y has {len(vy)}."
        )
    if len(vx) == 0:
        raise InvalidInputError("Correlation needs at least one element, got empty inputs.")
    return vx, vy
