"""
Fork-join parallel reduction.

The index range ``[0, n)`` is cut into contiguous, non-overlapping chunks.
Each chunk is reduced on a worker thread by an ordinary sequential
reducer, and the partial states are combined in index order after a single
join. For a fixed partition count the result is bit-for-bit reproducible;
different partition counts may differ within the inner strategy's error
bound.

The compiled kernels release the GIL, so chunks over shift views run truly
concurrently. Views with an arbitrary Python transform still work, but
gain nothing from extra threads.

Example
-------
>>> from openpcc.correlation import SequenceView, mean
>>> from openpcc.correlation.parallel import ParallelReducer
>>> vx = SequenceView.shifted(x, mean(x))
>>> vy = SequenceView.shifted(y, mean(y))
>>> reducer = ParallelReducer("compensated", workers=4)
>>> sum_xx, sum_xy, sum_yy = reducer.reduce(vx, vy)
"""

from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from numbers import Integral
from typing import List, Optional, Tuple, Union

from ..core.exceptions import ConfigurationError, InvalidInputError, ParallelReductionError
from ..utils.logging import get_logger
from .config import default_workers
from .reducers import ThreeWayReducer, get_reducer


def partition(n: int, parts: int) -> List[Tuple[int, int]]:
    """Split ``[0, n)`` into ``min(parts, n)`` contiguous ``(start, stop)`` chunks.

    Chunk sizes differ by at most one; the first ``n % parts`` chunks take
    the extra element. An empty range yields no chunks.
    """
    if n < 0:
        raise InvalidInputError(f"n must be non-negative, got {n}.")
    if parts < 1:
        raise ConfigurationError(f"parts must be >= 1, got {parts}.")
    if n == 0:
        return []

    parts = min(parts, n)
    base, extra = divmod(n, parts)
    bounds = []
    start = 0
    for k in range(parts):
        stop = start + base + (1 if k < extra else 0)
        bounds.append((start, stop))
        start = stop
    return bounds


def _positive_or_none(name: str, value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Integral) or value < 1:
        raise ConfigurationError(f"{name} must be a positive integer or None, got {value!r}.")
    return int(value)


class ParallelReducer(ThreeWayReducer):
    """Three-way reducer that fans chunks out to a thread pool.

    Parameters
    ----------
    inner : str or ThreeWayReducer
        Strategy applied to every chunk. ``"compensated"`` (default)
        combines partials by accumulator merge; ``"naive"`` by plain
        elementwise addition.
    workers : int, optional
        Size of the worker pool. Defaults to the CPU count.
    partitions : int, optional
        Number of chunks. Defaults to ``workers``.
    """

    name = "parallel"

    def __init__(
            self,
            inner: Union[str, ThreeWayReducer] = "compensated",
            workers: Optional[int] = None,
            partitions: Optional[int] = None,
    ):
        if isinstance(inner, str):
            inner = get_reducer(inner)
        if isinstance(inner, ParallelReducer):
            raise ConfigurationError("ParallelReducer cannot nest another ParallelReducer.")
        self.inner = inner

        workers = _positive_or_none("workers", workers)
        partitions = _positive_or_none("partitions", partitions)
        self.workers = workers if workers is not None else default_workers()
        self.partitions = partitions if partitions is not None else self.workers

        self.logger = get_logger("openpcc.parallel")

    def accumulate(self, view_x, view_y, start, stop):
        chunks = [(start + a, start + b) for a, b in partition(stop - start, self.partitions)]
        partials = self._fork_join(view_x, view_y, chunks)
        return self.inner.combine(partials)

    def combine(self, partials):
        return self.inner.combine(partials)

    def finalize(self, state):
        return self.inner.finalize(state)

    def _fork_join(self, view_x, view_y, chunks) -> list:
        """Partial states of every chunk, in chunk order. Fails fast."""
        if not chunks:
            return []

        n_threads = min(self.workers, len(chunks))
        self.logger.debug(
            f"Reducing n={chunks[-1][1] - chunks[0][0]} in {len(chunks)} chunks "
            f"on {n_threads} threads (inner={self.inner.name})"
        )

        with ThreadPoolExecutor(max_workers=n_threads, thread_name_prefix="openpcc-reduce") as pool:
            futures = [
                pool.submit(self.inner.accumulate, view_x, view_y, a, b) for a, b in chunks
            ]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)

            if any(f.exception() is not None for f in done):
                # Drop queued chunks, then let running ones drain before reporting.
                pool.shutdown(wait=True, cancel_futures=True)
                failures = [
                    (i, f.exception()) for i, f in enumerate(futures)
                    if not f.cancelled() and f.exception() is not None
                ]
                for i, exc in failures:
                    a, b = chunks[i]
                    self.logger.error(f"Chunk {i} [{a}, {b}) failed: {exc!r}")
                raise ParallelReductionError(
                    f"Parallel reduction aborted: {len(failures)} of {len(chunks)} chunks failed.",
                    failures,
                ) from failures[0][1]

            # Barrier passed: every future is done.
            return [f.result() for f in futures]

    def __repr__(self) -> str:
        return (
            f"ParallelReducer(inner='{self.inner.name}', "
            f"workers={self.workers}, partitions={self.partitions})"
        )
