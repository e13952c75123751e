"""
Compiled reduction kernels.

Every kernel takes a source array together with a scalar ``shift`` and
reads ``x[i] - shift`` on the fly, so a mean-subtracted sequence is never
materialized. All kernels release the GIL so the parallel reducer can run
them concurrently on worker threads.

No ``fastmath`` here: reassociation would cancel the two-sum residue.
"""

import math

from numba import njit


# --- Primitives ---

@njit(cache=True, nogil=True)
def two_sum(a, b):
    """Knuth's error-free transformation: a + b == s + err exactly.

    Mirrors ``summation.two_sum``; both must stay identical.
    """
    s = a + b
    if math.isinf(s):
        return s, 0.0
    bp = s - a
    err = (a - (s - bp)) + (b - bp)
    return s, err


# --- Single sums ---

@njit(cache=True, nogil=True)
def sum_naive(x, shift):
    total = 0.0
    for i in range(x.shape[0]):
        total += x[i] - shift
    return total


@njit(cache=True, nogil=True)
def sum_compensated(x, shift):
    """Returns (total, correction); the sum is total + correction."""
    total = 0.0
    correction = 0.0
    for i in range(x.shape[0]):
        total, err = two_sum(total, x[i] - shift)
        correction += err
    return total, correction


@njit(cache=True, nogil=True)
def dot_naive(a, shift_a, b, shift_b):
    total = 0.0
    for i in range(a.shape[0]):
        total += (a[i] - shift_a) * (b[i] - shift_b)
    return total


@njit(cache=True, nogil=True)
def dot_compensated(a, shift_a, b, shift_b):
    total = 0.0
    correction = 0.0
    for i in range(a.shape[0]):
        total, err = two_sum(total, (a[i] - shift_a) * (b[i] - shift_b))
        correction += err
    return total, correction


# --- Three-way products (x*x, x*y, y*y) ---

@njit(cache=True, nogil=True)
def three_way_naive(x, shift_x, y, shift_y):
    xx = 0.0
    xy = 0.0
    yy = 0.0
    for i in range(x.shape[0]):
        dx = x[i] - shift_x
        dy = y[i] - shift_y
        xx += dx * dx
        xy += dx * dy
        yy += dy * dy
    return xx, xy, yy


@njit(cache=True, nogil=True)
def three_way_compensated(x, shift_x, y, shift_y):
    """Returns (xx, c_xx, xy, c_xy, yy, c_yy) as (total, correction) pairs."""
    xx = 0.0
    xy = 0.0
    yy = 0.0
    c_xx = 0.0
    c_xy = 0.0
    c_yy = 0.0
    for i in range(x.shape[0]):
        dx = x[i] - shift_x
        dy = y[i] - shift_y
        xx, err = two_sum(xx, dx * dx)
        c_xx += err
        xy, err = two_sum(xy, dx * dy)
        c_xy += err
        yy, err = two_sum(yy, dy * dy)
        c_yy += err
    return xx, c_xx, xy, c_xy, yy, c_yy


# --- Raw moments for the one-pass algorithms ---

@njit(cache=True, nogil=True)
def raw_moments_naive(x, y):
    """Returns (sum_x, sum_y, sum_xx, sum_xy, sum_yy) of the raw values."""
    sx = 0.0
    sy = 0.0
    sxx = 0.0
    sxy = 0.0
    syy = 0.0
    for i in range(x.shape[0]):
        a = x[i]
        b = y[i]
        sx += a
        sy += b
        sxx += a * a
        sxy += a * b
        syy += b * b
    return sx, sy, sxx, sxy, syy


@njit(cache=True, nogil=True)
def raw_moments_compensated(x, y):
    sx = 0.0
    sy = 0.0
    sxx = 0.0
    sxy = 0.0
    syy = 0.0
    c_x = 0.0
    c_y = 0.0
    c_xx = 0.0
    c_xy = 0.0
    c_yy = 0.0
    for i in range(x.shape[0]):
        a = x[i]
        b = y[i]
        sx, err = two_sum(sx, a)
        c_x += err
        sy, err = two_sum(sy, b)
        c_y += err
        sxx, err = two_sum(sxx, a * a)
        c_xx += err
        sxy, err = two_sum(sxy, a * b)
        c_xy += err
        syy, err = two_sum(syy, b * b)
        c_yy += err
    return sx + c_x, sy + c_y, sxx + c_xx, sxy + c_xy, syy + c_yy
