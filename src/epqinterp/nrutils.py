"""
Numerical Recipes style kernels shared by the spline and Lagrange families.

Every routine here is a Numba ``njit`` kernel working on contiguous float64
arrays.  Kernels never raise: they report degenerate input through their
return values and the Python layer (``spliner``, ``ulagrange``,
``nulagrange``) turns those into ``epqinterp.errors`` exceptions with context.

Kernels
-------
bracket                    bisection for the spline interval ``[klo, klo+1]``
spline_second_derivatives  tridiagonal solve for natural / clamped splines
cubic_eval                 cubic spline formula with supplied second derivatives
locate_window              non-uniform Lagrange window selection
neville                    Neville's algorithm in true coordinates
uniform_neville            Neville's algorithm on a unit-spaced grid
"""

from typing import Tuple

import numpy as np
from numba import njit
from numpy.typing import NDArray

from .errors import InvalidArgument

dp = np.float64


# ===================================================================
#  Array helpers
# ===================================================================

def as_vector(values, name: str = "array") -> NDArray[np.float64]:
    """
    Return *values* as a fresh contiguous 1-D float64 array.

    Raises
    ------
    InvalidArgument
        If *values* is not one-dimensional.
    """
    arr = np.array(values, dtype=dp, copy=True)
    if arr.ndim != 1:
        raise InvalidArgument(f"{name} must be one-dimensional, got shape {arr.shape}")
    return np.ascontiguousarray(arr)


def as_table(values, name: str = "table") -> NDArray[np.float64]:
    """Return *values* as a fresh contiguous float64 array of any rank."""
    try:
        arr = np.array(values, dtype=dp, copy=True)
    except ValueError as exc:
        # ragged nested sequences
        raise InvalidArgument(f"{name} must be a rectangular array: {exc}") from exc
    return np.ascontiguousarray(arr)


# ===================================================================
#  Cubic spline kernels
# ===================================================================

@njit(cache=True)
def bracket(xa, x):
    """
    Bisection search for the spline interval containing *x*.

    Returns ``klo`` such that ``xa[klo] <= x <= xa[klo+1]`` for ascending
    *xa*; the upper index is always ``klo + 1``.
    """
    klo = 0
    khi = len(xa) - 1
    while khi - klo > 1:
        k = (khi + klo) >> 1
        if xa[k] > x:
            khi = k
        else:
            klo = k
    return klo


@njit(cache=True)
def spline_second_derivatives(x, y, yp1, ypn):
    """
    Second derivatives of the interpolating cubic spline through ``(x, y)``.

    A NaN end slope selects the natural condition (zero second derivative)
    at that end; a finite value clamps the first derivative.  The
    tridiagonal system is solved by forward elimination and back
    substitution in O(n).

    Returns
    -------
    (y2, bad)
        ``bad`` is -1, or the index ``i`` of the first zero-width interval
        ``x[i] == x[i+1]``; ``y2`` is then all zeros.
    """
    n = len(x)
    y2 = np.zeros(n)
    for i in range(n - 1):
        if x[i + 1] == x[i]:
            return y2, i
    u = np.zeros(n)

    if not np.isnan(yp1):
        y2[0] = -0.5
        u[0] = (3.0 / (x[1] - x[0])) * ((y[1] - y[0]) / (x[1] - x[0]) - yp1)

    for i in range(1, n - 1):
        sig = (x[i] - x[i - 1]) / (x[i + 1] - x[i - 1])
        p = sig * y2[i - 1] + 2.0
        y2[i] = (sig - 1.0) / p
        u[i] = (y[i + 1] - y[i]) / (x[i + 1] - x[i]) - (y[i] - y[i - 1]) / (x[i] - x[i - 1])
        u[i] = (6.0 * u[i] / (x[i + 1] - x[i - 1]) - sig * u[i - 1]) / p

    qn = 0.0
    un = 0.0
    if not np.isnan(ypn):
        qn = 0.5
        un = (3.0 / (x[n - 1] - x[n - 2])) * (ypn - (y[n - 1] - y[n - 2]) / (x[n - 1] - x[n - 2]))

    y2[n - 1] = (un - qn * u[n - 2]) / (qn * y2[n - 2] + 1.0)
    for k in range(n - 2, -1, -1):
        y2[k] = y2[k] * y2[k + 1] + u[k]
    return y2, -1


@njit(cache=True)
def cubic_eval(x, y, y2, xx):
    """
    Evaluate the cubic spline ``(x, y, y2)`` at *xx*.

    Returns
    -------
    (value, klo, ok)
        ``ok`` is False when the bracket ``[klo, klo+1]`` has zero width;
        ``value`` is then NaN.
    """
    klo = bracket(x, xx)
    khi = klo + 1
    h = x[khi] - x[klo]
    if h == 0.0:
        return np.nan, klo, False
    a = (x[khi] - xx) / h
    b = (xx - x[klo]) / h
    yy = (a * y[klo] + b * y[khi]
          + ((a * a * a - a) * y2[klo] + (b * b * b - b) * y2[khi]) * (h * h) / 6.0)
    return yy, klo, True


# ===================================================================
#  Lagrange (Neville) kernels
# ===================================================================

@njit(cache=True)
def locate_window(x, xsamp, order):
    """
    Select the ``order + 1`` table points used to interpolate at *x*.

    *xsamp* may be ascending or descending.  Bisection finds the bracketing
    pair, then the window is widened one point at a time on the side whose
    next point lies closer to the bracket, until it holds ``order + 1``
    points or touches a table edge.  Outside the table the window is
    clamped to the edge, which makes the caller extrapolate.

    Returns
    -------
    (first, nearest)
        Index of the first window point and of the sample nearest *x*.
    """
    lowlim = -1
    uplim = len(xsamp)
    maxindex = uplim - 1
    ascending = xsamp[maxindex] > xsamp[0]
    while uplim - lowlim > 1:
        midpoint = (uplim + lowlim) >> 1
        if (x > xsamp[midpoint]) == ascending:
            lowlim = midpoint
        else:
            uplim = midpoint
    if lowlim < 0:
        return 0, 0
    elif uplim > maxindex:
        return maxindex - order, maxindex

    if ascending:
        if x - xsamp[lowlim] <= xsamp[uplim] - x:
            nindex = lowlim
        else:
            nindex = uplim
    elif xsamp[lowlim] - x <= x - xsamp[uplim]:
        nindex = lowlim
    else:
        nindex = uplim

    first = lowlim
    last = uplim
    while last - first < order and first > 0 and last < maxindex:
        if ((xsamp[lowlim] - xsamp[first - 1]) + xsamp[uplim] - xsamp[last + 1] >= 0) == ascending:
            last += 1
        else:
            first -= 1
    if last >= maxindex:
        return maxindex - order, nindex
    elif first <= 0:
        return 0, nindex
    return first, nindex


@njit(cache=True)
def neville(xa, ya, ns, x):
    """
    Neville's algorithm through the points ``(xa, ya)``.

    Parameters
    ----------
    xa, ya : ndarray
        Window abscissas and ordinates, ``order + 1`` each.
    ns : int
        Index within the window of the point nearest *x*.
    x : float
        Evaluation point.

    Returns
    -------
    (y, dy, bad)
        Estimate, error estimate (last correction added) and, when two
        window abscissas coincide, the window index ``bad >= 0`` at which
        the zero denominator appeared (``-1`` otherwise).
    """
    n = len(xa)
    order = n - 1
    c = ya.copy()
    d = ya.copy()
    y = c[ns]
    ns -= 1
    dy = 0.0
    for m in range(1, order + 1):
        for i in range(0, order - m + 1):
            ho = xa[i] - x
            hp = xa[i + m] - x
            w = c[i + 1] - d[i]
            den = ho - hp
            if den == 0.0:
                return np.nan, np.nan, i
            den = w / den
            d[i] = hp * den
            c[i] = ho * den
        if 2 * ns < order - 1 - m:
            dy = c[ns + 1]
        else:
            dy = d[ns]
            ns -= 1
        y += dy
    return y, dy, -1


@njit(cache=True)
def uniform_neville(ya, x):
    """
    Neville's algorithm on the unit grid ``0, 1, ..., len(ya) - 1``.

    *x* is the reduced coordinate relative to the first window point.
    Returns ``(y, dy)``.
    """
    order = len(ya) - 1
    ns = int(np.floor(x + 0.5))
    if ns < 0:
        ns = 0
    elif ns > order:
        ns = order
    c = ya.copy()
    d = ya.copy()
    y = c[ns]
    ns -= 1
    dy = 0.0
    for m in range(1, order + 1):
        for i in range(0, order - m + 1):
            ho = i - x
            hp = (i + m) - x
            w = c[i + 1] - d[i]
            d[i] = -hp * w / m
            c[i] = -ho * w / m
        if 2 * ns < order - 1 - m:
            dy = c[ns + 1]
        else:
            dy = d[ns]
            ns -= 1
        y += dy
    return y, dy


def window_start(reduced: float, order: int, n: int) -> int:
    """
    First index of a uniform-grid window of ``order + 1`` points centred on
    the reduced coordinate, clamped to ``[0, n - order - 1]``.

    ``int()`` truncates toward zero, so reduced coordinates in ``(-1, 0)``
    start the window at the first point like those in ``[0, 1)``.
    """
    index0 = int(reduced) - order // 2
    if index0 < 0:
        return 0
    if index0 > n - order - 1:
        return n - order - 1
    return index0


def check_order(order: int, n: int) -> None:
    """Raise ``InvalidArgument`` unless ``1 <= order <= n - 1``."""
    if order < 1 or n < order + 1:
        raise InvalidArgument(
            f"0 < order <= table.length-1 is required (order={order}, length={n})."
        )


def monotonic_direction(xsamp) -> Tuple[int, int]:
    """
    Return ``(sign, bad_index)`` for the abscissa sequence *xsamp*.

    ``sign`` is +1 for strictly ascending and -1 for strictly descending
    data.  ``bad_index`` is -1 for a valid sequence, otherwise the index of
    the first sample that repeats (sign 0) or reverses the direction.
    """
    steps = np.sign(np.diff(np.asarray(xsamp, dtype=dp)))
    if steps.size == 0:
        return 0, 0
    sign = int(steps[0])
    if sign == 0:
        return 0, 1
    bad = np.nonzero(steps != sign)[0]
    if bad.size:
        return sign, int(bad[0]) + 1
    return sign, -1
