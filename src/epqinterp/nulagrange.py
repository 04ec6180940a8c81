"""
Lagrange interpolation on non-uniform grids.

Sample abscissas may be unevenly spaced and may run in either direction, but
must be strictly monotonic.  For a query ``x`` the ``order + 1`` samples used
are found by bisection followed by widening toward whichever side keeps the
window tighter around ``x``; near the table edges the window is clamped, so
queries outside the table extrapolate.  Neville's algorithm is then run in
the true coordinates.

Multi-dimensional tables are reduced one axis at a time, as in ``ulagrange``.
All interpolating functions return ``(estimate, error_estimate)``.
"""

from typing import Sequence, Tuple

import numpy as np

from .errors import InvalidArgument
from .logger import get_logger
from .nrutils import as_table, as_vector, check_order, dp, locate_window, monotonic_direction
from .nrutils import neville as _neville_kernel

log = get_logger(__name__)


def check_monotonic(xsamp, name: str = "xsamp") -> int:
    """
    Verify that *xsamp* is strictly monotonic.

    Returns
    -------
    int
        +1 for ascending, -1 for descending abscissas.

    Raises
    ------
    InvalidArgument
        For fewer than two samples, repeated or non-monotonic abscissas.
    """
    xsamp = np.asarray(xsamp, dtype=dp)
    if xsamp.ndim != 1 or len(xsamp) < 2:
        raise InvalidArgument(f"{name} must be a 1-D array of at least two abscissas")
    sign, bad = monotonic_direction(xsamp)
    if bad >= 0:
        if xsamp[bad] == xsamp[bad - 1]:
            raise InvalidArgument(
                f"Identical x values (x = {xsamp[bad]}) in {name} at indices {bad - 1} and {bad}."
            )
        raise InvalidArgument(f"{name} is not monotonic at index {bad} (x = {xsamp[bad]}).")
    return sign


def locate(x: float, xsamp, order: int) -> Tuple[int, int]:
    """
    Choose the interpolation window for *x*.

    Returns
    -------
    (first, nearest)
        Index of the first of the ``order + 1`` window samples and index of
        the sample nearest *x*.
    """
    xsamp = np.ascontiguousarray(xsamp, dtype=dp)
    check_order(order, len(xsamp))
    first, nearest = locate_window(float(x), xsamp, int(order))
    log.debug3("nulagrange: x=%s window [%d, %d], nearest %d", x, first, first + order, nearest)
    return int(first), int(nearest)


def neville(f, xsamp, location: Tuple[int, int], order: int, x: float) -> Tuple[float, float]:
    """
    Neville's algorithm over the window ``location = (first, nearest)``.

    Raises
    ------
    InvalidArgument
        If two abscissas in the window are identical.
    """
    offset, nearest = location
    stop = offset + order + 1
    xa = np.ascontiguousarray(xsamp[offset:stop], dtype=dp)
    ya = np.ascontiguousarray(f[offset:stop], dtype=dp)
    y, dy, bad = _neville_kernel(xa, ya, nearest - offset, float(x))
    if bad >= 0:
        raise InvalidArgument(
            f"neville: Identical x values (x = {xa[bad]}) in interpolation table "
            f"near index {bad + offset}."
        )
    return y, dy


def _interp1(f, xsamp, order, x):
    if len(f) != len(xsamp):
        raise InvalidArgument(
            f"fsamp and xsamp are of different length {len(f)} {len(xsamp)}"
        )
    location = locate(x, xsamp, order)
    return neville(f, xsamp, location, order, x)


def _reduce(f, xsamp, order, x):
    """Recursive worker; ``f`` is a float64 ndarray with ``f.ndim == len(x)``."""
    xs = xsamp[0]
    if f.ndim == 1:
        return _interp1(f, xs, order, x[0])
    if len(xs) != f.shape[0]:
        raise InvalidArgument(
            f"axis has {len(xs)} abscissas but the table has {f.shape[0]} rows"
        )
    first, _ = locate(x[0], xs, order)
    values = np.empty(order + 1, dtype=dp)
    for i in range(order + 1):
        values[i] = _reduce(f[first + i], xsamp[1:], order, x[1:])[0]
    return _interp1(values, xs[first:first + order + 1], order, x[0])


def dn(f, xsamp: Sequence, order: int, x: Sequence[float]):
    """
    Interpolate the ``N``-dimensional table ``f`` at ``x``.

    Parameters
    ----------
    f : array_like
        Table of rank ``N``.
    xsamp : sequence of array_like
        Abscissas per axis; ``xsamp[k]`` has ``f.shape[k]`` strictly
        monotonic values.
    order : int
        Interpolation order, ``1 <= order <= n - 1`` along every axis.
    x : sequence of float
        Query coordinates, at least ``N`` values.

    Returns
    -------
    (float, float)
        Estimate and error estimate of the first-axis interpolation.
    """
    f = as_table(f, "f")
    rank = f.ndim
    if rank < 1:
        raise InvalidArgument("f must have at least one dimension")
    x = np.atleast_1d(np.asarray(x, dtype=dp))
    if len(x) < rank or len(xsamp) < rank:
        raise InvalidArgument(
            f"Input array is too short: need {rank} values, got x={len(x)}, xsamp={len(xsamp)}"
        )
    axes = [as_vector(xsamp[k], f"xsamp[{k}]") for k in range(rank)]
    return _reduce(f, axes, int(order), x[:rank])


def _fixed_rank(f, rank):
    f = as_table(f, "f")
    if f.ndim != rank:
        raise InvalidArgument(f"f must be {rank}-dimensional, got {f.ndim} dimensions")
    return f


def d1(fsamp, xsamp, order: int, x: float):
    """
    Interpolate ``fsamp[i] = f(xsamp[i])`` at ``x``.

    Returns ``(estimate, error_estimate)``.
    """
    return dn(_fixed_rank(fsamp, 1), [xsamp], order, [x])


def d2(f, xsamp, order, x):
    """2-D version of ``d1``; ``xsamp`` holds one abscissa array per axis."""
    return dn(_fixed_rank(f, 2), xsamp, order, x)


def d3(f, xsamp, order, x):
    """3-D version of ``d1``."""
    return dn(_fixed_rank(f, 3), xsamp, order, x)


def d4(f, xsamp, order, x):
    """4-D version of ``d1``."""
    return dn(_fixed_rank(f, 4), xsamp, order, x)
