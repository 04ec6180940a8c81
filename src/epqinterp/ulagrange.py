"""
Lagrange interpolation on uniformly spaced grids.

The table ``f`` is sampled at ``x0 + i * xinc``.  For each axis a window of
``order + 1`` consecutive samples centred on the query is selected and the
interpolating polynomial through them is evaluated with Neville's algorithm
in reduced (unit-spaced) coordinates.  Multi-dimensional tables are reduced
one axis at a time: the ``order + 1`` rows of the window along the first axis
are interpolated at the remaining coordinates, then the resulting values are
interpolated along the first axis.

Queries outside the grid extrapolate from the edge window.

All functions return ``(estimate, error_estimate)``.  The error estimate is
the last Neville correction of the outermost (first axis) interpolation;
inner error estimates are discarded.
"""

from typing import Sequence, Tuple

import numpy as np

from .errors import InvalidArgument
from .logger import get_logger
from .nrutils import as_table, check_order, dp, uniform_neville, window_start

log = get_logger(__name__)


def _reduce(f, x0, xinc, order, x) -> Tuple[float, float]:
    """Recursive worker; ``f`` is a float64 ndarray with ``f.ndim == len(x)``."""
    n = f.shape[0]
    if xinc[0] == 0.0:
        raise InvalidArgument("Interval spacing must be nonzero.")
    check_order(order, n)
    reduced = (x[0] - x0[0]) / xinc[0]
    if not np.isfinite(reduced):
        raise InvalidArgument(f"coordinate {x[0]} does not give a finite grid position")
    index0 = window_start(reduced, order, n)
    log.debug3("ulagrange: axis of %d points, window starts at %d", n, index0)

    if f.ndim == 1:
        window = np.ascontiguousarray(f[index0:index0 + order + 1])
        return uniform_neville(window, reduced - index0)

    values = np.empty(order + 1, dtype=dp)
    for i in range(order + 1):
        values[i] = _reduce(f[index0 + i], x0[1:], xinc[1:], order, x[1:])[0]
    origin = x0[0] + index0 * xinc[0]
    return uniform_neville(values, (x[0] - origin) / xinc[0])


def dn(f, x0: Sequence[float], xinc: Sequence[float], order: int, x: Sequence[float]):
    """
    Interpolate the ``N``-dimensional uniform table ``f`` at ``x``.

    Parameters
    ----------
    f : array_like
        Table of rank ``N``; ``f[i1, i2, ...]`` is the value at
        ``(x0[0] + i1*xinc[0], x0[1] + i2*xinc[1], ...)``.
    x0, xinc : sequence of float
        Origin and spacing per axis, at least ``N`` values each.
    order : int
        Interpolation order, ``1 <= order <= n - 1`` along every axis.
    x : sequence of float
        Query coordinates, at least ``N`` values.

    Returns
    -------
    (float, float)
        Estimate and error estimate.

    Raises
    ------
    InvalidArgument
        Zero spacing, bad order or coordinate arrays shorter than ``N``.
    """
    f = as_table(f, "f")
    rank = f.ndim
    if rank < 1:
        raise InvalidArgument("f must have at least one dimension")
    x0 = np.atleast_1d(np.asarray(x0, dtype=dp))
    xinc = np.atleast_1d(np.asarray(xinc, dtype=dp))
    x = np.atleast_1d(np.asarray(x, dtype=dp))
    if len(x0) < rank or len(xinc) < rank or len(x) < rank:
        raise InvalidArgument(
            f"Input array is too short: need {rank} values, got "
            f"x0={len(x0)}, xinc={len(xinc)}, x={len(x)}"
        )
    return _reduce(f, x0[:rank], xinc[:rank], int(order), x[:rank])


def _fixed_rank(f, rank):
    f = as_table(f, "f")
    if f.ndim != rank:
        raise InvalidArgument(f"f must be {rank}-dimensional, got {f.ndim} dimensions")
    return f


def d1(f, x0: float, xinc: float, order: int, x: float):
    """
    Interpolate the 1-D table ``f[i] = f(x0 + i*xinc)`` at ``x``.

    Returns ``(estimate, error_estimate)``.
    """
    return dn(_fixed_rank(f, 1), [x0], [xinc], order, [x])


def d2(f, x0, xinc, order, x):
    """2-D version of ``d1``; ``x0``, ``xinc`` and ``x`` are sequences."""
    return dn(_fixed_rank(f, 2), x0, xinc, order, x)


def d3(f, x0, xinc, order, x):
    """3-D version of ``d1``."""
    return dn(_fixed_rank(f, 3), x0, xinc, order, x)


def d4(f, x0, xinc, order, x):
    """4-D version of ``d1``."""
    return dn(_fixed_rank(f, 4), x0, xinc, order, x)
