"""
Interpolation tables.

Thin facades that hold a tabulated function together with its grid and
dispatch to the interpolation engine:

- ``RegularTable``        uniform grid, Lagrange interpolation (``ulagrange``)
- ``NonUniformTable``     arbitrary monotonic grid, Lagrange (``nulagrange``)
- ``RegularSplineTable``  uniform grid, cubic spline (``spliner``/``ndspline``)

The Lagrange tables extrapolate outside their domain; callers that must
avoid extrapolation should compare against ``domain`` first.  The spline
table raises ``OutOfRange`` instead.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from . import nulagrange, ulagrange
from .errors import InvalidArgument
from .logger import get_logger
from .ndspline import NDCubicSpline
from .nrutils import as_table, as_vector, dp
from .spliner import CubicSpline

log = get_logger(__name__)


class _Table:
    """Common bookkeeping: values, dimension, domain and range."""

    def __init__(self, values, name: str):
        self._values = as_table(values, "values")
        if self._values.ndim < 1:
            raise InvalidArgument("Table dimensions must be >= 1")
        self.name = name or type(self).__name__

    @property
    def dimension(self) -> int:
        return self._values.ndim

    @property
    def shape(self):
        return self._values.shape

    @property
    def range(self) -> Tuple[float, float]:
        """
        Smallest and largest tabulated value.

        Interpolated values can overshoot this range slightly.
        """
        return float(self._values.min()), float(self._values.max())

    def _check_point(self, xval) -> np.ndarray:
        xval = np.atleast_1d(np.asarray(xval, dtype=dp))
        if len(xval) < self.dimension:
            raise InvalidArgument(
                f"Attempt to interpolate {self.name} at x with {len(xval)} coordinates; "
                f"the table has {self.dimension} dimensions"
            )
        return xval[: self.dimension]


def _uniform_axes(xmin, xinc, shape):
    xmin = np.atleast_1d(np.asarray(xmin, dtype=dp))
    xinc = np.atleast_1d(np.asarray(xinc, dtype=dp))
    if len(xmin) < len(shape) or len(xinc) < len(shape):
        raise InvalidArgument(
            f"xmin and xinc need {len(shape)} values, got {len(xmin)} and {len(xinc)}"
        )
    if np.any(xinc[: len(shape)] == 0.0):
        raise InvalidArgument("Interval spacing must be nonzero.")
    return xmin[: len(shape)], xinc[: len(shape)]


class RegularTable(_Table):
    """
    Function tabulated at ``xmin[k] + i * xinc[k]`` along each axis.

    Parameters
    ----------
    xmin, xinc : float or sequence of float
        Origin and spacing per axis.
    values : array_like
        Table of any rank ``>= 1``.
    name : str, optional
        Label used in error messages.
    """

    def __init__(self, xmin, xinc, values, name: str = ""):
        super().__init__(values, name)
        self._xmin, self._xinc = _uniform_axes(xmin, xinc, self.shape)

    @property
    def domain(self) -> List[Tuple[float, float]]:
        out = []
        for lo, inc, n in zip(self._xmin, self._xinc, self.shape):
            hi = lo + (n - 1) * inc
            out.append((float(min(lo, hi)), float(max(lo, hi))))
        return out

    def interpolate(self, xval, order: int) -> float:
        """Lagrange estimate of order *order* at ``xval``."""
        xval = self._check_point(xval)
        return ulagrange.dn(self._values, self._xmin, self._xinc, order, xval)[0]


class NonUniformTable(_Table):
    """
    Function tabulated on a rectilinear grid with arbitrary spacing.

    Parameters
    ----------
    axes : sequence of array_like
        Strictly monotonic abscissas per axis (ascending or descending).
    values : array_like
        Table with ``values.shape[k] == len(axes[k])``.
    name : str, optional
        Label used in error messages.
    """

    def __init__(self, axes: Sequence, values, name: str = ""):
        super().__init__(values, name)
        if len(axes) != self.dimension:
            raise InvalidArgument(
                f"{self.name}: {len(axes)} axes given for a {self.dimension}-dimensional table"
            )
        self._axes = []
        for k, a in enumerate(axes):
            a = as_vector(a, f"axes[{k}]")
            if len(a) != self.shape[k]:
                raise InvalidArgument(
                    f"{self.name}: axis {k} has {len(a)} abscissas, table has {self.shape[k]}"
                )
            nulagrange.check_monotonic(a, f"axes[{k}]")
            self._axes.append(a)

    @property
    def axes(self):
        return [a.copy() for a in self._axes]

    @property
    def domain(self) -> List[Tuple[float, float]]:
        return [(float(min(a[0], a[-1])), float(max(a[0], a[-1]))) for a in self._axes]

    def interpolate(self, xval, order: int) -> float:
        """Lagrange estimate of order *order* at ``xval``; extrapolates outside ``domain``."""
        xval = self._check_point(xval)
        return nulagrange.dn(self._values, self._axes, order, xval)[0]


class RegularSplineTable(_Table):
    """
    Uniform-grid table interpolated by a (multi-dimensional) cubic spline.

    Parameters are those of ``RegularTable``; every axis needs at least
    three points.
    """

    def __init__(self, xmin, xinc, values, name: str = ""):
        super().__init__(values, name)
        self._xmin, self._xinc = _uniform_axes(xmin, xinc, self.shape)
        axes = [lo + inc * np.arange(n) for lo, inc, n in zip(self._xmin, self._xinc, self.shape)]
        if self.dimension == 1:
            self._spline = CubicSpline(axes[0], self._values, context=self.name)
        else:
            self._spline = NDCubicSpline(axes, self._values, context=self.name)
        log.debug("%s: %d-dimensional spline table, shape %s", self.name, self.dimension, self.shape)

    @property
    def domain(self) -> List[Tuple[float, float]]:
        if self.dimension == 1:
            return [self._spline.limits]
        return self._spline.limits

    def interpolate(self, xval) -> float:
        """Spline value at ``xval``; ``OutOfRange`` outside ``domain``."""
        xval = self._check_point(xval)
        return self._spline.interpolate(*xval)
