"""
One-dimensional cubic spline interpolation.

This module provides the ``CubicSpline`` class, which owns an ``(x, y)``
table, sorts it, repairs duplicate abscissas, solves for the spline second
derivatives and evaluates the spline by bisection plus the standard cubic
formula (Numerical Recipes ``spline``/``splint``).  It also provides the
free functions ``spline2`` and ``evaluate`` for callers that manage the
second-derivative arrays themselves, as the multi-dimensional splines do.

Splines never extrapolate: a query outside ``[x_min, x_max]`` raises
``OutOfRange``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import DegenerateData, InvalidArgument, OutOfRange
from .logger import context_logger
from .nrutils import as_vector, cubic_eval, dp, spline_second_derivatives
from .settings import AVERAGE, DUPLICATE_POLICIES, get_settings

MIN_POINTS = 3


@dataclass(frozen=True, slots=True)
class BoundaryCondition:
    """
    End conditions of a cubic spline.

    ``yp0`` and ``ypn`` are the prescribed first derivatives at the first and
    last knot.  NaN at an end means *natural* there (zero second
    derivative).
    """

    yp0: float = math.nan
    ypn: float = math.nan

    @classmethod
    def natural(cls) -> "BoundaryCondition":
        return cls()

    @classmethod
    def clamped(cls, yp0: float, ypn: float) -> "BoundaryCondition":
        return cls(float(yp0), float(ypn))

    @property
    def is_natural(self) -> bool:
        return math.isnan(self.yp0) and math.isnan(self.ypn)


NATURAL = BoundaryCondition()


#######################################################################
# Free functions (caller-managed second derivatives)
#######################################################################

def spline2(x, y, y2, yp1=math.nan, ypn=math.nan):
    """
    Compute the second derivatives of the cubic spline through ``(x, y)``.

    Parameters
    ----------
    x : ndarray
        X-coordinates, 1D array, must be in ascending order
    y : ndarray
        Function values at x coordinates, 1D array
    y2 : ndarray
        Output array for second derivatives, shape (len(x)),
        modified in-place
    yp1, ypn : float, optional
        First derivatives at the ends; NaN (default) gives a natural end.

    Raises
    ------
    InvalidArgument
        If the lengths differ or x is not in ascending order.
    DegenerateData
        If two consecutive abscissas are equal.

    Notes
    -----
    The spline can be evaluated using evaluate.
    """
    x = np.ascontiguousarray(x, dtype=dp)
    y = np.ascontiguousarray(y, dtype=dp)
    if len(x) != len(y) or len(x) != len(y2):
        raise InvalidArgument("array lengths are not all equal")
    if len(x) < 2:
        raise InvalidArgument("Not enough points to spline.")
    if np.any(np.diff(x) < 0.0):
        raise InvalidArgument("x must be in ascending order")
    d2y, bad = spline_second_derivatives(x, y, float(yp1), float(ypn))
    if bad >= 0:
        raise DegenerateData(bad, bad + 1, x[bad])
    y2[:] = d2y


def evaluate(x0, x, y, y2):
    """
    Evaluate the cubic spline using pre-computed second derivatives.

    No range check is made; the end intervals are used for points outside
    the table.

    Parameters
    ----------
    x0 : float
        Position to interpolate
    x : ndarray
        X-coordinates used to compute spline, 1D array, ascending
    y : ndarray
        Function values at x coordinates, 1D array
    y2 : ndarray
        Second derivatives, e.g. from spline2 or CubicSpline.get_deriv

    Returns
    -------
    float
        Interpolated value at x0

    Raises
    ------
    InvalidArgument
        If the three arrays differ in length.
    DegenerateData
        If the bracketing interval has zero width.
    """
    if len(x) != len(y) or len(x) != len(y2):
        raise InvalidArgument("array lengths are not all equal")
    if len(x) < 2:
        raise InvalidArgument("Not enough points to evaluate a spline.")
    x = np.ascontiguousarray(x, dtype=dp)
    value, klo, ok = cubic_eval(
        x, np.ascontiguousarray(y, dtype=dp), np.ascontiguousarray(y2, dtype=dp), float(x0)
    )
    if not ok:
        raise DegenerateData(klo, klo + 1, x[klo])
    return value


#######################################################################
# CubicSpline
#######################################################################

class CubicSpline:
    """
    Natural (or clamped) cubic spline through a table ``y = f(x)``.

    Parameters
    ----------
    x, y : array_like
        Abscissas and ordinates, same length, at least 3 points.  The
        abscissas need not be sorted.
    boundary : BoundaryCondition, optional
        End conditions, natural by default.
    duplicates : {"separate", "average"}, optional
        How identical abscissas with different ordinates are repaired.
        Defaults to the module settings (``"separate"``).
    context : str, optional
        Label prefixed to log records, used by the multi-dimensional
        splines to identify the slice a record came from.
    """

    def __init__(self, x, y, boundary=None, duplicates=None, context=""):
        x = as_vector(x, "x")
        y = as_vector(y, "y")
        if len(x) != len(y):
            raise InvalidArgument(f"Arrays x and y are of different length {len(x)} {len(y)}")
        if len(x) < MIN_POINTS:
            raise InvalidArgument("A minimum of three data points is needed")

        settings = get_settings()
        policy = duplicates if duplicates is not None else settings.duplicate_policy
        if policy not in DUPLICATE_POLICIES:
            raise InvalidArgument(f"duplicates must be one of {DUPLICATE_POLICIES}, got {policy!r}")

        self._n_original = len(x)
        self._policy = policy
        self._separation_fraction = settings.separation_fraction
        self._boundary = boundary if boundary is not None else NATURAL
        self.context = context
        self._loaded = True
        self._load(x, y)

    # ------------------------------------------------------------------
    # placeholders
    # ------------------------------------------------------------------
    @classmethod
    def zero(cls, n: int, context: str = "") -> "CubicSpline":
        """
        Return an ``n``-point spline with all values zero.

        The placeholder must be filled by ``reset_data`` before it can be
        interpolated.
        """
        if n < MIN_POINTS:
            raise InvalidArgument("A minimum of three data points is needed")
        spline = cls(np.arange(n, dtype=dp), np.zeros(n), context=context)
        spline._loaded = False
        return spline

    @classmethod
    def one_d_array(cls, n: int, m: int) -> list:
        """Return a list of ``n`` placeholder splines of ``m`` points each."""
        if m < MIN_POINTS:
            raise InvalidArgument("A minimum of three data points is needed")
        return [cls.zero(m) for _ in range(n)]

    # ------------------------------------------------------------------
    # data handling
    # ------------------------------------------------------------------
    def _load(self, x, y):
        order = np.argsort(x, kind="stable")
        self._sorted = (x[order], y[order], order)
        self._x, self._y, self._indices = self._sorted
        self._x_min = float(self._x[0])
        self._x_max = float(self._x[-1])
        self._range = self._x_max - self._x_min
        self._d2y = None
        self._checked = False

    def reset_data(self, x, y) -> None:
        """
        Replace the table in place.

        The new arrays must have the length the spline was constructed
        with.  The data are re-sorted, the duplicate check is re-armed and
        the cached second derivatives are discarded.
        """
        x = as_vector(x, "x")
        y = as_vector(y, "y")
        if len(x) != len(y):
            raise InvalidArgument("Arrays x and y are of different length")
        if len(x) != self._n_original:
            raise InvalidArgument("Original array length not matched by new array length")
        self._loaded = True
        self._load(x, y)

    def average_identical_abscissae(self) -> None:
        """Average, rather than separate, identical abscissas with different ordinates."""
        self._policy = AVERAGE
        self._checked = False
        self._d2y = None

    @property
    def duplicate_policy(self) -> str:
        return self._policy

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------
    @property
    def x(self):
        """Sorted, repaired abscissas (read-only view)."""
        self._ensure_checked()
        view = self._x.view()
        view.flags.writeable = False
        return view

    @property
    def y(self):
        """Ordinates matching ``x`` (read-only view)."""
        self._ensure_checked()
        view = self._y.view()
        view.flags.writeable = False
        return view

    @property
    def n_points(self) -> int:
        """Number of points after duplicate repair."""
        self._ensure_checked()
        return len(self._x)

    @property
    def x_min(self) -> float:
        return self._x_min

    @property
    def x_max(self) -> float:
        return self._x_max

    @property
    def limits(self):
        """``(x_min, x_max)`` of the table as loaded; the domain of ``interpolate``."""
        return self._x_min, self._x_max

    @property
    def boundary(self) -> BoundaryCondition:
        return self._boundary

    @property
    def context(self) -> str:
        """Label prefixed to this spline's log records."""
        return self._context

    @context.setter
    def context(self, value: str) -> None:
        self._context = value
        self._log = context_logger(__name__, value)

    # ------------------------------------------------------------------
    # boundary conditions and derivative cache
    # ------------------------------------------------------------------
    def set_derivative_limits(self, yp0: float, ypn: float) -> None:
        """Clamp the first derivatives at the end points (overrides natural)."""
        self._boundary = BoundaryCondition.clamped(yp0, ypn)
        self._d2y = None

    def reset_to_natural(self) -> None:
        """Return to natural end conditions."""
        self._boundary = NATURAL
        self._d2y = None

    def calc_deriv(self):
        """Solve for and cache the second derivatives; returns them."""
        self._ensure_checked()
        self._log.debug2("CubicSpline: solving for %d second derivatives", len(self._x))
        d2y, bad = spline_second_derivatives(
            self._x, self._y, self._boundary.yp0, self._boundary.ypn
        )
        if bad >= 0:
            raise DegenerateData(bad, bad + 1, self._x[bad], self.context)
        self._d2y = d2y
        return d2y

    def get_deriv(self):
        """Return the second derivatives, computing them if necessary."""
        if self._d2y is None:
            self.calc_deriv()
        return self._d2y

    def set_deriv(self, d2y) -> None:
        """Install externally computed second derivatives."""
        self._ensure_checked()
        d2y = as_vector(d2y, "d2y")
        if len(d2y) != len(self._x):
            raise InvalidArgument(
                f"derivative array has {len(d2y)} values, table has {len(self._x)} points"
            )
        self._d2y = d2y

    @property
    def has_deriv(self) -> bool:
        return self._d2y is not None

    # ------------------------------------------------------------------
    # duplicate abscissa repair
    # ------------------------------------------------------------------
    def _ensure_checked(self) -> None:
        if not self._checked:
            self.check_for_identical_points()

    def check_for_identical_points(self) -> None:
        """
        Remove or repair points that share an abscissa.

        Identical points keep only the first copy.  Points with equal
        abscissas but different ordinates are averaged or separated,
        depending on the duplicate policy.  Separation moves the pair apart
        by ``separation_fraction`` of the abscissa range (less when a
        neighbour is closer) and decides which ordinate goes left from the
        trend of the neighbouring ordinates.  Repairs are logged, never
        raised.
        """
        x, y, idx = (a.copy() for a in self._sorted)
        n = len(x)
        if np.all(np.diff(x) > 0.0):
            self._x, self._y, self._indices = x, y, idx
            self._checked = True
            self._d2y = None
            return

        ii = 0
        while ii < n - 1:
            jj = ii + 1
            while jj < n:
                if x[ii] == x[jj]:
                    if y[ii] == y[jj]:
                        self._log.warning(
                            "CubicSpline: two identical points, %s, %s, in data array at "
                            "indices %d and %d, latter point removed",
                            x[ii], y[ii], idx[ii], idx[jj],
                        )
                        x, y, idx = np.delete(x, jj), np.delete(y, jj), np.delete(idx, jj)
                        n -= 1
                    elif self._policy == AVERAGE:
                        self._log.warning(
                            "CubicSpline: two identical abscissae with different ordinates, "
                            "%s: %s, %s, average of the ordinates taken",
                            x[ii], y[ii], y[jj],
                        )
                        y[ii] = (y[ii] + y[jj]) / 2.0
                        x, y, idx = np.delete(x, jj), np.delete(y, jj), np.delete(idx, jj)
                        n -= 1
                    else:
                        sepn = self._separate(x, y, idx, ii, jj, n)
                        self._log.warning(
                            "CubicSpline: two identical abscissae with different ordinates, "
                            "%s: %s, %s, the two abscissae have been separated by a distance %s",
                            (x[ii] + x[jj]) / 2.0, y[ii], y[jj], sepn,
                        )
                        jj += 1
                    if n - 1 == ii:
                        break
                elif x[jj] > x[ii]:
                    break
                else:
                    jj += 1
            ii += 1

        if n > 1 and np.any(np.diff(x) < 0.0):
            # runs of three or more equal abscissas can leave the repaired
            # points out of order
            order = np.argsort(x, kind="stable")
            x, y, idx = x[order], y[order], idx[order]
            self._log.debug("CubicSpline: repaired abscissae re-sorted")

        self._x = np.ascontiguousarray(x)
        self._y = np.ascontiguousarray(y)
        self._indices = idx
        self._checked = True
        self._d2y = None

    def _separate(self, x, y, idx, ii, jj, n) -> float:
        """Move the pair ``ii``, ``jj`` apart; returns the separation applied."""
        sepn = self._range * self._separation_fraction
        moved = False
        if n < 3:
            self._stay(x, ii, jj, sepn)
            return sepn

        if ii == 0:
            if x[2] - x[1] <= sepn:
                sepn = (x[2] - x[1]) / 2.0
            if y[0] > y[1]:
                if y[1] > y[2]:
                    moved = self._stay(x, ii, jj, sepn)
                else:
                    moved = self._swap(x, y, idx, ii, jj, sepn)
            elif y[2] <= y[1]:
                moved = self._swap(x, y, idx, ii, jj, sepn)
            else:
                moved = self._stay(x, ii, jj, sepn)

        if jj == n - 1:
            if x[n - 2] - x[n - 3] <= sepn:
                sepn = (x[n - 2] - x[n - 3]) / 2.0
            if y[ii] <= y[jj]:
                if y[ii - 1] <= y[ii]:
                    moved = self._stay(x, ii, jj, sepn)
                else:
                    moved = self._swap(x, y, idx, ii, jj, sepn)
            elif y[ii - 1] <= y[ii]:
                moved = self._swap(x, y, idx, ii, jj, sepn)
            else:
                moved = self._stay(x, ii, jj, sepn)

        if ii != 0 and jj != n - 1:
            if x[ii] - x[ii - 1] <= sepn:
                sepn = (x[ii] - x[ii - 1]) / 2.0
            if x[jj + 1] - x[jj] <= sepn:
                sepn = (x[jj + 1] - x[jj]) / 2.0
            if y[ii] > y[ii - 1]:
                if y[jj] > y[ii]:
                    if y[jj] > y[jj + 1]:
                        if y[ii - 1] <= y[jj + 1]:
                            moved = self._stay(x, ii, jj, sepn)
                        else:
                            moved = self._swap(x, y, idx, ii, jj, sepn)
                    else:
                        moved = self._stay(x, ii, jj, sepn)
                elif y[jj + 1] > y[jj]:
                    if y[jj + 1] > y[ii - 1]:
                        moved = self._stay(x, ii, jj, sepn)
                else:
                    moved = self._swap(x, y, idx, ii, jj, sepn)
            elif y[jj] > y[ii]:
                if y[jj + 1] > y[jj]:
                    moved = self._stay(x, ii, jj, sepn)
            elif y[jj + 1] > y[ii - 1]:
                moved = self._stay(x, ii, jj, sepn)
            else:
                moved = self._swap(x, y, idx, ii, jj, sepn)

        if not moved:
            self._stay(x, ii, jj, sepn)
        return sepn

    @staticmethod
    def _stay(x, ii, jj, sepn) -> bool:
        # the pair keeps its ordinate order: ii goes left, jj goes right
        centre = x[ii]
        x[ii] = centre - sepn / 2.0
        x[jj] = centre + sepn / 2.0
        return True

    @staticmethod
    def _swap(x, y, idx, ii, jj, sepn) -> bool:
        # the ordinates trade places before the pair is pulled apart
        centre = x[ii]
        x[ii] = centre - sepn / 2.0
        x[jj] = centre + sepn / 2.0
        y[ii], y[jj] = y[jj], y[ii]
        idx[ii], idx[jj] = idx[jj], idx[ii]
        return True

    # ------------------------------------------------------------------
    # evaluation
    # ------------------------------------------------------------------
    def interpolate(self, xx: float) -> float:
        """
        Return the spline value at *xx*.

        Raises
        ------
        OutOfRange
            If *xx* lies outside ``limits``, the abscissa range as loaded.
            Separating an end pair can push a repaired abscissa slightly
            past it; that margin is not part of the domain.
        DegenerateData
            If the bracketing interval has zero width.
        """
        if not self._loaded:
            raise InvalidArgument(f"{self.context or 'CubicSpline'} has no data; call reset_data first")
        self._ensure_checked()
        x = self._x
        xx = float(xx)
        if not (self._x_min <= xx <= self._x_max):
            raise OutOfRange(xx, self._x_min, self._x_max, self.context)
        if len(x) < 2:
            raise DegenerateData(0, 0, x[0], self.context)
        if self._d2y is None:
            self.calc_deriv()
        value, klo, ok = cubic_eval(x, self._y, self._d2y, xx)
        if not ok:
            raise DegenerateData(klo, klo + 1, x[klo], self.context)
        return value

    __call__ = interpolate

    def __repr__(self):
        return (f"CubicSpline(n={self._n_original}, limits=({self._x_min}, {self._x_max}), "
                f"boundary={self._boundary})")
