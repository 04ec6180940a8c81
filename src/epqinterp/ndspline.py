"""
Multi-dimensional cubic splines.

``NDCubicSpline`` interpolates a function tabulated on a rectilinear grid of
any dimension ``k >= 2`` by recursive one-dimensional reduction.  A node of
dimension ``k`` holds one child per point of its first axis, each child a
spline of dimension ``k - 1`` over the remaining axes (a ``CubicSpline`` when
``k - 1 == 1``).  To evaluate, every child is evaluated at the inner
coordinates and the resulting ``n1`` samples are splined along the first axis
by the node's *collapse* spline.

The second derivatives of the children depend only on the table, so they are
computed once and kept in a ``DerivativeCache``.  By default each node owns
its cache; a caller may hold its own cache and pass it with ``cache=`` to
share or persist it.

``BiCubicSpline``, ``TriCubicSpline`` and ``QuadriCubicSpline`` fix the
dimension and give the positional signatures ``interpolate(x1, x2[, x3[, x4]])``.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .errors import InvalidArgument
from .logger import get_logger
from .nrutils import as_table, as_vector, dp
from .spliner import MIN_POINTS, CubicSpline

log = get_logger(__name__)


class DerivativeCache:
    """
    Second derivatives of the children of one ``NDCubicSpline`` node.

    ``entries[i]`` holds child ``i``'s data: a 1-D array of second
    derivatives when the child is a ``CubicSpline``, or a nested
    ``DerivativeCache`` when the child is itself multi-dimensional.  An empty
    cache (``entries is None``) is filled on the next evaluation.
    """

    __slots__ = ("entries",)

    def __init__(self, entries=None):
        self.entries = entries

    @property
    def valid(self) -> bool:
        return self.entries is not None

    def invalidate(self) -> None:
        self.entries = None

    def __len__(self):
        return 0 if self.entries is None else len(self.entries)

    def __repr__(self):
        state = f"{len(self)} entries" if self.valid else "empty"
        return f"DerivativeCache({state})"


class NDCubicSpline:
    """
    Cubic spline of a function tabulated on a ``k``-dimensional grid.

    Parameters
    ----------
    axes : sequence of array_like
        One abscissa array per dimension, each with at least three points.
    y : array_like
        Tabulated values, ``y.shape == tuple(len(a) for a in axes)``.
    duplicates : {"separate", "average"}, optional
        Duplicate-abscissa policy of every 1-D spline in the tree.
    context : str, optional
        Label used in log records; defaults to the class name.
    """

    def __init__(self, axes: Sequence, y, duplicates: Optional[str] = None, context: str = ""):
        axes = [as_vector(a, f"axis {i}") for i, a in enumerate(axes)]
        y = as_table(y, "y")
        if len(axes) < 2:
            raise InvalidArgument(f"NDCubicSpline needs at least two axes, got {len(axes)}")
        self._check_shape(axes, y)

        self.context = context or type(self).__name__
        self._duplicates = duplicates
        self._axes = axes
        self._y = y
        self._loaded = True
        self._cache = DerivativeCache()
        self._children = self._build_children()
        self._collapse = CubicSpline(
            axes[0], np.zeros(len(axes[0])), duplicates=duplicates,
            context=f"{self.context} collapse",
        )

    @staticmethod
    def _check_shape(axes, y):
        for i, a in enumerate(axes):
            if len(a) < MIN_POINTS:
                raise InvalidArgument(
                    f"A minimum of three data points is needed along axis {i}, got {len(a)}"
                )
        expected = tuple(len(a) for a in axes)
        if y.shape != expected:
            raise InvalidArgument(f"y has shape {y.shape}, axes give {expected}")

    def _build_children(self) -> List:
        children = []
        inner = self._axes[1:]
        for i in range(len(self._axes[0])):
            label = f"{self.context} row {i}"
            if len(inner) == 1:
                child = CubicSpline(inner[0], self._y[i], duplicates=self._duplicates, context=label)
            else:
                child = NDCubicSpline(inner, self._y[i], duplicates=self._duplicates, context=label)
            children.append(child)
        return children

    # ------------------------------------------------------------------
    # placeholders and data handling
    # ------------------------------------------------------------------
    @classmethod
    def _placeholder_data(cls, shape):
        if len(shape) < 2:
            raise InvalidArgument("NDCubicSpline needs at least two axes")
        if any(n < MIN_POINTS for n in shape):
            raise InvalidArgument(f"A minimum of three data points is needed per axis, got {shape}")
        axes = [np.arange(n, dtype=dp) for n in shape]
        return axes, np.zeros(tuple(shape))

    @classmethod
    def zero(cls, *shape) -> "NDCubicSpline":
        """Return a placeholder of the given grid shape, to be filled by ``reset_data``."""
        axes, y = cls._placeholder_data(shape)
        spline = NDCubicSpline(axes, y)
        spline._loaded = False
        return spline

    def reset_data(self, axes: Sequence, y) -> None:
        """
        Replace the table with one of identical shape.

        The node's own derivative cache is invalidated.  Caches held by
        callers are theirs to invalidate.
        """
        axes = [as_vector(a, f"axis {i}") for i, a in enumerate(axes)]
        y = as_table(y, "y")
        if len(axes) != self.dimension:
            raise InvalidArgument(f"expected {self.dimension} axes, got {len(axes)}")
        if y.shape != self.shape or tuple(len(a) for a in axes) != self.shape:
            raise InvalidArgument("Original array length not matched by new array length")
        self._axes = axes
        self._y = y
        for i, child in enumerate(self._children):
            if isinstance(child, CubicSpline):
                child.reset_data(axes[1], y[i])
            else:
                child.reset_data(axes[1:], y[i])
        self._loaded = True
        self._cache.invalidate()

    def average_identical_abscissae(self) -> None:
        """Switch every spline in the tree to averaging identical abscissas."""
        for child in self._children:
            child.average_identical_abscissae()
        self._collapse.average_identical_abscissae()
        self._cache.invalidate()

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------
    @property
    def dimension(self) -> int:
        return len(self._axes)

    @property
    def shape(self):
        return tuple(len(a) for a in self._axes)

    @property
    def axes(self):
        return [a.copy() for a in self._axes]

    @property
    def limits(self):
        """``[(min, max), ...]`` for every axis."""
        return [(float(a.min()), float(a.max())) for a in self._axes]

    @property
    def x_min(self):
        return tuple(lo for lo, _ in self.limits)

    @property
    def x_max(self):
        return tuple(hi for _, hi in self.limits)

    # ------------------------------------------------------------------
    # derivative cache
    # ------------------------------------------------------------------
    def _fill(self, cache: DerivativeCache) -> DerivativeCache:
        log.debug2("%s: computing second derivatives for %d children",
                   self.context, len(self._children))
        entries = []
        for child in self._children:
            if isinstance(child, CubicSpline):
                entries.append(child.calc_deriv())
            else:
                entries.append(child._fill(DerivativeCache()))
        cache.entries = entries
        return cache

    def get_deriv(self) -> DerivativeCache:
        """Return the node's derivative cache, filling it if necessary."""
        if not self._cache.valid:
            self._fill(self._cache)
        return self._cache

    def set_deriv(self, cache: DerivativeCache) -> None:
        """Install a derivative cache, e.g. one returned by ``get_deriv`` of a twin."""
        if not isinstance(cache, DerivativeCache):
            raise InvalidArgument(f"expected a DerivativeCache, got {type(cache).__name__}")
        if cache.valid and len(cache) != len(self._children):
            raise InvalidArgument(
                f"cache has {len(cache)} entries, spline has {len(self._children)} children"
            )
        self._cache = cache

    # ------------------------------------------------------------------
    # evaluation
    # ------------------------------------------------------------------
    def interpolate(self, *coords, cache: Optional[DerivativeCache] = None) -> float:
        """
        Return the interpolated value at ``coords``.

        Parameters
        ----------
        *coords : float
            One coordinate per axis, in axis order.
        cache : DerivativeCache, optional
            Externally owned derivative cache; filled on first use.

        Raises
        ------
        OutOfRange
            If any coordinate lies outside its axis.
        """
        if len(coords) != self.dimension:
            raise InvalidArgument(f"expected {self.dimension} coordinates, got {len(coords)}")
        if not self._loaded:
            raise InvalidArgument(f"{self.context} has no data; call reset_data first")
        if cache is None:
            cache = self._cache
        if not cache.valid:
            self._fill(cache)
        elif len(cache) != len(self._children):
            raise InvalidArgument(
                f"cache has {len(cache)} entries, spline has {len(self._children)} children"
            )

        inner = coords[1:]
        samples = np.empty(len(self._children))
        for i, (child, entry) in enumerate(zip(self._children, cache.entries)):
            if isinstance(child, CubicSpline):
                child.set_deriv(entry)
                samples[i] = child.interpolate(inner[0])
            else:
                samples[i] = child.interpolate(*inner, cache=entry)

        self._collapse.reset_data(self._axes[0], samples)
        return self._collapse.interpolate(coords[0])

    def __call__(self, *coords, cache=None):
        return self.interpolate(*coords, cache=cache)

    def __repr__(self):
        return f"{type(self).__name__}(shape={self.shape})"


class BiCubicSpline(NDCubicSpline):
    """Cubic spline of ``y = f(x1, x2)`` tabulated on a grid."""

    def __init__(self, x1, x2, y, duplicates=None, context=""):
        super().__init__([x1, x2], y, duplicates=duplicates, context=context)

    @classmethod
    def zero(cls, n, m):
        axes, y = cls._placeholder_data((n, m))
        spline = cls(*axes, y)
        spline._loaded = False
        return spline

    def reset_data(self, x1, x2, y):
        super().reset_data([x1, x2], y)

    def interpolate(self, x1, x2, cache=None):
        return super().interpolate(x1, x2, cache=cache)


class TriCubicSpline(NDCubicSpline):
    """Cubic spline of ``y = f(x1, x2, x3)`` tabulated on a grid."""

    def __init__(self, x1, x2, x3, y, duplicates=None, context=""):
        super().__init__([x1, x2, x3], y, duplicates=duplicates, context=context)

    @classmethod
    def zero(cls, n, m, l):
        axes, y = cls._placeholder_data((n, m, l))
        spline = cls(*axes, y)
        spline._loaded = False
        return spline

    def reset_data(self, x1, x2, x3, y):
        super().reset_data([x1, x2, x3], y)

    def interpolate(self, x1, x2, x3, cache=None):
        return super().interpolate(x1, x2, x3, cache=cache)


class QuadriCubicSpline(NDCubicSpline):
    """Cubic spline of ``y = f(x1, x2, x3, x4)`` tabulated on a grid."""

    def __init__(self, x1, x2, x3, x4, y, duplicates=None, context=""):
        super().__init__([x1, x2, x3, x4], y, duplicates=duplicates, context=context)

    @classmethod
    def zero(cls, n, m, l, k):
        axes, y = cls._placeholder_data((n, m, l, k))
        spline = cls(*axes, y)
        spline._loaded = False
        return spline

    def reset_data(self, x1, x2, x3, x4, y):
        super().reset_data([x1, x2, x3, x4], y)

    def interpolate(self, x1, x2, x3, x4, cache=None):
        return super().interpolate(x1, x2, x3, x4, cache=cache)
