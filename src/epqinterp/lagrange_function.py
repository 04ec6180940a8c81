"""
Non-uniform Lagrange interpolation as a reusable function object.

An ``InterpolationFunction`` of ``N`` variables samples its first variable at
the abscissas ``xsamp``.  For ``N == 1`` the samples are plain values; for
``N > 1`` each sample is itself an ``InterpolationFunction`` of ``N - 1``
variables, so each child may carry its own abscissas and the sampling need
not be rectilinear.  Evaluation locates the window along the first variable,
evaluates only the children in that window at the remaining coordinates and
runs Neville's algorithm over the results.

Validation happens once, at construction; evaluation never mutates the tree.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import InvalidArgument
from .logger import get_logger
from .nrutils import as_table, as_vector, check_order, dp
from .nulagrange import check_monotonic, locate, neville

log = get_logger(__name__)


class InterpolationFunction:
    """
    Lagrange interpolant of ``N`` variables on non-uniform samples.

    Parameters
    ----------
    fsamp : sequence
        Sample values (floats) for a function of one variable, or
        ``InterpolationFunction`` objects of ``N - 1`` variables.
    xsamp : array_like
        Strictly monotonic abscissas of the first variable, ascending or
        descending, ``len(xsamp) == len(fsamp)``.
    order : int
        Interpolation order, ``1 <= order <= len(fsamp) - 1``.

    Raises
    ------
    InvalidArgument
        Bad order, mismatched lengths, repeated or non-monotonic
        abscissas, or children of unequal arity.
    """

    def __init__(self, fsamp: Sequence, xsamp, order: int):
        fsamp = list(fsamp)
        order = int(order)
        check_order(order, len(fsamp))
        xsamp = as_vector(xsamp, "xsamp")
        if len(xsamp) != len(fsamp):
            raise InvalidArgument(
                "Dependent (fsamp) and independent (x) arrays must be of the same length."
            )
        check_monotonic(xsamp)

        children = [f for f in fsamp if isinstance(f, InterpolationFunction)]
        if children:
            if len(children) != len(fsamp):
                raise InvalidArgument("fsamp must hold only numbers or only InterpolationFunctions")
            arity = children[0].n_variables
            if any(c.n_variables != arity for c in children):
                raise InvalidArgument(
                    f"Elements of fsamp must all be InterpolationFunctions of {arity} variables."
                )
            self._children = tuple(children)
            self._values = None
            self._nvars = arity + 1
        else:
            self._children = None
            self._values = as_vector(fsamp, "fsamp")
            self._nvars = 1

        self._xsamp = xsamp
        self._order = order
        log.debug2("InterpolationFunction: %d variables, %d samples, order %d",
                   self._nvars, len(xsamp), order)

    @classmethod
    def from_grid(cls, axes: Sequence, values, order: int) -> "InterpolationFunction":
        """
        Build the tree for a table on a rectilinear grid.

        ``values`` has one dimension per entry of ``axes`` and
        ``values.shape[k] == len(axes[k])``.
        """
        values = as_table(values, "values")
        if values.ndim != len(axes) or values.ndim < 1:
            raise InvalidArgument(
                f"values has {values.ndim} dimensions but {len(axes)} axes were given"
            )
        if values.ndim == 1:
            return cls(values, axes[0], order)
        return cls([cls.from_grid(axes[1:], row, order) for row in values], axes[0], order)

    @property
    def n_variables(self) -> int:
        return self._nvars

    @property
    def order(self) -> int:
        return self._order

    @property
    def xsamp(self):
        return self._xsamp.copy()

    def evaluate_with_error(self, x: Sequence[float]):
        """
        Return ``(estimate, error_estimate)`` at the point ``x``.

        ``x`` must hold at least ``n_variables`` coordinates; extra values
        are ignored.  Outside the sampled range the result is extrapolated.
        """
        x = np.atleast_1d(np.asarray(x, dtype=dp))
        if len(x) < self._nvars:
            raise InvalidArgument(
                f"function of {self._nvars} variables evaluated at {len(x)} coordinates"
            )
        first, nearest = locate(x[0], self._xsamp, self._order)
        stop = first + self._order + 1
        if self._children is None:
            window = self._values[first:stop]
        else:
            rest = x[1:]
            window = np.array([c.evaluate_at(rest) for c in self._children[first:stop]], dtype=dp)
        return neville(window, self._xsamp[first:stop], (0, nearest - first), self._order, x[0])

    def evaluate_at(self, x: Sequence[float]) -> float:
        """Interpolated value at ``x``."""
        return self.evaluate_with_error(x)[0]

    def __call__(self, *x):
        if len(x) == 1 and np.ndim(x[0]) == 1:
            x = x[0]
        return self.evaluate_at(x)

    def __repr__(self):
        return (f"InterpolationFunction(n_variables={self._nvars}, "
                f"points={len(self._xsamp)}, order={self._order})")
