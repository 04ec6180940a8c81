"""
Exception taxonomy for the interpolation engine.

All errors derive from ``ValueError`` so callers that already guard
numeric input with ``except ValueError`` keep working.

- ``InvalidArgument`` : malformed construction/reset input (length mismatch,
  too few points, bad order, zero spacing, non-monotonic grid).
- ``OutOfRange``      : cubic-spline query outside the tabulated domain.
  Splines never extrapolate; the Lagrange families do.
- ``DegenerateData``  : zero-width interval met while solving or evaluating a spline.
"""


class InterpolationError(ValueError):
    """Base class for every error raised by epqinterp."""


class InvalidArgument(InterpolationError):
    """Malformed table, order, spacing or coordinate vector."""


class OutOfRange(InterpolationError):
    """Query coordinate outside ``[x_min, x_max]`` of a spline table."""

    def __init__(self, x, x_min, x_max, context=""):
        self.x = x
        self.x_min = x_min
        self.x_max = x_max
        self.context = context
        prefix = f"{context}: " if context else ""
        super().__init__(
            f"{prefix}x ({x}) is outside the range of data points ({x_min} to {x_max})"
        )


class DegenerateData(InterpolationError):
    """Two numerically identical abscissas bound an interval of a spline table."""

    def __init__(self, klo, khi, x_value, context=""):
        self.klo = klo
        self.khi = khi
        self.x_value = x_value
        self.context = context
        prefix = f"{context}: " if context else ""
        super().__init__(
            f"{prefix}two values of x are identical: point {klo} and point {khi} ({x_value})"
        )
