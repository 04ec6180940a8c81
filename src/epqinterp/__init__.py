"""
epqinterp: multi-dimensional spline and Lagrange interpolation engine.

This package interpolates tabulated functions of one to four (or more)
variables: natural and clamped cubic splines in one dimension, tensor-product
cubic splines on rectilinear grids, and Lagrange (Neville) interpolation of
arbitrary order on uniform and non-uniform grids.
"""

# Import main sub-modules
from . import errors
from . import logger
from . import settings
from . import nrutils
from . import spliner
from . import ndspline
from . import ulagrange
from . import nulagrange
from . import lagrange_function
from . import tables

from .errors import DegenerateData, InterpolationError, InvalidArgument, OutOfRange
from .lagrange_function import InterpolationFunction
from .ndspline import (
    BiCubicSpline,
    DerivativeCache,
    NDCubicSpline,
    QuadriCubicSpline,
    TriCubicSpline,
)
from .settings import SplineSettings, get_settings, set_settings
from .spliner import BoundaryCondition, CubicSpline
from .tables import NonUniformTable, RegularSplineTable, RegularTable

__version__ = "0.1.0"

__all__ = [
    "errors",
    "logger",
    "settings",
    "nrutils",
    "spliner",
    "ndspline",
    "ulagrange",
    "nulagrange",
    "lagrange_function",
    "tables",
    "InterpolationError",
    "InvalidArgument",
    "OutOfRange",
    "DegenerateData",
    "CubicSpline",
    "BoundaryCondition",
    "NDCubicSpline",
    "BiCubicSpline",
    "TriCubicSpline",
    "QuadriCubicSpline",
    "DerivativeCache",
    "InterpolationFunction",
    "RegularTable",
    "NonUniformTable",
    "RegularSplineTable",
    "SplineSettings",
    "get_settings",
    "set_settings",
]
