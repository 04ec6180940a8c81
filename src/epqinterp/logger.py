"""
Logging for the interpolation engine.

Records go to the ``epqinterp`` logger hierarchy.  Two levels below
``DEBUG`` carry the chatty numerical detail:

* ``DEBUG2``  second-derivative solves (one per spline per data reset)
* ``DEBUG3``  Lagrange window selection (one per axis per evaluation)

Duplicate-abscissa repairs are ``WARNING`` records.  Splines that belong to
a larger structure log through a ``ContextAdapter`` so every record names
the slice it came from (``"BiCubicSpline row 3: ..."``).

Usage
-----
>>> from epqinterp.logger import context_logger, get_logger
>>> log = get_logger(__name__)
>>> log.debug2("second derivatives recomputed")
>>> context_logger(__name__, "X collapse").warning("abscissae separated")
"""

import logging
import sys

DEBUG2 = 9
DEBUG3 = 8

logging.addLevelName(DEBUG2, "DEBUG2")
logging.addLevelName(DEBUG3, "DEBUG3")

ROOT_NAME = "epqinterp"

# Verbosity knob of the parameter file (0..6) and its names.
VERBOSITY_LEVELS = {
    0: logging.ERROR,    # errors only
    1: logging.WARNING,  # plus data repairs
    2: logging.INFO,
    3: logging.DEBUG,    # table construction, settings changes
    4: logging.DEBUG,
    5: DEBUG2,           # plus derivative solves
    6: DEBUG3,           # plus window selection
}

VERBOSITY_NAMES = {
    "errors": 0,
    "repairs": 1,
    "info": 2,
    "debug": 3,
    "derivatives": 5,
    "windows": 6,
}


class _InterpLogger(logging.Logger):
    def debug2(self, msg, *args, **kwargs):
        if self.isEnabledFor(DEBUG2):
            self._log(DEBUG2, msg, args, **kwargs)

    def debug3(self, msg, *args, **kwargs):
        if self.isEnabledFor(DEBUG3):
            self._log(DEBUG3, msg, args, **kwargs)


logging.setLoggerClass(_InterpLogger)


class ContextAdapter(logging.LoggerAdapter):
    """Prefix every message with the owning object's context label."""

    def process(self, msg, kwargs):
        context = self.extra.get("context") if self.extra else ""
        if context:
            msg = f"{context}: {msg}"
        return msg, kwargs

    def debug2(self, msg, *args, **kwargs):
        self.log(DEBUG2, msg, *args, **kwargs)

    def debug3(self, msg, *args, **kwargs):
        self.log(DEBUG3, msg, *args, **kwargs)


def get_logger(name: str | None = None) -> _InterpLogger:
    """Return a logger under the ``epqinterp`` hierarchy.

    Module names such as ``epqinterp.spliner`` inherit from the root logger,
    so one ``set_level()`` call controls the whole package.
    """
    return logging.getLogger(name or ROOT_NAME)


def context_logger(name: str, context: str = "") -> ContextAdapter:
    """Return a logger for *name* whose records are labelled with *context*."""
    return ContextAdapter(get_logger(name), {"context": context})


def resolve_level(level: int | str) -> int | str:
    """Translate a verbosity (0..6 or one of ``VERBOSITY_NAMES``) to a logging level.

    Python level numbers above 6 and level names such as ``"DEBUG"`` pass
    through unchanged.
    """
    if isinstance(level, str) and level.lower() in VERBOSITY_NAMES:
        level = VERBOSITY_NAMES[level.lower()]
    if isinstance(level, int) and level in VERBOSITY_LEVELS:
        return VERBOSITY_LEVELS[level]
    return level


def set_level(level: int | str = logging.INFO) -> None:
    """Set the level of every epqinterp logger at once."""
    logging.getLogger(ROOT_NAME).setLevel(resolve_level(level))


def setup(level: int | str = logging.INFO, stream=None) -> None:
    """Attach one stream handler to the package root; later calls are no-ops."""
    root = logging.getLogger(ROOT_NAME)
    if root.handlers:
        return
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-7s: %(name)s: %(message)s"))
    root.addHandler(handler)
    set_level(level)
