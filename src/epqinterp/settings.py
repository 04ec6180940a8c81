"""
Run-time settings for the spline family.

The defaults reproduce the historical behaviour: identical abscissas with
different ordinates are *separated* by 0.05 % of the abscissa range.  A
settings file can override them; it is read the same way as the other
parameter files of the suite: one value per line, the first
whitespace-delimited token is the value, anything after ``!`` is a comment.

Example ``spline.params``::

    separate      ! duplicate policy: separate | average
    0.0005        ! separation as a fraction of the abscissa range
    repairs       ! log verbosity, 0..6 or a name (errors, repairs, info, debug, derivatives, windows)
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .errors import InvalidArgument
from .logger import VERBOSITY_LEVELS, VERBOSITY_NAMES, get_logger, set_level

log = get_logger(__name__)

SEPARATE = "separate"
AVERAGE = "average"
DUPLICATE_POLICIES = (SEPARATE, AVERAGE)


@dataclass(slots=True, frozen=True)
class SplineSettings:
    """Tunables shared by every ``CubicSpline`` built after they are set."""

    duplicate_policy: str = SEPARATE
    separation_fraction: float = 0.0005
    log_level: int = 1

    def __post_init__(self):
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise InvalidArgument(
                f"duplicate_policy must be one of {DUPLICATE_POLICIES}, got {self.duplicate_policy!r}"
            )
        if not (0.0 < self.separation_fraction < 0.5):
            raise InvalidArgument(
                f"separation_fraction must lie in (0, 0.5), got {self.separation_fraction}"
            )
        if self.log_level not in VERBOSITY_LEVELS:
            raise InvalidArgument(f"log_level must be 0..6, got {self.log_level}")


_settings = SplineSettings()


def get_settings() -> SplineSettings:
    """Return the current module-wide settings."""
    return _settings


def set_settings(settings: SplineSettings | None = None, **changes) -> SplineSettings:
    """Replace the module-wide settings.

    Either pass a complete ``SplineSettings`` or keyword overrides applied to
    the current one.  Returns the settings now in force.
    """
    global _settings
    new = settings if settings is not None else _settings
    if changes:
        new = replace(new, **changes)
    _settings = new
    set_level(new.log_level)
    log.debug("spline settings now %s", new)
    return new


def reset_settings() -> SplineSettings:
    """Restore the built-in defaults."""
    return set_settings(SplineSettings())


def GetFileParam(file_handle) -> str:
    """Read a single parameter token from a file handle.

    Reads one line, strips a trailing ``!`` comment and returns the first
    whitespace-delimited token.

    Raises
    ------
    InvalidArgument
        If the file ends early or the line carries no value.
    """
    line = file_handle.readline()
    if not line:
        raise InvalidArgument("Unexpected end of file while reading parameter")
    content = line.split("!", 1)[0]
    parts = content.split()
    if not parts:
        raise InvalidArgument(f"Comment-only or empty line in parameter file: {line!r}")
    return parts[0]


def read_settings(path) -> SplineSettings:
    """Read a ``SplineSettings`` from a parameter file (see module docstring)."""
    with open(path, "r", encoding="utf-8") as fh:
        policy = GetFileParam(fh).lower()
        fraction_token = GetFileParam(fh)
        level_token = GetFileParam(fh)
    try:
        fraction = float(fraction_token)
        level = VERBOSITY_NAMES.get(level_token.lower())
        if level is None:
            level = int(level_token)
    except ValueError as exc:
        raise InvalidArgument(f"cannot parse numeric value in {path}: {exc}") from exc
    return SplineSettings(
        duplicate_policy=policy, separation_fraction=fraction, log_level=level
    )
