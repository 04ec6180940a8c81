import logging

import pytest

from epqinterp import settings


@pytest.fixture(autouse=True)
def _default_settings():
    """Every test starts from the built-in spline settings and log level."""
    settings.reset_settings()
    yield
    settings.reset_settings()
    logging.getLogger("epqinterp").setLevel(logging.NOTSET)
