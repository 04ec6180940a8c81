"""
Tests for settings: spline tunables and the parameter-file reader.
"""
import io
import logging

import pytest

from epqinterp import settings
from epqinterp.errors import InvalidArgument
from epqinterp.settings import (
    AVERAGE,
    SEPARATE,
    GetFileParam,
    SplineSettings,
    get_settings,
    read_settings,
    reset_settings,
    set_settings,
)
from epqinterp.spliner import CubicSpline


class TestSplineSettings:
    def test_defaults(self):
        s = SplineSettings()
        assert s.duplicate_policy == SEPARATE
        assert s.separation_fraction == 0.0005
        assert s.log_level == 1

    def test_frozen(self):
        s = SplineSettings()
        with pytest.raises(AttributeError):
            s.duplicate_policy = AVERAGE

    def test_bad_policy(self):
        with pytest.raises(InvalidArgument):
            SplineSettings(duplicate_policy="ignore")

    @pytest.mark.parametrize("fraction", [0.0, -0.1, 0.5, 2.0])
    def test_bad_fraction(self, fraction):
        with pytest.raises(InvalidArgument):
            SplineSettings(separation_fraction=fraction)

    def test_bad_log_level(self):
        with pytest.raises(InvalidArgument):
            SplineSettings(log_level=9)


class TestModuleSettings:
    def test_get_returns_defaults(self):
        assert get_settings() == SplineSettings()

    def test_set_with_keywords(self):
        new = set_settings(duplicate_policy=AVERAGE)
        assert new.duplicate_policy == AVERAGE
        assert get_settings() is new

    def test_set_with_instance(self):
        s = SplineSettings(separation_fraction=0.001)
        assert set_settings(s) is s

    def test_reset(self):
        set_settings(duplicate_policy=AVERAGE)
        assert reset_settings() == SplineSettings()

    def test_set_applies_log_level(self):
        set_settings(log_level=0)
        assert logging.getLogger("epqinterp").level == logging.ERROR

    def test_new_splines_follow_policy(self):
        set_settings(duplicate_policy=AVERAGE)
        cs = CubicSpline([0.0, 1.0, 1.0, 2.0], [0.0, 1.0, 3.0, 4.0])
        assert cs.duplicate_policy == AVERAGE
        assert cs.n_points == 3
        assert cs.interpolate(1.0) == 2.0

    def test_separation_fraction_used(self):
        set_settings(separation_fraction=0.01)
        cs = CubicSpline([0.0, 1.0, 1.0, 2.0, 4.0], [0.0, 1.0, 2.0, 3.0, 4.0])
        xs = cs.x
        assert xs[2] - xs[1] == pytest.approx(0.04)

    def test_explicit_argument_overrides_settings(self):
        set_settings(duplicate_policy=AVERAGE)
        cs = CubicSpline([0.0, 1.0, 2.0], [0.0, 1.0, 2.0], duplicates=SEPARATE)
        assert cs.duplicate_policy == SEPARATE

    def test_module_attribute(self):
        assert settings.DUPLICATE_POLICIES == (SEPARATE, AVERAGE)


class TestParameterFile:
    def test_get_file_param_strips_comment(self):
        fh = io.StringIO("average   ! policy\n")
        assert GetFileParam(fh) == "average"

    def test_get_file_param_eof(self):
        with pytest.raises(InvalidArgument):
            GetFileParam(io.StringIO(""))

    def test_get_file_param_comment_only(self):
        with pytest.raises(InvalidArgument):
            GetFileParam(io.StringIO("! nothing here\n"))

    def test_read_settings(self, tmp_path):
        path = tmp_path / "spline.params"
        path.write_text("Average ! policy\n0.002 ! fraction\n3 ! level\n")
        s = read_settings(path)
        assert s == SplineSettings(duplicate_policy=AVERAGE, separation_fraction=0.002, log_level=3)

    def test_read_settings_named_verbosity(self, tmp_path):
        path = tmp_path / "spline.params"
        path.write_text("separate\n0.0005\nDerivatives ! level\n")
        assert read_settings(path).log_level == 5

    def test_read_settings_bad_number(self, tmp_path):
        path = tmp_path / "spline.params"
        path.write_text("separate\nwide\n1\n")
        with pytest.raises(InvalidArgument):
            read_settings(path)

    def test_read_settings_truncated(self, tmp_path):
        path = tmp_path / "spline.params"
        path.write_text("separate\n0.0005\n")
        with pytest.raises(InvalidArgument):
            read_settings(path)
