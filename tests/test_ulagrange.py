"""
Tests for ulagrange: Lagrange interpolation on uniform grids.

A polynomial of degree <= order is reproduced exactly by Neville's
algorithm, inside the grid and when extrapolating.

Tolerances:
    polynomial reproduction : rtol=1e-10, atol=1e-10
"""
import numpy as np
import pytest

from epqinterp import ulagrange
from epqinterp.errors import InvalidArgument

RNG = np.random.default_rng(0)

RTOL = 1e-10
ATOL = 1e-10


def _squares():
    x = np.arange(6, dtype=float)
    return x ** 2


# ===================================================================
# d1
# ===================================================================

class TestD1:
    def test_quadratic_at_half_point(self):
        y, dy = ulagrange.d1(_squares(), 0.0, 1.0, 2, 2.5)
        assert np.isclose(y, 6.25, rtol=RTOL, atol=ATOL)
        assert np.isfinite(dy)

    def test_exact_at_samples(self):
        f = RNG.standard_normal(9)
        for i in range(9):
            y, _ = ulagrange.d1(f, -1.0, 0.25, 3, -1.0 + 0.25 * i)
            assert np.isclose(y, f[i], rtol=RTOL, atol=ATOL)

    def test_cubic_reproduced(self):
        coeffs = RNG.standard_normal(4)
        x0, xinc = -2.0, 0.5
        xs = x0 + xinc * np.arange(10)
        f = np.polyval(coeffs, xs)
        for x in (-1.83, 0.1, 1.76, 2.49):
            y, _ = ulagrange.d1(f, x0, xinc, 3, x)
            assert np.isclose(y, np.polyval(coeffs, x), rtol=RTOL, atol=ATOL)

    def test_extrapolation(self):
        f = _squares()
        assert np.isclose(ulagrange.d1(f, 0.0, 1.0, 2, -1.0)[0], 1.0, rtol=RTOL, atol=ATOL)
        assert np.isclose(ulagrange.d1(f, 0.0, 1.0, 2, 7.0)[0], 49.0, rtol=RTOL, atol=ATOL)

    def test_negative_spacing(self):
        xs = 5.0 - np.arange(6, dtype=float)
        y, _ = ulagrange.d1(xs ** 2, 5.0, -1.0, 2, 2.5)
        assert np.isclose(y, 6.25, rtol=RTOL, atol=ATOL)

    def test_linear_error_estimate_vanishes(self):
        f = 2.0 * np.arange(8, dtype=float) + 1.0
        y, dy = ulagrange.d1(f, 0.0, 1.0, 3, 3.3)
        assert np.isclose(y, 7.6, rtol=RTOL, atol=ATOL)
        assert abs(dy) < ATOL

    def test_zero_spacing(self):
        with pytest.raises(InvalidArgument):
            ulagrange.d1(_squares(), 0.0, 0.0, 2, 1.0)

    @pytest.mark.parametrize("order", [0, 6, -1])
    def test_order_bounds(self, order):
        with pytest.raises(InvalidArgument):
            ulagrange.d1(_squares(), 0.0, 1.0, order, 1.0)

    def test_highest_order_allowed(self):
        y, _ = ulagrange.d1(_squares(), 0.0, 1.0, 5, 2.5)
        assert np.isclose(y, 6.25, rtol=RTOL, atol=ATOL)

    def test_wrong_rank(self):
        with pytest.raises(InvalidArgument):
            ulagrange.d1(np.zeros((3, 3)), 0.0, 1.0, 1, 1.0)


# ===================================================================
# d2 .. d4 and dn
# ===================================================================

class TestMultiDimensional:
    def test_d2_biquadratic(self):
        x1 = 1.0 + 0.5 * np.arange(6)
        x2 = -1.0 + 0.2 * np.arange(7)
        f = np.add.outer(x1 ** 2, 3.0 * x2) + np.outer(x1, x2 ** 2)
        y, _ = ulagrange.d2(f, [1.0, -1.0], [0.5, 0.2], 2, [2.3, -0.15])
        expected = 2.3 ** 2 + 3.0 * -0.15 + 2.3 * 0.15 ** 2
        assert np.isclose(y, expected, rtol=RTOL, atol=ATOL)

    def test_d2_coordinate_arrays_too_short(self):
        f = np.zeros((4, 4))
        with pytest.raises(InvalidArgument):
            ulagrange.d2(f, [0.0], [1.0, 1.0], 1, [0.5, 0.5])
        with pytest.raises(InvalidArgument):
            ulagrange.d2(f, [0.0, 0.0], [1.0, 1.0], 1, [0.5])

    def test_d2_zero_spacing_second_axis(self):
        with pytest.raises(InvalidArgument):
            ulagrange.d2(np.zeros((4, 4)), [0.0, 0.0], [1.0, 0.0], 1, [0.5, 0.5])

    def test_d3_trilinear(self):
        g = np.arange(4, dtype=float)
        f = g[:, None, None] + 2.0 * g[None, :, None] - g[None, None, :]
        y, _ = ulagrange.d3(f, [0.0, 0.0, 0.0], [1.0, 1.0, 1.0], 1, [1.5, 0.25, 2.75])
        assert np.isclose(y, 1.5 + 0.5 - 2.75, rtol=RTOL, atol=ATOL)

    def test_d4_linear(self):
        shape = (4, 5, 4, 5)
        f = np.fromfunction(lambda a, b, c, d: a + 2 * b + 3 * c + 4 * d, shape)
        x = [1.2, 3.4, 0.6, 2.2]
        y, _ = ulagrange.d4(f, [0.0] * 4, [1.0] * 4, 2, x)
        assert np.isclose(y, 1.2 + 6.8 + 1.8 + 8.8, rtol=RTOL, atol=ATOL)

    def test_extra_coordinates_ignored(self):
        f = np.add.outer(np.arange(5.0), np.arange(5.0))
        y, _ = ulagrange.d2(f, [0.0, 0.0, 9.0], [1.0, 1.0, 9.0], 2, [1.5, 2.5, 99.0])
        assert np.isclose(y, 4.0, rtol=RTOL, atol=ATOL)

    def test_dn_matches_d3(self):
        f = RNG.standard_normal((5, 6, 7))
        args = ([0.0, 1.0, 2.0], [0.1, 0.2, 0.3], 2, [0.23, 1.55, 3.1])
        assert ulagrange.dn(f, *args) == ulagrange.d3(f, *args)

    def test_d2_wrong_rank(self):
        with pytest.raises(InvalidArgument):
            ulagrange.d2(np.zeros(5), [0.0, 0.0], [1.0, 1.0], 1, [0.5, 0.5])
