"""Tests for Simpson quadrature and the hypsometric equation."""

import math

import numpy as np
import pytest

from sounding_viewer.numerics import integrate, hypsometric_equation
from sounding_viewer.utils.constants import DRY_AIR_GAS_CONSTANT, GRAVITY, ZERO_CELSIUS


class TestIntegrate:
    """Tests for composite Simpson's rule."""

    def test_exact_for_cubics(self):
        """Simpson's rule integrates cubic polynomials exactly."""
        assert np.isclose(integrate(lambda x: x ** 3, 0.0, 2.0, 1), 4.0)

    def test_sine(self):
        assert np.isclose(integrate(math.sin, 0.0, math.pi, 50), 2.0, rtol=1e-6)

    def test_reversed_bounds(self):
        forward = integrate(math.exp, 0.0, 1.0, 10)
        backward = integrate(math.exp, 1.0, 0.0, 10)
        assert np.isclose(backward, -forward)

    def test_empty_interval(self):
        assert integrate(math.exp, 1.0, 1.0, 4) == 0.0

    def test_invalid_panel_count(self):
        with pytest.raises(ValueError):
            integrate(math.exp, 0.0, 1.0, 0)


class TestHypsometricEquation:
    """Tests for layer thickness."""

    @staticmethod
    def isothermal_thickness(T, p_bottom, p_top):
        return DRY_AIR_GAS_CONSTANT / GRAVITY * (T + ZERO_CELSIUS) * math.log(p_bottom / p_top)

    def test_isothermal_dry_layer(self):
        thickness = hypsometric_equation(
            1000.0, 500.0, lambda p: 0.0, lambda p: -80.0, m=50
        )
        expected = self.isothermal_thickness(0.0, 1000.0, 500.0)
        assert np.isclose(thickness, expected, rtol=1e-4)

    def test_default_panels_close_to_exact(self):
        thickness = hypsometric_equation(1000.0, 500.0, lambda p: 0.0, lambda p: -80.0)
        expected = self.isothermal_thickness(0.0, 1000.0, 500.0)
        assert np.isclose(thickness, expected, rtol=1e-3)

    def test_typical_thickness(self):
        """The 1000-500 hPa thickness of a mild atmosphere is about 5.5 km."""
        thickness = hypsometric_equation(
            1000.0, 500.0, lambda p: 15.0 - (1000.0 - p) * 0.06, lambda p: -20.0
        )
        assert 5200.0 < thickness < 5800.0

    def test_moisture_thickens_layer(self):
        dry = hypsometric_equation(1000.0, 850.0, lambda p: 25.0, lambda p: -40.0)
        moist = hypsometric_equation(1000.0, 850.0, lambda p: 25.0, lambda p: 24.0)
        assert moist > dry

    def test_sign_follows_bounds(self):
        up = hypsometric_equation(900.0, 800.0, lambda p: 10.0, lambda p: 0.0)
        down = hypsometric_equation(800.0, 900.0, lambda p: 10.0, lambda p: 0.0)
        assert up > 0
        assert np.isclose(down, -up)
