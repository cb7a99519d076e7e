"""Tests for wind-based indices."""

import numpy as np
import pytest

from sounding_viewer.indices import (
    compute_mean_wind,
    compute_shear,
    compute_sreh,
    compute_stm,
)
from sounding_viewer.profile import HeightOutOfRangeError, Sounding


def linear_wind(z):
    """Westerly wind increasing by 1 m/s per km."""
    return z / 1000.0, 0.0


def uniform_wind(z):
    return 5.0, 5.0


class TestShear:
    """Tests for bulk shear and mean wind."""

    def test_linear_profile(self):
        assert np.isclose(compute_shear(linear_wind, 0, 6000), 6.0)

    def test_uniform_profile(self):
        assert compute_shear(uniform_wind, 0, 6000) == 0

    def test_mean_wind(self):
        u, v = compute_mean_wind(linear_wind, 0, 6000)
        assert np.isclose(u, 3.0)
        assert v == 0

    def test_invalid_step(self):
        with pytest.raises(ValueError):
            compute_mean_wind(linear_wind, 0, 6000, dz=0)

    def test_missing_wind_propagates(self):
        snd = Sounding([
            {"pressure": 1000, "height": 100, "winddir": 270, "windspd": 36},
            {"pressure": 850, "height": 1500, "winddir": 270, "windspd": 72},
        ])
        with pytest.raises(HeightOutOfRangeError):
            compute_shear(snd.get_wind_at, 100, 6100)


class TestStormMotion:
    """Tests for Bunkers storm motion."""

    def test_right_mover(self):
        u, v = compute_stm(linear_wind, 0, 1)
        assert np.isclose(u, 3.0)
        assert np.isclose(v, -7.5)

    def test_left_mover(self):
        u, v = compute_stm(linear_wind, 0, -1)
        assert np.isclose(u, 3.0)
        assert np.isclose(v, 7.5)

    def test_zero_shear_returns_mean_wind(self):
        assert compute_stm(uniform_wind, 0, 1) == (5.0, 5.0)

    def test_relative_to_surface_height(self):
        def shifted(z):
            return linear_wind(z - 500)
        assert np.allclose(compute_stm(shifted, 500, 1), (3.0, -7.5))

    def test_invalid_direction(self):
        with pytest.raises(ValueError):
            compute_stm(linear_wind, 0, 0)


class TestHelicity:
    """Tests for storm-relative helicity."""

    def test_linear_profile(self):
        srh = compute_sreh(linear_wind, 0, 3000, storm_motion=(3.0, -7.5))
        assert np.isclose(srh, 22.5)

    def test_default_storm_motion_is_right_mover(self):
        explicit = compute_sreh(linear_wind, 0, 3000, storm_motion=compute_stm(linear_wind, 0, 1))
        assert np.isclose(compute_sreh(linear_wind, 0, 3000), explicit)

    def test_uniform_profile(self):
        assert compute_sreh(uniform_wind, 0, 3000) == 0

    def test_veering_hodograph_positive(self):
        def veering(z):
            # Clockwise turning with height
            angle = np.radians(z / 3000.0 * 90.0)
            return 10 * np.sin(angle), 10 * np.cos(angle)
        assert compute_sreh(veering, 0, 3000, storm_motion=(0.0, 0.0)) > 0

    def test_sign_flips_with_layer_order(self):
        forward = compute_sreh(linear_wind, 0, 3000, storm_motion=(3.0, -7.5))
        backward = compute_sreh(linear_wind, 3000, 0, storm_motion=(3.0, -7.5))
        assert np.isclose(backward, -forward)
