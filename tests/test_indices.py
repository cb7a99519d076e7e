"""Tests for thermodynamic and composite indices."""

import math

import numpy as np
import pytest

from sounding_viewer.indices import (
    InflowLayer,
    ProfileAccessors,
    compute_boyden,
    compute_cape,
    compute_cii,
    compute_ct,
    compute_dci,
    compute_ehi,
    compute_fsi,
    compute_humidity_index,
    compute_inflow_layer,
    compute_inflow_layers,
    compute_k,
    compute_ko,
    compute_lifted_index,
    compute_max_updraft,
    compute_mji,
    compute_modified_k,
    compute_modified_tt,
    compute_most_unstable,
    compute_pii,
    compute_pw,
    compute_rackliff,
    compute_scp,
    compute_showalter,
    compute_soaring,
    compute_sweat,
    compute_thompson,
    compute_tt,
    compute_vt,
)
from sounding_viewer.profile import PressureOutOfRangeError, Sounding
from sounding_viewer.thermo import wet_bulb_temperature
from sounding_viewer.utils.constants import KMH_PER_KNOT


def table(values):
    """Accessor over a fixed pressure -> value mapping."""
    return lambda p: values[p]


@pytest.fixture
def k_acc(k_index_sounding):
    return ProfileAccessors.from_profile(k_index_sounding)


@pytest.fixture
def conv_acc(convective_sounding):
    return ProfileAccessors.from_profile(convective_sounding)


class TestClosedForm:
    """Indices computed from mandatory-level values."""

    def test_k_index(self, k_acc):
        assert compute_k(k_acc.f_t, k_acc.f_td) == 20

    def test_totals(self, k_acc):
        assert compute_tt(k_acc.f_t, k_acc.f_td) == 45
        assert compute_vt(k_acc.f_t) == 25
        assert compute_ct(k_acc.f_t, k_acc.f_td) == 20

    def test_convective_profile(self, conv_acc):
        assert compute_k(conv_acc.f_t, conv_acc.f_td) == 34
        assert compute_tt(conv_acc.f_t, conv_acc.f_td) == 54

    def test_humidity_index(self, k_acc):
        assert compute_humidity_index(k_acc.f_t, k_acc.f_td) == 40

    def test_soaring_index(self, k_acc):
        # VT 25, 850 depression 5, 700 depression 15
        assert compute_soaring(k_acc.f_t, k_acc.f_td) == 5

    def test_boyden(self, k_acc):
        # 1000-700 thickness 300 dam, T700 5
        assert np.isclose(compute_boyden(k_acc.f_t, k_acc.f_z), 95)

    def test_modified_k_and_totals(self, k_acc):
        assert compute_modified_k(k_acc.f_t, k_acc.f_td, k_acc.p_begin) == 40
        assert compute_modified_tt(k_acc.f_t, k_acc.f_td, k_acc.p_begin) == 65

    def test_rackliff_uses_wet_bulb(self, k_acc):
        tw850 = wet_bulb_temperature(15, 10, 850)
        assert np.isclose(compute_rackliff(k_acc.f_t, k_acc.f_td), tw850 + 10)
        assert 20 < compute_rackliff(k_acc.f_t, k_acc.f_td) < 25

    def test_modified_jefferson(self, k_acc):
        tw850 = wet_bulb_temperature(15, 10, 850)
        expected = 1.6 * tw850 + 10 - 0.5 * 15
        assert np.isclose(compute_mji(k_acc.f_t, k_acc.f_td), expected)

    def test_fog_stability_wind_in_knots(self):
        f_t = table({1000: 20.0, 850: 10.0})
        f_td = table({1000: 15.0})
        f_spd = table({850: 10 * KMH_PER_KNOT})
        assert np.isclose(compute_fsi(f_t, f_td, f_spd, 1000), 40.0)

    def test_convective_instability_negative_for_unstable_air(self, conv_acc):
        assert compute_cii(conv_acc.f_t, conv_acc.f_td, conv_acc.p_begin) < 0
        assert compute_ko(conv_acc.f_t, conv_acc.f_td) < 0

    def test_potential_instability(self, conv_acc):
        assert compute_pii(conv_acc.f_t, conv_acc.f_td, conv_acc.f_z) > 0

    def test_missing_mandatory_level(self):
        snd = Sounding([
            {"pressure": 1000, "temp": 25, "dewpt": 20},
            {"pressure": 600, "temp": 0, "dewpt": -10},
        ])
        acc = ProfileAccessors.from_profile(snd)
        with pytest.raises(PressureOutOfRangeError):
            compute_k(acc.f_t, acc.f_td)


class TestCape:
    """Tests for the parcel buoyancy integration."""

    def test_stable_profile_has_no_cape(self, isothermal_dry_sounding):
        acc = ProfileAccessors.from_profile(isothermal_dry_sounding)
        result = compute_cape(acc.f_t, acc.f_td, acc.p_begin, acc.p_end, p_step=5.0)
        assert result.cape == 0
        assert result.cin == 0
        assert math.isnan(result.lfc)
        assert math.isnan(result.el)

    def test_convective_profile(self, conv_acc):
        result = compute_cape(conv_acc.f_t, conv_acc.f_td, conv_acc.p_begin, conv_acc.p_end, p_step=5.0)
        assert result.cape > 500
        assert result.cin <= 0
        assert conv_acc.p_end <= result.el <= result.lfc < conv_acc.p_begin

    def test_step_size_insensitive(self, conv_acc):
        coarse = compute_cape(conv_acc.f_t, conv_acc.f_td, 1000, 100, p_step=5.0)
        fine = compute_cape(conv_acc.f_t, conv_acc.f_td, 1000, 100, p_step=1.0)
        assert np.isclose(coarse.cape, fine.cape, rtol=0.1)

    def test_supersaturated_start(self):
        f_t = lambda p: 20.0
        f_td = lambda p: 22.0
        with pytest.raises(ValueError):
            compute_cape(f_t, f_td, 1000, 500)

    def test_max_updraft(self):
        assert compute_max_updraft(50.0) == 10.0


class TestLiftedIndex:
    """Tests for the lifted and Showalter indices."""

    def test_unstable_profile_negative(self, conv_acc):
        assert compute_lifted_index(conv_acc.f_t, conv_acc.f_td, conv_acc.p_begin, p_step=5.0) < 0

    def test_stable_profile_positive(self, isothermal_dry_sounding):
        acc = ProfileAccessors.from_profile(isothermal_dry_sounding)
        assert compute_lifted_index(acc.f_t, acc.f_td, acc.p_begin, p_step=5.0) > 0

    def test_parcel_above_top(self, conv_acc):
        with pytest.raises(ValueError):
            compute_lifted_index(conv_acc.f_t, conv_acc.f_td, 400)

    def test_showalter_is_850_lifted_index(self, conv_acc):
        showalter = compute_showalter(conv_acc.f_t, conv_acc.f_td, p_step=5.0)
        lifted_850 = compute_lifted_index(conv_acc.f_t, conv_acc.f_td, 850, 500, p_step=5.0)
        assert showalter == lifted_850

    def test_surface_parcel_more_unstable_than_850(self, conv_acc):
        surface = compute_lifted_index(conv_acc.f_t, conv_acc.f_td, 1000, p_step=5.0)
        assert surface < compute_showalter(conv_acc.f_t, conv_acc.f_td, p_step=5.0)

    def test_derived_indices(self, conv_acc):
        f_t, f_td = conv_acc.f_t, conv_acc.f_td
        li = compute_lifted_index(f_t, f_td, 1000)
        assert np.isclose(compute_thompson(f_t, f_td, 1000), compute_k(f_t, f_td) - li)
        assert np.isclose(compute_dci(f_t, f_td, 1000), 18 + 14 - li)


class TestMostUnstable:
    """Tests for the most unstable parcel search."""

    def test_moist_layer_aloft(self):
        snd = Sounding([
            {"pressure": 1000, "temp": 20, "dewpt": -10},
            {"pressure": 925, "temp": 22, "dewpt": -5},
            {"pressure": 850, "temp": 20, "dewpt": 18},
            {"pressure": 700, "temp": 5, "dewpt": -20},
            {"pressure": 500, "temp": -15, "dewpt": -40},
        ])
        acc = ProfileAccessors.from_profile(snd)
        assert compute_most_unstable(acc.f_t, acc.f_td, acc.p_begin) == 850.0

    def test_surface_maximum(self):
        f_t = lambda p: 20.0 if p == 1000 else -60.0
        f_td = lambda p: 10.0 if p == 1000 else -80.0
        assert compute_most_unstable(f_t, f_td, 1000, 990, 5) == 1000

    def test_maximum_off_the_scan_grid(self):
        # Grid runs 1002, 997, ..., 852, 847; the moist peak at 850 falls between
        snd = Sounding([
            {"pressure": 1002, "temp": 24, "dewpt": -10},
            {"pressure": 900, "temp": 22, "dewpt": -5},
            {"pressure": 850, "temp": 20, "dewpt": 18},
            {"pressure": 800, "temp": 14, "dewpt": -15},
            {"pressure": 500, "temp": -15, "dewpt": -40},
        ])
        acc = ProfileAccessors.from_profile(snd)
        assert acc.p_begin == 1002

        result = compute_most_unstable(acc.f_t, acc.f_td, acc.p_begin)
        assert (1002 - result) % 5 == 0
        assert abs(result - 850) <= 2.5
        assert result == 852

    def test_no_levels_scanned(self, conv_acc):
        with pytest.raises(ValueError):
            compute_most_unstable(conv_acc.f_t, conv_acc.f_td, 400, 500)


class TestPrecipitableWater:
    """Tests for the column water integral."""

    def test_typical_value(self, conv_acc):
        pw = compute_pw(conv_acc.f_td, conv_acc.p_begin, conv_acc.p_end, m=50)
        assert 20 < pw < 80

    def test_dry_column(self):
        assert compute_pw(lambda p: -80.0, 1000, 500) < 0.1

    def test_moister_column_holds_more(self):
        dry = compute_pw(lambda p: 0.0, 1000, 500, m=20)
        moist = compute_pw(lambda p: 10.0, 1000, 500, m=20)
        assert moist > dry > 0


class TestInflowLayer:
    """Tests for the effective inflow layer."""

    def test_convective_profile_from_surface(self, conv_acc):
        layer = compute_inflow_layer(
            conv_acc.f_t, conv_acc.f_td, conv_acc.f_z,
            conv_acc.p_begin, conv_acc.p_end, scan_step=25, p_step=10,
        )
        assert isinstance(layer, InflowLayer)
        assert layer.p_bottom == 1000
        assert layer.z_bottom == 110
        assert layer.p_top < layer.p_bottom
        assert layer.z_top > layer.z_bottom

    def test_stable_profile_has_none(self, isothermal_dry_sounding):
        acc = ProfileAccessors.from_profile(isothermal_dry_sounding)
        args = (acc.f_t, acc.f_td)
        assert compute_inflow_layers(*args, acc.p_begin, acc.p_end, scan_step=50, p_step=10) == []
        assert compute_inflow_layer(
            acc.f_t, acc.f_td, acc.f_z, acc.p_begin, acc.p_end, scan_step=50, p_step=10
        ) is None

    def test_supersaturated_levels_do_not_qualify(self):
        f_t = lambda p: 20.0
        f_td = lambda p: 25.0
        assert compute_inflow_layers(f_t, f_td, 1000, 900, scan_step=50, p_step=10) == []


class TestComposite:
    """Tests for composite indices."""

    def test_ehi(self):
        assert compute_ehi(1600.0, 100.0) == 1.0

    def test_sweat(self):
        f_t = table({850: 20.0, 500: -10.0})
        f_td = table({850: 15.0})
        f_spd = table({850: 30 * KMH_PER_KNOT, 500: 50 * KMH_PER_KNOT})
        f_dir = table({850: 180.0, 500: 240.0})
        assert np.isclose(compute_sweat(f_t, f_td, f_spd, f_dir), 543.2532, atol=1e-3)

    def test_sweat_backing_wind_drops_shear_term(self):
        f_t = table({850: 20.0, 500: -10.0})
        f_td = table({850: 15.0})
        f_spd = table({850: 30 * KMH_PER_KNOT, 500: 50 * KMH_PER_KNOT})
        f_dir = table({850: 240.0, 500: 230.0})
        assert np.isclose(compute_sweat(f_t, f_td, f_spd, f_dir), 410.0)

    @pytest.mark.parametrize("ebwd, expected", [(5.0, 0.0), (15.0, 3.0), (25.0, 4.0)])
    def test_scp_shear_term(self, ebwd, expected):
        assert np.isclose(compute_scp(2000.0, 100.0, ebwd), expected)
