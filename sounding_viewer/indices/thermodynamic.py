"""
Parcel-based and closed-form thermodynamic indices.

Every function takes value accessors instead of a sounding:

- ``f_t(p)``, ``f_td(p)``: temperature and dewpoint (Celsius)
- ``f_z(p)``: height (m)
- ``f_spd(p)``, ``f_dir(p)``: wind speed (km/h) and direction (degrees)

and the surface pressure ``p_begin`` / top pressure ``p_end`` (hPa) where
needed. Accessors raise ``LookupError`` outside the profile; physically
invalid input raises :class:`~sounding_viewer.thermo.DomainError`. Both
propagate to the caller.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable

from sounding_viewer.numerics.integrate import (
    DEFAULT_THICKNESS_INTERVALS,
    hypsometric_equation,
    integrate,
)
from sounding_viewer.numerics.parcel import lift_parcel
from sounding_viewer.thermo.functions import (
    dewpoint_from_mixing_ratio,
    equivalent_potential_temperature,
    lifted_condensation_level,
    mixing_ratio,
    virtual_temperature,
    wet_bulb_temperature,
)
from sounding_viewer.utils.constants import (
    GRAVITY,
    KMH_PER_KNOT,
    ZERO_CELSIUS,
)

logger = logging.getLogger(__name__)

ValueAccessor = Callable[[float], float]

# Simpson panels for the precipitable water column integral
PW_INTERVALS = 200


@dataclass(frozen=True)
class CapeResult:
    """
    Result of a parcel buoyancy integration.

    Attributes
    ----------
    cape : float
        Convective available potential energy (J/kg), >= 0
    cin : float
        Convective inhibition (J/kg), <= 0
    lfc : float
        Level of free convection (hPa), NaN without positive buoyancy
    el : float
        Equilibrium level (hPa), NaN without positive buoyancy
    """
    cape: float
    cin: float
    lfc: float
    el: float


def _parcel_virtual_temperature(T: float, P: float, lcl: float, w: float) -> float:
    # Below the LCL the parcel keeps its initial mixing ratio, above it is saturated
    if P > lcl:
        Td = min(dewpoint_from_mixing_ratio(w, P), T)
    else:
        Td = T
    return virtual_temperature(T, Td, P)


def compute_cape(
    f_t: ValueAccessor,
    f_td: ValueAccessor,
    p_begin: float,
    p_end: float,
    p_step: float = 1.0,
    thickness_intervals: int = DEFAULT_THICKNESS_INTERVALS,
) -> CapeResult:
    """
    Integrate the buoyancy of a parcel lifted from ``p_begin`` to ``p_end``.

    Each step contributes ``g * (Tv_parcel - Tv_env) / Tv_env * dz`` where
    ``dz`` is the hypsometric thickness of the step. Positive contributions
    add to CAPE. Negative contributions add to CIN only when a positive
    layer follows them, so the stable layer above the equilibrium level is
    not counted.

    Parameters
    ----------
    f_t, f_td : callable
        Temperature and dewpoint accessors (Celsius)
    p_begin : float
        Parcel starting pressure (hPa)
    p_end : float
        Top of the integration (hPa)
    p_step : float
        Parcel pressure step (hPa)
    thickness_intervals : int
        Simpson panels per step thickness

    Returns
    -------
    result : CapeResult
    """
    t_initial = f_t(p_begin)
    td_initial = f_td(p_begin)
    lcl = lifted_condensation_level(p_begin, t_initial, td_initial)
    w_initial = mixing_ratio(td_initial, p_begin)

    cape = 0.0
    cin = 0.0
    pending_cin = 0.0
    lfc = math.nan
    el = math.nan

    prev_pressure = p_begin
    ascent = lift_parcel(t_initial, p_begin, p_end, lcl, p_step, thickness_intervals)
    for P, Tp in ascent:
        tv_env = virtual_temperature(f_t(P), f_td(P), P) + ZERO_CELSIUS
        tv_parcel = _parcel_virtual_temperature(Tp, P, lcl, w_initial) + ZERO_CELSIUS
        dz = hypsometric_equation(prev_pressure, P, f_t, f_td, thickness_intervals)

        energy = GRAVITY * (tv_parcel - tv_env) / tv_env * dz
        if energy > 0:
            if math.isnan(lfc):
                lfc = P
            el = P
            cape += energy
            cin += pending_cin
            pending_cin = 0.0
        else:
            pending_cin += energy

        prev_pressure = P

    return CapeResult(cape=cape, cin=cin, lfc=lfc, el=el)


def compute_max_updraft(cape: float) -> float:
    """Theoretical maximum updraft speed (m/s) for a given CAPE (J/kg)."""
    return math.sqrt(2 * cape)


def compute_lifted_index(
    f_t: ValueAccessor,
    f_td: ValueAccessor,
    p_begin: float,
    p_top: float = 500.0,
    p_step: float = 1.0,
) -> float:
    """
    Lifted index.

    Environmental temperature at ``p_top`` minus the virtual temperature of
    a parcel lifted there from ``p_begin``. Negative values mean the parcel
    is warmer than its environment.
    """
    if p_begin < p_top:
        raise ValueError(f"Parcel at {p_begin} hPa starts above {p_top} hPa")

    t_initial = f_t(p_begin)
    td_initial = f_td(p_begin)
    lcl = lifted_condensation_level(p_begin, t_initial, td_initial)
    w_initial = mixing_ratio(td_initial, p_begin)

    final = lift_parcel(t_initial, p_begin, p_top, lcl, p_step).final()
    tv_parcel = _parcel_virtual_temperature(final.temperature, final.pressure, lcl, w_initial)
    return f_t(p_top) - tv_parcel


def compute_showalter(f_t: ValueAccessor, f_td: ValueAccessor, p_step: float = 1.0) -> float:
    """Showalter index: lifted index of the 850 hPa parcel."""
    return compute_lifted_index(f_t, f_td, 850.0, 500.0, p_step)


def compute_most_unstable(
    f_t: ValueAccessor,
    f_td: ValueAccessor,
    p_begin: float,
    p_top: float = 500.0,
    p_step: float = 5.0,
) -> float:
    """
    Pressure of the most unstable parcel.

    Scans from ``p_begin`` up to ``p_top`` in ``p_step`` increments and
    returns the pressure with the highest equivalent potential temperature.
    The lowest level wins ties.

    Raises
    ------
    ValueError
        If no level in the scan has a finite equivalent potential temperature
    """
    best_pressure = math.nan
    best_theta_e = -math.inf

    P = p_begin
    while P >= p_top:
        theta_e = equivalent_potential_temperature(f_t(P), f_td(P), P)
        if theta_e > best_theta_e:
            best_theta_e = theta_e
            best_pressure = P
        P -= p_step

    if math.isnan(best_pressure):
        raise ValueError(f"No valid level between {p_begin} and {p_top} hPa")

    logger.debug(f"Most unstable parcel at {best_pressure:.1f} hPa, theta-e {best_theta_e:.2f} C")
    return best_pressure


def compute_pw(
    f_td: ValueAccessor,
    p_begin: float,
    p_end: float,
    m: int = PW_INTERVALS,
) -> float:
    """
    Precipitable water.

    Parameters
    ----------
    f_td : callable
        Dewpoint accessor (Celsius)
    p_begin, p_end : float
        Bottom and top of the column (hPa)
    m : int
        Simpson panels

    Returns
    -------
    pw : float
        Precipitable water (mm)
    """
    def specific_content(p: float) -> float:
        return mixing_ratio(f_td(p), p) / 1000

    # hPa -> Pa, kg/m^2 == mm
    return integrate(specific_content, p_end, p_begin, m) * 100 / GRAVITY


# =============================================================================
# Closed-form indices
# =============================================================================

def compute_k(f_t: ValueAccessor, f_td: ValueAccessor) -> float:
    """K index."""
    return f_t(850) + f_td(850) + f_td(700) - f_t(700) - f_t(500)


def compute_tt(f_t: ValueAccessor, f_td: ValueAccessor) -> float:
    """Totals totals."""
    return f_t(850) + f_td(850) - 2 * f_t(500)


def compute_vt(f_t: ValueAccessor) -> float:
    """Vertical totals."""
    return f_t(850) - f_t(500)


def compute_ct(f_t: ValueAccessor, f_td: ValueAccessor) -> float:
    """Cross totals."""
    return f_td(850) - f_t(500)


def compute_soaring(f_t: ValueAccessor, f_td: ValueAccessor) -> float:
    """Soaring index: vertical totals reduced by the 850 and 700 hPa dewpoint depressions."""
    return f_t(850) - f_t(500) - (f_t(850) - f_td(850)) - (f_t(700) - f_td(700))


def compute_boyden(f_t: ValueAccessor, f_z: ValueAccessor) -> float:
    """Boyden index from the 1000-700 hPa thickness (dam) and the 700 hPa temperature."""
    return (f_z(700) / 10 - f_z(1000) / 10) - f_t(700) - 200


def compute_mji(f_t: ValueAccessor, f_td: ValueAccessor) -> float:
    """Modified Jefferson index."""
    tw850 = wet_bulb_temperature(f_t(850), f_td(850), 850)
    return 1.6 * tw850 - f_t(500) - 0.5 * (f_t(700) - f_td(700))


def compute_rackliff(f_t: ValueAccessor, f_td: ValueAccessor) -> float:
    """Rackliff index."""
    tw850 = wet_bulb_temperature(f_t(850), f_td(850), 850)
    return tw850 - f_t(500)


def compute_thompson(f_t: ValueAccessor, f_td: ValueAccessor, p_begin: float) -> float:
    """Thompson index: K index minus the surface lifted index."""
    return compute_k(f_t, f_td) - compute_lifted_index(f_t, f_td, p_begin)


def compute_modified_k(f_t: ValueAccessor, f_td: ValueAccessor, p_begin: float) -> float:
    """K index with the 850 hPa values replaced by surface values."""
    t_sfc = f_t(p_begin)
    td_sfc = f_td(p_begin)
    return (t_sfc - f_t(500)) + td_sfc - (f_t(700) - f_td(700))


def compute_modified_tt(f_t: ValueAccessor, f_td: ValueAccessor, p_begin: float) -> float:
    """Totals totals with the 850 hPa values replaced by surface values."""
    return f_t(p_begin) + f_td(p_begin) - 2 * f_t(500)


def compute_cii(f_t: ValueAccessor, f_td: ValueAccessor, p_begin: float) -> float:
    """Convective instability index of Reap."""
    theta_e700 = equivalent_potential_temperature(f_t(700), f_td(700), 700)
    theta_e_sfc = equivalent_potential_temperature(f_t(p_begin), f_td(p_begin), p_begin)
    theta_e850 = equivalent_potential_temperature(f_t(850), f_td(850), 850)
    return theta_e700 - (theta_e_sfc + theta_e850) / 2


def compute_fsi(
    f_t: ValueAccessor,
    f_td: ValueAccessor,
    f_spd: ValueAccessor,
    p_begin: float,
) -> float:
    """Fog stability index, with the 850 hPa wind in knots."""
    spd850 = f_spd(850) / KMH_PER_KNOT
    return 4 * f_t(p_begin) - 2 * (f_t(850) + f_td(p_begin)) + spd850


def compute_dci(f_t: ValueAccessor, f_td: ValueAccessor, p_begin: float) -> float:
    """Deep convective index."""
    return f_t(850) + f_td(850) - compute_lifted_index(f_t, f_td, p_begin)


def compute_ko(f_t: ValueAccessor, f_td: ValueAccessor) -> float:
    """Ko index."""
    theta_e = {
        p: equivalent_potential_temperature(f_t(p), f_td(p), p)
        for p in (1000, 850, 700, 500)
    }
    return 0.5 * (theta_e[500] + theta_e[700]) - 0.5 * (theta_e[850] + theta_e[1000])


def compute_pii(f_t: ValueAccessor, f_td: ValueAccessor, f_z: ValueAccessor) -> float:
    """Potential instability index (K/km) between 925 and 500 hPa."""
    theta_e925 = equivalent_potential_temperature(f_t(925), f_td(925), 925)
    theta_e500 = equivalent_potential_temperature(f_t(500), f_td(500), 500)
    return (theta_e925 - theta_e500) / (f_z(500) - f_z(925)) * 1000


def compute_humidity_index(f_t: ValueAccessor, f_td: ValueAccessor) -> float:
    """Humidity index: sum of the 850, 700 and 500 hPa dewpoint depressions."""
    return sum(f_t(p) - f_td(p) for p in (850, 700, 500))
