"""
Thermodynamic functions for atmospheric soundings.

All functions operate on scalars. Temperatures are in Celsius, pressures in
hPa, mixing ratios in g/kg. Functions are total over their physical domain
and raise :class:`DomainError` (or return a non-finite value where noted)
outside it; callers are expected to propagate these errors.

References
----------
- Bolton, D. (1980). The computation of equivalent potential temperature.
  Monthly Weather Review, 108, 1046-1053.
"""

import math

from sounding_viewer.utils.constants import (
    ZERO_CELSIUS,
    DRY_AIR_GAS_CONSTANT,
    WATER_VAPOR_GAS_CONSTANT,
    DRY_AIR_SPECIFIC_HEAT,
    LATENT_HEAT_VAPORIZATION,
    GRAVITY,
    POISSON_EXPONENT,
    REFERENCE_PRESSURE,
    MAGNUS_E0,
    MAGNUS_A,
    MAGNUS_B,
    MIXING_RATIO_FACTOR,
    VIRTUAL_TEMPERATURE_FACTOR,
    WET_BULB_ITERATIONS,
)


class DomainError(ValueError):
    """Raised when an input is physically invalid (e.g. temperature below dewpoint)."""
    pass


# =============================================================================
# Humidity
# =============================================================================

def saturated_vapor_pressure(T: float) -> float:
    """
    Saturated vapor pressure over water.

    Parameters
    ----------
    T : float
        Temperature in Celsius

    Returns
    -------
    es : float
        Saturated vapor pressure in hPa
    """
    return MAGNUS_E0 * 10 ** ((MAGNUS_A * T) / (MAGNUS_B + T))


def vapor_pressure(Td: float) -> float:
    """Vapor pressure in hPa for a dewpoint in Celsius."""
    return saturated_vapor_pressure(Td)


def mixing_ratio_from_vapor_pressure(e: float, P: float) -> float:
    """
    Mixing ratio from vapor pressure.

    Parameters
    ----------
    e : float
        Vapor pressure in hPa
    P : float
        Station pressure in hPa

    Returns
    -------
    w : float
        Mixing ratio in g/kg
    """
    return MIXING_RATIO_FACTOR * (e / (P - e))


def mixing_ratio(Td: float, P: float) -> float:
    """Mixing ratio (g/kg) from dewpoint (Celsius) and pressure (hPa)."""
    return mixing_ratio_from_vapor_pressure(vapor_pressure(Td), P)


def saturated_mixing_ratio(T: float, P: float) -> float:
    """Saturated mixing ratio (g/kg) from temperature (Celsius) and pressure (hPa)."""
    return mixing_ratio_from_vapor_pressure(saturated_vapor_pressure(T), P)


def relative_humidity(T: float, Td: float, P: float) -> float:
    """
    Relative humidity as the ratio of mixing ratio to saturated mixing ratio.

    Returns
    -------
    rh : float
        Unitless value between 0 and 1
    """
    return mixing_ratio(Td, P) / saturated_mixing_ratio(T, P)


def dewpoint_temperature(T: float, RH: float) -> float:
    """
    Dewpoint temperature from temperature and relative humidity.

    Closed-form inverse of the saturation formula.

    Parameters
    ----------
    T : float
        Temperature in Celsius
    RH : float
        Relative humidity (0-1)

    Returns
    -------
    Td : float
        Dewpoint temperature in Celsius. NaN when ``RH * es / 6.11 <= 0``,
        i.e. when the humidity has no physical dewpoint.
    """
    x = saturated_vapor_pressure(T) * RH / MAGNUS_E0
    if not x > 0:
        return math.nan

    a = MAGNUS_B * math.log(x)
    b = MAGNUS_A * math.log(10) - math.log(x)
    return a / b


def dewpoint_from_vapor_pressure(e: float) -> float:
    """Dewpoint (Celsius) at which the vapor pressure ``e`` (hPa) saturates."""
    if not e > 0:
        return math.nan

    x = math.log10(e / MAGNUS_E0)
    return MAGNUS_B * x / (MAGNUS_A - x)


def dewpoint_from_mixing_ratio(w: float, P: float) -> float:
    """Dewpoint (Celsius) of air with mixing ratio ``w`` (g/kg) at pressure ``P`` (hPa)."""
    e = w * P / (MIXING_RATIO_FACTOR + w)
    return dewpoint_from_vapor_pressure(e)


def specific_humidity_from_mixing_ratio(w: float) -> float:
    """Specific humidity (g/kg) from mixing ratio (g/kg)."""
    rv = w / 1000
    return 1000 * rv / (1 + rv)


def specific_humidity(Td: float, P: float) -> float:
    """Specific humidity (g/kg) from dewpoint (Celsius) and pressure (hPa)."""
    return specific_humidity_from_mixing_ratio(mixing_ratio(Td, P))


# =============================================================================
# Temperatures
# =============================================================================

def virtual_temperature(T: float, Td: float, P: float) -> float:
    """
    Virtual temperature.

    Parameters
    ----------
    T : float
        Temperature in Celsius
    Td : float
        Dewpoint temperature in Celsius
    P : float
        Pressure in hPa

    Returns
    -------
    Tv : float
        Virtual temperature in Celsius
    """
    e = vapor_pressure(Td)
    return (T + ZERO_CELSIUS) / (1 - VIRTUAL_TEMPERATURE_FACTOR * (e / P)) - ZERO_CELSIUS


def potential_temperature(T: float, P: float, P0: float = REFERENCE_PRESSURE) -> float:
    """Potential temperature (Celsius) of air at ``T`` (Celsius) and ``P`` (hPa)."""
    return (T + ZERO_CELSIUS) * (P0 / P) ** POISSON_EXPONENT - ZERO_CELSIUS


def _bolton_lcl_temperature_kelvin(TK: float, TD: float) -> float:
    # Bolton (1980) formula 15
    return 1 / (1 / (TD - 56) + math.log(TK / TD) / 800) + 56


def equivalent_potential_temperature(
    T: float,
    Td: float,
    P: float,
    P0: float = REFERENCE_PRESSURE,
) -> float:
    """
    Equivalent potential temperature using the Bolton formulas.

    Formula (15) gives the temperature at the LCL, formula (43) the
    equivalent potential temperature.

    Parameters
    ----------
    T : float
        Temperature in Celsius
    Td : float
        Dewpoint temperature in Celsius
    P : float
        Pressure in hPa
    P0 : float
        Reference pressure in hPa

    Returns
    -------
    theta_e : float
        Equivalent potential temperature in Celsius
    """
    TK = T + ZERO_CELSIUS
    TD = Td + ZERO_CELSIUS
    r = mixing_ratio(Td, P) / 1000

    TL = _bolton_lcl_temperature_kelvin(TK, TD)
    theta_e = (
        TK
        * (P0 / P) ** (0.2854 * (1 - 0.28 * r))
        * math.exp((3.376 / TL - 0.00254) * r * 1000 * (1 + 0.81 * r))
    )

    return theta_e - ZERO_CELSIUS


def wet_bulb_temperature(T: float, Td: float, P: float) -> float:
    """
    Wet bulb temperature by fixed-point iteration.

    The estimate is refined a fixed number of times with the psychrometric
    equation linearized around the mean of the current estimate and the
    dewpoint. There is no convergence test; the result is always a weighted
    mean of ``T`` and ``Td``.

    Parameters
    ----------
    T : float
        Temperature in Celsius
    Td : float
        Dewpoint temperature in Celsius
    P : float
        Pressure in hPa

    Returns
    -------
    Tw : float
        Wet bulb temperature in Celsius
    """
    psychrometric_constant = 0.000665 * P / 10

    Twet = 0.0
    for _ in range(WET_BULB_ITERATIONS):
        tw_td_average = (Twet + Td) / 2
        es_average = saturated_vapor_pressure(tw_td_average) / 10  # kPa
        delta = 17.502 * 240.97 * es_average / (240.97 + tw_td_average) ** 2

        Twet = (psychrometric_constant * T + delta * Td) / (delta + psychrometric_constant)

    return Twet


# =============================================================================
# Lifted condensation level
# =============================================================================

def lifted_condensation_level_temp(T: float, Td: float) -> float:
    """
    Temperature at the lifted condensation level.

    Parameters
    ----------
    T : float
        Temperature in Celsius
    Td : float
        Dewpoint temperature in Celsius

    Returns
    -------
    TL : float
        LCL temperature in Celsius

    Raises
    ------
    DomainError
        If the air is supersaturated (``T < Td``)
    """
    if T < Td:
        raise DomainError(
            f"Temperature ({T:.2f} C) cannot be less than dewpoint temperature ({Td:.2f} C)"
        )

    TL = _bolton_lcl_temperature_kelvin(T + ZERO_CELSIUS, Td + ZERO_CELSIUS)
    return TL - ZERO_CELSIUS


def lifted_condensation_level(P: float, T: float, Td: float) -> float:
    """
    Pressure of the lifted condensation level.

    The LCL temperature is mapped back onto the parcel's dry adiabat
    (constant potential temperature). Saturated air (``T == Td``) returns
    ``P`` itself.

    Parameters
    ----------
    P : float
        Pressure in hPa
    T : float
        Temperature in Celsius
    Td : float
        Dewpoint temperature in Celsius

    Returns
    -------
    p_lcl : float
        LCL pressure in hPa
    """
    TL = lifted_condensation_level_temp(T, Td) + ZERO_CELSIUS
    theta = potential_temperature(T, P) + ZERO_CELSIUS
    return REFERENCE_PRESSURE * (TL / theta) ** (1 / POISSON_EXPONENT)


def moist_adiabatic_lapse_rate(T: float, P: float) -> float:
    """
    Saturated adiabatic lapse rate.

    Parameters
    ----------
    T : float
        Temperature in Celsius
    P : float
        Pressure in hPa

    Returns
    -------
    gamma_w : float
        Lapse rate in K/m
    """
    TK = T + ZERO_CELSIUS
    r = saturated_mixing_ratio(T, P) / 1000  # kg/kg
    Hv = LATENT_HEAT_VAPORIZATION

    X = 1 + (Hv * r) / (DRY_AIR_GAS_CONSTANT * TK)
    Y = DRY_AIR_SPECIFIC_HEAT + (Hv * Hv * r) / (WATER_VAPOR_GAS_CONSTANT * TK * TK)
    return GRAVITY * X / Y


# =============================================================================
# Wind
# =============================================================================

def wind_speed(u: float, v: float) -> float:
    """Wind speed in the unit of the components."""
    return math.hypot(u, v)


def wind_direction(u: float, v: float) -> float:
    """Meteorological wind direction (degrees the wind blows from) of a wind vector."""
    deg = -math.atan2(v, u) * 180 / math.pi - 90
    return deg + 360 if deg < 0 else deg


def wind_components(speed: float, direction: float) -> tuple:
    """
    Wind vector from speed and meteorological direction.

    Returns
    -------
    (u, v) : tuple of float
        Eastward and northward components in the unit of ``speed``
    """
    rad = math.radians(direction)
    return -speed * math.sin(rad), -speed * math.cos(rad)
