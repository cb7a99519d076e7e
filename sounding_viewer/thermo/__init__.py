"""
Thermodynamic functions.

Pure scalar formulas for humidity, virtual/potential/equivalent-potential and
wet bulb temperatures, the lifted condensation level and the moist adiabatic
lapse rate, plus wind vector helpers.

Functions
---------
vapor_pressure, saturated_vapor_pressure
    Empirical saturation formula (hPa)
mixing_ratio, saturated_mixing_ratio, mixing_ratio_from_vapor_pressure
    Mixing ratios (g/kg)
relative_humidity, dewpoint_temperature
    Relative humidity and its inverse
virtual_temperature, potential_temperature, equivalent_potential_temperature
    Derived temperatures (Celsius)
wet_bulb_temperature
    Fixed-iteration psychrometric solve
lifted_condensation_level, lifted_condensation_level_temp
    LCL pressure and temperature
moist_adiabatic_lapse_rate
    Saturated lapse rate (K/m)
"""

from sounding_viewer.thermo.functions import (
    DomainError,
    vapor_pressure,
    saturated_vapor_pressure,
    mixing_ratio_from_vapor_pressure,
    mixing_ratio,
    saturated_mixing_ratio,
    relative_humidity,
    dewpoint_temperature,
    dewpoint_from_vapor_pressure,
    dewpoint_from_mixing_ratio,
    specific_humidity_from_mixing_ratio,
    specific_humidity,
    virtual_temperature,
    potential_temperature,
    equivalent_potential_temperature,
    wet_bulb_temperature,
    lifted_condensation_level_temp,
    lifted_condensation_level,
    moist_adiabatic_lapse_rate,
    wind_speed,
    wind_direction,
    wind_components,
)

__all__ = [
    "DomainError",
    "vapor_pressure",
    "saturated_vapor_pressure",
    "mixing_ratio_from_vapor_pressure",
    "mixing_ratio",
    "saturated_mixing_ratio",
    "relative_humidity",
    "dewpoint_temperature",
    "dewpoint_from_vapor_pressure",
    "dewpoint_from_mixing_ratio",
    "specific_humidity_from_mixing_ratio",
    "specific_humidity",
    "virtual_temperature",
    "potential_temperature",
    "equivalent_potential_temperature",
    "wet_bulb_temperature",
    "lifted_condensation_level_temp",
    "lifted_condensation_level",
    "moist_adiabatic_lapse_rate",
    "wind_speed",
    "wind_direction",
    "wind_components",
]
