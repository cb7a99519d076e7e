"""
Physical constants and fixed policy values for sounding calculations.

Units follow the sounding conventions used throughout the package:
pressure in hPa, temperature in Celsius, height in meters, wind speed in km/h
unless a name says otherwise.
"""

# =============================================================================
# Thermodynamic constants
# =============================================================================

# 0 degC in Kelvin
ZERO_CELSIUS = 273.15

# Specific gas constant of dry air [J/(kg·K)]
DRY_AIR_GAS_CONSTANT = 287.0

# Specific gas constant of water vapour [J/(kg·K)]
WATER_VAPOR_GAS_CONSTANT = 461.5

# Specific heat of dry air at constant pressure [J/(kg·K)]
DRY_AIR_SPECIFIC_HEAT = 1003.5

# Latent heat of vaporization of water [J/kg]
LATENT_HEAT_VAPORIZATION = 2501000.0

# Gravitational acceleration [m/s^2]
GRAVITY = 9.8076

# Poisson exponent Rd/cp used for potential temperature
POISSON_EXPONENT = 0.286

# Reference pressure for potential temperatures [hPa]
REFERENCE_PRESSURE = 1000.0

# =============================================================================
# Empirical humidity formula (Magnus/Tetens, base 10)
# =============================================================================

# e = 6.11 * 10^(7.5 T / (237.3 + T))
MAGNUS_E0 = 6.11  # hPa
MAGNUS_A = 7.5
MAGNUS_B = 237.3  # degC

# 1000 * Rd/Rv, gives the mixing ratio in g/kg
MIXING_RATIO_FACTOR = 621.97

# 1 - Rd/Rv, used for virtual temperature
VIRTUAL_TEMPERATURE_FACTOR = 0.379

# Wet bulb fixed-point iteration count
WET_BULB_ITERATIONS = 50

# =============================================================================
# Unit conversions
# =============================================================================

KMH_PER_MS = 3.6
KMH_PER_KNOT = 1.852

# =============================================================================
# Sounding policy values
# =============================================================================

# Levels above this pressure [hPa] start enabled when a sounding is loaded
ENABLE_PRESSURE_THRESHOLD = 300.0

# Sentinel used by radiosonde text formats for missing data
MISSING_VALUE_SENTINEL = 99999.0
