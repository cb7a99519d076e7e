"""
Utility functions and physical constants.

This module provides the constants, configuration and output helpers used
throughout the sounding-viewer package.

Constants
---------
ZERO_CELSIUS : float
    0 degC in Kelvin
DRY_AIR_GAS_CONSTANT : float
    Specific gas constant of dry air (J/kg/K)
GRAVITY : float
    Gravitational acceleration (m/s^2)
POISSON_EXPONENT : float
    Rd/cp used for potential temperature
ENABLE_PRESSURE_THRESHOLD : float
    Levels above this pressure (hPa) start enabled

Configuration
-------------
SoundingConfig
    Complete calculation configuration dataclass
load_config
    Load configuration from YAML or JSON file
create_default_config
    Create and save default configuration file
validate_config
    Validate configuration and return issues list

Output
------
ReportFormatter (sounding_viewer.utils.output)
    Save index reports as JSON or CSV
"""

from sounding_viewer.utils.constants import (
    ZERO_CELSIUS,
    DRY_AIR_GAS_CONSTANT,
    GRAVITY,
    POISSON_EXPONENT,
    ENABLE_PRESSURE_THRESHOLD,
)
from sounding_viewer.utils.config import (
    SoundingConfig,
    ParcelConfig,
    IndexConfig,
    OutputConfig,
    load_config,
    create_default_config,
    validate_config,
)

__all__ = [
    "ZERO_CELSIUS",
    "DRY_AIR_GAS_CONSTANT",
    "GRAVITY",
    "POISSON_EXPONENT",
    "ENABLE_PRESSURE_THRESHOLD",
    # Configuration
    "SoundingConfig",
    "ParcelConfig",
    "IndexConfig",
    "OutputConfig",
    "load_config",
    "create_default_config",
    "validate_config",
]
