"""
sounding-viewer: Atmospheric sounding analysis library.

Computes sounding-derived quantities (CAPE, CIN, LFC, EL, lifted index,
storm-relative helicity and a battery of instability indices) from a
vertical profile of pressure, height, temperature, dewpoint and wind
observations, and supports live editing of that profile with every derived
quantity recomputed from the edited state.

Modules
-------
thermo
    Thermodynamic functions (humidity, derived temperatures, LCL, lapse rate)
numerics
    Simpson quadrature, hypsometric thickness and parcel ascents
profile
    Editable sounding model with interpolation queries and observers
indices
    Thermodynamic, kinematic and composite indices and the index battery
data
    Level record files (JSON, CSV)
utils
    Constants, configuration and report output
"""

__version__ = "0.1.0"
__author__ = "sounding-viewer Contributors"

from sounding_viewer.profile import Attribute, Sounding, SoundingSnapshot
from sounding_viewer.indices import IndexEngine, IndexReport

__all__ = [
    "__version__",
    "Attribute",
    "Sounding",
    "SoundingSnapshot",
    "IndexEngine",
    "IndexReport",
]
