"""
Numerical integration and parcel lifting.

Modules
-------
integrate
    Composite Simpson quadrature and the hypsometric layer thickness
parcel
    Dry/moist adiabatic parcel ascents as restartable sequences
"""

from sounding_viewer.numerics.integrate import (
    DEFAULT_THICKNESS_INTERVALS,
    integrate,
    hypsometric_equation,
)
from sounding_viewer.numerics.parcel import (
    ParcelPhase,
    ParcelPoint,
    ParcelAscent,
    lift_dry_parcel,
    lift_saturated_parcel,
    lift_parcel,
)

__all__ = [
    "DEFAULT_THICKNESS_INTERVALS",
    "integrate",
    "hypsometric_equation",
    "ParcelPhase",
    "ParcelPoint",
    "ParcelAscent",
    "lift_dry_parcel",
    "lift_saturated_parcel",
    "lift_parcel",
]
