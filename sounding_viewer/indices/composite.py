"""
Effective inflow layer and composite severe-weather indices.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sounding_viewer.indices.thermodynamic import ValueAccessor, compute_cape
from sounding_viewer.numerics.integrate import hypsometric_equation
from sounding_viewer.thermo.functions import DomainError
from sounding_viewer.utils.constants import KMH_PER_KNOT

logger = logging.getLogger(__name__)

INFLOW_CAPE_MIN = 100.0   # J/kg
INFLOW_CIN_MIN = -250.0   # J/kg


@dataclass(frozen=True)
class InflowLayer:
    """Effective inflow layer bounds in pressure (hPa) and height (m)."""
    p_bottom: float
    p_top: float
    z_bottom: float
    z_top: float


def compute_inflow_layers(
    f_t: ValueAccessor,
    f_td: ValueAccessor,
    p_begin: float,
    p_end: float,
    scan_step: float = 5.0,
    p_step: float = 5.0,
    cape_min: float = INFLOW_CAPE_MIN,
    cin_min: float = INFLOW_CIN_MIN,
) -> List[Tuple[float, float]]:
    """
    Contiguous runs of levels whose parcels qualify for the inflow layer.

    A parcel qualifies when its CAPE exceeds ``cape_min`` and its CIN
    exceeds ``cin_min``. Supersaturated levels do not qualify.

    Returns
    -------
    layers : list of (p_bottom, p_top)
        Runs in scan order, from the surface upwards
    """
    layers = []
    bottom = top = None

    P = p_begin
    while P >= p_end:
        try:
            result = compute_cape(f_t, f_td, P, p_end, p_step)
            qualifies = result.cape > cape_min and result.cin > cin_min
        except DomainError as e:
            logger.debug(f"Parcel at {P:.1f} hPa skipped: {e}")
            qualifies = False

        if qualifies:
            if bottom is None:
                bottom = P
            top = P
        elif bottom is not None:
            layers.append((bottom, top))
            bottom = top = None

        P -= scan_step

    if bottom is not None:
        layers.append((bottom, top))

    return layers


def compute_inflow_layer(
    f_t: ValueAccessor,
    f_td: ValueAccessor,
    f_z: ValueAccessor,
    p_begin: float,
    p_end: float,
    scan_step: float = 5.0,
    p_step: float = 5.0,
    cape_min: float = INFLOW_CAPE_MIN,
    cin_min: float = INFLOW_CIN_MIN,
) -> Optional[InflowLayer]:
    """
    Effective inflow layer.

    The thickest qualifying run (hypsometric thickness) is chosen; the
    lowest one wins ties.

    Returns
    -------
    layer : InflowLayer or None
        None when no level qualifies
    """
    layers = compute_inflow_layers(
        f_t, f_td, p_begin, p_end, scan_step, p_step, cape_min, cin_min
    )
    if not layers:
        return None

    p_bottom, p_top = max(
        layers, key=lambda layer: hypsometric_equation(layer[0], layer[1], f_t, f_td)
    )
    return InflowLayer(
        p_bottom=p_bottom,
        p_top=p_top,
        z_bottom=f_z(p_bottom),
        z_top=f_z(p_top),
    )


def compute_ehi(cape: float, srh: float) -> float:
    """Energy helicity index."""
    return cape * srh / 160000


def compute_sweat(
    f_t: ValueAccessor,
    f_td: ValueAccessor,
    f_spd: ValueAccessor,
    f_dir: ValueAccessor,
) -> float:
    """
    Severe weather threat index.

    Wind speeds are converted to knots. The shear term only applies to a
    veering wind between 850 and 500 hPa with both speeds at least 15 kt,
    850 hPa direction in 130-250 and 500 hPa direction in 210-310 degrees.
    """
    td850 = f_td(850)
    total_totals = f_t(850) + td850 - 2 * f_t(500)
    spd850 = f_spd(850) / KMH_PER_KNOT
    spd500 = f_spd(500) / KMH_PER_KNOT
    dir850 = f_dir(850)
    dir500 = f_dir(500)

    shear_term = 0.0
    if (
        130 <= dir850 <= 250
        and 210 <= dir500 <= 310
        and dir500 - dir850 > 0
        and spd850 >= 15
        and spd500 >= 15
    ):
        shear_term = 125 * (math.sin(math.radians(dir500 - dir850)) + 0.2)

    return (
        12 * max(td850, 0.0)
        + 20 * max(total_totals - 49, 0.0)
        + 2 * spd850
        + spd500
        + shear_term
    )


def compute_scp(mucape: float, esrh: float, ebwd: float) -> float:
    """
    Supercell composite parameter.

    Parameters
    ----------
    mucape : float
        Most unstable CAPE (J/kg)
    esrh : float
        Effective storm-relative helicity (m^2/s^2)
    ebwd : float
        Effective bulk wind difference (m/s)
    """
    if ebwd < 10:
        shear_term = 0.0
    elif ebwd > 20:
        shear_term = 1.0
    else:
        shear_term = ebwd / 20
    return (mucape / 1000) * (esrh / 50) * shear_term
