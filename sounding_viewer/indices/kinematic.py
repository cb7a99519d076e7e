"""
Wind-based indices.

All functions take ``fn_wind(height) -> (u, v)`` with heights in meters and
wind components in m/s, and return results in m/s (shear, storm motion) or
m^2/s^2 (helicity).
"""

import math
from typing import Callable, Optional, Tuple

import numpy as np

WindAccessor = Callable[[float], Tuple[float, float]]

# Bunkers internal dynamics deviation (m/s)
BUNKERS_DEVIATION = 7.5

DEFAULT_MEAN_WIND_STEP = 100.0
DEFAULT_HELICITY_STEP = 50.0


def _sample_heights(z_bottom: float, z_top: float, dz: float) -> np.ndarray:
    if not dz > 0:
        raise ValueError(f"Height step must be positive, got {dz}")
    n = max(int(math.ceil(abs(z_top - z_bottom) / dz)), 1)
    return np.linspace(z_bottom, z_top, n + 1)


def _sample_winds(fn_wind: WindAccessor, heights: np.ndarray) -> np.ndarray:
    return np.array([fn_wind(float(h)) for h in heights], dtype=float)


def compute_shear(fn_wind: WindAccessor, z_bottom: float, z_top: float) -> float:
    """Bulk wind difference (m/s) between two heights."""
    u_bottom, v_bottom = fn_wind(z_bottom)
    u_top, v_top = fn_wind(z_top)
    return math.hypot(u_top - u_bottom, v_top - v_bottom)


def compute_mean_wind(
    fn_wind: WindAccessor,
    z_bottom: float,
    z_top: float,
    dz: float = DEFAULT_MEAN_WIND_STEP,
) -> Tuple[float, float]:
    """Non-pressure-weighted mean wind vector (m/s) of a height layer."""
    winds = _sample_winds(fn_wind, _sample_heights(z_bottom, z_top, dz))
    u, v = winds.mean(axis=0)
    return float(u), float(v)


def compute_stm(
    fn_wind: WindAccessor,
    z_begin: float,
    direction: int = 1,
    deviation: float = BUNKERS_DEVIATION,
    dz: float = DEFAULT_MEAN_WIND_STEP,
) -> Tuple[float, float]:
    """
    Bunkers storm motion.

    The 0-6 km mean wind is deviated perpendicular to the shear between the
    0-0.5 km and 5.5-6 km mean winds.

    Parameters
    ----------
    fn_wind : callable
        Wind accessor
    z_begin : float
        Surface height (m)
    direction : int
        ``1`` for the right mover, ``-1`` for the left mover
    deviation : float
        Deviation from the mean wind (m/s)
    dz : float
        Sampling step of the layer means (m)

    Returns
    -------
    (u, v) : tuple of float
        Storm motion (m/s)
    """
    if direction not in (1, -1):
        raise ValueError(f"Direction must be 1 (right) or -1 (left), got {direction}")

    mean = np.array(compute_mean_wind(fn_wind, z_begin, z_begin + 6000, dz))
    low = np.array(compute_mean_wind(fn_wind, z_begin, z_begin + 500, dz))
    high = np.array(compute_mean_wind(fn_wind, z_begin + 5500, z_begin + 6000, dz))

    shear = high - low
    magnitude = np.hypot(*shear)
    if magnitude == 0:
        return float(mean[0]), float(mean[1])

    # Shear rotated 90 degrees clockwise for the right mover
    normal = direction * np.array([shear[1], -shear[0]]) / magnitude
    u, v = mean + deviation * normal
    return float(u), float(v)


def compute_sreh(
    fn_wind: WindAccessor,
    z_bottom: float,
    z_top: float,
    storm_motion: Optional[Tuple[float, float]] = None,
    dz: float = DEFAULT_HELICITY_STEP,
) -> float:
    """
    Storm-relative helicity of a height layer.

    Parameters
    ----------
    fn_wind : callable
        Wind accessor
    z_bottom, z_top : float
        Layer bounds (m)
    storm_motion : tuple of float, optional
        Storm motion (m/s). Defaults to the Bunkers right mover computed
        from ``z_bottom``.
    dz : float
        Sampling step (m)

    Returns
    -------
    srh : float
        Helicity (m^2/s^2); positive for a veering hodograph relative to
        the storm
    """
    if storm_motion is None:
        storm_motion = compute_stm(fn_wind, z_bottom, 1)
    cu, cv = storm_motion

    winds = _sample_winds(fn_wind, _sample_heights(z_bottom, z_top, dz))
    sru = winds[:, 0] - cu
    srv = winds[:, 1] - cv
    return float(np.sum(sru[1:] * srv[:-1] - sru[:-1] * srv[1:]))
