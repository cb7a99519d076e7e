"""
Quadrature used by the sounding calculations.

Thickness of a pressure layer is computed from the hypsometric equation,

    dz = (Rd / g) * Tv(p) / p * dp

integrated with composite Simpson's rule. The number of Simpson panels is
chosen per call site: a couple of panels for the thickness of a single parcel
step, a few hundred for column integrals such as precipitable water.
"""

from typing import Callable

from sounding_viewer.thermo.functions import virtual_temperature
from sounding_viewer.utils.constants import (
    DRY_AIR_GAS_CONSTANT,
    GRAVITY,
    ZERO_CELSIUS,
)

# Simpson panels for the thickness of one parcel step (4 subintervals)
DEFAULT_THICKNESS_INTERVALS = 2


def integrate(f: Callable[[float], float], a: float, b: float, m: int) -> float:
    """
    Composite Simpson's rule.

    Parameters
    ----------
    f : callable
        Integrand of one variable
    a, b : float
        Integration bounds. ``b < a`` yields the negated integral.
    m : int
        Number of Simpson panels; the interval is split into ``2 * m``
        subintervals

    Returns
    -------
    integral : float
        Approximation of the integral of ``f`` from ``a`` to ``b``
    """
    if m < 1:
        raise ValueError(f"Number of Simpson panels must be at least 1, got {m}")

    n = 2 * m
    h = (b - a) / n

    total = f(a) + f(b)
    for i in range(1, n):
        weight = 4 if i % 2 else 2
        total += weight * f(a + i * h)

    return total * h / 3


def hypsometric_equation(
    p_bottom: float,
    p_top: float,
    f_t: Callable[[float], float],
    f_td: Callable[[float], float],
    m: int = DEFAULT_THICKNESS_INTERVALS,
) -> float:
    """
    Thickness of a layer using the hypsometric equation.

    Parameters
    ----------
    p_bottom : float
        Pressure at the bottom of the layer (hPa)
    p_top : float
        Pressure at the top of the layer (hPa)
    f_t : callable
        Temperature (Celsius) at a given pressure (hPa)
    f_td : callable
        Dewpoint (Celsius) at a given pressure (hPa)
    m : int
        Number of Simpson panels

    Returns
    -------
    thickness : float
        Layer thickness in meters
    """
    def integrand(p: float) -> float:
        tv = virtual_temperature(f_t(p), f_td(p), p) + ZERO_CELSIUS
        return (DRY_AIR_GAS_CONSTANT / GRAVITY) * tv / p

    return integrate(integrand, p_top, p_bottom, m)
