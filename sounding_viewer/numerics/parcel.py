"""
Parcel lifting.

A parcel rises dry-adiabatically (constant potential temperature) from its
starting level to the lifted condensation level, then follows the moist
adiabat, stepping down in pressure by a fixed increment until the end
pressure is reached.

An ascent is a finite, restartable sequence: every iteration over a
:class:`ParcelAscent` starts a fresh walk from the initial state.

Examples
--------
>>> ascent = lift_parcel(25.0, 1000.0, 500.0, lcl=880.0, delta_p=10.0)
>>> for pressure, temperature in ascent:
...     pass
>>> ascent.final().pressure
500.0
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple

from sounding_viewer.numerics.integrate import (
    DEFAULT_THICKNESS_INTERVALS,
    hypsometric_equation,
)
from sounding_viewer.thermo.functions import moist_adiabatic_lapse_rate
from sounding_viewer.utils.constants import (
    POISSON_EXPONENT,
    ZERO_CELSIUS,
)

logger = logging.getLogger(__name__)


class ParcelPhase(Enum):
    """Stage of a parcel ascent."""
    DRY_ASCENT = "dry"
    MOIST_ASCENT = "moist"
    TERMINATED = "terminated"


class ParcelPoint(NamedTuple):
    """Parcel state after one pressure step."""
    pressure: float
    temperature: float


@dataclass(frozen=True)
class ParcelAscent:
    """
    Finite sequence of parcel states from ``p_initial`` up to ``p_end``.

    Attributes
    ----------
    t_initial : float
        Initial parcel temperature (Celsius)
    p_initial : float
        Initial pressure (hPa)
    p_end : float
        Pressure at which the ascent terminates (hPa)
    lcl : float
        Pressure where the parcel switches from the dry to the moist
        adiabat (hPa). ``lcl <= p_end`` gives a purely dry ascent,
        ``lcl >= p_initial`` a purely saturated one.
    delta_p : float
        Pressure decrement per step (hPa)
    thickness_intervals : int
        Simpson panels for the thickness of each moist step

    Notes
    -----
    The initial state itself is not part of the sequence. The last step of
    each phase is shortened so that the dry phase ends exactly on the LCL
    and the ascent ends exactly on ``p_end``. The walk also stops once the
    pressure no longer exceeds ``delta_p``, so it never reaches zero.
    """
    t_initial: float
    p_initial: float
    p_end: float
    lcl: float
    delta_p: float = 1.0
    thickness_intervals: int = DEFAULT_THICKNESS_INTERVALS

    def __post_init__(self):
        if not self.delta_p > 0:
            raise ValueError(f"Pressure step must be positive, got {self.delta_p}")

    @property
    def dry_top(self) -> float:
        """Pressure where the dry phase ends."""
        return max(min(self.lcl, self.p_initial), self.p_end)

    def phase(self, pressure: float) -> ParcelPhase:
        """Phase the parcel is in at ``pressure``."""
        if pressure < self.p_end:
            return ParcelPhase.TERMINATED
        if pressure >= self.dry_top and self.dry_top < self.p_initial:
            return ParcelPhase.DRY_ASCENT
        return ParcelPhase.MOIST_ASCENT

    def __iter__(self) -> Iterator[ParcelPoint]:
        return self._walk()

    def final(self) -> ParcelPoint:
        """Last state of the ascent, or the initial state if there are no steps."""
        point = ParcelPoint(self.p_initial, self.t_initial)
        for point in self:
            pass
        return point

    def _pressures(self, start: float, stop: float) -> Iterator[float]:
        P = start
        while P > stop and P > self.delta_p:
            P = max(P - self.delta_p, stop)
            yield P

    def _walk(self) -> Iterator[ParcelPoint]:
        P = self.p_initial
        T = self.t_initial

        # Dry adiabat
        TK = self.t_initial + ZERO_CELSIUS
        for P in self._pressures(self.p_initial, self.dry_top):
            T = TK * (P / self.p_initial) ** POISSON_EXPONENT - ZERO_CELSIUS
            yield ParcelPoint(P, T)

        # Moist adiabat from wherever the dry phase stopped
        for P_next in self._pressures(P, self.p_end):
            dz = hypsometric_equation(
                P, P_next, lambda _: T, lambda _: T, self.thickness_intervals
            )
            T = T - moist_adiabatic_lapse_rate(T, P) * dz
            P = P_next
            yield ParcelPoint(P, T)


def lift_dry_parcel(
    t_initial: float,
    p_initial: float,
    p_end: float,
    delta_p: float = 1.0,
) -> ParcelAscent:
    """Lift a parcel along its dry adiabat from ``p_initial`` to ``p_end``."""
    return ParcelAscent(t_initial, p_initial, p_end, lcl=p_end, delta_p=delta_p)


def lift_saturated_parcel(
    t_initial: float,
    p_initial: float,
    p_end: float,
    delta_p: float = 1.0,
    thickness_intervals: int = DEFAULT_THICKNESS_INTERVALS,
) -> ParcelAscent:
    """Lift a saturated parcel along the moist adiabat from ``p_initial`` to ``p_end``."""
    return ParcelAscent(
        t_initial, p_initial, p_end,
        lcl=p_initial,
        delta_p=delta_p,
        thickness_intervals=thickness_intervals,
    )


def lift_parcel(
    t_initial: float,
    p_initial: float,
    p_end: float,
    lcl: float,
    delta_p: float = 1.0,
    thickness_intervals: int = DEFAULT_THICKNESS_INTERVALS,
) -> ParcelAscent:
    """
    Lift a parcel dry up to its LCL and saturated above it.

    Parameters
    ----------
    t_initial : float
        Initial temperature (Celsius)
    p_initial : float
        Initial pressure (hPa)
    p_end : float
        Pressure where the ascent stops (hPa)
    lcl : float
        Lifted condensation level (hPa)
    delta_p : float
        Pressure step (hPa)
    thickness_intervals : int
        Simpson panels per moist step

    Returns
    -------
    ascent : ParcelAscent
        Restartable sequence of (pressure, temperature) pairs
    """
    logger.debug(
        f"Lifting parcel T={t_initial:.2f} C from {p_initial:.1f} hPa "
        f"to {p_end:.1f} hPa, LCL {lcl:.1f} hPa"
    )
    return ParcelAscent(
        t_initial, p_initial, p_end,
        lcl=lcl,
        delta_p=delta_p,
        thickness_intervals=thickness_intervals,
    )
