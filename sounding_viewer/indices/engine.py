"""
Index battery.

:class:`IndexEngine` evaluates every index of the battery against a sounding
or a snapshot of one. Indices are isolated from each other: an index whose
inputs are out of range or physically invalid is reported as undefined and
the remaining indices are still computed.

For off-thread computation the engine takes an immutable snapshot of the
sounding and hands it to an executor:

>>> from concurrent.futures import ThreadPoolExecutor
>>> with ThreadPoolExecutor(max_workers=1) as executor:
...     report = IndexEngine().submit(sounding, executor).result()
>>> report["sfc-cape"]
"""

import logging
import math
import time
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from sounding_viewer.indices.composite import (
    InflowLayer,
    compute_ehi,
    compute_inflow_layer,
    compute_scp,
    compute_sweat,
)
from sounding_viewer.indices.kinematic import (
    WindAccessor,
    compute_shear,
    compute_sreh,
    compute_stm,
)
from sounding_viewer.indices.thermodynamic import (
    CapeResult,
    ValueAccessor,
    compute_boyden,
    compute_cape,
    compute_cii,
    compute_ct,
    compute_dci,
    compute_fsi,
    compute_humidity_index,
    compute_k,
    compute_ko,
    compute_lifted_index,
    compute_max_updraft,
    compute_mji,
    compute_modified_k,
    compute_modified_tt,
    compute_most_unstable,
    compute_pii,
    compute_pw,
    compute_rackliff,
    compute_showalter,
    compute_soaring,
    compute_thompson,
    compute_tt,
    compute_vt,
)
from sounding_viewer.profile.levels import Attribute
from sounding_viewer.thermo.functions import wind_speed
from sounding_viewer.utils.config import SoundingConfig
from sounding_viewer.utils.constants import KMH_PER_KNOT, KMH_PER_MS

logger = logging.getLogger(__name__)

# Exceptions that make a single index undefined
INDEX_ERRORS = (ArithmeticError, LookupError, ValueError)

MS_TO_KNOTS = KMH_PER_MS / KMH_PER_KNOT

UNDEFINED = "Undefined"


@dataclass(frozen=True)
class ProfileAccessors:
    """Value accessors and scalar bounds of a profile."""
    f_t: ValueAccessor
    f_td: ValueAccessor
    f_z: ValueAccessor
    f_spd: ValueAccessor
    f_dir: ValueAccessor
    fn_wind: WindAccessor
    p_begin: float  # surface pressure (hPa)
    p_end: float    # top pressure (hPa)
    z_begin: float  # surface height (m)

    @classmethod
    def from_profile(cls, profile) -> "ProfileAccessors":
        """
        Build accessors over a sounding or snapshot.

        The parcel bounds come from the levels carrying both temperature
        and dewpoint, so missing moisture aloft lowers the top instead of
        leaving every parcel index undefined.

        Raises
        ------
        IndexError
            If no enabled level has both a temperature and a dewpoint
        """
        surface, top = profile.thermo_bounds()

        def accessor(attr: Attribute) -> ValueAccessor:
            return lambda p: profile.get_value_at(p, attr)

        return cls(
            f_t=accessor(Attribute.TEMP),
            f_td=accessor(Attribute.DEWPT),
            f_z=accessor(Attribute.HEIGHT),
            f_spd=accessor(Attribute.WINDSPD),
            f_dir=accessor(Attribute.WINDDIR),
            fn_wind=profile.get_wind_at,
            p_begin=surface.pressure,
            p_end=top.pressure,
            z_begin=surface.height,
        )


@dataclass(frozen=True)
class IndexValue:
    """Value of one index, ``None`` when undefined."""
    key: str
    name: str
    value: Optional[float]
    error: Optional[str] = None

    @property
    def defined(self) -> bool:
        return self.value is not None

    def format(self, precision: int = 2) -> str:
        if self.value is None:
            return UNDEFINED
        return f"{self.value:.{precision}f}"


@dataclass
class IndexReport:
    """Result of one battery evaluation."""
    values: List[IndexValue]
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __iter__(self) -> Iterator[IndexValue]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, key: str) -> Optional[float]:
        return self.get(key).value

    def get(self, key: str) -> IndexValue:
        for value in self.values:
            if value.key == key:
                return value
        raise KeyError(key)

    @property
    def undefined(self) -> List[str]:
        return [value.key for value in self.values if not value.defined]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": dict(self.metadata),
            "indices": [
                {
                    "key": value.key,
                    "name": value.name,
                    "value": value.value,
                    "error": value.error,
                }
                for value in self.values
            ],
        }

    def format_table(self, precision: int = 2) -> str:
        width = max((len(value.name) for value in self.values), default=0)
        return "\n".join(
            f"{value.name:<{width}}  {value.format(precision)}" for value in self.values
        )


class _Battery:
    """Shared intermediate results for one evaluation of the battery."""

    def __init__(self, accessors: ProfileAccessors, config: SoundingConfig):
        self.acc = accessors
        self.parcel = config.parcel
        self.options = config.indices
        self._memo: Dict[str, Tuple[Any, Optional[Exception]]] = {}

    def _memoized(self, name: str, compute: Callable[[], Any]) -> Any:
        if name not in self._memo:
            try:
                self._memo[name] = (compute(), None)
            except INDEX_ERRORS as e:
                self._memo[name] = (None, e)
        value, error = self._memo[name]
        if error is not None:
            raise error
        return value

    def cape(self, p_begin: float) -> CapeResult:
        acc = self.acc
        return compute_cape(
            acc.f_t, acc.f_td, p_begin, acc.p_end,
            self.parcel.pressure_step, self.parcel.thickness_intervals,
        )

    def lifted_index(self, p_begin: float) -> float:
        acc = self.acc
        return compute_lifted_index(
            acc.f_t, acc.f_td, p_begin, p_step=self.parcel.pressure_step
        )

    @property
    def surface_cape(self) -> CapeResult:
        return self._memoized("surface_cape", lambda: self.cape(self.acc.p_begin))

    @property
    def most_unstable(self) -> float:
        acc = self.acc
        return self._memoized("most_unstable", lambda: compute_most_unstable(
            acc.f_t, acc.f_td, acc.p_begin,
            self.options.most_unstable_top, self.options.most_unstable_step,
        ))

    @property
    def mu_cape(self) -> CapeResult:
        return self._memoized("mu_cape", lambda: self.cape(self.most_unstable))

    @property
    def inflow(self) -> InflowLayer:
        acc = self.acc
        opts = self.options

        def find() -> InflowLayer:
            layer = compute_inflow_layer(
                acc.f_t, acc.f_td, acc.f_z, acc.p_begin, acc.p_end,
                opts.inflow_scan_step, opts.inflow_pressure_step,
                opts.inflow_cape_min, opts.inflow_cin_min,
            )
            if layer is None:
                raise LookupError("No effective inflow layer")
            return layer

        return self._memoized("inflow", find)

    def storm_motion(self, direction: int) -> Tuple[float, float]:
        return self._memoized(f"storm_motion{direction}", lambda: compute_stm(
            self.acc.fn_wind, self.acc.z_begin, direction,
            self.options.bunkers_deviation, self.options.mean_wind_step,
        ))

    def shear(self, z_bottom: float, z_top: float) -> float:
        """Bulk shear in knots."""
        return compute_shear(self.acc.fn_wind, z_bottom, z_top) * MS_TO_KNOTS

    def sreh(self, z_bottom: float, z_top: float) -> float:
        return self._memoized(f"sreh{z_bottom}-{z_top}", lambda: compute_sreh(
            self.acc.fn_wind, z_bottom, z_top,
            self.storm_motion(1), self.options.helicity_step,
        ))

    def sreh_above_ground(self, depth: float) -> float:
        return self.sreh(self.acc.z_begin, self.acc.z_begin + depth)

    def effective_sreh(self) -> float:
        return self.sreh(self.inflow.z_bottom, self.inflow.z_top)


@dataclass(frozen=True)
class IndexDefinition:
    """One entry of the battery."""
    key: str
    name: str
    compute: Callable[[_Battery], float]


def _agl_shear(depth: float) -> Callable[[_Battery], float]:
    return lambda b: b.shear(b.acc.z_begin, b.acc.z_begin + depth)


INDEX_DEFINITIONS: Tuple[IndexDefinition, ...] = (
    IndexDefinition("sfc-cape", "SFC CAPE", lambda b: b.surface_cape.cape),
    IndexDefinition("sfc-cin", "SFC CIN", lambda b: b.surface_cape.cin),
    IndexDefinition("sfc-updraft", "SFC Maximum updraft (m/s)",
                    lambda b: compute_max_updraft(b.surface_cape.cape)),
    IndexDefinition("sfc-lfc", "SFC LFC (m)", lambda b: b.acc.f_z(b.surface_cape.lfc)),
    IndexDefinition("sfc-el", "SFC EL (m)", lambda b: b.acc.f_z(b.surface_cape.el)),
    IndexDefinition("sfc-lftx", "SFC Lifted Index", lambda b: b.lifted_index(b.acc.p_begin)),
    IndexDefinition("mu-parcel", "Most unstable parcel (mb)", lambda b: b.most_unstable),
    IndexDefinition("mu-cape", "MU CAPE", lambda b: b.mu_cape.cape),
    IndexDefinition("mu-cin", "MU CIN", lambda b: b.mu_cape.cin),
    IndexDefinition("mu-lftx", "MU Lifted Index", lambda b: b.lifted_index(b.most_unstable)),
    IndexDefinition("pw", "Precipitable Water", lambda b: compute_pw(
        b.acc.f_td, b.acc.p_begin, b.acc.p_end, b.options.pw_intervals)),
    IndexDefinition("k", "K Index", lambda b: compute_k(b.acc.f_t, b.acc.f_td)),
    IndexDefinition("tt", "Totals Totals", lambda b: compute_tt(b.acc.f_t, b.acc.f_td)),
    IndexDefinition("soaring", "Soaring Index", lambda b: compute_soaring(b.acc.f_t, b.acc.f_td)),
    IndexDefinition("boyden", "Boyden Index", lambda b: compute_boyden(b.acc.f_t, b.acc.f_z)),
    IndexDefinition("vt", "Vertical Totals", lambda b: compute_vt(b.acc.f_t)),
    IndexDefinition("ct", "Cross Totals", lambda b: compute_ct(b.acc.f_t, b.acc.f_td)),
    IndexDefinition("mji", "Modified Jefferson Index", lambda b: compute_mji(b.acc.f_t, b.acc.f_td)),
    IndexDefinition("rackliff", "Rackliff Index", lambda b: compute_rackliff(b.acc.f_t, b.acc.f_td)),
    IndexDefinition("thompson", "Thompson Index",
                    lambda b: compute_thompson(b.acc.f_t, b.acc.f_td, b.acc.p_begin)),
    IndexDefinition("showalter", "Showalter Index",
                    lambda b: compute_showalter(b.acc.f_t, b.acc.f_td, b.parcel.pressure_step)),
    IndexDefinition("modified-k", "Modified K Index",
                    lambda b: compute_modified_k(b.acc.f_t, b.acc.f_td, b.acc.p_begin)),
    IndexDefinition("modified-tt", "Modified Totals Totals",
                    lambda b: compute_modified_tt(b.acc.f_t, b.acc.f_td, b.acc.p_begin)),
    IndexDefinition("cii", "Convective Instability Index",
                    lambda b: compute_cii(b.acc.f_t, b.acc.f_td, b.acc.p_begin)),
    IndexDefinition("fsi", "Fog Stability Index",
                    lambda b: compute_fsi(b.acc.f_t, b.acc.f_td, b.acc.f_spd, b.acc.p_begin)),
    IndexDefinition("dci", "Deep Convective Index",
                    lambda b: compute_dci(b.acc.f_t, b.acc.f_td, b.acc.p_begin)),
    IndexDefinition("ko", "Ko Index", lambda b: compute_ko(b.acc.f_t, b.acc.f_td)),
    IndexDefinition("pii", "Potential Instability Index",
                    lambda b: compute_pii(b.acc.f_t, b.acc.f_td, b.acc.f_z)),
    IndexDefinition("hi", "Humidity Index", lambda b: compute_humidity_index(b.acc.f_t, b.acc.f_td)),
    IndexDefinition("inflow-bottom", "Inflow Bottom (m)", lambda b: b.inflow.z_bottom),
    IndexDefinition("inflow-top", "Inflow Top (m)", lambda b: b.inflow.z_top),
    IndexDefinition("shear-1", "Bulk Shear 0-1 km (kt)", _agl_shear(1000)),
    IndexDefinition("shear-3", "Bulk Shear 0-3 km (kt)", _agl_shear(3000)),
    IndexDefinition("shear-6", "Bulk Shear 0-6 km (kt)", _agl_shear(6000)),
    IndexDefinition("shear-8", "Bulk Shear 0-8 km (kt)", _agl_shear(8000)),
    IndexDefinition("shear-inflow", "Bulk Shear Inflow (kt)",
                    lambda b: b.shear(b.inflow.z_bottom, b.inflow.z_top)),
    IndexDefinition("bunkers-r", "Bunkers STM (R) (kt)",
                    lambda b: wind_speed(*b.storm_motion(1)) * MS_TO_KNOTS),
    IndexDefinition("bunkers-l", "Bunkers STM (L) (kt)",
                    lambda b: wind_speed(*b.storm_motion(-1)) * MS_TO_KNOTS),
    IndexDefinition("sreh-1", "SReH (0-1 km) (m^2/s^2)", lambda b: b.sreh_above_ground(1000)),
    IndexDefinition("sreh-3", "SReH (0-3 km) (m^2/s^2)", lambda b: b.sreh_above_ground(3000)),
    IndexDefinition("sreh-inflow", "SReH (Inflow) (m^2/s^2)", lambda b: b.effective_sreh()),
    IndexDefinition("ehi-1", "Energy Helicity Index 0-1km",
                    lambda b: compute_ehi(b.surface_cape.cape, b.sreh_above_ground(1000))),
    IndexDefinition("ehi-3", "Energy Helicity Index 0-3km",
                    lambda b: compute_ehi(b.surface_cape.cape, b.sreh_above_ground(3000))),
    IndexDefinition("ehi-inflow", "Energy Helicity Index Inflow",
                    lambda b: compute_ehi(b.surface_cape.cape, b.effective_sreh())),
    IndexDefinition("sweat", "SWEAT Index",
                    lambda b: compute_sweat(b.acc.f_t, b.acc.f_td, b.acc.f_spd, b.acc.f_dir)),
    IndexDefinition("scp", "SCP", lambda b: compute_scp(
        b.mu_cape.cape,
        b.effective_sreh(),
        compute_shear(b.acc.fn_wind, b.inflow.z_bottom, b.inflow.z_top),
    )),
)

INDEX_KEYS = tuple(definition.key for definition in INDEX_DEFINITIONS)


class IndexEngine:
    """
    Evaluates the index battery.

    Args:
        config: Calculation configuration; defaults are used when omitted
        keys: Subset of index keys to evaluate, in battery order
    """

    def __init__(self, config: Optional[SoundingConfig] = None, keys: Optional[List[str]] = None):
        self.config = config or SoundingConfig()
        if keys is None:
            self.keys = INDEX_KEYS
        else:
            unknown = set(keys) - set(INDEX_KEYS)
            if unknown:
                raise KeyError(f"Unknown index keys: {sorted(unknown)}")
            self.keys = tuple(key for key in INDEX_KEYS if key in set(keys))

    @property
    def definitions(self) -> Tuple[IndexDefinition, ...]:
        return tuple(d for d in INDEX_DEFINITIONS if d.key in self.keys)

    def compute(self, profile) -> IndexReport:
        """
        Evaluate every index against a sounding or snapshot.

        Args:
            profile: Sounding or SoundingSnapshot

        Returns:
            IndexReport with one value per index; failed indices are undefined
        """
        start = time.perf_counter()

        try:
            accessors = ProfileAccessors.from_profile(profile)
        except LookupError as e:
            logger.warning(f"Cannot compute indices: {e}")
            values = [IndexValue(d.key, d.name, None, str(e)) for d in self.definitions]
            return IndexReport(values=values, metadata={"enabled_levels": len(profile)})

        battery = _Battery(accessors, self.config)
        values = [self._evaluate(definition, battery) for definition in self.definitions]

        elapsed = time.perf_counter() - start
        undefined = sum(1 for value in values if not value.defined)
        logger.info(
            f"Computed {len(values)} indices ({undefined} undefined) in {elapsed:.2f} s"
        )

        return IndexReport(
            values=values,
            metadata={
                "name": self.config.name,
                "enabled_levels": len(profile),
                "surface_pressure": accessors.p_begin,
                "top_pressure": accessors.p_end,
                "elapsed_seconds": elapsed,
            },
        )

    def _evaluate(self, definition: IndexDefinition, battery: _Battery) -> IndexValue:
        try:
            value = float(definition.compute(battery))
        except INDEX_ERRORS as e:
            logger.warning(f"Index {definition.key} undefined: {type(e).__name__}: {e}")
            return IndexValue(definition.key, definition.name, None, f"{type(e).__name__}: {e}")

        if not math.isfinite(value):
            logger.warning(f"Index {definition.key} undefined: non-finite result")
            return IndexValue(definition.key, definition.name, None, "non-finite result")

        return IndexValue(definition.key, definition.name, value)

    def submit(self, sounding, executor: Executor) -> "Future[IndexReport]":
        """
        Evaluate the battery on an executor.

        The sounding is copied into an immutable snapshot first, so later
        edits do not affect the running computation.

        Args:
            sounding: Sounding to evaluate
            executor: Thread or process pool

        Returns:
            Future resolving to an IndexReport
        """
        snapshot = sounding.snapshot()
        logger.debug(f"Submitting index computation for {snapshot!r}")
        return executor.submit(self.compute, snapshot)
