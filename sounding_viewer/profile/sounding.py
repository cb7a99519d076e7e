"""
Editable sounding profile.

The :class:`Sounding` owns its levels in raw (insertion) order and keeps a
cache of the enabled levels sorted by ascending pressure. The cache is
rebuilt on every mutation before observers are notified, so every query
made from an observer callback sees the new state. Queries hand out
:class:`FrozenLevel` copies, so the mutation methods are the only way to
change a sounding.

Pressure ordering follows the sounding convention used throughout the
package: ``first()`` is the enabled level with the lowest pressure (the top
of the profile) and ``last()`` the one with the highest pressure (the
surface). ``top_level()`` and ``surface_level()`` are unambiguous aliases.

Examples
--------
>>> snd = Sounding([
...     {"pressure": 1000, "height": 100, "temp": 25, "dewpt": 20},
...     {"pressure": 850, "height": 1500, "temp": 15, "dewpt": 10},
... ])
>>> snd.get_value_at(925, Attribute.TEMP)
20.0
"""

import inspect
import logging
import math
import weakref
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Sequence,
    Tuple,
    Union,
)

import numpy as np

from sounding_viewer.profile.levels import (
    Attribute,
    FrozenLevel,
    Level,
    LevelSource,
    get_value,
    set_value,
)
from sounding_viewer.thermo.functions import wind_components
from sounding_viewer.utils.constants import KMH_PER_MS

logger = logging.getLogger(__name__)


class PressureOutOfRangeError(LookupError):
    """Pressure lies outside the enabled levels that carry the attribute."""
    pass


class HeightOutOfRangeError(LookupError):
    """Height lies outside the enabled levels that carry wind data."""
    pass


class LevelNotFoundError(LookupError):
    """No level with the given identity."""
    pass


RecordLike = Union[LevelSource, Mapping[str, Any]]


def _as_source(item: RecordLike) -> LevelSource:
    if isinstance(item, LevelSource):
        return item
    return LevelSource.from_mapping(item)


class _ProfileView:
    """
    Read-only queries shared by soundings and their snapshots.

    Every level handed out is a :class:`FrozenLevel`; a sounding changes
    only through its mutation methods.
    """

    _frozen: Tuple[FrozenLevel, ...]
    _enabled: List[FrozenLevel]
    _columns: Dict[Attribute, Tuple[np.ndarray, np.ndarray]]

    def _rebuild_cache(self, levels: Sequence) -> None:
        self._frozen = tuple(level.freeze() for level in levels)
        enabled = [
            level for level in self._frozen
            if level.enabled and math.isfinite(level.pressure)
        ]
        enabled.sort(key=lambda level: level.pressure)
        self._enabled = enabled

        self._columns = {}
        for attr in Attribute:
            pressures, values = [], []
            for level in enabled:
                value = get_value(level, attr)
                if math.isfinite(value):
                    pressures.append(level.pressure)
                    values.append(value)
            self._columns[attr] = (np.array(pressures, dtype=float), np.array(values, dtype=float))

        winds = []
        for level in enabled:
            if all(math.isfinite(x) for x in (level.height, level.windspd, level.winddir)):
                u, v = wind_components(level.windspd / KMH_PER_MS, level.winddir)
                winds.append((level.height, u, v))
        winds.sort(key=lambda row: row[0])
        self._wind = np.array(winds, dtype=float).reshape(-1, 3)

    @property
    def levels(self) -> Tuple[FrozenLevel, ...]:
        """All levels in raw order, disabled ones included."""
        return self._frozen

    def __iter__(self) -> Iterator[FrozenLevel]:
        """Enabled levels in ascending pressure."""
        return iter(list(self._enabled))

    def __len__(self) -> int:
        return len(self._enabled)

    def first(self) -> FrozenLevel:
        """Enabled level with the lowest pressure (top of the profile)."""
        if not self._enabled:
            raise IndexError("Sounding has no enabled levels")
        return self._enabled[0]

    def last(self) -> FrozenLevel:
        """Enabled level with the highest pressure (surface)."""
        if not self._enabled:
            raise IndexError("Sounding has no enabled levels")
        return self._enabled[-1]

    def top_level(self) -> FrozenLevel:
        return self.first()

    def surface_level(self) -> FrozenLevel:
        return self.last()

    def thermo_bounds(self) -> Tuple[FrozenLevel, FrozenLevel]:
        """
        Surface and top of the thermodynamic profile.

        Only enabled levels carrying both a temperature and a dewpoint
        count, so a missing dewpoint aloft narrows the profile instead of
        leaving it without a usable top.

        Returns
        -------
        (surface, top) : tuple of FrozenLevel
            Highest and lowest pressure levels with temp and dewpt

        Raises
        ------
        IndexError
            If no enabled level has both a temperature and a dewpoint
        """
        levels = [
            level for level in self._enabled
            if math.isfinite(level.temp) and math.isfinite(level.dewpt)
        ]
        if not levels:
            raise IndexError("Sounding has no levels with temperature and dewpoint")
        return levels[-1], levels[0]

    def get_level(self, level_id: int) -> FrozenLevel:
        """Level with identity ``level_id``, enabled or not."""
        for level in self._frozen:
            if level.id == level_id:
                return level
        raise LevelNotFoundError(f"No level with id {level_id}")

    def get_value_at(self, pressure: float, attr: Attribute) -> float:
        """
        Linearly interpolate an attribute at an arbitrary pressure.

        Only enabled levels with a finite value of ``attr`` take part. At a
        level's own pressure its stored value is returned exactly.

        Parameters
        ----------
        pressure : float
            Pressure (hPa)
        attr : Attribute
            Attribute to interpolate

        Returns
        -------
        value : float
            Interpolated value

        Raises
        ------
        PressureOutOfRangeError
            If ``pressure`` is outside the enabled levels carrying ``attr``
        """
        attr = Attribute(attr)
        pressures, values = self._columns[attr]
        if pressures.size == 0 or not (pressures[0] <= pressure <= pressures[-1]):
            raise PressureOutOfRangeError(
                f"{attr.value} is not available at {pressure} hPa"
            )
        return float(np.interp(pressure, pressures, values))

    def get_wind_at(self, height: float) -> Tuple[float, float]:
        """
        Wind vector at an arbitrary height.

        Parameters
        ----------
        height : float
            Height (m)

        Returns
        -------
        (u, v) : tuple of float
            Eastward and northward components (m/s)

        Raises
        ------
        HeightOutOfRangeError
            If ``height`` is outside the levels carrying wind data
        """
        heights, u, v = self._wind.T
        if heights.size == 0 or not (heights[0] <= height <= heights[-1]):
            raise HeightOutOfRangeError(f"No wind data at {height} m")
        return float(np.interp(height, heights, u)), float(np.interp(height, heights, v))

    def to_records(self) -> List[Dict[str, Any]]:
        """Export all levels in raw order, including the enabled flag."""
        return [
            LevelSource(
                pressure=level.pressure,
                height=level.height,
                temp=level.temp,
                dewpt=level.dewpt,
                winddir=level.winddir,
                windspd=level.windspd,
                enabled=level.enabled,
            ).to_dict()
            for level in self._frozen
        ]

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """Enabled levels as columns in ascending pressure (NaN for missing data)."""
        return {
            attr.value: np.array([get_value(level, attr) for level in self._enabled], dtype=float)
            for attr in Attribute
        }


class SoundingSnapshot(_ProfileView):
    """
    Immutable copy of a sounding.

    Snapshots share no mutable state with the sounding they were taken from
    and can be handed to another thread or process for computation.
    """

    def __init__(self, levels: Iterable[FrozenLevel]):
        self._levels = tuple(levels)
        self._rebuild_cache(self._levels)

    def snapshot(self) -> "SoundingSnapshot":
        return self

    def __repr__(self) -> str:
        return f"SoundingSnapshot(levels={len(self._levels)}, enabled={len(self._enabled)})"


def _direction_delta(a: float, b: float) -> float:
    # Signed shortest rotation from a to b in degrees
    return (b - a + 180) % 360 - 180


def _midpoint_level(a: Level, b: Level) -> Level:
    values = {
        attr.value: (get_value(a, attr) + get_value(b, attr)) / 2
        for attr in Attribute
        if attr is not Attribute.WINDDIR
    }
    values["winddir"] = (a.winddir + _direction_delta(a.winddir, b.winddir) / 2) % 360
    return Level(**values)


def _extrapolated_level(edge: Level, inner: Level) -> Level:
    values = {
        attr.value: 2 * get_value(edge, attr) - get_value(inner, attr)
        for attr in Attribute
        if attr is not Attribute.WINDDIR
    }
    values["winddir"] = (edge.winddir - _direction_delta(edge.winddir, inner.winddir)) % 360
    if values["windspd"] < 0:
        values["windspd"] = 0.0
    return Level(**values)


class Sounding(_ProfileView):
    """
    Vertical profile with live editing.

    Parameters
    ----------
    levels : iterable
        Raw level records (:class:`LevelSource` or mappings with the keys
        ``pressure, height, temp, dewpt, winddir, windspd`` and an optional
        ``enabled``). Missing values become NaN.

    Notes
    -----
    Observers registered with :meth:`subscribe` are called without
    arguments after every mutation, in registration order. Bound methods are
    held weakly so a discarded display does not keep receiving updates.
    """

    def __init__(self, levels: Iterable[RecordLike] = ()):
        self._levels: List[Level] = [Level.from_source(_as_source(item)) for item in levels]
        self._observers: List[Callable[[], Any]] = []
        self._rebuild_cache(self._levels)
        logger.debug(f"Sounding created with {len(self._levels)} levels, {len(self._enabled)} enabled")

    @classmethod
    def from_records(cls, records: Iterable[RecordLike]) -> "Sounding":
        return cls(records)

    def __repr__(self) -> str:
        return f"Sounding(levels={len(self._levels)}, enabled={len(self._enabled)})"

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Callable[[], Any]) -> Callable[[], None]:
        """
        Register a change callback.

        Returns
        -------
        unsubscribe : callable
            Removes the registration when called
        """
        if inspect.ismethod(callback):
            ref = weakref.WeakMethod(callback)
        else:
            def ref(callback=callback):
                return callback
        self._observers.append(ref)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Callable[[], Any]) -> None:
        remaining = []
        for ref in self._observers:
            target = ref()
            if target is not None and target != callback:
                remaining.append(ref)
        self._observers = remaining

    def _notify(self) -> None:
        # Callbacks may unsubscribe while the pass runs
        for ref in list(self._observers):
            callback = ref()
            if callback is not None:
                callback()
        self._observers = [ref for ref in self._observers if ref() is not None]

    def _changed(self, action: str, level_id: int) -> None:
        self._rebuild_cache(self._levels)
        logger.debug(f"{action} level {level_id}")
        self._notify()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _index_of(self, level_id: int) -> int:
        for i, level in enumerate(self._levels):
            if level.id == level_id:
                return i
        raise LevelNotFoundError(f"No level with id {level_id}")

    def enable_level(self, level_id: int) -> None:
        self._levels[self._index_of(level_id)].enabled = True
        self._changed("Enabled", level_id)

    def disable_level(self, level_id: int) -> None:
        """Exclude a level from every computation without deleting it."""
        self._levels[self._index_of(level_id)].enabled = False
        self._changed("Disabled", level_id)

    def delete(self, level_id: int) -> None:
        del self._levels[self._index_of(level_id)]
        self._changed("Deleted", level_id)

    def change_attribute(self, level_id: int, attr: Attribute, value: float) -> None:
        level = self._levels[self._index_of(level_id)]
        set_value(level, attr, value)
        self._changed(f"Set {Attribute(attr).value}={value} on", level_id)

    def insert_above(self, level_id: int) -> FrozenLevel:
        """
        Insert a level just before ``level_id`` in raw order.

        The new level is the midpoint of the target and its raw-order
        predecessor, or a linear extrapolation when the target comes first.

        Returns
        -------
        level : FrozenLevel
            The inserted (enabled) level
        """
        index = self._index_of(level_id)
        target = self._levels[index]
        if index == 0:
            inner = self._levels[1] if len(self._levels) > 1 else target
            new_level = _extrapolated_level(target, inner)
        else:
            new_level = _midpoint_level(self._levels[index - 1], target)

        self._levels.insert(index, new_level)
        self._changed("Inserted", new_level.id)
        return new_level.freeze()

    def insert_below(self, level_id: int) -> FrozenLevel:
        """
        Insert a level just after ``level_id`` in raw order.

        The new level is the midpoint of the target and its raw-order
        successor, or a linear extrapolation when the target comes last.

        Returns
        -------
        level : FrozenLevel
            The inserted (enabled) level
        """
        index = self._index_of(level_id)
        target = self._levels[index]
        if index == len(self._levels) - 1:
            inner = self._levels[index - 1] if index > 0 else target
            new_level = _extrapolated_level(target, inner)
        else:
            new_level = _midpoint_level(target, self._levels[index + 1])

        self._levels.insert(index + 1, new_level)
        self._changed("Inserted", new_level.id)
        return new_level.freeze()

    def snapshot(self) -> SoundingSnapshot:
        """Deep, immutable copy for off-thread computation."""
        return SoundingSnapshot(self._frozen)
