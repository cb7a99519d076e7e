"""
Sounding levels and their attributes.

A level is one observation of the vertical profile. Missing observations are
stored as NaN and treated as absent data by every query.
"""

import itertools
import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from sounding_viewer.utils.constants import (
    ENABLE_PRESSURE_THRESHOLD,
    MISSING_VALUE_SENTINEL,
)


class Attribute(str, Enum):
    """Observed quantities of a level."""
    PRESSURE = "pressure"  # hPa
    HEIGHT = "height"      # m
    TEMP = "temp"          # Celsius
    DEWPT = "dewpt"        # Celsius
    WINDDIR = "winddir"    # degrees
    WINDSPD = "windspd"    # km/h


RECORD_FIELDS = tuple(attr.value for attr in Attribute)

# Process-wide, never reused
_level_ids = itertools.count(1)


def next_level_id() -> int:
    """Allocate a new level identity."""
    return next(_level_ids)


def _to_float(value: Any) -> float:
    """Convert a raw record value, mapping blanks and the sentinel to NaN."""
    if value is None:
        return math.nan
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return math.nan
    number = float(value)
    if number == MISSING_VALUE_SENTINEL:
        return math.nan
    return number


def _to_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip().lower()
        if not value:
            return None
        if value in ("1", "true", "yes", "on"):
            return True
        if value in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"Invalid enabled flag: {value!r}")
    return bool(value)


@dataclass(frozen=True)
class LevelSource:
    """
    Raw level record as ingested or exported.

    ``enabled`` is optional on input; when absent the level starts enabled
    if its pressure is above the initial enable threshold.
    """
    pressure: float = math.nan
    height: float = math.nan
    temp: float = math.nan
    dewpt: float = math.nan
    winddir: float = math.nan
    windspd: float = math.nan
    enabled: Optional[bool] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LevelSource":
        """Build a record from a mapping of field names to raw values."""
        values = {name: _to_float(data.get(name)) for name in RECORD_FIELDS}
        return cls(enabled=_to_bool(data.get("enabled")), **values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class Level:
    """
    Mutable level owned by a :class:`~sounding_viewer.profile.sounding.Sounding`.

    Never handed out by the sounding; queries return :class:`FrozenLevel`
    copies and edits go through the sounding's mutation methods.

    Attributes
    ----------
    pressure : float
        Pressure (hPa)
    height : float
        Geopotential height (m)
    temp : float
        Temperature (Celsius)
    dewpt : float
        Dewpoint (Celsius)
    winddir : float
        Direction the wind blows from (degrees)
    windspd : float
        Wind speed (km/h)
    enabled : bool
        Disabled levels are kept but excluded from every computation
    id : int
        Unique identity, assigned once
    """
    pressure: float = math.nan
    height: float = math.nan
    temp: float = math.nan
    dewpt: float = math.nan
    winddir: float = math.nan
    windspd: float = math.nan
    enabled: bool = True
    id: int = field(default_factory=next_level_id)

    @classmethod
    def from_source(cls, source: LevelSource) -> "Level":
        enabled = source.enabled
        if enabled is None:
            enabled = source.pressure > ENABLE_PRESSURE_THRESHOLD
        return cls(
            pressure=source.pressure,
            height=source.height,
            temp=source.temp,
            dewpt=source.dewpt,
            winddir=source.winddir,
            windspd=source.windspd,
            enabled=enabled,
        )

    def freeze(self) -> "FrozenLevel":
        """Immutable copy with the same identity."""
        return FrozenLevel(**{f.name: getattr(self, f.name) for f in fields(self)})


@dataclass(frozen=True)
class FrozenLevel:
    """Read-only copy of a level, as returned by every sounding query."""
    pressure: float
    height: float
    temp: float
    dewpt: float
    winddir: float
    windspd: float
    enabled: bool
    id: int

    def freeze(self) -> "FrozenLevel":
        return self


AnyLevel = Union[Level, FrozenLevel, LevelSource]


def get_value(level: AnyLevel, attr: Attribute) -> float:
    """Value of ``attr`` on ``level``."""
    return getattr(level, Attribute(attr).value)


def set_value(level: Level, attr: Attribute, value: float) -> None:
    """Set ``attr`` on a mutable ``level``."""
    setattr(level, Attribute(attr).value, float(value))

