"""
Sounding profile model.

Modules
-------
levels
    Level records, the attribute enum and level identities
sounding
    Editable sounding with interpolation queries, observers and snapshots
details
    Derived quantities at one pressure of a profile
"""

from sounding_viewer.profile.levels import (
    Attribute,
    LevelSource,
    Level,
    FrozenLevel,
    RECORD_FIELDS,
    get_value,
    set_value,
    next_level_id,
)
from sounding_viewer.profile.sounding import (
    Sounding,
    SoundingSnapshot,
    PressureOutOfRangeError,
    HeightOutOfRangeError,
    LevelNotFoundError,
)
from sounding_viewer.profile.details import LevelDetails, level_details

__all__ = [
    "Attribute",
    "LevelSource",
    "Level",
    "FrozenLevel",
    "RECORD_FIELDS",
    "get_value",
    "set_value",
    "next_level_id",
    "Sounding",
    "SoundingSnapshot",
    "PressureOutOfRangeError",
    "HeightOutOfRangeError",
    "LevelNotFoundError",
    "LevelDetails",
    "level_details",
]
