"""
Derived thermodynamic quantities at a single pressure of a profile.
"""

from dataclasses import asdict, dataclass
from typing import Dict

from sounding_viewer.profile.levels import Attribute
from sounding_viewer.thermo.functions import (
    equivalent_potential_temperature,
    mixing_ratio,
    potential_temperature,
    relative_humidity,
    saturated_mixing_ratio,
    saturated_vapor_pressure,
    specific_humidity_from_mixing_ratio,
    vapor_pressure,
    virtual_temperature,
    wet_bulb_temperature,
)


@dataclass(frozen=True)
class LevelDetails:
    """Quantities shown for one level of the profile."""
    pressure: float                # hPa
    height: float                  # m
    temperature: float             # Celsius
    dewpoint: float                # Celsius
    virtual_temperature: float     # Celsius
    potential_temperature: float   # Celsius
    equivalent_potential_temperature: float  # Celsius
    wet_bulb_temperature: float    # Celsius
    vapor_pressure: float          # hPa
    saturated_vapor_pressure: float  # hPa
    mixing_ratio: float            # g/kg
    saturated_mixing_ratio: float  # g/kg
    relative_humidity: float       # 0-1
    specific_humidity: float       # g/kg

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def format(self) -> str:
        lines = [
            f"Pressure: {self.pressure:.1f} mb",
            f"Height: {self.height:.1f} m",
            f"Temperature: {self.temperature:.2f} degC",
            f"Dewpoint Temperature: {self.dewpoint:.2f} degC",
            f"Virtual Temperature: {self.virtual_temperature:.2f} degC",
            f"Potential Temperature: {self.potential_temperature:.2f} degC",
            f"Equivalent Potential Temperature: {self.equivalent_potential_temperature:.2f} degC",
            f"Wet bulb Temperature: {self.wet_bulb_temperature:.2f} degC",
            f"Vapor Pressure: {self.vapor_pressure:.1f} mb",
            f"Saturated Vapor Pressure: {self.saturated_vapor_pressure:.1f} mb",
            f"Mixing Ratio: {self.mixing_ratio:.1f} g/kg",
            f"Saturated Mixing Ratio: {self.saturated_mixing_ratio:.1f} g/kg",
            f"Relative Humidity: {self.relative_humidity * 100:.1f}%",
            f"Specific Humidity: {self.specific_humidity:.1f} g/kg",
        ]
        return "\n".join(lines)


def level_details(source, pressure: float) -> LevelDetails:
    """
    Compute the details of a profile at ``pressure``.

    Args:
        source: Sounding or snapshot providing ``get_value_at``
        pressure: Pressure in hPa within the enabled range

    Returns:
        LevelDetails for the interpolated level
    """
    height = source.get_value_at(pressure, Attribute.HEIGHT)
    temp = source.get_value_at(pressure, Attribute.TEMP)
    dewpt = source.get_value_at(pressure, Attribute.DEWPT)
    w = mixing_ratio(dewpt, pressure)

    return LevelDetails(
        pressure=pressure,
        height=height,
        temperature=temp,
        dewpoint=dewpt,
        virtual_temperature=virtual_temperature(temp, dewpt, pressure),
        potential_temperature=potential_temperature(temp, pressure),
        equivalent_potential_temperature=equivalent_potential_temperature(temp, dewpt, pressure),
        wet_bulb_temperature=wet_bulb_temperature(temp, dewpt, pressure),
        vapor_pressure=vapor_pressure(dewpt),
        saturated_vapor_pressure=saturated_vapor_pressure(temp),
        mixing_ratio=w,
        saturated_mixing_ratio=saturated_mixing_ratio(temp, pressure),
        relative_humidity=relative_humidity(temp, dewpt, pressure),
        specific_humidity=specific_humidity_from_mixing_ratio(w),
    )
