"""
Configuration file support for sounding-viewer.

Provides YAML and JSON configuration file loading and validation
for the sounding index calculations.

Usage
-----
>>> from sounding_viewer.utils.config import load_config, SoundingConfig
>>> config = load_config("indices.yaml")
>>> print(config.parcel.pressure_step)
"""

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Any, Union

import yaml


@dataclass
class ParcelConfig:
    """Parcel ascent configuration."""

    pressure_step: float = 1.0  # hPa per parcel step
    thickness_intervals: int = 2  # Simpson panels per step thickness


@dataclass
class IndexConfig:
    """Index battery configuration."""

    most_unstable_top: float = 500.0  # hPa
    most_unstable_step: float = 5.0  # hPa
    inflow_scan_step: float = 5.0  # hPa between candidate parcels
    inflow_pressure_step: float = 5.0  # hPa per parcel step inside the scan
    inflow_cape_min: float = 100.0  # J/kg
    inflow_cin_min: float = -250.0  # J/kg
    pw_intervals: int = 200  # Simpson panels
    mean_wind_step: float = 100.0  # m
    helicity_step: float = 50.0  # m
    bunkers_deviation: float = 7.5  # m/s


@dataclass
class OutputConfig:
    """Output configuration."""

    format: str = "table"  # table, json, csv
    precision: int = 2


@dataclass
class SoundingConfig:
    """Complete calculation configuration."""

    name: str = "unnamed_sounding"
    description: str = ""

    parcel: ParcelConfig = field(default_factory=ParcelConfig)
    indices: IndexConfig = field(default_factory=IndexConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_json(self, path: Union[str, Path], indent: int = 2) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=indent)


def _dict_to_config(data: Dict[str, Any]) -> SoundingConfig:
    """Convert dictionary to SoundingConfig."""
    data = data or {}
    config = SoundingConfig(
        name=data.get('name', 'unnamed_sounding'),
        description=data.get('description', ''),
    )

    if 'parcel' in data:
        config.parcel = ParcelConfig(**data['parcel'])
    if 'indices' in data:
        config.indices = IndexConfig(**data['indices'])
    if 'output' in data:
        config.output = OutputConfig(**data['output'])

    return config


def load_config(path: Union[str, Path]) -> SoundingConfig:
    """
    Load configuration from YAML or JSON file.

    Parameters
    ----------
    path : str or Path
        Path to configuration file (.yaml, .yml, or .json)

    Returns
    -------
    config : SoundingConfig
        Loaded configuration

    Raises
    ------
    FileNotFoundError
        If configuration file doesn't exist
    ValueError
        If file format is not supported
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in ('.yaml', '.yml'):
        with open(path) as f:
            data = yaml.safe_load(f)
    elif suffix == '.json':
        with open(path) as f:
            data = json.load(f)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Use .yaml, .yml, or .json")

    return _dict_to_config(data)


def create_default_config(path: Union[str, Path] = "sounding_config.yaml") -> SoundingConfig:
    """
    Create and save a default configuration file.

    Parameters
    ----------
    path : str or Path
        Output path for configuration file

    Returns
    -------
    config : SoundingConfig
        Default configuration
    """
    config = SoundingConfig(
        name="default_sounding",
        description="Default sounding-viewer index configuration",
    )

    path = Path(path)
    if path.suffix.lower() in ('.yaml', '.yml'):
        config.to_yaml(path)
    else:
        config.to_json(path)

    return config


def validate_config(config: SoundingConfig) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Parameters
    ----------
    config : SoundingConfig
        Configuration to validate

    Returns
    -------
    issues : list of str
        List of validation issues (empty if valid)
    """
    issues = []

    # Parcel validation
    if config.parcel.pressure_step <= 0:
        issues.append("Parcel pressure step must be positive")
    if config.parcel.thickness_intervals < 1:
        issues.append("Thickness intervals must be at least 1")

    # Index validation
    indices = config.indices
    if not 0 < indices.most_unstable_top <= 1100:
        issues.append("Most unstable scan top must be between 0 and 1100 hPa")
    if indices.most_unstable_step <= 0:
        issues.append("Most unstable scan step must be positive")
    if indices.inflow_scan_step <= 0 or indices.inflow_pressure_step <= 0:
        issues.append("Inflow scan and parcel steps must be positive")
    if indices.inflow_cape_min < 0:
        issues.append("Inflow CAPE threshold must be non-negative")
    if indices.inflow_cin_min > 0:
        issues.append("Inflow CIN threshold must be non-positive")
    if indices.pw_intervals < 1:
        issues.append("Precipitable water intervals must be at least 1")
    if indices.mean_wind_step <= 0 or indices.helicity_step <= 0:
        issues.append("Wind sampling steps must be positive")
    if indices.bunkers_deviation < 0:
        issues.append("Bunkers deviation must be non-negative")

    # Output validation
    if config.output.format not in ('table', 'json', 'csv'):
        issues.append("Output format must be one of: table, json, csv")
    if config.output.precision < 0:
        issues.append("Output precision must be non-negative")

    return issues
