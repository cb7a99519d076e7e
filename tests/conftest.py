"""Shared fixtures for sounding-viewer tests."""

import pytest

from sounding_viewer.profile import Sounding
from sounding_viewer.utils.config import SoundingConfig

# pressure, height, temp, dewpt, winddir, windspd (km/h)
CONVECTIVE_PROFILE = [
    (1000, 110, 30.0, 22.0, 170, 20),
    (975, 340, 27.5, 20.5, 180, 30),
    (950, 570, 25.5, 19.5, 190, 40),
    (925, 800, 23.5, 18.5, 200, 45),
    (900, 1040, 21.5, 17.0, 210, 50),
    (850, 1530, 18.0, 14.0, 220, 55),
    (800, 2050, 14.5, 9.0, 230, 60),
    (750, 2590, 11.0, 3.0, 235, 65),
    (700, 3160, 7.0, -2.0, 240, 70),
    (650, 3770, 3.0, -8.0, 245, 80),
    (600, 4420, -1.5, -14.0, 250, 90),
    (550, 5110, -6.0, -20.0, 255, 100),
    (500, 5860, -11.0, -27.0, 260, 110),
    (450, 6680, -16.5, -33.0, 262, 120),
    (400, 7570, -22.5, -38.0, 265, 130),
    (350, 8550, -29.5, -44.0, 268, 140),
    (300, 9650, -37.5, -50.0, 270, 150),
    (250, 10900, -45.5, -57.0, 270, 160),
    (200, 12350, -53.0, -63.0, 270, 150),
    (150, 14100, -58.0, -70.0, 270, 120),
    (100, 16600, -62.0, -77.0, 270, 90),
]


def make_records(rows, enabled=None):
    """Build level records from (pressure, height, temp, dewpt, winddir, windspd) rows."""
    records = []
    for row in rows:
        record = dict(zip(("pressure", "height", "temp", "dewpt", "winddir", "windspd"), row))
        if enabled is not None:
            record["enabled"] = enabled
        records.append(record)
    return records


@pytest.fixture
def convective_records():
    """Warm, moist, veering profile from 1000 to 100 hPa, all levels enabled."""
    return make_records(CONVECTIVE_PROFILE, enabled=True)


@pytest.fixture
def convective_sounding(convective_records):
    return Sounding(convective_records)


@pytest.fixture
def shallow_sounding():
    """Convective profile truncated at 600 hPa."""
    rows = [row for row in CONVECTIVE_PROFILE if row[0] >= 600]
    return Sounding(make_records(rows, enabled=True))


@pytest.fixture
def k_index_sounding():
    """Four mandatory levels whose K index is exactly 20."""
    return Sounding([
        {"pressure": 1000, "height": 100, "temp": 25, "dewpt": 20},
        {"pressure": 850, "height": 1500, "temp": 15, "dewpt": 10},
        {"pressure": 700, "height": 3100, "temp": 5, "dewpt": -10},
        {"pressure": 500, "height": 5800, "temp": -10, "dewpt": -30},
    ])


@pytest.fixture
def isothermal_dry_sounding():
    """Isothermal 20 degC profile with very dry air; no parcel is ever buoyant."""
    rows = [
        (p, z, 20.0, -40.0, 270, 20)
        for p, z in zip(range(1000, 100, -100), range(100, 20000, 1500))
    ]
    return Sounding(make_records(rows, enabled=True))


@pytest.fixture
def fast_config():
    """Coarser steps for tests that run the whole battery."""
    config = SoundingConfig(name="test")
    config.parcel.pressure_step = 5.0
    config.indices.inflow_scan_step = 25.0
    config.indices.inflow_pressure_step = 10.0
    config.indices.pw_intervals = 50
    return config
