"""
Reading and writing sounding level records.

Records are plain rows with the fields ``pressure, height, temp, dewpt,
winddir, windspd`` and an optional ``enabled`` flag, stored either as a JSON
list of objects or as CSV with a header row:

    pressure,height,temp,dewpt,winddir,windspd,enabled
    1000,110,25.0,20.0,180,18,true
    850,1500,15.0,10.0,220,36,true
    ...

Blank values and the 99999 sentinel are read as missing (NaN).
"""

import csv
import json
import logging
import math
from pathlib import Path
from typing import List, Union

from sounding_viewer.profile.levels import RECORD_FIELDS, LevelSource

logger = logging.getLogger(__name__)

CSV_FIELDS = RECORD_FIELDS + ("enabled",)


def load_records(path: Union[str, Path]) -> List[LevelSource]:
    """
    Load level records from a JSON or CSV file.

    Parameters
    ----------
    path : str or Path
        Path to a ``.json`` or ``.csv`` file

    Returns
    -------
    records : list of LevelSource
        Records in file order

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist
    ValueError
        If the file format is not supported or a value cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sounding file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == '.json':
        with open(path) as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise ValueError(f"Expected a list of level records in {path}")
    elif suffix == '.csv':
        with open(path, 'r', newline='') as f:
            rows = list(csv.DictReader(f))
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Use .json or .csv")

    records = [LevelSource.from_mapping(row) for row in rows]
    logger.info(f"Loaded {len(records)} level records from {path}")
    return records


def _csv_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isnan(value):
        return ""
    return repr(value)


def save_records(source, path: Union[str, Path]) -> str:
    """
    Save all levels of a sounding, disabled ones included.

    Args:
        source: Sounding or snapshot providing ``to_records``
        path: Output ``.json`` or ``.csv`` path; missing values are written
            as null / empty fields

    Returns:
        Path to saved file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    records = source.to_records()

    suffix = path.suffix.lower()
    if suffix == '.json':
        rows = [
            {
                key: None if isinstance(value, float) and math.isnan(value) else value
                for key, value in record.items()
            }
            for record in records
        ]
        with open(path, 'w') as f:
            json.dump(rows, f, indent=2)
    elif suffix == '.csv':
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(CSV_FIELDS)
            for record in records:
                writer.writerow([_csv_value(record[name]) for name in CSV_FIELDS])
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Use .json or .csv")

    logger.info(f"Saved {len(records)} level records to {path}")
    return str(path)
