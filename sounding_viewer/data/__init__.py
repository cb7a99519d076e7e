"""
Sounding record files.

Functions
---------
load_records
    Read level records from JSON or CSV
save_records
    Write all levels of a sounding, including the enabled flag
"""

from sounding_viewer.data.records import load_records, save_records

__all__ = ["load_records", "save_records"]
