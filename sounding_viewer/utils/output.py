"""
Output formatter for exporting index reports.

Supports multiple output formats:
- JSON: Full structured output with metadata
- CSV: One row per index
"""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path

from sounding_viewer import __version__

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "csv")


class ReportFormatter:
    """Formatter for exporting index reports to various formats.

    Example:
        >>> formatter = ReportFormatter(precision=2)
        >>> formatter.save(report, "indices.json", format="json")
        >>> formatter.save(report, "indices.csv", format="csv")
    """

    def __init__(self, precision: int = 2):
        """Initialize the formatter.

        Args:
            precision: Decimal places used by the CSV output
        """
        self.precision = precision

    def save(
        self,
        report,  # IndexReport
        output_path: str,
        format: str = "json",
        **kwargs,
    ) -> str:
        """Save an index report to file.

        Args:
            report: IndexReport object
            output_path: Output file path
            format: Output format (json, csv)
            **kwargs: Additional format-specific options

        Returns:
            Path to saved file

        Raises:
            ValueError: If format is not supported
        """
        format = format.lower()
        if format not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported format: {format}")

        # Create output directory if needed
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if format == "json":
            return self._save_json(report, output_path, **kwargs)
        return self._save_csv(report, output_path, **kwargs)

    def _save_json(self, report, output_path: Path, indent: int = 2, **kwargs) -> str:
        """Save report to JSON format; undefined indices are written as null."""
        content = report.to_dict()
        data = {
            "metadata": {
                "format_version": "1.0",
                "created": datetime.now().isoformat(),
                "software": f"sounding-viewer {__version__}",
                **content["metadata"],
            },
            "indices": content["indices"],
        }

        with open(output_path, 'w') as f:
            json.dump(data, f, indent=indent)

        logger.info(f"Saved JSON output to {output_path}")
        return str(output_path)

    def _save_csv(self, report, output_path: Path, delimiter: str = ",", **kwargs) -> str:
        """Save report to CSV format with columns key, name, value."""
        with open(output_path, 'w', newline='') as f:
            writer = csv.writer(f, delimiter=delimiter)
            writer.writerow(["key", "name", "value"])
            for value in report:
                writer.writerow([value.key, value.name, value.format(self.precision)])

        logger.info(f"Saved CSV output to {output_path}")
        return str(output_path)
