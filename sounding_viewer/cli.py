"""
Command-line interface for sounding-viewer.

Provides CLI commands for:
- Computing the index battery of a sounding file
- Printing derived quantities at a pressure level
- Exporting the edited level records
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from sounding_viewer import __version__


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def run_indices(args: argparse.Namespace) -> int:
    """Compute the index battery of a sounding file."""
    from sounding_viewer.data import load_records, save_records
    from sounding_viewer.indices import IndexEngine
    from sounding_viewer.profile import Sounding, level_details
    from sounding_viewer.utils.config import SoundingConfig, load_config, validate_config
    from sounding_viewer.utils.output import ReportFormatter

    # Load configuration
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Configuration file not found: {args.config}")
            return 1
        config = load_config(config_path)
    else:
        config = SoundingConfig(name=Path(args.input).stem)

    issues = validate_config(config)
    if issues:
        for issue in issues:
            print(f"Error: {issue}")
        return 1

    sounding = Sounding(load_records(args.input))

    if args.disable_above is not None:
        for level in sounding.levels:
            if level.enabled and level.pressure < args.disable_above:
                sounding.disable_level(level.id)

    if args.details is not None:
        print(level_details(sounding, args.details).format())
        print()

    report = IndexEngine(config).compute(sounding)

    # Output
    output_format = args.format or config.output.format
    if args.output:
        if output_format == "table":
            output_format = "json"
        formatter = ReportFormatter(precision=config.output.precision)
        output_path = formatter.save(report, args.output, format=output_format)
        print(f"Results saved to: {output_path}")
    else:
        print(report.format_table(config.output.precision))

    if args.export:
        export_path = save_records(sounding, args.export)
        print(f"Records saved to: {export_path}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sounding-viewer",
        description="sounding-viewer: sounding-derived instability and kinematic indices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Print the index table of a sounding
    sounding-viewer sounding.csv

    # Use a configuration file and save the report
    sounding-viewer sounding.json --config indices.yaml --output report.json

    # Ignore levels above 100 hPa and export the edited records
    sounding-viewer sounding.csv --disable-above 100 --export edited.csv
        """,
    )

    parser.add_argument(
        "input",
        type=str,
        help="Sounding records (.json or .csv)",
    )

    # Global options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"sounding-viewer {__version__}",
    )

    # Configuration options
    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to YAML or JSON configuration file",
    )

    # Profile options
    parser.add_argument(
        "--disable-above",
        type=float,
        metavar="P",
        help="Disable levels with pressure below P [hPa]",
    )
    parser.add_argument(
        "--details",
        type=float,
        metavar="P",
        help="Print derived quantities at pressure P [hPa]",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Output file path",
    )
    parser.add_argument(
        "-f", "--format",
        type=str,
        choices=["json", "csv"],
        help="Output format",
    )
    parser.add_argument(
        "--export",
        type=str,
        metavar="RECORDS",
        help="Save the level records (.json or .csv), including enabled flags",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        return run_indices(args)
    except Exception as e:
        logging.exception(f"Index computation failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
