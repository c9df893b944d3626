"""
CLI argument parsing.
"""

import argparse
from pathlib import Path
from typing import Optional


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="intune-assignments",
        description="Render an HTML report of Intune app assignments from a snapshot.",
    )
    parser.add_argument(
        "snapshot",
        type=Path,
        metavar="SNAPSHOT",
        help="Snapshot JSON file, or a directory of cached API responses "
             "(mobileApps.json, groups.json, assignmentFilters.json)",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        dest="output_dir",
        type=Path,
        default=Path("./output"),
        help="Output directory for report.html (default: ./output)",
    )
    parser.add_argument(
        "--icons-dir",
        type=Path,
        metavar="DIR",
        help="Directory of cached app icons named <app id>.png (or .jpg/.gif/.svg)",
    )
    parser.add_argument(
        "--show-ids",
        action="store_true",
        help="Fill the app id column in every table",
    )
    parser.add_argument(
        "--save-snapshot",
        type=Path,
        metavar="PATH",
        help="Also write the loaded input as a single snapshot JSON to PATH",
    )

    return parser.parse_args(argv)
