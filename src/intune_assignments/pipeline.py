"""
Pipeline orchestrator: load the snapshot (file or API cache directory),
optionally re-save it, then run renderers into output_dir.
"""

import json
from pathlib import Path
from typing import Callable, Optional

from ._util import debug, read_value_list, warn
from .schema import ReportSnapshot, SCHEMA_VERSION

# Cached API responses, one file per collection
APPS_CACHE_FILE = "mobileApps.json"
GROUPS_CACHE_FILE = "groups.json"
FILTERS_CACHE_FILE = "assignmentFilters.json"


def load_cache_dir(cache_dir: Path) -> ReportSnapshot:
    """Build a snapshot from cached API responses.

    The apps file is required; missing group/filter files leave those
    lookups empty so names resolve to ''.
    """
    apps_path = cache_dir / APPS_CACHE_FILE
    if not apps_path.is_file():
        raise FileNotFoundError(f"{apps_path}: application cache not found")
    data = {
        "meta": {"source": str(cache_dir)},
        "applications": read_value_list(apps_path),
    }
    for key, name in (("groups", GROUPS_CACHE_FILE), ("filters", FILTERS_CACHE_FILE)):
        p = cache_dir / name
        if p.is_file():
            data[key] = read_value_list(p)
        else:
            debug("load", f"{p} not found, {key} will not be resolved")
    return ReportSnapshot.model_validate(data)


def load_snapshot(path: Path) -> ReportSnapshot:
    """Load a snapshot JSON file, or a cache directory of API responses."""
    path = Path(path)
    if path.is_dir():
        return load_cache_dir(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    file_version = data.get("schema_version", 1)
    if file_version > SCHEMA_VERSION:
        warn(
            f"snapshot was created by a newer intune-assignments (schema v{file_version}, "
            f"this tool supports v{SCHEMA_VERSION}). Some fields may be dropped."
        )
        data["schema_version"] = SCHEMA_VERSION
    return ReportSnapshot.model_validate(data)


def save_snapshot(snapshot: ReportSnapshot, path: Path) -> None:
    """Serialize snapshot to JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")


def run_pipeline(
    *,
    snapshot_path: Path,
    output_dir: Path,
    run_renderers: Callable[[ReportSnapshot, Path], None],
    save_snapshot_path: Optional[Path] = None,
) -> ReportSnapshot:
    """
    Load the snapshot, optionally save a normalized copy, then run renderers.

    Returns the loaded snapshot.
    """
    snapshot = load_snapshot(snapshot_path)
    debug(
        "load",
        f"{len(snapshot.applications)} apps, {len(snapshot.groups)} groups, "
        f"{len(snapshot.filters)} filters",
    )
    if save_snapshot_path is not None:
        save_snapshot(snapshot, save_snapshot_path)
    output_dir.mkdir(parents=True, exist_ok=True)
    run_renderers(snapshot, output_dir)
    return snapshot
