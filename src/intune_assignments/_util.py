"""Shared utilities for intune-assignments: debug logging, JSON helpers."""

import json
import os
import sys
from pathlib import Path
from typing import Any, List

_DEBUG = bool(os.environ.get("INTUNE_ASSIGNMENTS_DEBUG", ""))


def debug(label: str, msg: str) -> None:
    """Print a debug message to stderr when INTUNE_ASSIGNMENTS_DEBUG is set."""
    if _DEBUG:
        print(f"[intune-assignments] {label}: {msg}", file=sys.stderr)


def warn(msg: str) -> None:
    print(f"WARNING: {msg}", file=sys.stderr)


def read_value_list(p: Path) -> List[Any]:
    """Read a cached API response: a bare list or a {"value": [...]} envelope."""
    data = json.loads(p.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("value", [])
    if not isinstance(data, list):
        raise ValueError(f"{p}: expected a list or an object with a 'value' list")
    return data
