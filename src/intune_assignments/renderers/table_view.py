"""Table view renderer.

Turns banded rows into per-cell context (text, emphasis, background) and
renders it through templates/_assignment_table.html.j2.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from jinja2 import Environment
from markupsafe import Markup

from ..banding import band
from ..expand import capitalize_first
from ..schema import EnrichedRow

# Raw field name -> column header
HEADER_LABELS = {
    "type": "App type",
    "displayName": "App name",
    "intent": "Assignment Intent",
    "targetGroupName": "Target Group",
    "filterName": "Filter name",
    "filterMode": "Filter Intent",
    "publisher": "Publisher",
    "version": "Version",
    "filename": "Filename",
    "createdAt": "Created",
    "modifiedAt": "Modified",
    "id": "App id",
}

# (raw field name, EnrichedRow attribute), in display order. band color is
# applied to the <tr> and has no column of its own.
COLUMNS: List[Tuple[str, str]] = [
    ("icon", "icon"),
    ("type", "type"),
    ("displayName", "display_name"),
    ("intent", "intent"),
    ("targetGroupName", "target_group_name"),
    ("filterName", "filter_name"),
    ("filterMode", "filter_mode"),
    ("publisher", "publisher"),
    ("version", "version"),
    ("filename", "filename"),
    ("createdAt", "created_at"),
    ("modifiedAt", "modified_at"),
    ("id", "app_id"),
]

# Columns that can carry the bold grouping emphasis
GROUP_COLUMNS = ("display_name", "target_group_name")

# Checked in order; "available" also covers availableWithoutEnrollment.
INTENT_COLORS: List[Tuple[str, str]] = [
    ("required", "#90EE90"),
    ("uninstall", "#FA8072"),
    ("available", "#FFFF99"),
]

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True)
class ViewSpec:
    """How one table view sorts, bands and emphasizes its rows."""

    anchor: str
    title: str
    sort_keys: Tuple[str, ...]
    group_key: str
    active_group_column: str


def bucket_view(bucket_name: str) -> ViewSpec:
    return ViewSpec(
        anchor=bucket_name,
        title=f"{bucket_name} App Assignments",
        sort_keys=("display_name",),
        group_key="app_id",
        active_group_column="display_name",
    )


TARGET_GROUP_VIEW = ViewSpec(
    anchor="TargetGroups",
    title="App Assignments by Target Group",
    sort_keys=("target_group_name", "display_name"),
    group_key="target_group_name",
    active_group_column="target_group_name",
)


def header_label(field: str) -> str:
    if field == "icon":
        return ""
    return HEADER_LABELS.get(field, field)


def intent_background(intent: str) -> str:
    """Background color for an intent cell, matched by case-insensitive prefix."""
    folded = intent.casefold()
    for prefix, color in INTENT_COLORS:
        if folded.startswith(prefix):
            return color
    return ""


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime(_TIMESTAMP_FORMAT)
    return str(value)


def _cells(row: EnrichedRow, active_group_column: str, show_ids: bool) -> List[dict]:
    cells = []
    for field, attr in COLUMNS:
        cell = {"field": field, "value": "", "bold": False, "background": ""}
        if attr == "icon":
            cell["value"] = Markup(row.icon)
        elif attr == "app_id":
            cell["value"] = row.app_id if show_ids else ""
        elif attr == "intent":
            cell["value"] = capitalize_first(row.intent)
            cell["background"] = intent_background(row.intent)
        else:
            cell["value"] = _cell_text(getattr(row, attr))
            cell["bold"] = attr == active_group_column and attr in GROUP_COLUMNS
        cells.append(cell)
    return cells


def render(
    banded_rows: Sequence[EnrichedRow],
    active_group_column: str,
    show_ids: bool,
    env: Environment,
) -> Markup:
    """Render already-banded rows to a <table> fragment."""
    rows = [
        {"band_color": row.band_color, "cells": _cells(row, active_group_column, show_ids)}
        for row in banded_rows
    ]
    template = env.get_template("_assignment_table.html.j2")
    return Markup(template.render(
        headers=[header_label(field) for field, _ in COLUMNS],
        rows=rows,
    ))


def render_view(
    rows: Sequence[EnrichedRow],
    view: ViewSpec,
    env: Environment,
    show_ids: bool = False,
    title: Optional[str] = None,
) -> dict:
    """Band rows for this view and render its table; returns the section context."""
    banded = band(rows, view.sort_keys, view.group_key)
    return {
        "anchor": view.anchor,
        "title": title or view.title,
        "count": len(banded),
        "table_html": render(banded, view.active_group_column, show_ids, env),
    }
