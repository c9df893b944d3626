"""HTML report renderer.

Runs the row pipeline (lookups, expansion, bucket classification) over the
snapshot, renders one table per bucket plus the target-group view, and hands
everything to templates/report.html.j2.
"""

from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from jinja2 import Environment

from .._util import debug
from ..classify import classify
from ..expand import IconLookup, expand
from ..lookups import build_filter_lookup, build_group_lookup
from ..schema import Application, Bucket, EnrichedRow, ReportSnapshot
from .table_view import TARGET_GROUP_VIEW, bucket_view, render_view

REPORT_FILENAME = "report.html"


def app_type_counts(applications: Iterable[Application]) -> List[Tuple[str, int]]:
    """Count assigned apps per app type, most common first."""
    counts = Counter(app.type for app in applications if app.assignments)
    return sorted(counts.items(), key=lambda item: (-item[1], item[0].casefold()))


def build_rows(
    snapshot: ReportSnapshot,
    icon_for: Optional[IconLookup] = None,
) -> List[EnrichedRow]:
    group_lookup = build_group_lookup(snapshot.groups)
    filter_lookup = build_filter_lookup(snapshot.filters)
    rows = expand(snapshot.applications, group_lookup, filter_lookup, icon_for)
    debug("report", f"{len(rows)} assignment rows from {len(snapshot.applications)} apps")
    return rows


def _build_context(
    snapshot: ReportSnapshot,
    env: Environment,
    show_ids: bool,
    icon_for: Optional[IconLookup],
) -> dict:
    rows = build_rows(snapshot, icon_for)
    buckets: Dict[Bucket, List[EnrichedRow]] = classify(rows)

    # Each view bands its own copies, so colors never leak between views.
    sections = [
        render_view(bucket_rows, bucket_view(bucket.value), env, show_ids)
        for bucket, bucket_rows in buckets.items()
    ]
    sections.append(render_view(rows, TARGET_GROUP_VIEW, env, show_ids))

    nav = [
        {"anchor": s["anchor"], "label": bucket.value, "count": s["count"]}
        for bucket, s in zip(buckets, sections)
    ]
    nav.append({
        "anchor": TARGET_GROUP_VIEW.anchor,
        "label": "Target Groups",
        "count": sections[-1]["count"],
    })

    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    return {
        "tenant": snapshot.meta.get("tenant", ""),
        "generated": generated,
        "nav": nav,
        "type_counts": app_type_counts(snapshot.applications),
        "total_rows": len(rows),
        "sections": sections,
    }


def build_report(
    snapshot: ReportSnapshot,
    env: Environment,
    show_ids: bool = False,
    icon_for: Optional[IconLookup] = None,
) -> str:
    """Return the complete report document."""
    from jinja2 import FileSystemLoader

    # When called from run_all() the loader is already set; when called
    # directly (e.g. tests), point it at the package templates dir.
    if env.loader is None:
        templates_dir = Path(__file__).resolve().parent.parent / "templates"
        env = env.overlay(loader=FileSystemLoader(str(templates_dir)))

    ctx = _build_context(snapshot, env, show_ids, icon_for)
    return env.get_template("report.html.j2").render(ctx)


def render(
    snapshot: ReportSnapshot,
    env: Environment,
    output_dir: Path,
    show_ids: bool = False,
    icon_for: Optional[IconLookup] = None,
) -> Path:
    """Write report.html into output_dir and return its path."""
    output_dir = Path(output_dir)
    html = build_report(snapshot, env, show_ids=show_ids, icon_for=icon_for)
    path = output_dir / REPORT_FILENAME
    path.write_text(html, encoding="utf-8")
    return path
