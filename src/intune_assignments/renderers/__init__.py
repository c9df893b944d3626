"""
Renderers consume the full snapshot and a Jinja2 environment, writing to output_dir.
"""

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from ..expand import IconLookup
from ..schema import ReportSnapshot

from .html_report import render as render_html_report


def make_env() -> Environment:
    templates_dir = Path(__file__).resolve().parent.parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=True,
    )


def run_all(
    snapshot: ReportSnapshot,
    output_dir: Path,
    show_ids: bool = False,
    icon_for: Optional[IconLookup] = None,
) -> None:
    """Run all renderers. output_dir is created if it does not exist."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    render_html_report(snapshot, make_env(), output_dir, show_ids=show_ids, icon_for=icon_for)
