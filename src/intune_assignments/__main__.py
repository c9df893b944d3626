"""
CLI entry point. Parses args and delegates to pipeline.
"""

import sys
from pathlib import Path
from typing import Optional

from .cli import parse_args
from .pipeline import run_pipeline
from .schema import ReportSnapshot


def _run_renderers(snapshot: ReportSnapshot, output_dir: Path, args) -> None:
    """Run all renderers."""
    from .renderers import run_all

    icon_for = None
    if args.icons_dir is not None:
        from .icons import DirectoryIconResolver
        icon_for = DirectoryIconResolver(args.icons_dir)

    run_all(snapshot, output_dir, show_ids=args.show_ids, icon_for=icon_for)


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)

    if args.icons_dir is not None and not args.icons_dir.is_dir():
        print(f"ERROR: icons directory not found: {args.icons_dir}", file=sys.stderr)
        return 1

    try:
        def run_renderers(snapshot: ReportSnapshot, output_dir: Path) -> None:
            _run_renderers(snapshot, output_dir, args)

        run_pipeline(
            snapshot_path=args.snapshot,
            output_dir=args.output_dir,
            run_renderers=run_renderers,
            save_snapshot_path=args.save_snapshot,
        )
        print(f"Report written to {args.output_dir / 'report.html'}")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
