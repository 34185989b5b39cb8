"""Command line entry point.

Example::

    areabook-stats --cache-dir cache/commands --key-indicators cache/kics.json \
        --window six_to_twelve_months
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.engine import IntervalReportEngine, ReportConfig
from .core.errors import EC_WINDOW_INVALID, PipelineError
from .core.loader import load_area_ids, load_people
from .core.window import PRESETS, StatsWindow


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Average days between contacts per area")
    ap.add_argument("--cache-dir", required=True, help="directory holding <area id>.json commands responses")
    source = ap.add_mutually_exclusive_group(required=True)
    source.add_argument("--areas", nargs="+", help="area ids to load")
    source.add_argument("--key-indicators", help="key-indicators JSON listing the area ids")
    ap.add_argument("--window", choices=sorted(PRESETS), default="last_6_months", help="window preset")
    ap.add_argument("--start-ms", type=int, default=None, help="custom window start (unix ms)")
    ap.add_argument("--end-ms", type=int, default=None, help="custom window end (unix ms)")
    ap.add_argument("--filename", default="contacts", help="output base name")
    ap.add_argument("--ver", default="v1")
    ap.add_argument("--no-png", dest="write_png", action="store_false", help="skip the area chart")
    ap.add_argument("--quiet", action="store_true", help="hide the progress bar")
    return ap


def _window(args: argparse.Namespace) -> StatsWindow:
    if args.start_ms is None and args.end_ms is None:
        return StatsWindow.from_preset(args.window)
    if args.start_ms is None or args.end_ms is None:
        raise PipelineError(EC_WINDOW_INVALID, "--start-ms and --end-ms must be given together")
    return StatsWindow(args.start_ms, args.end_ms)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cache_dir = Path(args.cache_dir).expanduser()
    if not cache_dir.is_dir():
        print(f"[ERROR] cache directory not found: {cache_dir}", file=sys.stderr)
        return 1

    try:
        window = _window(args)
        area_ids = args.areas if args.areas else load_area_ids(args.key_indicators)
    except PipelineError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    engine = IntervalReportEngine(
        ReportConfig(window=window, filename=args.filename, ver=args.ver, write_png=args.write_png)
    )
    try:
        people = load_people(area_ids, cache_dir, engine.logger, progress=not args.quiet)
        results = engine.run(people)
    except PipelineError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2

    days = results["overall_mean_days"]
    if days is None:
        print("no qualifying intervals in window")
    else:
        print(f"{days} days between contacts")
    print(f"Wrote: {results['csv_path']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
