"""
main.py — Command-line interface for CovView

Draws a coverage chart without the web app:
1) From a summary JSON file (plain or .gz)
2) From the summary endpoint (--url)

Writes SVG markup, or the scene description as JSON, to a file or stdout.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from covview import config
from covview.chart_layout import build_coverage_scene
from covview.summary_loader import fetch_coverage_summary, load_coverage_summary
from covview.summary_parser import InvalidSummaryError
from covview.svg_renderer import render_coverage_svg

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="covview",
        description="Draw a stacked coverage chart from a genome model coverage summary",
    )
    parser.add_argument(
        "summary",
        nargs="?",
        help="Path to a coverage summary JSON file (.json or .json.gz)",
    )
    parser.add_argument("--url", help="Fetch the summary from this JSON endpoint instead of a file")
    parser.add_argument("-o", "--output", help="Write to this file instead of stdout")
    parser.add_argument(
        "--format",
        choices=["svg", "json"],
        default="svg",
        help="svg markup (default) or the scene description as JSON",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point for CovView."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else config.LOG_LEVEL)

    if not args.summary and not args.url:
        parser.error("give a summary file or --url")

    try:
        if args.url:
            summary = fetch_coverage_summary(args.url)
            if summary is None:
                print(f"Error: {config.FETCH_FAILURE_MESSAGE} ({args.url})", file=sys.stderr)
                return 1
        else:
            summary = load_coverage_summary(args.summary)
        scene = build_coverage_scene(summary)
    except FileNotFoundError:
        print(f"Error: summary file not found: {args.summary}", file=sys.stderr)
        return 2
    except json.JSONDecodeError as e:
        print(f"Error: {args.summary} is not valid JSON: {e}", file=sys.stderr)
        return 2
    except InvalidSummaryError as e:
        print(f"Error: invalid coverage summary: {e}", file=sys.stderr)
        return 2

    if args.format == "json":
        output = json.dumps(scene, indent=2)
    else:
        output = render_coverage_svg(scene)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        logger.info("Wrote %s chart for %d models to %s", args.format, len(scene["rows"]), args.output)
    else:
        sys.stdout.write(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
