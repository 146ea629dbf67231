#!/usr/bin/env python3
"""
pedigreechart - Pedigree Chart Generator

Renders the ancestors of an individual as an SVG pedigree chart: one box per
person, connected by orthogonal lines, growing in one of four directions.

Usage:
    # Default left-to-right chart with 4 generations
    pedigreechart ancestors.json

    # Top-to-bottom chart, 6 generations, fill missing ancestors with empty boxes
    pedigreechart ancestors.json -l down -g 6 --show-empty-boxes

    # With an options file and a custom output path
    pedigreechart ancestors.json -c chart.hcl -o my-chart.svg
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .chart import ChartBuilder
from .config_loader import MAX_GENERATIONS, MIN_GENERATIONS, ConfigLoader
from .orientation import ChartLayout
from .records import load_records
from .renderer import SVGRenderer
from .text import PillowTextMeasurer

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pedigreechart",
        description="Render an ancestor tree as an SVG pedigree chart.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    pedigreechart ancestors.json
    pedigreechart ancestors.json -l down -g 6 --show-empty-boxes
    pedigreechart ancestors.json -c chart.hcl -o my-chart.svg
        """,
    )

    parser.add_argument("input", help="Path to the ancestor tree JSON file")

    parser.add_argument(
        "-o",
        "--output",
        default="pedigree.svg",
        help="Output file path (SVG). Default: pedigree.svg",
    )

    parser.add_argument("-c", "--config", help="Path to an HCL chart options file", default=None)

    parser.add_argument(
        "-l",
        "--layout",
        choices=[layout.value for layout in ChartLayout],
        default=None,
        help="Direction the tree grows in (default: right)",
    )

    parser.add_argument(
        "-g",
        "--generations",
        type=int,
        default=None,
        help=f"Number of generations to show ({MIN_GENERATIONS}-{MAX_GENERATIONS}, default: 4)",
    )

    parser.add_argument(
        "--show-empty-boxes",
        action="store_const",
        const=True,
        default=None,
        help="Draw empty boxes for missing ancestors",
    )

    parser.add_argument(
        "--rtl",
        action="store_const",
        const=True,
        default=None,
        help="Lay out the chart for a right-to-left document",
    )

    parser.add_argument(
        "--estimate-text",
        action="store_true",
        help="Estimate text widths instead of measuring them with font metrics",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    try:
        config = ConfigLoader().load(args.config).with_overrides(
            layout=ChartLayout.parse(args.layout) if args.layout else None,
            generations=args.generations,
            show_empty_boxes=args.show_empty_boxes,
            rtl=args.rtl,
        )

        root = load_records(input_path, max_generations=config.generations)
        if root is None:
            print("Nothing to render: the input holds no individual", file=sys.stderr)
            return 1

        measure = None if args.estimate_text else PillowTextMeasurer()
        chart = ChartBuilder(config, measure=measure).build(root)

        output_path = Path(args.output)
        output_path.write_text(SVGRenderer().render_svg(chart), encoding="utf-8")

        print(f"Chart generated: {output_path.absolute()}")
        print("\nSummary:")
        print(f"  Layout: {config.layout.value}")
        print(f"  Generations: {config.generations}")
        print(f"  Boxes: {len(chart.nodes)}")
        print(f"  Links: {len(chart.paths)}")

    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            logger.exception("Chart generation failed")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
