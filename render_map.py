"""
Tactile map renderer: GeoJSON FeatureCollection in, embossing SVG out.

Usage:
  python render_map.py campus.geojson                     # prints stage summary, writes SVG to ./
  python render_map.py campus.geojson -o out/             # writes out/tactile-map-YYYY-MM-DD.svg
  python render_map.py campus.geojson -t 5 --layout margin --margins 25
  python render_map.py campus.geojson --margins 20 10 20 10 --no-legend
"""

import argparse
import logging
import sys
from pathlib import Path

from tactimap.config import settings
from tactimap.engine.config import LayoutPolicy, Margins, Page, PipelineConfig
from tactimap.engine.layers import summarise_layers
from tactimap.engine.pipeline import Pipeline
from tactimap.geo.loader import summarise
from tactimap.svg.exporter import export_svg


def print_summary(result):
    """Per-stage report, one block per completed stage."""
    if result.features is not None:
        s = summarise(result.features)
        print(f"[load]     {s['total']} features, {s['total_vertices']} vertices")
        for layer, entry in s["by_layer"].items():
            print(f"             {layer}: {entry['count']} features, {entry['vertices']} verts")

    if result.filtered is not None:
        counts = summarise_layers(result.filtered)
        total = counts.pop("total")
        print(f"[filter]   {total} features: " + ", ".join(f"{k}={v}" for k, v in counts.items()))

    if result.simplified is not None:
        st = result.simplified.stats
        print(f"[simplify] {st.before} -> {st.after} vertices ({st.total_reduction}% reduction)")
        for layer, ls in st.by_layer.items():
            print(f"             {layer}: {ls.before} -> {ls.after}")

    if result.drawing is not None:
        d = result.drawing
        print(f"[render]   {d.primitive_count} primitives on {d.width:g}x{d.height:g}mm")

    for stage, error in result.errors.items():
        print(f"  ERROR in {stage}: {error}")


def build_parser(defaults=None):
    defaults = defaults or settings
    parser = argparse.ArgumentParser(description="Tactile map renderer: GeoJSON to embossing SVG")
    parser.add_argument("input", help="GeoJSON FeatureCollection file")
    parser.add_argument("-o", "--output", default=".", help="Output folder (default: current)")
    parser.add_argument(
        "-t",
        "--tolerance",
        type=float,
        default=defaults.default_tolerance_m,
        help="Simplification tolerance in metres (default: DEFAULT_TOLERANCE_M setting)",
    )
    parser.add_argument(
        "--layout",
        choices=[p.value for p in LayoutPolicy],
        default=LayoutPolicy.FULL_EXTENT.value,
        help="'full' fits every layer; 'margin' fits buildings and puts labels in the margins",
    )
    parser.add_argument(
        "--margins", type=float, nargs="+", default=[defaults.page_margin], help="1 or 4 values (top right bottom left), mm"
    )
    parser.add_argument("--width", type=float, default=defaults.page_width, help="Page width, mm")
    parser.add_argument("--height", type=float, default=defaults.page_height, help="Page height, mm")
    parser.add_argument("--no-legend", action="store_true", help="Omit the legend overlay")
    parser.add_argument("--no-accel", action="store_true", help="Use the pure Douglas-Peucker implementation only")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def config_from_args(args, defaults=None) -> PipelineConfig:
    """Raises ValueError for margins that leave no content area."""
    margins = Margins.parse(args.margins[0] if len(args.margins) == 1 else args.margins)
    return PipelineConfig.from_settings(
        defaults or settings,
        tolerance_m=args.tolerance,
        accelerated=not args.no_accel,
        page=Page(args.width, args.height, margins),
        layout=LayoutPolicy(args.layout),
        legend=not args.no_legend,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    source = Path(args.input)
    if not source.exists():
        print(f"Error: input does not exist: {source}")
        sys.exit(1)

    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = Pipeline(config).run(source)
    print_summary(result)

    if not result.ok:
        sys.exit(2)

    exported = export_svg(result.drawing, Path(args.output))
    print(f"  → Saved: {exported.path} ({exported.size} bytes)")


if __name__ == "__main__":
    main()
