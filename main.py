import argparse
import logging
import sys
from pathlib import Path

import structlog

# Make the local package importable without installation.
ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT / "src"))

from chameleon import ChameleonSprite, SpriteOptions, load_options


def configure_logging(verbose: bool = False) -> None:
    """Send structlog events to stderr; debug level only when verbose."""
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def options_from_args(args: argparse.Namespace) -> SpriteOptions:
    """Layer CLI flags over the (optional) JSON options file."""
    base = load_options(args.config) if args.config else SpriteOptions()

    custom: dict = {"colors": {}, "strokeWidths": {}}
    if args.path is not None:
        custom["path"] = args.path
    if args.subfolder:
        custom["subfolder"] = args.subfolder
    if args.name:
        custom["name"] = args.name
    if args.color_naming:
        custom["colors"]["naming"] = args.color_naming
    if args.no_colors:
        custom["colors"]["modifiable"] = False
    if args.no_preserve_original:
        custom["colors"]["preserveOriginal"] = False
    if args.stroke_width_naming:
        custom["strokeWidths"]["naming"] = args.stroke_width_naming
    if args.no_stroke_widths:
        custom["strokeWidths"]["modifiable"] = False
    if args.no_non_scaling:
        custom["strokeWidths"]["nonScaling"] = False
    if args.no_transition:
        custom["transition"] = False
    elif args.transition is not None:
        custom["transition"] = args.transition
    return base.merged(custom)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Combine a directory of SVG icons into a sprite with CSS-variable colors."
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="Icon directory, relative to the working directory (default: current directory).",
    )
    parser.add_argument("--config", help="JSON file with sprite options.")
    parser.add_argument("--subfolder", help="Output directory inside the icon directory.")
    parser.add_argument("--name", help="Output file name without the .svg extension.")
    parser.add_argument("--color-naming", help="Base name for color variables.")
    parser.add_argument(
        "--no-colors", action="store_true", help="Leave fill and stroke values untouched."
    )
    parser.add_argument(
        "--no-preserve-original",
        action="store_true",
        help="Fall back to currentColor instead of the original color.",
    )
    parser.add_argument("--stroke-width-naming", help="Base name for stroke-width variables.")
    parser.add_argument(
        "--no-stroke-widths", action="store_true", help="Leave stroke-width values untouched."
    )
    parser.add_argument(
        "--no-non-scaling",
        action="store_true",
        help="Do not add vector-effect=\"non-scaling-stroke\".",
    )
    parser.add_argument("--transition", help="CSS transition snippet (default: 'all .3s ease').")
    parser.add_argument(
        "--no-transition", action="store_true", help="Do not append a transition style."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        options = options_from_args(args)
        print(f"Creating basic sprite inside '{options.output_dir()}/' ...")
        report = ChameleonSprite(options).create()
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Found {report.svg_count} SVGs.")
    if report.color_count:
        print(f"Injected color variables into {report.color_count} attributes.")
    if report.stroke_width_count:
        print(f"Injected stroke-width variables into {report.stroke_width_count} attributes.")
    print(f"Wrote: {report.output_file}")
    print("Task complete!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
