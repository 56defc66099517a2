"""
Command-line interface.

Run with: python -m rollpack --lanes 4 --channels 3 --layers 2 --output pack.png
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Optional, Sequence

from rollpack.logging_config import setup_logging
from rollpack.model.pack_config import GapMode, parse_pack_config
from rollpack.model.pack_scene import PackAssembler
from rollpack.view.pack_plotter import PackPlotter, export_filename

logger = logging.getLogger("rollpack.cli")

# CLI option -> input key understood by parse_pack_config
OPTION_KEYS: dict[str, str] = {
    "lanes": "laneCount",
    "channels": "channelCount",
    "layers": "layerCount",
    "roll_diameter": "rollOuterDiameterMm",
    "core_diameter": "coreOuterDiameterMm",
    "roll_length": "rollLengthMm",
    "gap": "gapMm",
    "gap_mode": "gapMode",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rollpack",
        description="Render a palletized pack of paper rolls.",
    )
    # Values stay strings: invalid ones fall back to defaults instead of aborting
    grid = parser.add_argument_group("pack")
    grid.add_argument("--lanes", help="Rolls along the roll axis (default 4)")
    grid.add_argument("--channels", help="Rolls side by side (default 3)")
    grid.add_argument("--layers", help="Stacked layers (default 2)")
    grid.add_argument("--roll-diameter", help="Roll outer diameter in mm (default 120)")
    grid.add_argument("--core-diameter", help="Core outer diameter in mm (default 45)")
    grid.add_argument("--roll-length", help="Roll length in mm (default 100)")
    grid.add_argument("--gap", help="Gap between rolls in mm (default 7)")
    grid.add_argument(
        "--gap-mode",
        help=f"Axes the gap applies to: {', '.join(m.value for m in GapMode)} (default lane)",
    )

    out = parser.add_argument_group("output")
    out.add_argument("-o", "--output", help="PNG path (default roll_pack_<channels>_<lanes>_<layers>.png)")
    out.add_argument("--window-size", nargs=2, type=int, metavar=("W", "H"), default=[1600, 1000])
    out.add_argument("--show", action="store_true", help="Open an interactive window")
    out.add_argument("--log-level", default="INFO")
    out.add_argument("--log-file", default=None)
    return parser


def raw_parameters(args: argparse.Namespace) -> dict[str, Any]:
    """The options the user actually gave, keyed for parse_pack_config."""
    return {
        key: getattr(args, option)
        for option, key in OPTION_KEYS.items()
        if getattr(args, option) is not None
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    config = parse_pack_config(raw_parameters(args))
    logger.info(f"Pack configuration: {config.as_dict()}")

    assembler = PackAssembler()
    plotter: Optional[PackPlotter] = None

    try:
        plotter = PackPlotter(off_screen=not args.show, window_size=tuple(args.window_size))
        plotter.attach(assembler)
        scene = assembler.regenerate(config)
        if args.show:
            plotter.show(screenshot=args.output)
        else:
            plotter.export_png(args.output or export_filename(scene.config))
    except Exception as e:
        logger.exception(f"Rendering failed: {e}")
        return 1
    finally:
        assembler.clear()
        if plotter is not None:
            plotter.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
