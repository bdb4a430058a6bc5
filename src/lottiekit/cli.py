"""Command line inspection of composition files.

Usage:
    lottiekit info <path>                       Header, layer tree and warnings
    lottiekit sample <path> --layer 3 --frame 12   Transform of one layer at a frame

Examples:
    lottiekit info anim.json --scale 2
    python -m lottiekit sample anim.json --layer 1 --frame 30.5
"""

from typing import List, Optional
import argparse
import logging
import sys

from dotenv import load_dotenv

from lottiekit import setup_logging
from lottiekit.animation.values import static_or_none
from lottiekit.config.settings import get_settings
from lottiekit.errors import LottieError
from lottiekit.loader import FileSource, load
from lottiekit.model.composition import Composition

logger = logging.getLogger(__name__)


def _print_info(composition: Composition) -> None:
    bounds = composition.bounds
    print(f"Size:      {bounds.width}x{bounds.height} (scale {composition.scale})")
    print(f"Frames:    {composition.start_frame:g}-{composition.end_frame:g} "
          f"@ {composition.frame_rate:g} fps")
    print(f"Duration:  {composition.duration_millis:.0f} ms")
    print(f"Version:   {composition.version}")
    print(f"Layers:    {len(composition.layers)}")
    print(f"Precomps:  {len(composition.precomps)}")
    print(f"Images:    {len(composition.images)}")
    print(f"Fonts:     {len(composition.fonts)}")
    print(f"Glyphs:    {len(composition.characters)}")
    print()
    print(composition, end="")

    warnings = composition.warnings
    if warnings:
        print()
        print("Warnings:")
        for warning in warnings:
            print(f"  - {warning}")


def _print_sample(composition: Composition, layer_id: int, frame: float) -> int:
    layer = composition.layer_by_id(layer_id)
    if layer is None:
        print(f"No top-level layer with id {layer_id}", file=sys.stderr)
        return 1

    transform = layer.transform
    print(f"Layer {layer.id} ({layer.name}, {layer.type.name}) at frame {frame:g}")
    print(f"  visible:   {layer.is_visible_at(frame)}")
    print(f"  anchor:    {transform.anchor.value_at(frame)}")
    print(f"  position:  {transform.position.value_at(frame)}")
    print(f"  scale:     {transform.scale.value_at(frame)}")
    print(f"  rotation:  {transform.rotation.value_at(frame)}")
    print(f"  opacity:   {transform.opacity.value_at(frame)}")
    print(f"  skew:      {static_or_none(transform.skew, frame, 0.0)}")
    parents = composition.layers.parent_chain(layer)
    if parents:
        print(f"  parents:   {' -> '.join(parent.name for parent in parents)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lottiekit", description="Inspect Lottie compositions")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Show header, layers and warnings")
    info.add_argument("path", help="Composition JSON file")
    info.add_argument("--scale", type=float, default=None, help="Density scale")

    sample = subparsers.add_parser("sample", help="Evaluate a layer transform at a frame")
    sample.add_argument("path", help="Composition JSON file")
    sample.add_argument("--layer", type=int, required=True, help="Top-level layer id")
    sample.add_argument("--frame", type=float, default=0.0, help="Frame to sample")
    sample.add_argument("--scale", type=float, default=None, help="Density scale")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    # Load environment variables
    load_dotenv()

    args = build_parser().parse_args(argv)
    setup_logging(args.debug or get_settings().debug)

    try:
        composition = load(FileSource(args.path), scale=args.scale)
    except LottieError as e:
        logger.error(f"Unable to load {args.path}: {e}")
        return 1

    if args.command == "info":
        _print_info(composition)
        return 0
    return _print_sample(composition, args.layer, args.frame)


if __name__ == "__main__":
    sys.exit(main())
