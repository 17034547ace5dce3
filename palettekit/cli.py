"""Command-line interface for palettekit."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .pipeline import PaletteExtractor
from .render import render_swatches
from .types import ExtractorConfig, PaletteError


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="palettekit",
        description="Extract a labeled color palette from an image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  palettekit -i photo.jpg
  palettekit -i photo.jpg --colors 12 --seed 7 --json
  palettekit -i photo.jpg --swatch photo_palette.png
        """,
    )

    parser.add_argument("-i", "--input", required=True, help="Input image file path")

    parser.add_argument(
        "--colors",
        "-c",
        type=int,
        default=8,
        help="Number of k-means clusters (default: 8)",
    )

    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Fixed number of k-means iterations (default: 5)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for centroid initialization (default: random)",
    )

    parser.add_argument(
        "--size",
        type=int,
        default=128,
        help="Downsample so the longer side is at most this many pixels (default: 128)",
    )

    parser.add_argument("--json", action="store_true", help="Print the palette as JSON")

    parser.add_argument(
        "--swatch",
        default=None,
        help="Save a PNG swatch sheet to this path",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    return parser


def format_palette(palette) -> str:
    """Format a palette as aligned text lines."""
    lines = []
    for label, color in palette.roles():
        if color is None:
            lines.append(f"{label:<14} -")
        else:
            lines.append(f"{label:<14} {color.hex}  {color.population} px")

    lines.append("")
    lines.append(f"All colors ({len(palette.all_colors)}):")
    for color in palette.all_colors:
        flags = [
            name
            for name, on in (
                ("vibrant", color.is_vibrant),
                ("dark", color.is_dark),
                ("light", color.is_light),
            )
            if on
        ]
        lines.append(f"  {color.hex}  {color.population:>6} px  {' '.join(flags)}".rstrip())
    return "\n".join(lines)


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ExtractorConfig(
            n_colors=parsed.colors,
            iterations=parsed.iterations,
            target_size=parsed.size,
            random_state=parsed.seed,
        )
        result = PaletteExtractor(config).process(parsed.input)
        palette = result.palette

        if parsed.json:
            data = palette.to_dict()
            data["duration_ms"] = round(result.duration_ms, 2)
            print(json.dumps(data, indent=2))
        else:
            print(f"Processing: {parsed.input} ({result.width}x{result.height})")
            print(format_palette(palette))
            print(f"Done in {result.duration_ms:.1f} ms")

        if parsed.swatch:
            swatch_path = Path(parsed.swatch)
            swatch_path.parent.mkdir(parents=True, exist_ok=True)
            render_swatches(palette, swatch_path)
            if not parsed.json:
                print(f"Swatch saved: {swatch_path}")

        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (PaletteError, ValueError) as e:
        print(f"Error processing image: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
