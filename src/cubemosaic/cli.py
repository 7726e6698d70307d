"""
Command-line interface for the cube mosaic generator.
"""

import os
import sys
import argparse

import yaml

from .config import Config, default_palette_colors, describe_palette
from .generator import MosaicGenerator


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Convert an image into a 3x3 cube sticker mosaic",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 20 cubes across, default palette
  cubemosaic input.jpg output/ --cubes-across 20

  # Smoother result with per-cube images zipped
  cubemosaic input.jpg output/ --blur 0.8 --save-cubes

  # Favour correct lightness over hue
  cubemosaic input.jpg output/ --lum-weight 3.0

  # Show the palette in use
  cubemosaic --show-palette
        """
    )

    parser.add_argument(
        "input",
        nargs="?",
        help="Input image file (JPG/PNG)"
    )
    parser.add_argument(
        "output",
        nargs="?",
        help="Output directory for mosaic files"
    )

    parser.add_argument(
        "--config", "-c",
        default="config.yaml",
        help="Configuration file path (default: config.yaml, missing file means defaults)"
    )
    parser.add_argument(
        "--cubes-across", "-n",
        type=int,
        help="Number of cubes across the mosaic"
    )
    parser.add_argument(
        "--sticker-px",
        type=int,
        help="Rendered size of one sticker in pixels"
    )
    parser.add_argument(
        "--blur",
        type=float,
        dest="blur_radius",
        help="Gaussian blur radius applied after resampling, in stickers"
    )
    parser.add_argument(
        "--lum-weight",
        type=float,
        help="Luminance weight for palette matching (default: 2.2)"
    )
    parser.add_argument(
        "--save-cubes",
        action="store_true",
        default=None,
        help="Also write a ZIP with one PNG per cube"
    )

    parser.add_argument(
        "--show-palette",
        action="store_true",
        help="Print the palette and exit"
    )
    parser.add_argument(
        "--write-config",
        metavar="PATH",
        help="Write the effective configuration to PATH and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    return parser


def validate_arguments(args: argparse.Namespace) -> bool:
    """Validate command-line arguments."""
    if args.show_palette or args.write_config:
        return True

    if not args.input:
        print("Error: Input image file is required")
        return False

    if not args.output:
        print("Error: Output directory is required")
        return False

    if not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}")
        return False

    if args.cubes_across is not None and args.cubes_across < 1:
        print("Error: Cubes across must be at least 1")
        return False

    if args.sticker_px is not None:
        if args.sticker_px < 1:
            print("Error: Sticker size must be at least 1px")
            return False
        if args.sticker_px < 4:
            print("[WARN] Sticker sizes below 4px are hard to read")

    if args.blur_radius is not None and args.blur_radius < 0:
        print("Error: Blur radius must be non-negative")
        return False

    if args.lum_weight is not None and args.lum_weight <= 0:
        print("Error: Luminance weight must be positive")
        return False

    return True


def load_config(args: argparse.Namespace) -> Config:
    """Build configuration from the YAML file plus CLI overrides."""
    return Config.from_yaml(
        args.config,
        input=args.input,
        output_dir=args.output,
        cubes_across=args.cubes_across,
        sticker_px=args.sticker_px,
        blur_radius=args.blur_radius,
        lum_weight=args.lum_weight,
        save_cubes=args.save_cubes,
    )


def show_palette(config: Config):
    """Show the palette in use."""
    palette = config.build_palette()
    print("\n" + "=" * 60)
    print(f"PALETTE ({palette.size()} colors)")
    print("=" * 60)
    for line in describe_palette(palette):
        print(line)
    print("=" * 60)


def write_config(config: Config, path: str):
    """Write the effective configuration, filling in the standard palette."""
    if not config.palette.colors:
        config.palette.colors = default_palette_colors()
    config.save_yaml(path)
    print(f"[OK] Configuration written to {path}")


def generate_mosaic(args: argparse.Namespace, config: Config) -> bool:
    """Generate a cube mosaic from the parsed arguments."""
    try:
        settings = config.mosaic

        print("\n" + "=" * 60)
        print("CUBE MOSAIC GENERATOR")
        print("=" * 60)
        print(f"Input: {config.input}")
        print(f"Output: {config.output_dir}")
        print(f"Cubes across: {settings.cubes_across}")
        print(f"Sticker size: {settings.sticker_px}px")
        print(f"Blur radius: {settings.blur_radius}")
        print(f"Luminance weight: {settings.lum_weight}")
        print("-" * 60)

        results = MosaicGenerator(config).generate(config.input, config.output_dir)

        metadata = results["metadata"]
        grid = metadata["grid"]

        print("\n" + "=" * 60)
        print("[OK] MOSAIC COMPLETE")
        print("=" * 60)
        print(f"Stickers: {grid['stickers_across']} x {grid['stickers_high']}")
        print(f"Cubes: {grid['cubes_across']} x {grid['cubes_down']}")
        print(f"Grid hash: {metadata['grid_hash']}")

        print("\nSticker usage:")
        total = sum(metadata["color_usage"].values()) or 1
        for key, count in metadata["color_usage"].items():
            print(f"  {key}: {count:6d} ({count / total:.1%})")

        print("\nGenerated Files:")
        for path in results["outputs"].values():
            print(f"  [OK] {path}")

        return True

    except Exception as e:
        print(f"\n[X] Error during mosaic generation: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return False


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not validate_arguments(args):
        sys.exit(1)

    try:
        config = load_config(args)
    except (ValueError, TypeError, OSError, yaml.YAMLError) as e:
        print(f"Error: Invalid configuration: {e}")
        sys.exit(1)

    if args.show_palette:
        show_palette(config)
        return

    if args.write_config:
        write_config(config, args.write_config)
        return

    success = generate_mosaic(args, config)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
