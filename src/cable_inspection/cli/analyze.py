"""CLI for measuring cable diameter and detecting jacket defects in images."""

import argparse
import json
import logging
import sys
from glob import glob

import numpy as np

from ..core.analysis import analyze_image_file
from ..core.config import DEFAULT_CONFIG, load_config, save_config
from ..utils.file_io import create_output_directory, get_image_files, save_batch_summary, validate_image_file


def create_argument_parser() -> argparse.ArgumentParser:
    """Create argument parser for the analyze command."""
    parser = argparse.ArgumentParser(
        description="Measure cable diameter and detect jacket defects (pinholes, cuts, scratches).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Inspect a single image
  cable-analyze cable.png

  # Batch inspection of a folder with debug images
  cable-analyze samples/ --out-dir results --save-debug

  # Tune thresholds for a darker scene and keep them for later runs
  cable-analyze cable.jpg --measure-threshold 40 --save-config dark_scene.json
  cable-analyze *.jpg --config dark_scene.json
        """,
    )

    # Input/Output
    parser.add_argument(
        "images",
        nargs="+",
        help="Path(s) to input images (PNG/JPEG/BMP) or directories. Supports wildcards.",
    )
    parser.add_argument("--out-dir", default="out", help="Output directory for results (default: ./out)")

    # Configuration
    config_group = parser.add_argument_group("Configuration")
    config_group.add_argument("--config", help="Load pipeline constants from a JSON file")
    config_group.add_argument("--save-config", help="Save the effective pipeline constants to a JSON file")

    # Measurement
    measure_group = parser.add_argument_group("Diameter Measurement")
    measure_group.add_argument(
        "--measure-threshold",
        type=int,
        help=f"Jacket mask threshold (default: {DEFAULT_CONFIG.measure_thresh_low})",
    )

    # Defect detection
    defect_group = parser.add_argument_group("Defect Detection")
    defect_group.add_argument(
        "--canny-low",
        type=int,
        help=f"Canny lower threshold (default: {DEFAULT_CONFIG.canny_low})",
    )
    defect_group.add_argument(
        "--canny-high",
        type=int,
        help=f"Canny upper threshold (default: {DEFAULT_CONFIG.canny_high})",
    )
    defect_group.add_argument(
        "--area-filter",
        type=int,
        help=f"Maximum bounding box area of a defect in px^2 (default: {DEFAULT_CONFIG.area_filter})",
    )

    # Output options
    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument("--no-overlay", action="store_true", help="Skip writing annotated images")
    output_group.add_argument(
        "--save-debug",
        action="store_true",
        help="Save debug images (jacket mask, edge map, grouping canvas)",
    )
    output_group.add_argument("--quiet", action="store_true", help="Suppress progress output, only show final summary")
    output_group.add_argument("--verbose", action="store_true", help="Enable debug logging from the pipelines")

    return parser


def build_config(args):
    """Combine the optional config file with command line overrides.

    Raises:
        ValueError: If the config file or an override is invalid
    """
    config = load_config(args.config) if args.config else DEFAULT_CONFIG

    overrides = {
        "measure_thresh_low": args.measure_threshold,
        "canny_low": args.canny_low,
        "canny_high": args.canny_high,
        "area_filter": args.area_filter,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        config = config.replace(**overrides)

    return config


def expand_image_paths(patterns: list[str], quiet: bool = False) -> list[str]:
    """Expand wildcards and directories into a list of image paths."""
    image_paths = []
    for pattern in patterns:
        if "*" in pattern or "?" in pattern:
            matches = sorted(glob(pattern))
            if matches:
                image_paths.extend(matches)
            elif not quiet:
                print(f"Warning: No files match pattern '{pattern}'")
        elif validate_image_file(pattern):
            image_paths.append(pattern)
        else:
            directory_images = get_image_files(pattern)
            if directory_images:
                image_paths.extend(directory_images)
            else:
                image_paths.append(pattern)
    return image_paths


def analyze_single_image(image_path: str, args, config) -> dict:
    """Inspect a single image and return results."""
    try:
        if not args.quiet:
            print(f"Analyzing: {image_path}")

        results = analyze_image_file(
            image_path,
            output_dir=args.out_dir,
            config=config,
            no_overlay=args.no_overlay,
            save_debug=args.save_debug,
        )

        if not args.quiet:
            diameter = results.get("diameter_px")
            diameter_text = f"{diameter:.1f} px" if diameter is not None else "not measured"
            print(f"  Diameter: {diameter_text}, defects: {results['defect_count']} {results['defect_counts']}")

        return results

    except Exception as e:
        error_result = {"image_path": image_path, "error": str(e), "success": False}
        if not args.quiet:
            print(f"Error analyzing {image_path}: {e}")
        return error_result


def print_summary(all_results: list[dict]) -> None:
    """Print inspection summary."""
    total = len(all_results)
    successful_results = [r for r in all_results if not r.get("error")]
    failed = total - len(successful_results)

    print("\nInspection Summary:")
    print(f"  Total images: {total}")
    print(f"  Successful: {len(successful_results)}")
    print(f"  Failed: {failed}")

    diameters = [r["diameter_px"] for r in successful_results if r.get("diameter_px") is not None]
    if diameters:
        print(f"  Mean diameter: {np.mean(diameters):.1f} ± {np.std(diameters):.1f} px")
        print(f"  Range: {min(diameters):.1f} - {max(diameters):.1f} px")

    if successful_results:
        totals = {}
        for result in successful_results:
            for label, count in result.get("defect_counts", {}).items():
                totals[label] = totals.get(label, 0) + count
        print("  Defects: " + ", ".join(f"{label}={count}" for label, count in totals.items()))


def main():
    """Main entry point for the analyze command."""
    parser = create_argument_parser()
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: Invalid configuration: {e}")
        sys.exit(1)

    if args.save_config:
        config_path = save_config(args.save_config, config)
        if not args.quiet:
            print(f"Saved configuration to: {config_path}")

    image_paths = expand_image_paths(args.images, quiet=args.quiet)
    if not image_paths:
        print("Error: No valid image files specified")
        sys.exit(1)

    missing_images = [img for img in image_paths if not validate_image_file(img)]
    if missing_images:
        print("Error: The following image files were not found or are invalid:")
        for img in missing_images:
            print(f"  {img}")
        sys.exit(1)

    create_output_directory(args.out_dir)

    all_results = [analyze_single_image(image_path, args, config) for image_path in image_paths]

    # Save batch summary if multiple images
    if len(all_results) > 1:
        summary_path = save_batch_summary(all_results, args.out_dir)
        if not args.quiet:
            print(f"Batch summary saved to: {summary_path}")

    if not args.quiet:
        print_summary(all_results)

    # Print JSON output for single image (for scripting)
    if len(all_results) == 1 and not all_results[0].get("error") and args.quiet:
        print(json.dumps(all_results[0], indent=2))

    # Exit with error code if any analyses failed
    if any(r.get("error") for r in all_results):
        sys.exit(1)


if __name__ == "__main__":
    main()
