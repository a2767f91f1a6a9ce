"""End-to-end inspection of one image file with results written to disk."""

import os
from pathlib import Path
from typing import Any

from cable_inspection.utils.file_io import load_image, save_defects_csv, save_image, save_metrics_json

from .config import DEFAULT_CONFIG, InspectionConfig
from .defects import find_defects
from .measurement import measure_diameter
from .visualization import create_inspection_overlay, save_debug_images


def analyze_image(image, config: InspectionConfig | None = None, save_debug: bool = False) -> dict[str, Any]:
    """Run both pipelines on an in-memory image.

    Args:
        image: BGR input image
        config: Pipeline constants (defaults when None)
        save_debug: Keep intermediate images in the returned results

    Returns:
        Dictionary with ``measurement`` and ``defects`` result objects plus a
        combined ``overlay`` image (None when the image is empty)
    """
    config = config or DEFAULT_CONFIG

    measurement = measure_diameter(image, config, return_debug=save_debug)
    defects = find_defects(image, config, return_debug=save_debug)

    overlay = None
    if measurement.ok and defects.ok:
        overlay = create_inspection_overlay(image, measurement.measurements, defects.regions, config)

    return {"measurement": measurement, "defects": defects, "overlay": overlay}


def analyze_image_file(
    image_path: str,
    output_dir: str = "out",
    config: InspectionConfig | None = None,
    no_overlay: bool = False,
    save_debug: bool = False,
) -> dict[str, Any]:
    """Inspect a cable image file and save overlays and metrics.

    Args:
        image_path: Path to input image
        output_dir: Output directory for results
        config: Pipeline constants (defaults when None)
        no_overlay: Skip writing the annotated images
        save_debug: Also write intermediate masks and edge maps

    Returns:
        Dictionary with complete inspection results

    Raises:
        FileNotFoundError: If the image cannot be loaded
    """
    image = load_image(image_path)
    if image is None:
        raise FileNotFoundError(f"Could not load image: {image_path}")

    config = config or DEFAULT_CONFIG
    os.makedirs(output_dir, exist_ok=True)
    stem = Path(image_path).stem

    analysis = analyze_image(image, config, save_debug=save_debug)
    measurement = analysis["measurement"]
    defects = analysis["defects"]

    height, width = image.shape[:2]
    region_dicts = [region.as_dict() for region in defects.regions]
    results = {
        "image_path": os.path.abspath(image_path),
        "image_size_px": [width, height],
        "measurements": [m.as_dict() for m in measurement.measurements],
        "rows_measured": len(measurement.measurements),
        "diameter_px": measurement.mean_width,
        "diameter_min_px": min((m.width for m in measurement.measurements), default=None),
        "diameter_max_px": max((m.width for m in measurement.measurements), default=None),
        "defects": region_dicts,
        "defect_count": len(defects.regions),
        "defect_counts": defects.counts(),
        "config": config.to_dict(),
    }

    results["defects_csv"] = save_defects_csv(region_dicts, output_dir, stem)

    if save_debug:
        debug_images = {**measurement.debug_images, **defects.debug_images}
        results["debug_images"] = save_debug_images(debug_images, output_dir, stem)

    if not no_overlay:
        outputs = {
            "measure_image": (measurement.annotated, f"{stem}_measure.png"),
            "defect_image": (defects.annotated, f"{stem}_defects.png"),
            "overlay_image": (analysis["overlay"], f"{stem}_overlay.png"),
        }
        for key, (output, filename) in outputs.items():
            output_path = os.path.join(output_dir, filename)
            if save_image(output, output_path):
                results[key] = os.path.abspath(output_path)

    results["metrics_json"] = save_metrics_json(results, output_dir, stem)

    return results
