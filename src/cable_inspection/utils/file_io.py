"""File I/O utilities for images, inspection results and batch summaries."""

import csv
import json
import logging
import os
from pathlib import Path
from typing import Any

import cv2
import numpy as np

logger = logging.getLogger(__name__)

INPUT_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp"}
OUTPUT_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp"}

DEFECT_CSV_FIELDS = [
    "index",
    "label",
    "label_id",
    "center_x_px",
    "center_y_px",
    "width_px",
    "height_px",
    "angle_deg",
    "bbox_x",
    "bbox_y",
    "bbox_w",
    "bbox_h",
    "avg_intensity",
    "aspect_ratio",
]


def load_image(file_path: str) -> np.ndarray | None:
    """Decode an image file as a three-channel BGR array.

    Args:
        file_path: Path to image file

    Returns:
        Decoded image, or None if the file is missing or cannot be decoded
    """
    if not os.path.isfile(file_path):
        logger.warning("Image file not found: %s", file_path)
        return None

    image = cv2.imread(file_path, cv2.IMREAD_COLOR)
    if image is None:
        logger.warning("Could not decode image: %s", file_path)
    return image


def save_image(image: np.ndarray | None, file_path: str) -> bool:
    """Encode an image to disk, format chosen by extension.

    Args:
        image: Image to write
        file_path: Output path ending in .png, .jpg, .jpeg or .bmp

    Returns:
        True if the file was written, False on any encoder failure
    """
    if image is None or image.size == 0:
        return False

    if Path(file_path).suffix.lower() not in OUTPUT_EXTENSIONS:
        logger.warning("Unsupported output format: %s", file_path)
        return False

    try:
        written = cv2.imwrite(file_path, image)
    except cv2.error as e:
        logger.warning("Failed to write %s: %s", file_path, e)
        return False

    if not written:
        logger.warning("Encoder refused to write %s", file_path)
    return bool(written)


def save_metrics_json(metrics: dict[str, Any], output_dir: str, stem: str) -> str:
    """Save inspection metrics to JSON file.

    Args:
        metrics: Dictionary of inspection metrics
        output_dir: Output directory path
        stem: Output file stem

    Returns:
        Absolute path to saved JSON file
    """
    json_path = os.path.join(output_dir, f"{stem}_metrics.json")

    with open(json_path, "w") as f:
        json.dump(metrics, f, indent=2, default=_json_serializer)

    return os.path.abspath(json_path)


def load_metrics_json(file_path: str) -> dict[str, Any]:
    """Load inspection metrics from JSON file.

    Args:
        file_path: Path to JSON file

    Returns:
        Dictionary of inspection metrics

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    with open(file_path) as f:
        return json.load(f)


def save_defects_csv(defects: list[dict[str, Any]], output_dir: str, stem: str) -> str:
    """Save one CSV row per defect region.

    Args:
        defects: Region dictionaries as produced by ``DefectRegion.as_dict``
        output_dir: Output directory path
        stem: Output file stem

    Returns:
        Absolute path to saved CSV file
    """
    csv_path = os.path.join(output_dir, f"{stem}_defects.csv")

    with open(csv_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=DEFECT_CSV_FIELDS)
        writer.writeheader()
        for index, defect in enumerate(defects):
            bbox_x, bbox_y, bbox_w, bbox_h = defect["bbox_px"]
            writer.writerow(
                {
                    "index": index,
                    "label": defect["label"],
                    "label_id": defect["label_id"],
                    "center_x_px": defect["center_px"][0],
                    "center_y_px": defect["center_px"][1],
                    "width_px": defect["size_px"][0],
                    "height_px": defect["size_px"][1],
                    "angle_deg": defect["angle_deg"],
                    "bbox_x": bbox_x,
                    "bbox_y": bbox_y,
                    "bbox_w": bbox_w,
                    "bbox_h": bbox_h,
                    "avg_intensity": defect["avg_intensity"],
                    "aspect_ratio": defect["aspect_ratio"],
                }
            )

    return os.path.abspath(csv_path)


def save_batch_summary(
    results_list: list[dict[str, Any]], output_dir: str, filename: str = "batch_summary.json"
) -> str:
    """Save summary of batch inspection results.

    Args:
        results_list: List of inspection result dictionaries
        output_dir: Output directory path
        filename: Output filename

    Returns:
        Absolute path to saved summary file
    """
    summary = {
        "total_images": len(results_list),
        "successful_analyses": len([r for r in results_list if not r.get("error")]),
        "failed_analyses": len([r for r in results_list if r.get("error")]),
        "results": results_list,
    }

    summary_path = os.path.join(output_dir, filename)

    with open(summary_path, "w") as f:
        json.dump(summary, f, indent=2, default=_json_serializer)

    return os.path.abspath(summary_path)


def find_metrics_files(directory: str, pattern: str = "*_metrics.json") -> list[Path]:
    """Find all metrics JSON files in a directory, sorted by name."""
    search_dir = Path(directory)
    return sorted(search_dir.glob(pattern))


def create_output_directory(output_dir: str, exist_ok: bool = True) -> str:
    """Create output directory if it doesn't exist.

    Returns:
        Absolute path to output directory

    Raises:
        OSError: If directory creation fails
    """
    os.makedirs(output_dir, exist_ok=exist_ok)
    return os.path.abspath(output_dir)


def validate_image_file(file_path: str) -> bool:
    """Validate that file exists and is a supported input format.

    Args:
        file_path: Path to image file

    Returns:
        True if file is valid, False otherwise
    """
    if not os.path.isfile(file_path):
        return False

    return Path(file_path).suffix.lower() in INPUT_EXTENSIONS


def get_image_files(directory: str, recursive: bool = False) -> list[str]:
    """Get list of supported image files in directory.

    Args:
        directory: Directory to search
        recursive: Whether to search subdirectories

    Returns:
        Sorted list of image file paths
    """
    search_dir = Path(directory)

    if not search_dir.exists():
        return []

    candidates = search_dir.rglob("*") if recursive else search_dir.glob("*")
    image_files = {f for f in candidates if f.is_file() and f.suffix.lower() in INPUT_EXTENSIONS}

    return sorted(str(f) for f in image_files)


def _json_serializer(obj):
    """JSON serializer for numpy scalars."""
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    else:
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
