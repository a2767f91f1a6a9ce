"""Overlay drawing for measurement and defect results."""

import os

import cv2
import numpy as np

from .config import DEFAULT_CONFIG, InspectionConfig
from .models import DefectRegion, Measurement, OrientedRect

FONT = cv2.FONT_HERSHEY_DUPLEX


def draw_segment(
    canvas: np.ndarray,
    start: tuple[int, int],
    end: tuple[int, int],
    color: tuple[int, int, int],
    thickness: int = 1,
) -> None:
    cv2.line(canvas, start, end, color, thickness)


def draw_ellipse(
    canvas: np.ndarray, ellipse: OrientedRect, color: tuple[int, int, int], thickness: int = 2
) -> None:
    cv2.ellipse(canvas, ellipse.to_cv(), color, thickness)


def draw_label(
    canvas: np.ndarray,
    text: str,
    origin: tuple[int, int],
    color: tuple[int, int, int],
    font_scale: float = 0.5,
) -> None:
    """Draw text with its baseline starting at ``origin``.

    Text is rasterized 8-connected so every drawn pixel has exactly ``color``.
    """
    cv2.putText(canvas, text, origin, FONT, font_scale, color)


def draw_measurement(canvas: np.ndarray, measurement: Measurement, config: InspectionConfig = DEFAULT_CONFIG) -> None:
    """Draw outward tick marks at both jacket edges and the width label.

    Args:
        canvas: Image to draw on (modified in-place)
        measurement: Row measurement to annotate
        config: Drawing parameters
    """
    y = measurement.y
    color = config.overlay_color
    draw_segment(
        canvas,
        (measurement.x_left, y),
        (measurement.x_left - config.tick_length, y),
        color,
        config.line_thickness,
    )
    draw_segment(
        canvas,
        (measurement.x_right, y),
        (measurement.x_right + config.tick_length, y),
        color,
        config.line_thickness,
    )
    draw_label(
        canvas,
        f"Diameter: {measurement.width}",
        (measurement.x_right + config.measure_label_offset, y),
        color,
        config.font_scale,
    )


def draw_defect(canvas: np.ndarray, region: DefectRegion, config: InspectionConfig = DEFAULT_CONFIG) -> None:
    """Outline the defect ellipse and write its class to the right of it."""
    draw_ellipse(canvas, region.ellipse, config.overlay_color, config.ellipse_thickness)

    center_x, center_y = region.ellipse.center
    draw_label(
        canvas,
        region.label.label,
        (int(center_x) + config.defect_label_offset, int(center_y)),
        config.overlay_color,
        config.font_scale,
    )


def create_inspection_overlay(
    image: np.ndarray,
    measurements: list[Measurement],
    regions: list[DefectRegion],
    config: InspectionConfig = DEFAULT_CONFIG,
) -> np.ndarray:
    """Draw both measurement and defect overlays plus a summary banner.

    Args:
        image: Source image (not modified)
        measurements: Row measurements to annotate
        regions: Classified defects to annotate
        config: Drawing parameters

    Returns:
        Annotated copy of the image
    """
    overlay = image.copy()

    for measurement in measurements:
        draw_measurement(overlay, measurement, config)
    for region in regions:
        draw_defect(overlay, region, config)

    label_lines = []
    if measurements:
        mean_width = float(np.mean([m.width for m in measurements]))
        label_lines.append(f"Diameter: {mean_width:.0f} px")
    else:
        label_lines.append("Diameter: n/a")
    label_lines.append(f"Defects: {len(regions)}")

    # Draw text with outline for visibility
    font_scale = 0.7
    thickness = 2

    for i, label in enumerate(label_lines):
        text_pos = (12, 28 + i * 25)
        cv2.putText(overlay, label, text_pos, FONT, font_scale, (0, 0, 0), thickness + 1, cv2.LINE_AA)
        cv2.putText(overlay, label, text_pos, FONT, font_scale, (255, 255, 255), thickness, cv2.LINE_AA)

    return overlay


def save_debug_images(debug_images: dict[str, np.ndarray], output_dir: str, stem: str) -> list[str]:
    """Save intermediate pipeline images for troubleshooting.

    Args:
        debug_images: Mapping of short name (e.g. ``"mask"``) to image
        output_dir: Output directory
        stem: Output file stem

    Returns:
        Absolute paths of the written files
    """
    paths = []
    for name, debug_image in debug_images.items():
        if debug_image is None:
            continue
        debug_path = os.path.join(output_dir, f"{stem}_{name}.png")
        cv2.imwrite(debug_path, debug_image)
        paths.append(os.path.abspath(debug_path))
    return paths
