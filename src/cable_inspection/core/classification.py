"""Defect classification from warped patch brightness and ellipse shape."""

import numpy as np

from cable_inspection.utils.image_processing import to_gray, warp_to_upright

from .config import DEFAULT_CONFIG, InspectionConfig
from .models import DefectClass, OrientedRect


def measure_patch_intensity(ellipse: OrientedRect, image: np.ndarray) -> int:
    """Mean column sum of the gray patch under a rotated rectangle.

    The rectangle is warped to an upright ``width x height`` patch, each column
    is summed, and the total is divided by the rectangle width. The result is
    in units of intensity times rows, so taller patches score higher.

    Args:
        ellipse: Rotated rectangle enclosing the defect
        image: Original BGR image

    Returns:
        Truncated mean column sum, 0 for rectangles a pixel wide or less
    """
    width, height = ellipse.size
    if not (width > 1.0 and height > 1.0):
        return 0

    patch = warp_to_upright(image, ellipse.corners(), (width, height))
    column_sums = to_gray(patch).sum(axis=0, dtype=np.int64)
    return int(column_sums.sum() / width)


def aspect_ratio(ellipse: OrientedRect) -> float:
    """Short side over long side, in (0, 1]."""
    width, height = ellipse.size
    longest = max(width, height)
    if longest <= 0:
        return 1.0
    return float(min(width, height) / longest)


def classify_defect_details(
    ellipse: OrientedRect, image: np.ndarray, config: InspectionConfig = DEFAULT_CONFIG
) -> tuple[DefectClass, int, float]:
    """Classify a defect and return the evidence used.

    Returns:
        Tuple of (label, avg_intensity, aspect_ratio)
    """
    avg_intensity = measure_patch_intensity(ellipse, image)
    ratio = aspect_ratio(ellipse)

    # exposed conductor makes the whole patch bright
    if avg_intensity > config.scratch_intensity:
        return DefectClass.SCRATCH, avg_intensity, ratio
    if ratio <= config.aspect_cut:
        return DefectClass.CUT, avg_intensity, ratio
    return DefectClass.PINHOLE, avg_intensity, ratio


def classify_defect(
    ellipse: OrientedRect, image: np.ndarray, config: InspectionConfig | None = None
) -> DefectClass:
    """Label a defect region as pinhole, cut or scratch.

    Args:
        ellipse: Fitted ellipse of the defect cluster
        image: Original BGR image
        config: Pipeline constants (defaults when None)

    Returns:
        Defect class
    """
    label, _, _ = classify_defect_details(ellipse, image, config or DEFAULT_CONFIG)
    return label
