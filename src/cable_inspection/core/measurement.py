"""Cable diameter measurement from the jacket silhouette."""

import logging

import numpy as np

from cable_inspection.utils.image_processing import (
    apply_gaussian_blur,
    is_empty_image,
    threshold_binary,
    to_gray,
)

from .config import DEFAULT_CONFIG, InspectionConfig
from .models import Measurement, MeasurementResult
from .visualization import draw_measurement

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = "No image loaded."


def measurement_rows(height: int) -> list[int]:
    """Rows at one, two and three quarters of the image height."""
    split = height // 4
    return [split, split * 2, split * 3]


def create_jacket_mask(image: np.ndarray, config: InspectionConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Binary mask of the jacket silhouette.

    Args:
        image: BGR input image
        config: Pipeline constants

    Returns:
        Single-channel mask, nonzero where the blurred luminance exceeds
        ``config.measure_thresh_low``
    """
    gray = to_gray(image)
    blurred = apply_gaussian_blur(gray, config.blur_kernel)
    return threshold_binary(blurred, config.measure_thresh_low, config.measure_thresh_high)


def measure_rows(mask: np.ndarray, rows: list[int]) -> list[Measurement]:
    """Scan mask rows for the outermost foreground columns.

    Rows with no foreground, or a single foreground column, are skipped.

    Args:
        mask: Binary mask
        rows: Row indices to scan, in order

    Returns:
        Measurements for the rows that could be measured
    """
    measurements = []
    for y in rows:
        columns = np.flatnonzero(mask[y])
        if columns.size == 0:
            logger.debug("Row %d has no jacket pixels, skipping", y)
            continue

        x_left, x_right = int(columns[0]), int(columns[-1])
        if x_left == x_right:
            logger.debug("Row %d has a single jacket pixel, skipping", y)
            continue

        measurements.append(Measurement(y=int(y), x_left=x_left, x_right=x_right))
    return measurements


def measure_diameter(
    image: np.ndarray | None,
    config: InspectionConfig | None = None,
    return_debug: bool = False,
) -> MeasurementResult:
    """Measure the cable width at three rows and annotate a copy of the image.

    The input image is never modified.

    Args:
        image: BGR input image
        config: Pipeline constants (defaults when None)
        return_debug: Attach the threshold mask as ``debug_images["mask"]``

    Returns:
        MeasurementResult; on an empty input it carries ``error`` and no image
    """
    if is_empty_image(image):
        return MeasurementResult(annotated=None, error=NO_IMAGE_MESSAGE)

    config = config or DEFAULT_CONFIG
    annotated = image.copy()

    mask = create_jacket_mask(image, config)
    measurements = measure_rows(mask, measurement_rows(mask.shape[0]))

    for measurement in measurements:
        draw_measurement(annotated, measurement, config)

    result = MeasurementResult(annotated=annotated, measurements=measurements)
    if return_debug:
        result.debug_images["mask"] = mask
    return result
