"""Two-pass contour pipeline that locates and labels jacket defects.

Canny tends to break one physical defect into many small contours. Pass one
paints the bounding box of every small edge contour onto a blank canvas; pass
two re-extracts only the outermost contours of that canvas, so overlapping or
touching boxes collapse into a single region per defect.
"""

import logging

import cv2
import numpy as np

from cable_inspection.utils.image_processing import (
    ContourMode,
    apply_gaussian_blur,
    approximate_polygon,
    bounding_rect,
    close_edges,
    detect_edges,
    find_contours,
    fit_ellipse,
    is_empty_image,
    threshold_binary,
    to_gray,
)

from .classification import classify_defect_details
from .config import DEFAULT_CONFIG, InspectionConfig
from .measurement import NO_IMAGE_MESSAGE
from .models import DefectRegion, DefectResult
from .visualization import draw_defect

logger = logging.getLogger(__name__)


def detect_defect_edges(image: np.ndarray, config: InspectionConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Closed Canny edge map of the image.

    Args:
        image: BGR input image
        config: Pipeline constants

    Returns:
        Binary edge image after dilate-then-erode
    """
    gray = to_gray(image)
    blurred = apply_gaussian_blur(gray, config.blur_kernel)
    edges = detect_edges(blurred, config.canny_low, config.canny_high)
    return close_edges(edges, config.morph_kernel)


def group_defect_candidates(edges: np.ndarray, config: InspectionConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Paint filled bounding boxes of small edge contours onto a black canvas.

    Contours whose box area reaches ``config.area_filter`` (cable outline,
    image border, large shadows) are left out.

    Args:
        edges: Binary edge image
        config: Pipeline constants

    Returns:
        Three-channel canvas the size of ``edges``
    """
    height, width = edges.shape[:2]
    canvas = np.zeros((height, width, 3), dtype=np.uint8)

    for contour in find_contours(edges, ContourMode.TREE):
        perimeter = cv2.arcLength(contour, True)
        polygon = approximate_polygon(contour, config.poly_eps_fraction * perimeter)
        box = bounding_rect(polygon)

        if box.area < config.area_filter:
            cv2.rectangle(canvas, box.top_left, box.bottom_right, (255, 255, 255), -1)

    return canvas


def cluster_defect_regions(canvas: np.ndarray, config: InspectionConfig = DEFAULT_CONFIG) -> list[np.ndarray]:
    """Merge touching boxes on the grouping canvas into one contour each.

    Args:
        canvas: Output of :func:`group_defect_candidates`
        config: Pipeline constants

    Returns:
        Outermost contours with every boundary point kept
    """
    gray = to_gray(canvas)
    blurred = apply_gaussian_blur(gray, config.blur_kernel)
    mask = threshold_binary(blurred, config.group_thresh_low, config.group_thresh_high)
    return find_contours(mask, ContourMode.EXTERNAL, cv2.CHAIN_APPROX_NONE)


def build_defect_region(
    contour: np.ndarray, image: np.ndarray, config: InspectionConfig = DEFAULT_CONFIG
) -> DefectRegion | None:
    """Fit, filter and classify one clustered contour.

    Returns:
        The classified region, or None when the contour has fewer than five
        points or its bounding box is not below ``config.area_filter``
    """
    ellipse = fit_ellipse(contour)
    if ellipse is None:
        logger.debug("Skipping contour with %d points, too few for an ellipse fit", len(contour))
        return None

    box = bounding_rect(approximate_polygon(contour, config.group_poly_eps))
    if box.area >= config.area_filter:
        logger.debug("Skipping merged cluster with box area %d", box.area)
        return None

    label, avg_intensity, ratio = classify_defect_details(ellipse, image, config)
    return DefectRegion(
        ellipse=ellipse,
        label=label,
        bounding_box=box,
        avg_intensity=avg_intensity,
        aspect_ratio=ratio,
    )


def find_defects(
    image: np.ndarray | None,
    config: InspectionConfig | None = None,
    return_debug: bool = False,
) -> DefectResult:
    """Locate, classify and annotate defects on the cable jacket.

    Regions are returned in contour extraction order, which is deterministic
    for a given image. The input image is never modified.

    Args:
        image: BGR input image
        config: Pipeline constants (defaults when None)
        return_debug: Attach ``"edges"`` and ``"groups"`` intermediate images

    Returns:
        DefectResult; on an empty input it carries ``error`` and no image
    """
    if is_empty_image(image):
        return DefectResult(annotated=None, error=NO_IMAGE_MESSAGE)

    config = config or DEFAULT_CONFIG
    annotated = image.copy()

    edges = detect_defect_edges(image, config)
    canvas = group_defect_candidates(edges, config)

    regions = []
    for contour in cluster_defect_regions(canvas, config):
        region = build_defect_region(contour, image, config)
        if region is None:
            continue
        regions.append(region)
        draw_defect(annotated, region, config)

    logger.debug("Found %d defect regions", len(regions))

    result = DefectResult(annotated=annotated, regions=regions)
    if return_debug:
        result.debug_images.update({"edges": edges, "groups": canvas})
    return result
