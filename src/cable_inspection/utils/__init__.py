"""Utility modules for image primitives and file I/O."""

from .file_io import (
    create_output_directory,
    find_metrics_files,
    get_image_files,
    load_image,
    load_metrics_json,
    save_batch_summary,
    save_defects_csv,
    save_image,
    save_metrics_json,
    validate_image_file,
)
from .image_processing import (
    ContourMode,
    apply_gaussian_blur,
    approximate_polygon,
    bounding_rect,
    close_edges,
    detect_edges,
    dilate,
    erode,
    find_contours,
    fit_ellipse,
    is_empty_image,
    rect_kernel,
    threshold_binary,
    to_gray,
    warp_to_upright,
)

__all__ = [
    # Image processing
    "ContourMode",
    "to_gray",
    "apply_gaussian_blur",
    "threshold_binary",
    "detect_edges",
    "rect_kernel",
    "dilate",
    "erode",
    "close_edges",
    "find_contours",
    "approximate_polygon",
    "bounding_rect",
    "fit_ellipse",
    "warp_to_upright",
    "is_empty_image",
    # File I/O
    "load_image",
    "save_image",
    "save_metrics_json",
    "load_metrics_json",
    "save_defects_csv",
    "save_batch_summary",
    "find_metrics_files",
    "create_output_directory",
    "validate_image_file",
    "get_image_files",
]
