"""Image processing primitives shared by the measurement and defect pipelines."""

from enum import Enum

import cv2
import numpy as np

from cable_inspection.core.models import AxisRect, OrientedRect


class ContourMode(Enum):
    """Contour retrieval modes."""

    TREE = cv2.RETR_TREE  # Full hierarchy
    EXTERNAL = cv2.RETR_EXTERNAL  # Only outermost contours


def is_empty_image(image: np.ndarray | None) -> bool:
    """Return True for a missing or zero-size image."""
    return image is None or image.size == 0


def to_gray(image: np.ndarray) -> np.ndarray:
    """Convert a BGR image to single-channel luminance.

    Args:
        image: BGR image, or an already grayscale image (copied)

    Returns:
        Grayscale image
    """
    if image.ndim == 2:
        return image.copy()
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def apply_gaussian_blur(image: np.ndarray, kernel_size: int = 3, sigma: float = 0) -> np.ndarray:
    """Apply Gaussian blur to image.

    Args:
        image: Input image
        kernel_size: Size of the Gaussian kernel (must be odd)
        sigma: Standard deviation for Gaussian kernel (0 = auto-calculate)

    Returns:
        Blurred image
    """
    if kernel_size % 2 == 0:
        kernel_size += 1

    return cv2.GaussianBlur(image, (kernel_size, kernel_size), sigma)


def threshold_binary(image: np.ndarray, low: int, high: int = 255) -> np.ndarray:
    """Set pixels above ``low`` to ``high`` and everything else to zero."""
    _, binary = cv2.threshold(image, low, high, cv2.THRESH_BINARY)
    return binary


def detect_edges(image: np.ndarray, low_threshold: int, high_threshold: int) -> np.ndarray:
    """Canny edge map of a grayscale image.

    Args:
        image: Input grayscale image
        low_threshold: Lower hysteresis threshold
        high_threshold: Upper hysteresis threshold

    Returns:
        Edge-detected binary image
    """
    return cv2.Canny(image, low_threshold, high_threshold)


def rect_kernel(size: tuple[int, int] = (3, 3)) -> np.ndarray:
    """Rectangular structuring element of the given (width, height)."""
    return cv2.getStructuringElement(cv2.MORPH_RECT, tuple(size))


def dilate(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    return cv2.dilate(image, kernel)


def erode(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    return cv2.erode(image, kernel)


def close_edges(edges: np.ndarray, kernel_size: tuple[int, int] = (3, 3)) -> np.ndarray:
    """Dilate then erode to bridge small gaps inside edge outlines."""
    kernel = rect_kernel(kernel_size)
    return erode(dilate(edges, kernel), kernel)


def find_contours(
    binary_image: np.ndarray,
    mode: ContourMode = ContourMode.EXTERNAL,
    approximation: int = cv2.CHAIN_APPROX_SIMPLE,
) -> list[np.ndarray]:
    """Extract contours from a binary image.

    Args:
        binary_image: Single-channel image, nonzero pixels are foreground
        mode: Hierarchy retrieval mode
        approximation: OpenCV chain approximation flag

    Returns:
        List of contours in OpenCV extraction order
    """
    contours, _ = cv2.findContours(binary_image, mode.value, approximation)
    return list(contours)


def approximate_polygon(contour: np.ndarray, epsilon: float) -> np.ndarray:
    """Douglas-Peucker approximation of a closed contour."""
    return cv2.approxPolyDP(contour, epsilon, True)


def bounding_rect(points: np.ndarray) -> AxisRect:
    x, y, w, h = cv2.boundingRect(points)
    return AxisRect(int(x), int(y), int(w), int(h))


def fit_ellipse(contour: np.ndarray) -> OrientedRect | None:
    """Fit an ellipse to contour points.

    Args:
        contour: OpenCV contour array

    Returns:
        Fitted ellipse as a rotated rectangle, or None with fewer than 5 points
    """
    if len(contour) < 5:
        return None
    return OrientedRect.from_cv(cv2.fitEllipse(contour))


def warp_to_upright(image: np.ndarray, quad: np.ndarray, size: tuple[float, float]) -> np.ndarray:
    """Perspective-warp a quadrilateral onto an upright ``width x height`` image.

    Args:
        image: Source image
        quad: Four points ordered bottom-left, top-left, top-right, bottom-right
        size: Target (width, height); the output raster size is truncated to
            whole pixels, at least one

    Returns:
        Warped patch
    """
    width, height = float(size[0]), float(size[1])
    destination = np.array(
        [
            [0.0, height - 1.0],
            [0.0, 0.0],
            [width - 1.0, 0.0],
            [width - 1.0, height - 1.0],
        ],
        dtype=np.float32,
    )
    matrix = cv2.getPerspectiveTransform(np.asarray(quad, dtype=np.float32), destination)
    output_size = (max(int(width), 1), max(int(height), 1))
    return cv2.warpPerspective(image, matrix, output_size)
