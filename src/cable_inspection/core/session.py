"""Stateful front end holding the loaded image and the latest outputs."""

import logging

import numpy as np

from cable_inspection.utils.file_io import load_image, save_image
from cable_inspection.utils.image_processing import is_empty_image

from .config import DEFAULT_CONFIG, InspectionConfig
from .defects import find_defects
from .measurement import NO_IMAGE_MESSAGE, measure_diameter
from .models import DefectResult, MeasurementResult

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Could not load image."


class InspectionSession:
    """Load an image, run either pipeline and save the annotated results.

    The session keeps the most recent input image and the most recent
    annotated output of each pipeline, so saving does not re-run analysis.
    Failures never raise: they set ``last_error`` and return a falsy value or
    a result carrying ``error``.

    Example:
        >>> with InspectionSession() as session:
        ...     if session.load("cable.png"):
        ...         result = session.measure()
        ...         session.save_measurement("cable_measure.png")
    """

    def __init__(self, config: InspectionConfig | None = None):
        self.config = config or DEFAULT_CONFIG
        self.image: np.ndarray | None = None
        self.measure_output: np.ndarray | None = None
        self.defect_output: np.ndarray | None = None
        self.last_error: str | None = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def has_image(self) -> bool:
        return not is_empty_image(self.image)

    def load(self, image_path: str) -> bool:
        """Replace the current image; cached outputs are discarded.

        Returns:
            True if the image was decoded
        """
        self.measure_output = None
        self.defect_output = None
        self.image = load_image(image_path)

        if self.image is None:
            self.last_error = LOAD_FAILED_MESSAGE
            return False

        self.last_error = None
        return True

    def measure(self) -> MeasurementResult:
        result = measure_diameter(self.image, self.config)
        self.last_error = result.error
        if result.ok:
            self.measure_output = result.annotated
        return result

    def find_defects(self) -> DefectResult:
        result = find_defects(self.image, self.config)
        self.last_error = result.error
        if result.ok:
            self.defect_output = result.annotated
        return result

    def save_measurement(self, file_path: str) -> bool:
        """Write the measurement overlay, measuring first if needed."""
        if self.measure_output is None:
            self.measure()
        return self._save(self.measure_output, file_path)

    def save_defects(self, file_path: str) -> bool:
        """Write the defect overlay, running detection first if needed."""
        if self.defect_output is None:
            self.find_defects()
        return self._save(self.defect_output, file_path)

    def close(self) -> None:
        """Release the image and cached outputs."""
        self.image = None
        self.measure_output = None
        self.defect_output = None
        self.last_error = None

    def _save(self, output: np.ndarray | None, file_path: str) -> bool:
        if output is None:
            self.last_error = self.last_error or NO_IMAGE_MESSAGE
            return False

        if not save_image(output, file_path):
            self.last_error = f"Could not save image to {file_path}."
            logger.warning(self.last_error)
            return False
        return True
