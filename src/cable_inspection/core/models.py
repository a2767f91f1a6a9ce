"""Result types shared by the measurement and defect pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

import cv2
import numpy as np


class DefectClass(IntEnum):
    """Defect labels assigned by the classifier."""

    PINHOLE = 0
    CUT = 1
    SCRATCH = 2

    @property
    def label(self) -> str:
        """Text drawn next to the defect on the overlay."""
        return _DEFECT_LABELS[self]


_DEFECT_LABELS = {
    DefectClass.PINHOLE: "Defect: Pin Hole",
    DefectClass.CUT: "Defect: Cut",
    DefectClass.SCRATCH: "Defect: Scratch",
}


@dataclass(frozen=True)
class AxisRect:
    """Axis-aligned rectangle: top-left corner plus width and height."""

    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def top_left(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def bottom_right(self) -> tuple[int, int]:
        return (self.x + self.width, self.y + self.height)


@dataclass(frozen=True)
class OrientedRect:
    """Rotated rectangle as returned by ``cv2.fitEllipse``.

    ``size`` is ``(width, height)`` in the rectangle's own frame and ``angle``
    is in degrees, both following OpenCV's ``RotatedRect`` conventions.
    """

    center: tuple[float, float]
    size: tuple[float, float]
    angle: float

    @classmethod
    def from_cv(cls, rotated_rect) -> OrientedRect:
        (center_x, center_y), (width, height), angle = rotated_rect
        return cls(
            center=(float(center_x), float(center_y)),
            size=(float(width), float(height)),
            angle=float(angle),
        )

    def to_cv(self) -> tuple[tuple[float, float], tuple[float, float], float]:
        return (self.center, self.size, self.angle)

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]

    def corners(self) -> np.ndarray:
        """Corner points as a (4, 2) float32 array.

        Order is bottom-left, top-left, top-right, bottom-right in the
        rectangle's own frame (``cv2.boxPoints`` order).
        """
        return cv2.boxPoints(self.to_cv()).astype(np.float32)

    def as_dict(self) -> dict[str, Any]:
        return {
            "center_px": [self.center[0], self.center[1]],
            "size_px": [self.size[0], self.size[1]],
            "angle_deg": self.angle,
        }


@dataclass(frozen=True)
class Measurement:
    """Jacket extent on one image row."""

    y: int
    x_left: int
    x_right: int

    @property
    def width(self) -> int:
        return self.x_right - self.x_left

    def as_dict(self) -> dict[str, int]:
        return {
            "y": self.y,
            "x_left": self.x_left,
            "x_right": self.x_right,
            "width_px": self.width,
        }


@dataclass(frozen=True)
class DefectRegion:
    """One clustered defect with its fitted ellipse and class label."""

    ellipse: OrientedRect
    label: DefectClass
    bounding_box: AxisRect
    avg_intensity: int
    aspect_ratio: float

    def as_dict(self) -> dict[str, Any]:
        return {
            **self.ellipse.as_dict(),
            "label": self.label.name.lower(),
            "label_id": int(self.label),
            "bbox_px": [
                self.bounding_box.x,
                self.bounding_box.y,
                self.bounding_box.width,
                self.bounding_box.height,
            ],
            "avg_intensity": self.avg_intensity,
            "aspect_ratio": self.aspect_ratio,
        }


@dataclass
class MeasurementResult:
    """Output of the diameter pipeline.

    ``annotated`` is ``None`` only when ``error`` is set.
    """

    annotated: np.ndarray | None
    measurements: list[Measurement] = field(default_factory=list)
    error: str | None = None
    debug_images: dict[str, np.ndarray] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def mean_width(self) -> float | None:
        if not self.measurements:
            return None
        return float(np.mean([m.width for m in self.measurements]))


@dataclass
class DefectResult:
    """Output of the defect pipeline."""

    annotated: np.ndarray | None
    regions: list[DefectRegion] = field(default_factory=list)
    error: str | None = None
    debug_images: dict[str, np.ndarray] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    def counts(self) -> dict[str, int]:
        """Number of regions per defect class, every class present."""
        counts = {defect.name.lower(): 0 for defect in DefectClass}
        for region in self.regions:
            counts[region.label.name.lower()] += 1
        return counts
