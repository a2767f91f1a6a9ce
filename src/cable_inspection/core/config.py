"""Tunable pipeline constants and their JSON persistence."""

import dataclasses
import json
import os
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class InspectionConfig:
    """Thresholds and drawing parameters for both pipelines.

    The defaults are tuned for a lit cable photographed against a plain
    background; every value is in pixels or 8-bit intensity units.
    """

    # Shared preprocessing
    blur_kernel: int = 3

    # Diameter measurement
    measure_thresh_low: int = 60
    measure_thresh_high: int = 255

    # Defect edges and grouping
    canny_low: int = 60
    canny_high: int = 255
    morph_kernel: tuple[int, int] = (3, 3)
    area_filter: int = 10_000
    group_thresh_low: int = 50
    group_thresh_high: int = 255
    poly_eps_fraction: float = 0.02
    group_poly_eps: float = 1.0

    # Classification
    scratch_intensity: int = 18_000
    aspect_cut: float = 0.85

    # Annotation
    tick_length: int = 15
    measure_label_offset: int = 25
    defect_label_offset: int = 60
    font_scale: float = 0.5
    overlay_color: tuple[int, int, int] = (0, 0, 180)
    line_thickness: int = 1
    ellipse_thickness: int = 2

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.name in _TUPLE_FIELDS:
                if not isinstance(value, tuple) or not all(_is_number(v, int) for v in value):
                    raise ValueError(f"{f.name} must be a tuple of integers, got {value!r}")
            elif not _is_number(value, f.type):
                raise ValueError(f"{f.name} must be {f.type.__name__}, got {value!r}")

        # Even sizes are bumped to the next odd size by the blur itself
        if self.blur_kernel < 1:
            raise ValueError(f"blur_kernel must be positive, got {self.blur_kernel}")
        if len(self.morph_kernel) != 2 or min(self.morph_kernel) < 1:
            raise ValueError(f"morph_kernel must be two positive sizes, got {self.morph_kernel}")
        if len(self.overlay_color) != 3:
            raise ValueError(f"overlay_color must be a BGR triple, got {self.overlay_color}")
        if not 0.0 < self.aspect_cut <= 1.0:
            raise ValueError(f"aspect_cut must be in (0, 1], got {self.aspect_cut}")

    def replace(self, **changes: Any) -> "InspectionConfig":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InspectionConfig":
        """Build a config from a plain mapping, rejecting unknown keys.

        Raises:
            ValueError: If the mapping contains keys that are not config fields
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        values = dict(data)
        # JSON has no tuples
        for key in _TUPLE_FIELDS:
            if key in values:
                try:
                    values[key] = tuple(int(v) for v in values[key])
                except (TypeError, ValueError) as e:
                    raise ValueError(f"{key} must be a list of integers, got {values[key]!r}") from e
        return cls(**values)


_TUPLE_FIELDS = ("morph_kernel", "overlay_color")


def _is_number(value: Any, kind: type) -> bool:
    """True for an int (or, when ``kind`` is float, an int or float), never a bool."""
    if isinstance(value, bool):
        return False
    if kind is float:
        return isinstance(value, (int, float))
    return isinstance(value, int)


DEFAULT_CONFIG = InspectionConfig()


def save_config(file_path: str, config: InspectionConfig) -> str:
    """Save configuration to a JSON file.

    Args:
        file_path: Output file path
        config: Configuration to write

    Returns:
        Absolute path to saved file
    """
    os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)

    with open(file_path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)

    return os.path.abspath(file_path)


def load_config(file_path: str) -> InspectionConfig:
    """Load configuration from a JSON file.

    Missing keys keep their defaults.

    Args:
        file_path: Input file path

    Returns:
        Loaded configuration

    Raises:
        ValueError: If the file is not a JSON object or has unknown keys
        FileNotFoundError: If file doesn't exist
    """
    with open(file_path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{file_path} does not contain a JSON object.")

    return InspectionConfig.from_dict(data)
