"""Core pipelines for cable diameter measurement and defect detection."""

from .analysis import analyze_image, analyze_image_file
from .classification import aspect_ratio, classify_defect, classify_defect_details, measure_patch_intensity
from .config import DEFAULT_CONFIG, InspectionConfig, load_config, save_config
from .defects import (
    build_defect_region,
    cluster_defect_regions,
    detect_defect_edges,
    find_defects,
    group_defect_candidates,
)
from .measurement import create_jacket_mask, measure_diameter, measure_rows, measurement_rows
from .models import (
    AxisRect,
    DefectClass,
    DefectRegion,
    DefectResult,
    Measurement,
    MeasurementResult,
    OrientedRect,
)
from .session import InspectionSession
from .visualization import (
    create_inspection_overlay,
    draw_defect,
    draw_measurement,
    save_debug_images,
)

__all__ = [
    # Configuration
    "DEFAULT_CONFIG",
    "InspectionConfig",
    "load_config",
    "save_config",
    # Models
    "AxisRect",
    "OrientedRect",
    "Measurement",
    "MeasurementResult",
    "DefectClass",
    "DefectRegion",
    "DefectResult",
    # Measurement
    "measure_diameter",
    "measure_rows",
    "measurement_rows",
    "create_jacket_mask",
    # Defects
    "find_defects",
    "detect_defect_edges",
    "group_defect_candidates",
    "cluster_defect_regions",
    "build_defect_region",
    # Classification
    "classify_defect",
    "classify_defect_details",
    "measure_patch_intensity",
    "aspect_ratio",
    # Visualization
    "create_inspection_overlay",
    "draw_measurement",
    "draw_defect",
    "save_debug_images",
    # Host-facing
    "InspectionSession",
    "analyze_image",
    "analyze_image_file",
]
