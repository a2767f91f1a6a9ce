"""Cable Inspection

Measures the jacket diameter of a cable photograph and detects, clusters and
classifies surface defects (pinholes, cuts, scratches).
Provides both CLI tools and a Python API for programmatic use.
"""

__version__ = "0.1.0"
__author__ = "Cable Inspection Team"

# Import main API functions for convenience
from .core.analysis import analyze_image_file
from .core.classification import classify_defect
from .core.config import InspectionConfig, load_config, save_config
from .core.defects import find_defects
from .core.measurement import measure_diameter
from .core.models import DefectClass, DefectRegion, Measurement, OrientedRect
from .core.session import InspectionSession

__all__ = [
    "analyze_image_file",
    "measure_diameter",
    "find_defects",
    "classify_defect",
    "InspectionConfig",
    "InspectionSession",
    "load_config",
    "save_config",
    "DefectClass",
    "DefectRegion",
    "Measurement",
    "OrientedRect",
]
