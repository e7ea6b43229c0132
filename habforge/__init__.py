"""
HabForge: space habitat geometry and NASA standards validation.

Closed-form geometry for habitat pressure shells, a rule-based validation
engine for complete habitat designs, and an interactive design session.
"""

from .errors import (
    HabForgeError,
    InvalidDimensions,
    UnsupportedShape,
    UnknownDurationCategory,
    StandardsUnavailable,
)
from .geometry import (
    compute_volume,
    compute_surface_area,
    compute_structural_mass,
    compute_moment_of_inertia,
    max_cross_section_diameter,
    check_launch_constraints,
    recommended_dimensions,
)
from .models import (
    HabitatDesign,
    MissionParameters,
    FunctionalModule,
    Connection,
    Finding,
)
from .standards import StandardsConfig, get_standards_provider, load_standards
from .validation import (
    validate_design,
    calculate_compliance_score,
    categorize_duration,
    required_nhv,
)
from .session import HabitatSession

__version__ = "0.1.0"

__all__ = [
    "HabForgeError",
    "InvalidDimensions",
    "UnsupportedShape",
    "UnknownDurationCategory",
    "StandardsUnavailable",
    "compute_volume",
    "compute_surface_area",
    "compute_structural_mass",
    "compute_moment_of_inertia",
    "max_cross_section_diameter",
    "check_launch_constraints",
    "recommended_dimensions",
    "HabitatDesign",
    "MissionParameters",
    "FunctionalModule",
    "Connection",
    "Finding",
    "StandardsConfig",
    "get_standards_provider",
    "load_standards",
    "validate_design",
    "calculate_compliance_score",
    "categorize_duration",
    "required_nhv",
    "HabitatSession",
]
