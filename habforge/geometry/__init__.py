"""Closed-form habitat geometry engine."""

from .shapes import (
    ShapeTag,
    HabitatShape,
    CylinderShape,
    SphereShape,
    TorusShape,
    DomeShape,
    InflatableShape,
    ModularShape,
    CustomShape,
    make_shape,
)
from .calculations import (
    InertiaTensor,
    LaunchFit,
    UtilizationFactors,
    compute_volume,
    compute_surface_area,
    compute_structural_mass,
    compute_moment_of_inertia,
    lateral_extent,
    effective_height,
    max_cross_section_diameter,
    check_launch_constraints,
    recommended_dimensions,
)

__all__ = [
    "ShapeTag",
    "HabitatShape",
    "CylinderShape",
    "SphereShape",
    "TorusShape",
    "DomeShape",
    "InflatableShape",
    "ModularShape",
    "CustomShape",
    "make_shape",
    "InertiaTensor",
    "LaunchFit",
    "UtilizationFactors",
    "compute_volume",
    "compute_surface_area",
    "compute_structural_mass",
    "compute_moment_of_inertia",
    "lateral_extent",
    "effective_height",
    "max_cross_section_diameter",
    "check_launch_constraints",
    "recommended_dimensions",
]
