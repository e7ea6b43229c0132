"""Closed-form geometry and mass calculations for habitat shapes.

Every function here is pure. Dimensions are validated at the point of use:
a missing or non-positive field for the active shape raises
``InvalidDimensions``, and an operation without a formula for the shape
raises ``UnsupportedShape``. No default dimensions are substituted.
"""

import math
from typing import List, Optional, Union

import numpy as np
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..config.engine_config import GeometryDefaults, config
from ..errors import InvalidDimensions, UnsupportedShape
from .shapes import (
    CustomShape,
    CylinderShape,
    DomeShape,
    InflatableShape,
    ModularShape,
    SphereShape,
    TorusShape,
    ShapeTag,
)


class InertiaTensor(BaseModel):
    """Diagonal of the inertia tensor about the shape's principal axes (kg·m²)."""

    model_config = ConfigDict(frozen=True)

    ixx: float
    iyy: float
    izz: float

    def as_matrix(self) -> np.ndarray:
        """Return the full 3x3 tensor."""
        return np.diag([self.ixx, self.iyy, self.izz])


class UtilizationFactors(BaseModel):
    """Fraction of each fairing limit used by the habitat, capped at 1.0."""

    model_config = ConfigDict(frozen=True)

    diameter: float = Field(ge=0, le=1)
    height: float = Field(ge=0, le=1)
    mass: float = Field(ge=0, le=1)

    def mean(self) -> float:
        """Average utilization over the three limits."""
        return float(np.mean([self.diameter, self.height, self.mass]))


class LaunchFit(BaseModel):
    """Result of checking a habitat against a launch vehicle fairing."""

    model_config = ConfigDict(frozen=True)

    fits: bool
    violations: List[str] = Field(default_factory=list)
    utilization_factors: UtilizationFactors


def _require(shape, field: str) -> float:
    """Return a strictly positive dimension or raise ``InvalidDimensions``."""
    value = getattr(shape, field, None)
    if value is None or value <= 0:
        raise InvalidDimensions(shape.shape, field, value)
    return float(value)


def _dome_dimensions(shape: DomeShape):
    """Validated (radius, cap height); the cap may not exceed the sphere."""
    radius = _require(shape, "radius")
    height = _require(shape, "height")
    if height > 2 * radius:
        raise InvalidDimensions(shape.shape, "height", height)
    return radius, height


def compute_volume(shape) -> float:
    """Calculate the enclosed volume of a habitat shape in m³."""
    if isinstance(shape, CylinderShape):
        r = _require(shape, "radius")
        h = _require(shape, "height")
        volume = math.pi * r**2 * h
    elif isinstance(shape, SphereShape):
        r = _require(shape, "radius")
        volume = (4.0 / 3.0) * math.pi * r**3
    elif isinstance(shape, TorusShape):
        major = _require(shape, "major_radius")
        minor = _require(shape, "minor_radius")
        volume = 2 * math.pi**2 * major * minor**2
    elif isinstance(shape, DomeShape):
        # Spherical cap: V = π h² (3r - h) / 3
        r, h = _dome_dimensions(shape)
        volume = math.pi * h**2 * (3 * r - h) / 3
    elif isinstance(shape, InflatableShape):
        r = _require(shape, "inflated_radius")
        h = _require(shape, "inflated_height")
        volume = math.pi * r**2 * h
    elif isinstance(shape, ModularShape):
        volume = (
            _require(shape, "length")
            * _require(shape, "width")
            * _require(shape, "height")
        )
    else:
        raise UnsupportedShape(getattr(shape, "shape", type(shape).__name__), "volume")

    logger.debug(f"Volume of {shape.shape}: {volume:.3f} m³")
    return volume


def compute_surface_area(shape) -> float:
    """Calculate the outer surface area of a habitat shape in m²."""
    if isinstance(shape, CylinderShape):
        r = _require(shape, "radius")
        h = _require(shape, "height")
        # 2πr² + 2πrh, end caps included
        return 2 * math.pi * r * (r + h)
    if isinstance(shape, SphereShape):
        r = _require(shape, "radius")
        return 4 * math.pi * r**2
    if isinstance(shape, TorusShape):
        major = _require(shape, "major_radius")
        minor = _require(shape, "minor_radius")
        return 4 * math.pi**2 * major * minor
    if isinstance(shape, DomeShape):
        r, h = _dome_dimensions(shape)
        base_radius_sq = 2 * r * h - h**2
        return 2 * math.pi * r * h + math.pi * base_radius_sq
    if isinstance(shape, InflatableShape):
        r = _require(shape, "inflated_radius")
        h = _require(shape, "inflated_height")
        return 2 * math.pi * r * (r + h)
    if isinstance(shape, ModularShape):
        length = _require(shape, "length")
        width = _require(shape, "width")
        height = _require(shape, "height")
        return 2 * (length * width + length * height + width * height)
    raise UnsupportedShape(
        getattr(shape, "shape", type(shape).__name__), "surface area"
    )


def compute_structural_mass(
    shape,
    wall_thickness: Optional[float] = None,
    density: Optional[float] = None,
) -> float:
    """Estimate pressure-shell mass in kg as surface area x wall thickness x density.

    Args:
        shape: Habitat shape descriptor
        wall_thickness: Shell thickness in m; ``config.geometry`` when omitted
        density: Shell material density in kg/m³; ``config.geometry`` when omitted

    Returns:
        Structural mass in kg
    """
    if wall_thickness is None:
        wall_thickness = config.geometry.WALL_THICKNESS_M
    if density is None:
        density = config.geometry.WALL_DENSITY_KG_M3
    if wall_thickness <= 0:
        raise ValueError("wall_thickness must be positive")
    if density <= 0:
        raise ValueError("density must be positive")
    return compute_surface_area(shape) * wall_thickness * density


def compute_moment_of_inertia(shape, density: Optional[float] = None) -> InertiaTensor:
    """Calculate principal moments of inertia assuming a uniformly filled volume.

    Mass is the shape volume at ``density`` kg/m³, by default
    ``config.geometry.INERTIA_DENSITY_KG_M3``.
    Cylinder, sphere and modular shapes use their closed forms. Every other
    shape is approximated by the sphere of equal volume; this is a deliberate
    simplification, not an exact result.
    """
    if density is None:
        density = config.geometry.INERTIA_DENSITY_KG_M3
    if density <= 0:
        raise ValueError("density must be positive")
    volume = compute_volume(shape)
    mass = volume * density

    if isinstance(shape, CylinderShape):
        r = shape.radius
        h = shape.height
        transverse = (mass / 12) * (3 * r**2 + h**2)
        return InertiaTensor(ixx=transverse, iyy=transverse, izz=(mass / 2) * r**2)

    if isinstance(shape, SphereShape):
        moment = (2.0 / 5.0) * mass * shape.radius**2
        return InertiaTensor(ixx=moment, iyy=moment, izz=moment)

    if isinstance(shape, ModularShape):
        length, width, height = shape.length, shape.width, shape.height
        return InertiaTensor(
            ixx=(mass / 12) * (width**2 + height**2),
            iyy=(mass / 12) * (length**2 + height**2),
            izz=(mass / 12) * (length**2 + width**2),
        )

    # Sphere-equivalent radius from V = 4/3 π r³
    approx_radius = ((3 * volume) / (4 * math.pi)) ** (1.0 / 3.0)
    moment = (2.0 / 5.0) * mass * approx_radius**2
    logger.debug(
        f"Approximating {shape.shape} inertia with equivalent sphere r={approx_radius:.3f} m"
    )
    return InertiaTensor(ixx=moment, iyy=moment, izz=moment)


def lateral_extent(shape) -> float:
    """Largest extent of the shape across the launch axis in m."""
    if isinstance(shape, (CylinderShape, SphereShape, DomeShape)):
        return 2 * _require(shape, "radius")
    if isinstance(shape, InflatableShape):
        return 2 * _require(shape, "inflated_radius")
    if isinstance(shape, TorusShape):
        return 2 * (_require(shape, "major_radius") + _require(shape, "minor_radius"))
    if isinstance(shape, (ModularShape, CustomShape)):
        return max(_require(shape, "length"), _require(shape, "width"))
    raise UnsupportedShape(type(shape).__name__, "lateral extent")


def effective_height(shape) -> float:
    """Extent of the shape along the launch axis in m."""
    if isinstance(shape, CylinderShape):
        return _require(shape, "height")
    if isinstance(shape, InflatableShape):
        return _require(shape, "inflated_height")
    if isinstance(shape, SphereShape):
        return 2 * _require(shape, "radius")
    if isinstance(shape, TorusShape):
        return 2 * _require(shape, "minor_radius")
    if isinstance(shape, DomeShape):
        return _dome_dimensions(shape)[1]
    if isinstance(shape, (ModularShape, CustomShape)):
        return _require(shape, "height")
    raise UnsupportedShape(type(shape).__name__, "effective height")


def max_cross_section_diameter(shape, fairing_diameter: float) -> float:
    """Largest lateral extent of the shape, clamped to the fairing diameter.

    This reports what would fit inside the fairing; whether the raw geometry
    fits is decided by ``check_launch_constraints``.
    """
    return min(lateral_extent(shape), fairing_diameter)


def check_launch_constraints(
    shape,
    fairing_diameter: float,
    fairing_height: float,
    max_mass: float,
    geometry: Optional[GeometryDefaults] = None,
) -> LaunchFit:
    """Check a habitat against a payload fairing and launch mass limit.

    Args:
        shape: Habitat shape descriptor
        fairing_diameter: Usable fairing diameter in m
        fairing_height: Usable fairing height in m
        max_mass: Launch mass capacity in kg
        geometry: Wall thickness and density for the shell mass; the global
            engine configuration when omitted

    Returns:
        LaunchFit with one violation per exceeded axis and per-axis
        utilization capped at 1.0
    """
    if min(fairing_diameter, fairing_height, max_mass) <= 0:
        raise ValueError("Fairing limits must be positive")

    violations = []
    geometry = geometry or config.geometry
    structural_mass = compute_structural_mass(
        shape, geometry.WALL_THICKNESS_M, geometry.WALL_DENSITY_KG_M3
    )
    diameter = lateral_extent(shape)
    height = effective_height(shape)

    diameter_ratio = diameter / fairing_diameter
    if diameter_ratio > 1.0:
        violations.append(
            f"Habitat diameter ({diameter:.2f}m) exceeds fairing diameter ({fairing_diameter}m)"
        )

    height_ratio = height / fairing_height
    if height_ratio > 1.0:
        violations.append(
            f"Habitat height ({height:.2f}m) exceeds fairing height ({fairing_height}m)"
        )

    mass_ratio = structural_mass / max_mass
    if mass_ratio > 1.0:
        violations.append(
            f"Structural mass ({structural_mass / 1000:.1f}t) exceeds launch capacity ({max_mass / 1000:.1f}t)"
        )

    return LaunchFit(
        fits=not violations,
        violations=violations,
        utilization_factors=UtilizationFactors(
            diameter=min(diameter_ratio, 1.0),
            height=min(height_ratio, 1.0),
            mass=min(mass_ratio, 1.0),
        ),
    )


def recommended_dimensions(
    shape: Union[str, ShapeTag, object],
    target_volume: float,
    aspect_ratio: Optional[float] = None,
):
    """Solve for dimensions that enclose ``target_volume`` m³.

    Args:
        shape: Shape tag, or a shape descriptor whose tag is used
        target_volume: Desired volume in m³
        aspect_ratio: Cylinder height over diameter; ``config.geometry`` when omitted

    Returns:
        A new shape descriptor of the same tag

    Raises:
        UnsupportedShape: for shapes without an inverse formula (torus, dome,
            inflatable, custom)
    """
    tag = ShapeTag(getattr(shape, "shape", shape))
    if target_volume <= 0:
        raise InvalidDimensions(tag.value, "target_volume", target_volume)

    if tag is ShapeTag.CYLINDER:
        if aspect_ratio is None:
            aspect_ratio = config.geometry.DEFAULT_ASPECT_RATIO
        if aspect_ratio <= 0:
            raise InvalidDimensions(tag.value, "aspect_ratio", aspect_ratio)
        # V = πr²h with h = aspect_ratio * 2r
        radius = (target_volume / (2 * math.pi * aspect_ratio)) ** (1.0 / 3.0)
        return CylinderShape(radius=radius, height=aspect_ratio * 2 * radius)

    if tag is ShapeTag.SPHERE:
        radius = ((3 * target_volume) / (4 * math.pi)) ** (1.0 / 3.0)
        return SphereShape(radius=radius)

    if tag is ShapeTag.MODULAR:
        side = target_volume ** (1.0 / 3.0)
        return ModularShape(length=side, width=side, height=side)

    raise UnsupportedShape(tag.value, "recommended dimensions")
