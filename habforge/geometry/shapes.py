"""Habitat shape descriptors.

Each shape tag is its own model carrying only the dimensions it needs. The
models do not enforce positivity on construction: geometry operations check
the fields they use and raise ``InvalidDimensions`` at the point of use.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ShapeTag(str, Enum):
    """Supported habitat shape tags."""

    CYLINDER = "cylinder"
    SPHERE = "sphere"
    TORUS = "torus"
    DOME = "dome"
    INFLATABLE = "inflatable"
    MODULAR = "modular"
    CUSTOM = "custom"


class _ShapeBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CylinderShape(_ShapeBase):
    shape: Literal["cylinder"] = "cylinder"
    radius: Optional[float] = Field(None, description="Radius in m")
    height: Optional[float] = Field(None, description="Height in m")


class SphereShape(_ShapeBase):
    shape: Literal["sphere"] = "sphere"
    radius: Optional[float] = Field(None, description="Radius in m")


class TorusShape(_ShapeBase):
    shape: Literal["torus"] = "torus"
    major_radius: Optional[float] = Field(
        None, description="Distance from torus center to tube center in m"
    )
    minor_radius: Optional[float] = Field(None, description="Tube radius in m")


class DomeShape(_ShapeBase):
    """Spherical cap.

    ``radius`` is the radius of the sphere the cap is cut from and ``height``
    is the cap height, so ``height`` may not exceed ``2 * radius``.
    """

    shape: Literal["dome"] = "dome"
    radius: Optional[float] = Field(None, description="Sphere radius in m")
    height: Optional[float] = Field(None, description="Cap height in m")


class InflatableShape(_ShapeBase):
    """Inflatable habitat, treated as a cylinder once deployed."""

    shape: Literal["inflatable"] = "inflatable"
    inflated_radius: Optional[float] = Field(None, description="Deployed radius in m")
    inflated_height: Optional[float] = Field(None, description="Deployed height in m")


class ModularShape(_ShapeBase):
    shape: Literal["modular"] = "modular"
    length: Optional[float] = Field(None, description="Length in m")
    width: Optional[float] = Field(None, description="Width in m")
    height: Optional[float] = Field(None, description="Height in m")


class CustomShape(_ShapeBase):
    """Free-form habitat with an optional bounding envelope."""

    shape: Literal["custom"] = "custom"
    length: Optional[float] = Field(None, description="Envelope length in m")
    width: Optional[float] = Field(None, description="Envelope width in m")
    height: Optional[float] = Field(None, description="Envelope height in m")


HabitatShape = Annotated[
    Union[
        CylinderShape,
        SphereShape,
        TorusShape,
        DomeShape,
        InflatableShape,
        ModularShape,
        CustomShape,
    ],
    Field(discriminator="shape"),
]

SHAPE_MODELS = {
    ShapeTag.CYLINDER: CylinderShape,
    ShapeTag.SPHERE: SphereShape,
    ShapeTag.TORUS: TorusShape,
    ShapeTag.DOME: DomeShape,
    ShapeTag.INFLATABLE: InflatableShape,
    ShapeTag.MODULAR: ModularShape,
    ShapeTag.CUSTOM: CustomShape,
}


def make_shape(tag, **dimensions):
    """Build a shape descriptor from a tag and its dimension fields."""
    return SHAPE_MODELS[ShapeTag(tag)](**dimensions)
