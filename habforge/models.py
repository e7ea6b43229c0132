"""Habitat design records.

A ``HabitatDesign`` is the snapshot handed to the validation engine: the
pressure-shell shape, the mission it serves, its functional modules and the
connections between them, plus the derived metrics and findings of the last
validation run.
"""

import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Literal, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from .config import config
from .geometry.shapes import CylinderShape, HabitatShape


def new_id(prefix: str) -> str:
    """Short unique identifier such as ``module-3f2a9c1e``."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


class Destination(str, Enum):
    LEO = "leo"
    LUNAR_ORBIT = "lunar_orbit"
    LUNAR_SURFACE = "lunar_surface"
    MARS_ORBIT = "mars_orbit"
    MARS_SURFACE = "mars_surface"
    DEEP_SPACE = "deep_space"


class ModuleType(str, Enum):
    """Functional module types."""

    COMMAND = "command"
    HABITATION = "habitation"
    LABORATORY = "laboratory"
    LOGISTICS = "logistics"
    EXERCISE = "exercise"
    MEDICAL = "medical"
    AIRLOCK = "airlock"
    GREENHOUSE = "greenhouse"
    WORKSHOP = "workshop"
    RECREATION = "recreation"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class FindingCategory(str, Enum):
    VOLUME = "volume"
    MASS = "mass"
    POWER = "power"
    SAFETY = "safety"
    ACCESSIBILITY = "accessibility"
    ADJACENCY = "adjacency"


class MissionParameters(BaseModel):
    """Mission the habitat is designed for."""

    crew_size: int = Field(4, ge=1, le=20, description="Number of crew members")
    duration_days: int = Field(180, ge=1, le=10000, description="Mission duration")
    destination: Destination = Destination.LUNAR_SURFACE
    launch_vehicle: str = Field(
        "sls_block_1", min_length=1, description="Launch vehicle id"
    )
    mission_type: Literal["exploration", "research", "construction", "settlement"] = (
        "exploration"
    )
    emergency_evacuation: bool = True


class Vector3D(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self):
        """Coordinates as an ``(x, y, z)`` tuple."""
        return (self.x, self.y, self.z)


class Quaternion(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


class ModuleDimensions(BaseModel):
    """Bounding box of a module in meters."""

    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class AccessRequirements(BaseModel):
    direct_access: bool = False
    emergency_access: bool = False
    equipment_access: bool = False


class FunctionalModule(BaseModel):
    """A functional area placed inside the habitat."""

    id: str = Field(default_factory=lambda: new_id("module"))
    name: str = Field(min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    type: ModuleType
    position: Vector3D = Field(default_factory=Vector3D)
    rotation: Quaternion = Field(default_factory=Quaternion)
    dimensions: ModuleDimensions
    mass_kg: Optional[float] = Field(
        None, ge=0, description="Measured mass; estimated from volume when omitted"
    )
    power_requirement: float = Field(0.0, ge=0, description="Power draw in kW")
    crew_capacity: int = Field(0, ge=0)
    essential: bool = False
    adjacency_requirements: List[str] = Field(default_factory=list)
    adjacency_restrictions: List[str] = Field(default_factory=list)
    access_requirements: AccessRequirements = Field(default_factory=AccessRequirements)

    @computed_field
    @property
    def volume(self) -> float:
        """Bounding-box volume in m³."""
        d = self.dimensions
        return d.length * d.width * d.height

    @computed_field
    @property
    def mass(self) -> float:
        """Module mass in kg under the global engine configuration.

        Metrics and analysis use ``metrics.module_mass`` with their own
        configuration instead.
        """
        if self.mass_kg is not None:
            return self.mass_kg
        return self.volume * config.design.EQUIPMENT_DENSITY_KG_M3


class Connection(BaseModel):
    """Passage between two modules."""

    id: str = Field(default_factory=lambda: new_id("connection"))
    from_module_id: str
    to_module_id: str
    type: Literal["corridor", "airlock", "hatch", "emergency"] = "corridor"
    diameter: float = Field(0.8, gt=0)
    length: float = Field(2.0, gt=0)
    pressurized: bool = True
    bidirectional: bool = True


class DesignMetrics(BaseModel):
    total_volume: float = 0.0
    pressurized_volume: float = 0.0
    net_habitable_volume: float = 0.0
    total_mass: float = 0.0
    power_requirement: float = 0.0


class Finding(BaseModel):
    """One validation result."""

    model_config = ConfigDict(frozen=True)

    category: FindingCategory
    severity: Severity
    message: str
    suggestion: Optional[str] = None
    affected_modules: List[str] = Field(default_factory=list)
    compliance_standard: Optional[str] = None
    check: str = Field("", description="Sub-check that produced the finding")


class HabitatDesign(BaseModel):
    """Complete habitat design snapshot."""

    id: str = Field(default_factory=lambda: new_id("habitat"))
    name: str = Field("New Habitat Design", min_length=1, max_length=100)
    description: str = Field("", max_length=1000)
    version: str = "1.0.0"
    author: str = "HabForge User"
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    shape: HabitatShape = Field(
        default_factory=lambda: CylinderShape(radius=4.0, height=12.0)
    )
    mission: MissionParameters = Field(default_factory=MissionParameters)
    modules: List[FunctionalModule] = Field(default_factory=list)
    connections: List[Connection] = Field(default_factory=list)

    metrics: DesignMetrics = Field(default_factory=DesignMetrics)
    findings: List[Finding] = Field(default_factory=list)
    compliance_score: int = Field(100, ge=0, le=100)

    @model_validator(mode="after")
    def _unique_module_ids(self):
        seen = set()
        for module in self.modules:
            if module.id in seen:
                raise ValueError(f"Duplicate module id: {module.id}")
            seen.add(module.id)
        return self

    def module(self, module_id: str) -> Optional[FunctionalModule]:
        """Find a module by id."""
        for module in self.modules:
            if module.id == module_id:
                return module
        return None

    def modules_of_type(self, module_type: ModuleType) -> List[FunctionalModule]:
        """Modules of one type, in design order."""
        return [m for m in self.modules if m.type == module_type]

    def save_to_file(self, output_path: Path) -> None:
        """Save the design to a JSON file."""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            f.write(self.model_dump_json(indent=2))

        logger.info(f"Design saved to {output_path}")

    @classmethod
    def load_from_file(cls, file_path: Path) -> "HabitatDesign":
        """Load a design from a JSON file."""
        with open(file_path, "r") as f:
            data = f.read()
        return cls.model_validate_json(data)
