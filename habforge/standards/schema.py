"""Schema of the standards configuration consumed by the validation engine."""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml
from loguru import logger
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_STANDARDS_FILE = Path(__file__).parent / "nasa_standards.yaml"


class VolumeStandards(BaseModel):
    """Per-crew and per-function volume requirements in m³."""

    nhv_per_crew_minimum: float = Field(gt=0)
    nhv_per_crew_optimal: float = Field(gt=0)
    nhv_per_crew_luxury: Optional[float] = Field(None, gt=0)
    sleep_volume_per_crew: float = Field(ge=0)
    hygiene_volume_per_crew: float = Field(0.0, ge=0)
    work_volume_per_crew: float = Field(ge=0)
    common_area_per_crew: float = Field(ge=0)
    exercise_volume_minimum: float = Field(0.0, ge=0)
    food_prep_volume: float = Field(0.0, ge=0)
    medical_volume_minimum: float = Field(0.0, ge=0)

    @model_validator(mode="after")
    def _optimal_above_minimum(self):
        if self.nhv_per_crew_optimal < self.nhv_per_crew_minimum:
            raise ValueError("nhv_per_crew_optimal must not be below nhv_per_crew_minimum")
        return self


class DurationMultiplier(BaseModel):
    """NHV multiplier applied to missions strictly longer than ``above_days``."""

    above_days: int = Field(ge=0)
    multiplier: float = Field(gt=0)


class DurationCategory(BaseModel):
    """Named mission duration range; ``max_days=None`` is open-ended."""

    name: str
    min_days: int = Field(ge=1)
    max_days: Optional[int] = None
    label: str = ""

    def contains(self, duration_days: int) -> bool:
        """True if the duration falls in this range, bounds inclusive."""
        if duration_days < self.min_days:
            return False
        return self.max_days is None or duration_days <= self.max_days


class FairingSpec(BaseModel):
    """Launch vehicle payload fairing envelope and mass capacity."""

    diameter: float = Field(gt=0, description="Usable diameter in m")
    height: float = Field(gt=0, description="Usable height in m")
    volume: Optional[float] = Field(None, gt=0, description="Usable volume in m³")
    mass_limit: float = Field(gt=0, description="Payload mass capacity in kg")
    label: str = ""


class CrewStandards(BaseModel):
    min_crew: int = Field(ge=1)
    optimal_crew: int = Field(4, ge=1)
    max_crew_small: int = Field(6, ge=1)
    max_crew_large: int = Field(ge=1)
    isolation_factor: float = Field(1.0, gt=0)


class ModuleTypeStandard(BaseModel):
    essential: bool = False
    min_volume: float = Field(ge=0)
    max_occupancy: Optional[int] = Field(None, ge=0)
    description: str = ""


class MassBudgets(BaseModel):
    consumables_per_crew_per_day: float = Field(3.5, ge=0)
    waste_per_crew_per_day: float = Field(2.8, ge=0)


class DestinationEnvironment(BaseModel):
    gravity: float = Field(ge=0, description="Surface gravity in m/s²")
    radiation_protection_required: bool = True
    temperature_range: Tuple[float, float]
    pressure_differential: float = Field(description="kPa across the pressure shell")
    label: str = ""


class StandardsConfig(BaseModel):
    """Complete standards table used to validate habitat designs."""

    volume: VolumeStandards
    duration_multipliers: List[DurationMultiplier] = Field(default_factory=list)
    mission_durations: List[DurationCategory]
    launch_vehicles: Dict[str, FairingSpec]
    crew: CrewStandards
    module_types: Dict[str, ModuleTypeStandard]
    mass_budgets: MassBudgets = Field(default_factory=MassBudgets)
    destinations: Dict[str, DestinationEnvironment] = Field(default_factory=dict)

    @field_validator("launch_vehicles", "module_types", "destinations")
    @classmethod
    def _normalize_keys(cls, value: Dict) -> Dict:
        return {key.strip().lower(): item for key, item in value.items()}

    @field_validator("duration_multipliers")
    @classmethod
    def _sort_multipliers(cls, value: List[DurationMultiplier]) -> List[DurationMultiplier]:
        return sorted(value, key=lambda step: step.above_days)

    @field_validator("mission_durations")
    @classmethod
    def _check_duration_table(cls, value: List[DurationCategory]) -> List[DurationCategory]:
        """Require ranges that start at day 1, touch end to end and end open."""
        if not value:
            raise ValueError("mission_durations must define at least one range")
        expected_start = 1
        for index, category in enumerate(value):
            if category.min_days != expected_start:
                raise ValueError(
                    f"Duration range {category.name} starts at day {category.min_days}, "
                    f"expected {expected_start}"
                )
            is_last = index == len(value) - 1
            if category.max_days is None:
                if not is_last:
                    raise ValueError(
                        f"Only the last duration range may be open-ended ({category.name})"
                    )
            else:
                if is_last:
                    raise ValueError(
                        f"Last duration range {category.name} must be open-ended"
                    )
                if category.max_days < category.min_days:
                    raise ValueError(f"Duration range {category.name} is empty")
                expected_start = category.max_days + 1
        return value

    def fairing(self, vehicle_id: str) -> Optional[FairingSpec]:
        """Look up a launch vehicle fairing, ignoring case and whitespace."""
        return self.launch_vehicles.get(vehicle_id.strip().lower())

    def essential_module_types(self) -> List[str]:
        """Module types whose absence is always an error, in table order."""
        return [name for name, spec in self.module_types.items() if spec.essential]

    def duration_multiplier(self, duration_days: int) -> float:
        """NHV multiplier for a mission duration (1.0 below every step)."""
        multiplier = 1.0
        for step in self.duration_multipliers:
            if duration_days > step.above_days:
                multiplier = step.multiplier
        return multiplier


def load_standards(path: Optional[Union[str, Path]] = None) -> StandardsConfig:
    """Load a standards configuration from YAML.

    Args:
        path: YAML file to read; the packaged NASA table when omitted

    Returns:
        Validated StandardsConfig
    """
    standards_file = Path(path) if path else DEFAULT_STANDARDS_FILE
    logger.debug(f"Loading standards from {standards_file}")
    data = yaml.safe_load(standards_file.read_text(encoding="utf-8"))
    standards = StandardsConfig.model_validate(data)
    logger.debug(
        f"Loaded {len(standards.launch_vehicles)} launch vehicles and "
        f"{len(standards.module_types)} module types"
    )
    return standards
