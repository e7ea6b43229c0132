"""
Configuration settings for the geometry and validation engine.

This module holds the engineering heuristics that are not part of the NASA
standards table: default structural material, life-support rules of thumb,
compliance score penalties and derived-metric factors.
"""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class GeometryDefaults:
    """Material and density assumptions for closed-form mass estimates."""

    WALL_THICKNESS_M: float = 0.1
    WALL_DENSITY_KG_M3: float = 2700.0  # Aluminum
    INERTIA_DENSITY_KG_M3: float = 1000.0  # Average habitat fill
    DEFAULT_ASPECT_RATIO: float = 2.0  # Height over diameter for cylinders

    def __post_init__(self):
        """Validate geometry defaults."""
        if self.WALL_THICKNESS_M <= 0:
            raise ValueError("WALL_THICKNESS_M must be positive")
        if self.WALL_DENSITY_KG_M3 <= 0:
            raise ValueError("WALL_DENSITY_KG_M3 must be positive")
        if self.INERTIA_DENSITY_KG_M3 <= 0:
            raise ValueError("INERTIA_DENSITY_KG_M3 must be positive")
        if self.DEFAULT_ASPECT_RATIO <= 0:
            raise ValueError("DEFAULT_ASPECT_RATIO must be positive")


@dataclass
class LifeSupportThresholds:
    """Rules of thumb for the launch, safety and life-support checks."""

    POWER_KW_PER_M3: float = 2.0  # Rough power capacity per m³ of habitat
    AIRFLOW_M3_PER_MIN_PER_CREW: float = 0.5
    MIN_AIR_CHANGES_PER_HOUR: float = 0.5
    MIN_FAIRING_UTILIZATION: float = 0.6
    MIN_AIRLOCKS: int = 2
    AIRLOCK_REDUNDANCY_DAYS: int = 30  # Missions longer than this need spares

    def __post_init__(self):
        """Validate thresholds."""
        if self.POWER_KW_PER_M3 <= 0:
            raise ValueError("POWER_KW_PER_M3 must be positive")
        if self.AIRFLOW_M3_PER_MIN_PER_CREW <= 0:
            raise ValueError("AIRFLOW_M3_PER_MIN_PER_CREW must be positive")
        if self.MIN_AIR_CHANGES_PER_HOUR < 0:
            raise ValueError("MIN_AIR_CHANGES_PER_HOUR must be non-negative")
        if not 0 <= self.MIN_FAIRING_UTILIZATION <= 1:
            raise ValueError("MIN_FAIRING_UTILIZATION must be between 0 and 1")
        if self.MIN_AIRLOCKS < 0:
            raise ValueError("MIN_AIRLOCKS must be non-negative")
        if self.AIRLOCK_REDUNDANCY_DAYS < 0:
            raise ValueError("AIRLOCK_REDUNDANCY_DAYS must be non-negative")


@dataclass
class ScorePenalties:
    """Points deducted from a perfect compliance score per finding."""

    ERROR: int = 15
    WARNING: int = 5
    INFO: int = 1

    def __post_init__(self):
        """Validate penalties."""
        if min(self.ERROR, self.WARNING, self.INFO) < 0:
            raise ValueError("Score penalties must be non-negative")

    def for_severity(self, severity: str) -> int:
        """Penalty for a severity name; unknown severities cost nothing."""
        return {"error": self.ERROR, "warning": self.WARNING, "info": self.INFO}.get(
            severity, 0
        )


@dataclass
class DesignDefaults:
    """Factors used when deriving aggregate design metrics."""

    EQUIPMENT_VOLUME_FRACTION: float = 0.3  # Module volume lost to equipment
    EQUIPMENT_DENSITY_KG_M3: float = 300.0  # Outfitted module mass per m³
    AIRLOCK_CONNECTION_DIAMETER_M: float = 1.2
    CONNECTION_DIAMETER_M: float = 0.8
    CONNECTION_LENGTH_M: float = 2.0

    def __post_init__(self):
        """Validate design defaults."""
        if not 0 <= self.EQUIPMENT_VOLUME_FRACTION <= 1:
            raise ValueError("EQUIPMENT_VOLUME_FRACTION must be between 0 and 1")
        if self.EQUIPMENT_DENSITY_KG_M3 <= 0:
            raise ValueError("EQUIPMENT_DENSITY_KG_M3 must be positive")
        if self.AIRLOCK_CONNECTION_DIAMETER_M <= 0:
            raise ValueError("AIRLOCK_CONNECTION_DIAMETER_M must be positive")
        if self.CONNECTION_DIAMETER_M <= 0:
            raise ValueError("CONNECTION_DIAMETER_M must be positive")
        if self.CONNECTION_LENGTH_M <= 0:
            raise ValueError("CONNECTION_LENGTH_M must be positive")


class EngineConfig:
    """Global configuration for the HabForge engine."""

    def __init__(self):
        self.geometry = GeometryDefaults()
        self.life_support = LifeSupportThresholds()
        self.score = ScorePenalties()
        self.design = DesignDefaults()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "geometry_defaults": self.geometry.__dict__,
            "life_support_thresholds": self.life_support.__dict__,
            "score_penalties": self.score.__dict__,
            "design_defaults": self.design.__dict__,
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "EngineConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored; every section that is present is validated
        after its overrides are applied.
        """
        instance = cls()
        sections = {
            "geometry_defaults": ("geometry", GeometryDefaults),
            "life_support_thresholds": ("life_support", LifeSupportThresholds),
            "score_penalties": ("score", ScorePenalties),
            "design_defaults": ("design", DesignDefaults),
        }

        for key, (attr, section_cls) in sections.items():
            if key not in config_dict:
                continue
            section = section_cls()
            for k, v in config_dict[key].items():
                if hasattr(section, k):
                    setattr(section, k, v)
            section.__post_init__()  # Validate
            setattr(instance, attr, section)

        return instance

    def validate(self):
        """Validate entire configuration."""
        self.geometry.__post_init__()
        self.life_support.__post_init__()
        self.score.__post_init__()
        self.design.__post_init__()


# Default configuration instance
config = EngineConfig()
config.validate()  # Ensure default configuration is valid
