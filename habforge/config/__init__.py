"""Engine configuration."""

from .engine_config import (
    EngineConfig,
    GeometryDefaults,
    LifeSupportThresholds,
    ScorePenalties,
    DesignDefaults,
    config,
)

__all__ = [
    "EngineConfig",
    "GeometryDefaults",
    "LifeSupportThresholds",
    "ScorePenalties",
    "DesignDefaults",
    "config",
]
