"""Validation of habitat designs against NASA-derived standards."""

from .engine import validate_design, calculate_compliance_score
from .graph import ConnectionGraph
from .requirements import (
    RequiredVolume,
    categorize_duration,
    duration_category,
    required_nhv,
)
from .rules import (
    CHECKERS,
    DesignChecker,
    VolumeChecker,
    LaunchChecker,
    CrewChecker,
    SafetyChecker,
    AdjacencyChecker,
    LifeSupportChecker,
)

__all__ = [
    "validate_design",
    "calculate_compliance_score",
    "ConnectionGraph",
    "RequiredVolume",
    "categorize_duration",
    "duration_category",
    "required_nhv",
    "CHECKERS",
    "DesignChecker",
    "VolumeChecker",
    "LaunchChecker",
    "CrewChecker",
    "SafetyChecker",
    "AdjacencyChecker",
    "LifeSupportChecker",
]
