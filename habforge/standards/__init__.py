"""NASA-derived standards tables and their providers."""

from .schema import (
    StandardsConfig,
    VolumeStandards,
    DurationMultiplier,
    DurationCategory,
    FairingSpec,
    CrewStandards,
    ModuleTypeStandard,
    MassBudgets,
    DestinationEnvironment,
    load_standards,
)
from .provider import (
    StandardsProvider,
    StaticStandardsProvider,
    YamlStandardsProvider,
    HttpStandardsProvider,
    get_standards_provider,
)

__all__ = [
    "StandardsConfig",
    "VolumeStandards",
    "DurationMultiplier",
    "DurationCategory",
    "FairingSpec",
    "CrewStandards",
    "ModuleTypeStandard",
    "MassBudgets",
    "DestinationEnvironment",
    "load_standards",
    "StandardsProvider",
    "StaticStandardsProvider",
    "YamlStandardsProvider",
    "HttpStandardsProvider",
    "get_standards_provider",
]
