"""Derived design metrics."""

from typing import Optional

from loguru import logger

from .config import EngineConfig, config
from .config.engine_config import DesignDefaults
from .geometry import compute_structural_mass, compute_volume
from .models import DesignMetrics, FunctionalModule, HabitatDesign


def module_volume(design: HabitatDesign) -> float:
    """Summed bounding-box volume of every module in m³."""
    return sum(m.volume for m in design.modules)


def module_mass(
    module: FunctionalModule, defaults: Optional[DesignDefaults] = None
) -> float:
    """Module mass in kg: ``mass_kg`` when given, else volume x equipment density."""
    defaults = defaults or config.design
    if module.mass_kg is not None:
        return module.mass_kg
    return module.volume * defaults.EQUIPMENT_DENSITY_KG_M3


def net_habitable_volume(
    design: HabitatDesign, defaults: Optional[DesignDefaults] = None
) -> float:
    """Pressurized volume left once module equipment is stowed.

    Raises:
        InvalidDimensions: if the shell dimensions are incomplete
        UnsupportedShape: if the shell has no volume formula
    """
    defaults = defaults or config.design
    total = compute_volume(design.shape)
    return max(0.0, total - defaults.EQUIPMENT_VOLUME_FRACTION * module_volume(design))


def compute_design_metrics(
    design: HabitatDesign, engine_config: Optional[EngineConfig] = None
) -> DesignMetrics:
    """Recompute every derived metric of a design from scratch.

    Args:
        design: Design snapshot
        engine_config: Shell material and equipment factors; the global
            configuration when omitted

    Returns:
        Fresh DesignMetrics
    """
    engine_config = engine_config or config
    geometry = engine_config.geometry
    total_volume = compute_volume(design.shape)
    structural_mass = compute_structural_mass(
        design.shape, geometry.WALL_THICKNESS_M, geometry.WALL_DENSITY_KG_M3
    )

    metrics = DesignMetrics(
        total_volume=total_volume,
        pressurized_volume=total_volume,
        net_habitable_volume=net_habitable_volume(design, engine_config.design),
        total_mass=sum(module_mass(m, engine_config.design) for m in design.modules)
        + structural_mass,
        power_requirement=sum(m.power_requirement for m in design.modules),
    )
    logger.debug(
        f"Metrics for {design.name}: volume={metrics.total_volume:.1f}m³ "
        f"NHV={metrics.net_habitable_volume:.1f}m³ mass={metrics.total_mass:.0f}kg"
    )
    return metrics
