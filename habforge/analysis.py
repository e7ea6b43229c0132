"""Layout analysis of a habitat design.

Volume and mass budgets, connection graph statistics, adjacency bookkeeping
and a simple redundancy assessment. Unlike validation this produces numbers
rather than findings and fails loudly on incomplete geometry.
"""

from collections import Counter
from typing import Dict, List, Optional

import numpy as np
from loguru import logger
from pydantic import BaseModel, Field

from .config import EngineConfig, config
from .geometry import compute_structural_mass
from .metrics import compute_design_metrics, module_mass
from .models import HabitatDesign, ModuleType, Vector3D
from .standards.schema import StandardsConfig
from .validation.graph import ConnectionGraph


class VolumeAnalysis(BaseModel):
    total_volume: float
    pressurized_volume: float
    net_habitable_volume: float
    volume_per_crew: float
    module_volume: float
    volume_utilization: float = Field(description="Module volume as % of total volume")
    volume_by_type: Dict[str, float] = Field(default_factory=dict)


class MassAnalysis(BaseModel):
    total_mass: float
    structural_mass: float
    module_mass: float
    consumables_mass: float = Field(description="Crew consumables for the whole mission")
    mass_per_crew: float
    mass_by_type: Dict[str, float] = Field(default_factory=dict)
    center_of_mass: Vector3D = Field(default_factory=Vector3D)


class AccessibilityAnalysis(BaseModel):
    average_path_length: float = Field(0.0, description="Mean hops between reachable modules")
    max_path_length: int = 0
    max_hops_to_airlock: Optional[int] = None
    bottlenecks: List[str] = Field(default_factory=list)
    dead_ends: List[str] = Field(default_factory=list)
    unreachable_modules: List[str] = Field(
        default_factory=list, description="Modules without a path to any airlock"
    )


class AdjacencyAnalysis(BaseModel):
    satisfied_requirements: int = 0
    violated_requirements: int = 0
    respected_restrictions: int = 0
    violated_restrictions: int = 0


class SafetyAnalysis(BaseModel):
    redundancy_score: float = Field(description="% of essential types present at least twice")
    missing_essential_types: List[str] = Field(default_factory=list)
    critical_single_points: List[str] = Field(default_factory=list)


class DesignAnalysis(BaseModel):
    volume: VolumeAnalysis
    mass: MassAnalysis
    accessibility: AccessibilityAnalysis
    adjacency: AdjacencyAnalysis
    safety: SafetyAnalysis


def _volume_analysis(design: HabitatDesign, engine_config: EngineConfig) -> VolumeAnalysis:
    metrics = compute_design_metrics(design, engine_config)
    module_volume = sum(m.volume for m in design.modules)
    by_type: Dict[str, float] = {}
    for module in design.modules:
        by_type[module.type.value] = by_type.get(module.type.value, 0.0) + module.volume

    return VolumeAnalysis(
        total_volume=metrics.total_volume,
        pressurized_volume=metrics.pressurized_volume,
        net_habitable_volume=metrics.net_habitable_volume,
        volume_per_crew=metrics.net_habitable_volume / design.mission.crew_size,
        module_volume=module_volume,
        volume_utilization=100.0 * module_volume / metrics.total_volume,
        volume_by_type=by_type,
    )


def _mass_analysis(
    design: HabitatDesign, standards: StandardsConfig, engine_config: EngineConfig
) -> MassAnalysis:
    geometry = engine_config.geometry
    structural_mass = compute_structural_mass(
        design.shape, geometry.WALL_THICKNESS_M, geometry.WALL_DENSITY_KG_M3
    )
    masses = np.array(
        [module_mass(m, engine_config.design) for m in design.modules], dtype=float
    )
    modules_total = float(masses.sum()) if masses.size else 0.0

    by_type: Dict[str, float] = {}
    for module, mass in zip(design.modules, masses):
        by_type[module.type.value] = by_type.get(module.type.value, 0.0) + float(mass)

    center = Vector3D()
    if modules_total > 0:
        positions = np.array([m.position.as_tuple() for m in design.modules], dtype=float)
        x, y, z = np.average(positions, axis=0, weights=masses)
        center = Vector3D(x=float(x), y=float(y), z=float(z))

    mission = design.mission
    consumables = (
        mission.crew_size
        * mission.duration_days
        * standards.mass_budgets.consumables_per_crew_per_day
    )
    total = structural_mass + modules_total
    return MassAnalysis(
        total_mass=total,
        structural_mass=structural_mass,
        module_mass=modules_total,
        consumables_mass=consumables,
        mass_per_crew=total / mission.crew_size,
        mass_by_type=by_type,
        center_of_mass=center,
    )


def _accessibility_analysis(design: HabitatDesign, graph: ConnectionGraph) -> AccessibilityAnalysis:
    module_ids = [m.id for m in design.modules]
    known = set(module_ids)
    pair_hops = []
    for source in module_ids:
        for target, distance in graph.shortest_paths(source).items():
            if target != source and target in known:
                pair_hops.append(distance)
    hops = np.array(pair_hops, dtype=float)

    airlocks = [m.id for m in design.modules if m.type == ModuleType.AIRLOCK]
    to_airlock: Dict[str, int] = {}
    for airlock in airlocks:
        for module_id, distance in graph.shortest_paths(airlock).items():
            if module_id not in to_airlock or distance < to_airlock[module_id]:
                to_airlock[module_id] = distance
    egress = [to_airlock[mid] for mid in module_ids if mid in to_airlock]

    return AccessibilityAnalysis(
        average_path_length=float(np.mean(hops)) if hops.size else 0.0,
        max_path_length=int(np.max(hops)) if hops.size else 0,
        max_hops_to_airlock=max(egress) if egress else None,
        bottlenecks=sorted(graph.articulation_points() & set(module_ids)),
        dead_ends=[mid for mid in module_ids if graph.degree(mid) == 1],
        unreachable_modules=[mid for mid in module_ids if mid not in to_airlock],
    )


def _adjacency_analysis(design: HabitatDesign, graph: ConnectionGraph) -> AdjacencyAnalysis:
    result = AdjacencyAnalysis()
    for module in design.modules:
        for required_id in module.adjacency_requirements:
            if graph.connected(module.id, required_id):
                result.satisfied_requirements += 1
            else:
                result.violated_requirements += 1
        for restricted_id in module.adjacency_restrictions:
            if graph.connected(module.id, restricted_id):
                result.violated_restrictions += 1
            else:
                result.respected_restrictions += 1
    return result


def _safety_analysis(
    design: HabitatDesign, standards: StandardsConfig, graph: ConnectionGraph
) -> SafetyAnalysis:
    essential = standards.essential_module_types()
    counts = Counter(m.type.value for m in design.modules)
    redundant = sum(1 for t in essential if counts[t] >= 2)
    cut_points = graph.articulation_points()

    return SafetyAnalysis(
        redundancy_score=100.0 * redundant / len(essential) if essential else 100.0,
        missing_essential_types=[t for t in essential if counts[t] == 0],
        critical_single_points=[
            m.id for m in design.modules if m.type.value in essential and m.id in cut_points
        ],
    )


def analyze_design(
    design: HabitatDesign,
    standards: StandardsConfig,
    engine_config: Optional[EngineConfig] = None,
) -> DesignAnalysis:
    """Compute the full layout analysis of a design.

    Args:
        design: Design snapshot
        standards: Standards table (essential types, consumables budget)
        engine_config: Shell material and equipment factors; the global
            configuration when omitted

    Returns:
        DesignAnalysis

    Raises:
        InvalidDimensions: if the shell dimensions are incomplete
        UnsupportedShape: if the shell has no volume formula
    """
    engine_config = engine_config or config
    graph = ConnectionGraph(design.connections, (m.id for m in design.modules))
    analysis = DesignAnalysis(
        volume=_volume_analysis(design, engine_config),
        mass=_mass_analysis(design, standards, engine_config),
        accessibility=_accessibility_analysis(design, graph),
        adjacency=_adjacency_analysis(design, graph),
        safety=_safety_analysis(design, standards, graph),
    )
    logger.debug(
        f"Analyzed {design.name}: {len(design.modules)} modules, "
        f"{len(analysis.accessibility.bottlenecks)} bottlenecks"
    )
    return analysis
