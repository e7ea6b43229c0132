"""Habitat design rule checkers.

Each checker evaluates one family of NASA-derived requirements against a
design snapshot and returns its findings. Checkers hold no state between
runs and never mutate the design.
"""

from typing import List, Optional

from loguru import logger

from ..config import EngineConfig, config
from ..geometry import check_launch_constraints, compute_volume
from ..metrics import net_habitable_volume
from ..models import (
    Finding,
    FindingCategory,
    HabitatDesign,
    ModuleType,
    Severity,
)
from ..standards.schema import StandardsConfig
from .graph import ConnectionGraph
from .requirements import categorize_duration, required_nhv

LONG_DURATION_CATEGORIES = ("EXTENDED", "PERMANENT")


class DesignChecker:
    """Base class for rule checkers."""

    name = "design"

    def __init__(
        self,
        design: HabitatDesign,
        standards: StandardsConfig,
        engine_config: Optional[EngineConfig] = None,
    ):
        self.design = design
        self.standards = standards
        self.config = engine_config or config

    @property
    def mission(self):
        """Mission parameters of the design under check."""
        return self.design.mission

    def finding(
        self,
        category: FindingCategory,
        severity: Severity,
        message: str,
        **kwargs,
    ) -> Finding:
        """Build a finding tagged with this checker's name.

        Extra keyword arguments (suggestion, affected_modules,
        compliance_standard) are passed through to ``Finding``.
        """
        return Finding(
            category=category,
            severity=severity,
            message=message,
            check=self.name,
            **kwargs,
        )

    def module_volume(self, *module_types: ModuleType) -> float:
        """Summed volume of the modules of the given types in m³."""
        return sum(m.volume for m in self.design.modules if m.type in module_types)

    def check(self) -> List[Finding]:
        """Run the rules and return their findings in a stable order."""
        raise NotImplementedError


class VolumeChecker(DesignChecker):
    """Net habitable volume and functional area sizing."""

    name = "volume"

    def check(self) -> List[Finding]:
        findings = []
        crew = self.mission.crew_size
        required = required_nhv(crew, self.mission.duration_days, self.standards)
        actual = net_habitable_volume(self.design, self.config.design)
        logger.debug(
            f"NHV {actual:.1f}m³ against minimum {required.minimum:.1f}m³ "
            f"(x{required.multiplier})"
        )

        if actual < required.minimum:
            findings.append(
                self.finding(
                    FindingCategory.VOLUME,
                    Severity.ERROR,
                    f"Net Habitable Volume ({actual:.1f}m³) is below NASA minimum "
                    f"requirement ({required.minimum:.1f}m³)",
                    suggestion=f"Increase habitat volume by {required.minimum - actual:.1f}m³ "
                    "or reduce crew size",
                    compliance_standard="NASA-STD-3001-V1",
                )
            )
        elif actual < required.optimal:
            findings.append(
                self.finding(
                    FindingCategory.VOLUME,
                    Severity.WARNING,
                    f"Net Habitable Volume is below optimal requirement "
                    f"({required.optimal:.1f}m³)",
                    suggestion="Consider increasing volume for crew comfort and mission success",
                    compliance_standard="NASA-STD-3001-V1",
                )
            )

        per_crew = actual / crew
        per_crew_minimum = self.standards.volume.nhv_per_crew_minimum
        if per_crew < per_crew_minimum:
            findings.append(
                self.finding(
                    FindingCategory.VOLUME,
                    Severity.ERROR,
                    f"Volume per crew member ({per_crew:.1f}m³) is below minimum "
                    f"({per_crew_minimum}m³)",
                    suggestion="Increase habitat volume or reduce crew size",
                    compliance_standard="NASA-STD-3001-V1",
                )
            )

        findings.extend(self._functional_areas())
        return findings

    def _functional_areas(self) -> List[Finding]:
        crew = self.mission.crew_size
        volume = self.standards.volume
        areas = [
            (
                "sleep area",
                self.module_volume(ModuleType.HABITATION),
                crew * volume.sleep_volume_per_crew,
                "Increase habitation module size or add sleep quarters",
                "Crew Quarters Requirements",
            ),
            (
                "work space",
                self.module_volume(ModuleType.LABORATORY, ModuleType.COMMAND),
                crew * volume.work_volume_per_crew,
                "Increase laboratory or command module size",
                "Workspace Requirements",
            ),
            (
                "common area",
                self.module_volume(ModuleType.RECREATION),
                crew * volume.common_area_per_crew,
                "Add or enlarge a recreation module for shared crew activities",
                "Crew Common Area Requirements",
            ),
        ]

        findings = []
        for label, actual, required, suggestion, standard in areas:
            if actual < required:
                findings.append(
                    self.finding(
                        FindingCategory.VOLUME,
                        Severity.WARNING,
                        f"Insufficient {label} ({actual:.1f}m³ vs {required:.1f}m³ required)",
                        suggestion=suggestion,
                        compliance_standard=standard,
                    )
                )
        return findings


class LaunchChecker(DesignChecker):
    """Payload fairing envelope and launch mass."""

    name = "launch"

    def check(self) -> List[Finding]:
        vehicle = self.mission.launch_vehicle
        fairing = self.standards.fairing(vehicle)
        if fairing is None:
            return [
                self.finding(
                    FindingCategory.MASS,
                    Severity.ERROR,
                    f"Unknown launch vehicle: {vehicle}",
                    suggestion="Select a valid launch vehicle",
                    compliance_standard="Launch Vehicle Specifications",
                )
            ]

        fit = check_launch_constraints(
            self.design.shape,
            fairing.diameter,
            fairing.height,
            fairing.mass_limit,
            geometry=self.config.geometry,
        )
        label = fairing.label or vehicle
        findings = [
            self.finding(
                FindingCategory.MASS,
                Severity.ERROR,
                violation,
                suggestion="Reduce habitat size or select larger launch vehicle",
                compliance_standard=f"{label} Specifications",
            )
            for violation in fit.violations
        ]

        utilization = fit.utilization_factors.mean()
        if utilization < self.config.life_support.MIN_FAIRING_UTILIZATION:
            findings.append(
                self.finding(
                    FindingCategory.VOLUME,
                    Severity.INFO,
                    f"Low fairing utilization ({utilization * 100:.1f}%). "
                    "Consider optimizing dimensions.",
                    suggestion="Increase habitat size to better utilize launch capacity",
                    compliance_standard="Launch Efficiency Guidelines",
                )
            )
        return findings


class CrewChecker(DesignChecker):
    """Crew size limits and long-duration provisions."""

    name = "crew"

    def check(self) -> List[Finding]:
        findings = []
        crew = self.mission.crew_size
        limits = self.standards.crew

        if crew < limits.min_crew:
            findings.append(
                self.finding(
                    FindingCategory.SAFETY,
                    Severity.ERROR,
                    f"Crew size ({crew}) is below minimum safe crew ({limits.min_crew})",
                    suggestion="Increase crew size for mission safety and redundancy",
                    compliance_standard="NASA-STD-3001-V2",
                )
            )

        if crew > limits.max_crew_large:
            findings.append(
                self.finding(
                    FindingCategory.VOLUME,
                    Severity.WARNING,
                    f"Large crew size ({crew}) may require multiple habitat modules",
                    suggestion="Consider modular habitat design or crew rotation",
                    compliance_standard="Crew Operations Guidelines",
                )
            )

        category = categorize_duration(self.mission.duration_days, self.standards)
        if category in LONG_DURATION_CATEGORIES and not self.design.modules_of_type(
            ModuleType.GREENHOUSE
        ):
            findings.append(
                self.finding(
                    FindingCategory.VOLUME,
                    Severity.WARNING,
                    "Long-duration missions should include food production capability",
                    suggestion="Add greenhouse/hydroponic module for food sustainability",
                    compliance_standard="Long-Duration Mission Requirements",
                )
            )
        return findings


class SafetyChecker(DesignChecker):
    """Essential modules, airlock redundancy and evacuation capacity."""

    name = "safety"

    def check(self) -> List[Finding]:
        findings = []
        present = {m.type.value for m in self.design.modules}

        for module_type in self.standards.essential_module_types():
            if module_type not in present:
                findings.append(
                    self.finding(
                        FindingCategory.SAFETY,
                        Severity.ERROR,
                        f"Missing essential module: {module_type}",
                        suggestion=f"Add {module_type} module for mission safety",
                        compliance_standard="NASA-STD-3001-V2",
                    )
                )

        thresholds = self.config.life_support
        airlocks = self.design.modules_of_type(ModuleType.AIRLOCK)
        if (
            len(airlocks) < thresholds.MIN_AIRLOCKS
            and self.mission.duration_days > thresholds.AIRLOCK_REDUNDANCY_DAYS
        ):
            findings.append(
                self.finding(
                    FindingCategory.SAFETY,
                    Severity.WARNING,
                    "Long-duration missions should have redundant airlocks",
                    suggestion="Add secondary airlock for emergency egress",
                    affected_modules=[m.id for m in airlocks],
                    compliance_standard="Emergency Egress Requirements",
                )
            )

        if self.mission.emergency_evacuation:
            capacity = sum(m.crew_capacity for m in airlocks)
            if capacity < self.mission.crew_size:
                findings.append(
                    self.finding(
                        FindingCategory.SAFETY,
                        Severity.ERROR,
                        "Insufficient emergency evacuation capacity",
                        suggestion="Increase airlock capacity or add emergency escape pods",
                        affected_modules=[m.id for m in airlocks],
                        compliance_standard="Emergency Evacuation Procedures",
                    )
                )
        return findings


class AdjacencyChecker(DesignChecker):
    """Module adjacency requirements, restrictions and minimum sizes."""

    name = "adjacency"

    def check(self) -> List[Finding]:
        findings = []
        graph = ConnectionGraph(
            self.design.connections, (m.id for m in self.design.modules)
        )

        for module in self.design.modules:
            for required_id in module.adjacency_requirements:
                if not graph.connected(module.id, required_id):
                    findings.append(
                        self.finding(
                            FindingCategory.ADJACENCY,
                            Severity.WARNING,
                            f"{module.name} should be adjacent to {self._name_of(required_id)}",
                            suggestion="Add connection or relocate modules for optimal workflow",
                            affected_modules=[module.id, required_id],
                            compliance_standard="Habitat Layout Guidelines",
                        )
                    )

            for restricted_id in module.adjacency_restrictions:
                if graph.connected(module.id, restricted_id):
                    findings.append(
                        self.finding(
                            FindingCategory.ADJACENCY,
                            Severity.ERROR,
                            f"{module.name} should not be adjacent to "
                            f"{self._name_of(restricted_id)}",
                            suggestion="Relocate modules to maintain safe separation",
                            affected_modules=[module.id, restricted_id],
                            compliance_standard="Safety Separation Requirements",
                        )
                    )

            type_standard = self.standards.module_types.get(module.type.value)
            if type_standard is not None and module.volume < type_standard.min_volume:
                findings.append(
                    self.finding(
                        FindingCategory.VOLUME,
                        Severity.WARNING,
                        f"{module.name} volume ({module.volume:.1f}m³) is below "
                        f"recommended minimum ({type_standard.min_volume}m³)",
                        suggestion="Increase module size for optimal functionality",
                        affected_modules=[module.id],
                        compliance_standard="Module Design Standards",
                    )
                )
        return findings

    def _name_of(self, module_id: str) -> str:
        module = self.design.module(module_id)
        return module.name if module else module_id


class LifeSupportChecker(DesignChecker):
    """Power budget and air circulation."""

    name = "life_support"

    def check(self) -> List[Finding]:
        findings = []
        thresholds = self.config.life_support
        total_volume = compute_volume(self.design.shape)

        power = sum(m.power_requirement for m in self.design.modules)
        capacity = total_volume * thresholds.POWER_KW_PER_M3
        if power > capacity:
            findings.append(
                self.finding(
                    FindingCategory.POWER,
                    Severity.WARNING,
                    f"Power requirement ({power:.1f}kW) may exceed capacity",
                    suggestion="Review power systems or reduce equipment power consumption",
                    compliance_standard="Power System Requirements",
                )
            )

        airflow = self.mission.crew_size * thresholds.AIRFLOW_M3_PER_MIN_PER_CREW
        air_changes = airflow * 60 / total_volume
        if air_changes < thresholds.MIN_AIR_CHANGES_PER_HOUR:
            findings.append(
                self.finding(
                    FindingCategory.SAFETY,
                    Severity.WARNING,
                    "Low air circulation rate for crew size",
                    suggestion="Increase air handling capacity or reduce habitat volume",
                    compliance_standard="Air Quality Standards",
                )
            )
        return findings


CHECKERS = (
    VolumeChecker,
    LaunchChecker,
    CrewChecker,
    SafetyChecker,
    AdjacencyChecker,
    LifeSupportChecker,
)
