"""Tests for the habitat validation engine."""

import pytest

from habforge.config import EngineConfig
from habforge.errors import UnknownDurationCategory
from habforge.geometry import CustomShape, CylinderShape, SphereShape
from habforge.models import (
    Connection,
    Finding,
    FindingCategory,
    FunctionalModule,
    HabitatDesign,
    MissionParameters,
    ModuleDimensions,
    ModuleType,
    Severity,
)
from habforge.standards import StandardsConfig, load_standards
from habforge.validation import (
    AdjacencyChecker,
    LaunchChecker,
    LifeSupportChecker,
    SafetyChecker,
    VolumeChecker,
    CrewChecker,
    calculate_compliance_score,
    categorize_duration,
    required_nhv,
    validate_design,
)

ESSENTIAL_TYPES = ["command", "habitation", "logistics", "exercise", "medical", "airlock"]


@pytest.fixture
def standards():
    return load_standards()


def make_module(module_id, module_type, size=(4.0, 3.0, 2.5), **fields):
    length, width, height = size
    return FunctionalModule(
        id=module_id,
        name=fields.pop("name", module_id.upper()),
        type=module_type,
        dimensions=ModuleDimensions(length=length, width=width, height=height),
        **fields,
    )


def make_design(modules=(), connections=(), shape=None, **mission):
    params = {"crew_size": 4, "duration_days": 180, "launch_vehicle": "sls_block_1"}
    params.update(mission)
    return HabitatDesign(
        name="Test Habitat",
        shape=shape or CylinderShape(radius=4.0, height=12.0),
        mission=MissionParameters(**params),
        modules=list(modules),
        connections=list(connections),
    )


def finding(severity, category=FindingCategory.SAFETY):
    return Finding(category=category, severity=severity, message="test")


def of_check(findings, check):
    return [f for f in findings if f.check == check]


class TestComplianceScore:
    """Test the linear penalty score."""

    def test_no_findings_is_perfect(self):
        assert calculate_compliance_score([]) == 100

    def test_two_errors(self):
        assert calculate_compliance_score([finding(Severity.ERROR)] * 2) == 70

    def test_mixed_severities(self):
        findings = [finding(Severity.ERROR), finding(Severity.WARNING), finding(Severity.INFO)]
        assert calculate_compliance_score(findings) == 79

    def test_clamped_at_zero(self):
        assert calculate_compliance_score([finding(Severity.ERROR)] * 10) == 0

    def test_custom_penalties(self):
        engine_config = EngineConfig.from_dict({"score_penalties": {"ERROR": 50}})
        findings = [finding(Severity.ERROR)]
        assert calculate_compliance_score(findings, engine_config.score) == 50


class TestDurationRequirements:
    """Test duration categorization and required NHV."""

    @pytest.mark.parametrize(
        "days,category",
        [
            (1, "SHORT_TERM"),
            (30, "SHORT_TERM"),
            (31, "MEDIUM_TERM"),
            (180, "MEDIUM_TERM"),
            (181, "LONG_TERM"),
            (501, "EXTENDED"),
            (1000, "EXTENDED"),
            (1001, "PERMANENT"),
            (10000, "PERMANENT"),
        ],
    )
    def test_categorize_duration(self, standards, days, category):
        assert categorize_duration(days, standards) == category

    def test_unmatched_duration_raises(self, standards):
        with pytest.raises(UnknownDurationCategory):
            categorize_duration(0, standards)

    def test_required_nhv_boundary(self, standards):
        """Test 180 days uses multiplier 1.0 and 181 days uses 1.2."""
        at_180 = required_nhv(4, 180, standards)
        at_181 = required_nhv(4, 181, standards)
        assert at_180.minimum == pytest.approx(100.0)
        assert at_180.optimal == pytest.approx(300.0)
        assert at_181.minimum == pytest.approx(120.0)
        assert at_181.optimal == pytest.approx(360.0)
        assert at_181.multiplier == 1.2


class TestVolumeChecker:
    """Test NHV and functional area rules."""

    def test_small_habitat_errors(self, standards):
        design = make_design(shape=CylinderShape(radius=2.0, height=5.0))
        findings = VolumeChecker(design, standards).check()
        errors = [f for f in findings if f.severity == Severity.ERROR]
        # NHV 62.8m³ < 100m³ and 15.7m³ per crew < 25m³
        assert len(errors) == 2
        assert errors[0].message.startswith("Net Habitable Volume (62.8m³) is below NASA minimum")
        assert errors[0].compliance_standard == "NASA-STD-3001-V1"
        assert errors[1].message.startswith("Volume per crew member (15.7m³)")

    def test_between_minimum_and_optimal_warns(self, standards):
        design = make_design(shape=SphereShape(radius=3.5))
        findings = VolumeChecker(design, standards).check()
        nhv = [f for f in findings if "Net Habitable Volume" in f.message]
        assert len(nhv) == 1
        assert nhv[0].severity == Severity.WARNING

    def test_duration_multiplier_changes_outcome(self, standards):
        """Test a habitat just above the 180-day minimum fails at 181 days."""
        # 110m³, no modules: minimum is 100m³ at 180 days and 120m³ at 181 days
        shape = CylinderShape(radius=1.0, height=110.0 / 3.141592653589793)
        at_180 = VolumeChecker(make_design(shape=shape), standards).check()
        at_181 = VolumeChecker(make_design(shape=shape, duration_days=181), standards).check()
        assert not any("below NASA minimum" in f.message for f in at_180)
        assert any("below NASA minimum" in f.message for f in at_181)

    def test_functional_area_warnings(self, standards):
        findings = VolumeChecker(make_design(), standards).check()
        assert [f.severity for f in findings] == [Severity.WARNING] * 3
        assert findings[0].message == "Insufficient sleep area (0.0m³ vs 10.0m³ required)"
        assert findings[1].message == "Insufficient work space (0.0m³ vs 32.0m³ required)"
        assert findings[2].message == "Insufficient common area (0.0m³ vs 40.0m³ required)"

    def test_functional_areas_satisfied(self, standards):
        modules = [
            make_module("hab", ModuleType.HABITATION),
            make_module("lab", ModuleType.LABORATORY, size=(4, 3, 2)),
            make_module("cmd", ModuleType.COMMAND, size=(4, 2, 2)),
            make_module("rec", ModuleType.RECREATION, size=(4, 4, 2.5)),
        ]
        findings = VolumeChecker(make_design(modules), standards).check()
        assert findings == []

    def test_equipment_fraction_reduces_nhv(self, standards):
        """Test module volume eats into NHV at the configured fraction."""
        big = make_module("lab", ModuleType.LABORATORY, size=(10, 10, 5.5))
        design = make_design([big], shape=CylinderShape(radius=2.0, height=10.0))
        findings = VolumeChecker(design, standards).check()
        # 125.7 - 0.3 * 550 < 0, clamped to zero
        assert findings[0].message.startswith("Net Habitable Volume (0.0m³)")


class TestLaunchChecker:
    """Test launch vehicle rules."""

    def test_unknown_vehicle(self, standards):
        design = make_design(launch_vehicle="saturn_v")
        findings = LaunchChecker(design, standards).check()
        assert len(findings) == 1
        assert findings[0].severity == Severity.ERROR
        assert findings[0].message == "Unknown launch vehicle: saturn_v"

    def test_case_insensitive_vehicle(self, standards):
        design = make_design(launch_vehicle="STARSHIP")
        assert LaunchChecker(design, standards).check() == []

    def test_violations_become_errors(self, standards):
        findings = LaunchChecker(make_design(), standards).check()
        assert len(findings) == 2
        assert all(f.severity == Severity.ERROR for f in findings)
        assert all(f.category == FindingCategory.MASS for f in findings)
        assert findings[0].compliance_standard == "NASA SLS Block 1 Specifications"

    def test_low_utilization_info(self, standards):
        design = make_design(shape=SphereShape(radius=1.0), launch_vehicle="starship")
        findings = LaunchChecker(design, standards).check()
        assert len(findings) == 1
        assert findings[0].severity == Severity.INFO
        assert findings[0].message.startswith("Low fairing utilization (")


class TestCrewChecker:
    """Test crew size and long-duration rules."""

    def test_below_minimum_crew(self, standards):
        findings = CrewChecker(make_design(crew_size=1), standards).check()
        assert len(findings) == 1
        assert findings[0].severity == Severity.ERROR
        assert findings[0].category == FindingCategory.SAFETY

    def test_large_crew_warns(self, standards):
        findings = CrewChecker(make_design(crew_size=13), standards).check()
        assert len(findings) == 1
        assert findings[0].severity == Severity.WARNING

    @pytest.mark.parametrize("days", [501, 2000])
    def test_long_missions_need_greenhouse(self, standards, days):
        findings = CrewChecker(make_design(duration_days=days), standards).check()
        assert [f.message for f in findings] == [
            "Long-duration missions should include food production capability"
        ]
        greenhouse = make_module("grn", ModuleType.GREENHOUSE)
        assert CrewChecker(make_design([greenhouse], duration_days=days), standards).check() == []

    def test_medium_mission_needs_no_greenhouse(self, standards):
        assert CrewChecker(make_design(duration_days=500), standards).check() == []


class TestSafetyChecker:
    """Test essential modules, airlocks and evacuation."""

    def test_missing_essential_modules(self, standards):
        findings = SafetyChecker(make_design(emergency_evacuation=False, duration_days=10), standards).check()
        assert [f.message for f in findings] == [
            f"Missing essential module: {t}" for t in ESSENTIAL_TYPES
        ]

    def test_redundant_airlocks(self, standards):
        one = [make_module("al1", ModuleType.AIRLOCK, crew_capacity=4)]
        short = SafetyChecker(make_design(one, duration_days=30), standards).check()
        long = SafetyChecker(make_design(one, duration_days=31), standards).check()
        redundancy = "Long-duration missions should have redundant airlocks"
        assert redundancy not in [f.message for f in short]
        assert redundancy in [f.message for f in long]

    def test_evacuation_capacity(self, standards):
        airlocks = [
            make_module("al1", ModuleType.AIRLOCK, crew_capacity=2),
            make_module("al2", ModuleType.AIRLOCK, crew_capacity=1),
        ]
        findings = SafetyChecker(make_design(airlocks), standards).check()
        evac = [f for f in findings if f.message == "Insufficient emergency evacuation capacity"]
        assert len(evac) == 1
        assert evac[0].severity == Severity.ERROR
        assert evac[0].affected_modules == ["al1", "al2"]

        enough = [m.model_copy(update={"crew_capacity": 2}) for m in airlocks]
        findings = SafetyChecker(make_design(enough), standards).check()
        assert not any("evacuation" in f.message for f in findings)

    def test_evacuation_not_required(self, standards):
        findings = SafetyChecker(make_design(emergency_evacuation=False), standards).check()
        assert not any("evacuation" in f.message for f in findings)


class TestAdjacencyChecker:
    """Test adjacency requirements and restrictions."""

    def test_requirement_without_connection(self, standards):
        a = make_module("a", ModuleType.COMMAND, name="Alpha", adjacency_requirements=["b"])
        b = make_module("b", ModuleType.HABITATION, name="Bravo")
        findings = AdjacencyChecker(make_design([a, b]), standards).check()
        assert len(findings) == 1
        assert findings[0].severity == Severity.WARNING
        assert findings[0].message == "Alpha should be adjacent to Bravo"
        assert findings[0].affected_modules == ["a", "b"]

    def test_connection_satisfies_requirement(self, standards):
        a = make_module("a", ModuleType.COMMAND, adjacency_requirements=["b"])
        b = make_module("b", ModuleType.HABITATION)
        link = Connection(id="c1", from_module_id="b", to_module_id="a", bidirectional=False)
        assert AdjacencyChecker(make_design([a, b], [link]), standards).check() == []

    def test_unknown_module_falls_back_to_id(self, standards):
        a = make_module("a", ModuleType.COMMAND, name="Alpha", adjacency_requirements=["ghost"])
        findings = AdjacencyChecker(make_design([a]), standards).check()
        assert findings[0].message == "Alpha should be adjacent to ghost"

    def test_restriction_violated(self, standards):
        a = make_module("a", ModuleType.EXERCISE, name="Gym", adjacency_restrictions=["c"])
        c = make_module("c", ModuleType.HABITATION, name="Quarters")
        link = Connection(id="c1", from_module_id="a", to_module_id="c")
        findings = AdjacencyChecker(make_design([a, c], [link]), standards).check()
        assert len(findings) == 1
        assert findings[0].severity == Severity.ERROR
        assert findings[0].message == "Gym should not be adjacent to Quarters"

    def test_module_below_type_minimum(self, standards):
        tiny = make_module("lab", ModuleType.LABORATORY, size=(2, 2, 2))
        findings = AdjacencyChecker(make_design([tiny]), standards).check()
        assert len(findings) == 1
        assert findings[0].category == FindingCategory.VOLUME
        assert findings[0].message == "LAB volume (8.0m³) is below recommended minimum (25.0m³)"

    def test_types_without_minimum_ignored(self, standards):
        tiny = make_module("ws", ModuleType.WORKSHOP, size=(1, 1, 1))
        assert AdjacencyChecker(make_design([tiny]), standards).check() == []


class TestLifeSupportChecker:
    """Test power and air circulation rules."""

    def test_power_exceeds_capacity(self, standards):
        hungry = make_module("lab", ModuleType.LABORATORY, power_requirement=2000.0)
        design = make_design([hungry], shape=SphereShape(radius=3.0), crew_size=8)
        findings = LifeSupportChecker(design, standards).check()
        assert [f.category for f in findings] == [FindingCategory.POWER]
        assert findings[0].message == "Power requirement (2000.0kW) may exceed capacity"

    def test_low_air_changes(self, standards):
        # 4 crew * 0.5 m³/min * 60 / 603m³ is about 0.2 changes per hour
        findings = LifeSupportChecker(make_design(), standards).check()
        assert [f.message for f in findings] == ["Low air circulation rate for crew size"]


class TestValidateDesign:
    """Test the full validation pass."""

    def test_end_to_end_reference_design(self, standards):
        """Test crew 4, 180 days, cylinder r=4 h=12, no modules, SLS Block 1."""
        findings = validate_design(make_design(), standards)

        missing = [f for f in findings if f.message.startswith("Missing essential module")]
        assert [f.message.split(": ")[1] for f in missing] == ESSENTIAL_TYPES
        assert all(f.severity == Severity.ERROR for f in missing)

        nhv_errors = [
            f
            for f in findings
            if f.severity == Severity.ERROR and f.category == FindingCategory.VOLUME
        ]
        assert nhv_errors == []
        assert calculate_compliance_score(findings) < 100

    def test_findings_in_checker_order(self, standards):
        findings = validate_design(make_design(), standards)
        order = ["volume", "launch", "crew", "safety", "adjacency", "life_support"]
        seen = [f.check for f in findings]
        assert seen == sorted(seen, key=order.index)

    def test_idempotent(self, standards):
        design = make_design([make_module("a", ModuleType.COMMAND, adjacency_requirements=["b"])])
        assert validate_design(design, standards) == validate_design(design, standards)

    def test_does_not_mutate_design(self, standards):
        design = make_design()
        before = design.model_dump()
        validate_design(design, standards)
        assert design.model_dump() == before

    def test_adjacency_warning_cleared_by_connection(self, standards):
        a = make_module("a", ModuleType.COMMAND, name="Alpha", adjacency_requirements=["b"])
        b = make_module("b", ModuleType.HABITATION, name="Bravo")
        without = validate_design(make_design([a, b]), standards)
        link = Connection(id="ab", from_module_id="a", to_module_id="b")
        with_link = validate_design(make_design([a, b], [link]), standards)

        message = "Alpha should be adjacent to Bravo"
        assert [f.message for f in without].count(message) == 1
        assert message not in [f.message for f in with_link]
        assert [f for f in without if f.message != message] == with_link

    def test_restriction_yields_one_error(self, standards):
        a = make_module("a", ModuleType.COMMAND, adjacency_restrictions=["c"])
        c = make_module("c", ModuleType.HABITATION)
        link = Connection(id="ac", from_module_id="a", to_module_id="c")
        findings = of_check(validate_design(make_design([a, c], [link]), standards), "adjacency")
        assert [f.severity for f in findings] == [Severity.ERROR]

    def test_geometry_failure_skips_only_affected_checks(self, standards):
        """Test a shape without formulas degrades to skipped sub-checks."""
        design = make_design(shape=CustomShape(length=5, width=5, height=5))
        findings = validate_design(design, standards)
        checks = {f.check for f in findings}
        assert "volume" not in checks
        assert "launch" not in checks
        assert "life_support" not in checks
        assert "safety" in checks
        assert calculate_compliance_score(findings) < 100

    def test_incomplete_duration_table_skips_crew_check(self, standards):
        """Test an unmatched duration is reported by skipping the crew sub-check."""
        durations = [d.model_copy() for d in standards.mission_durations]
        truncated = standards.model_copy(update={"mission_durations": durations[:2]})
        findings = validate_design(make_design(duration_days=600), truncated)
        assert "crew" not in {f.check for f in findings}
        assert "safety" in {f.check for f in findings}

    def test_custom_thresholds(self, standards):
        engine_config = EngineConfig.from_dict(
            {"life_support_thresholds": {"MIN_AIR_CHANGES_PER_HOUR": 0.1}}
        )
        findings = validate_design(make_design(), standards, engine_config)
        assert "Low air circulation rate for crew size" not in [f.message for f in findings]

    def test_custom_standards_table(self, standards):
        data = standards.model_dump()
        data["crew"]["min_crew"] = 6
        stricter = StandardsConfig.model_validate(data)
        findings = validate_design(make_design(), stricter)
        assert any(f.message.startswith("Crew size (4) is below minimum") for f in findings)
